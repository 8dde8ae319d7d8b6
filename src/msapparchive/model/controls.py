"""
App / Screen / Control Data Model
=================================
Defines the in-memory application tree stored in an .msapp archive.

Two independently shaped trees meet here:
    Control: structural tree, persisted as yaml documents under Src/Controls.
    ControlEditorState: editor-only metadata tree, persisted as json under Controls.
Both are matched by node name and folded together on load (see persistence.merge).

Only the fields needed for that folding are modelled explicitly. Everything
else (formulas, headers, publish info...) is carried through as opaque mappings.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterator, List, Optional

_CONTROL_KEYS = ("Name", "Control", "Variant", "Properties", "Controls")
_APP_KEYS = ("Name", "FormatVersion", "Properties", "Header", "PublishInfo")


@dataclass
class ControlEditorState:
    """
    Editor metadata of one control (position, style, locking...).
    Mirrors the control tree by name and keeps its children under "Controls".
    """
    # None for nested nodes without a usable name; such nodes never match a control
    name: Optional[str]
    controls: Optional[List[ControlEditorState]] = None
    # Any other key of the json object, passed through unexamined
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        if self.name is not None:
            d["Name"] = self.name
        d.update(self.data)
        if self.controls is not None:
            d["Controls"] = [child.to_dict() for child in self.controls]
        return d

    @staticmethod
    def from_dict(data: Dict[str, Any], require_name: bool = True) -> ControlEditorState:
        """Only the root node (require_name=True) must carry a string 'Name'."""
        if not isinstance(data, dict):
            raise TypeError(f"Expected a json object for control editor state, got {type(data).__name__}.")
        name = data.get("Name")
        if not isinstance(name, str):
            if require_name:
                raise ValueError("Control editor state has no 'Name'.")
            name = None

        children = data.get("Controls")
        controls = None
        if children is not None:
            controls = [ControlEditorState.from_dict(child, require_name=False) for child in children]

        extra = {k: v for k, v in data.items() if k not in ("Name", "Controls")}
        return ControlEditorState(name=name, controls=controls, data=extra)


@dataclass
class Control:
    """
    A node of the structural UI tree.
    Names are unique among siblings only. `controls` is None for leaves.
    """
    KIND: ClassVar[str] = "Control"
    DEFAULT_TYPE: ClassVar[Optional[str]] = None

    name: str
    control_type: Optional[str] = None
    variant: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict)
    controls: Optional[List[Control]] = None
    # Unmodelled document keys, passed through unexamined
    extra: Dict[str, Any] = field(default_factory=dict)

    # Attached on load, never written to the yaml document
    editor_state: Optional[ControlEditorState] = None

    @property
    def is_leaf(self) -> bool:
        return not self.controls

    def walk(self) -> Iterator[Control]:
        """Yield this control and all descendants (pre-order)."""
        yield self
        for child in self.controls or []:
            yield from child.walk()

    def find(self, name: str) -> Optional[Control]:
        """First control in this subtree with the given name."""
        return next((c for c in self.walk() if c.name == name), None)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"Name": self.name}
        if self.control_type is not None:
            d["Control"] = self.control_type
        if self.variant is not None:
            d["Variant"] = self.variant
        if self.properties:
            d["Properties"] = dict(self.properties)
        if self.controls is not None:
            d["Controls"] = [child.to_dict() for child in self.controls]
        d.update(self.extra)
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Control:
        if not isinstance(data, dict):
            raise TypeError(f"Expected a mapping for {cls.KIND}, got {type(data).__name__}.")
        name = data.get("Name")
        if name is None:
            raise ValueError(f"{cls.KIND} has no 'Name'.")

        children = data.get("Controls")
        controls = None
        if children is not None:
            # Nested nodes are always plain controls
            controls = [Control.from_dict(child) for child in children]

        return cls(
            name=str(name),
            control_type=data.get("Control", cls.DEFAULT_TYPE),
            variant=data.get("Variant"),
            properties=dict(data.get("Properties") or {}),
            controls=controls,
            extra={k: v for k, v in data.items() if k not in _CONTROL_KEYS},
        )


@dataclass
class Screen(Control):
    """Top-level control; each screen is persisted as its own entry."""
    KIND: ClassVar[str] = "Screen"
    DEFAULT_TYPE: ClassVar[Optional[str]] = "Screen"

    control_type: Optional[str] = "Screen"


@dataclass
class App:
    """
    Root of the application tree.
    Screens are stored in separate entries and are NOT part of the app document.
    """
    KIND: ClassVar[str] = "App"

    name: str = "App"
    format_version: Optional[str] = None

    # Opaque blocks, passed through unexamined
    properties: Dict[str, Any] = field(default_factory=dict)
    header: Dict[str, Any] = field(default_factory=dict)
    publish_info: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    screens: List[Screen] = field(default_factory=list)

    def get_screen(self, name: str) -> Optional[Screen]:
        return next((s for s in self.screens if s.name == name), None)

    @property
    def screen_names(self) -> List[str]:
        return [s.name for s in self.screens]

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"Name": self.name}
        if self.format_version is not None:
            d["FormatVersion"] = self.format_version
        if self.properties:
            d["Properties"] = dict(self.properties)
        if self.header:
            d["Header"] = dict(self.header)
        if self.publish_info:
            d["PublishInfo"] = dict(self.publish_info)
        d.update(self.extra)
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> App:
        if not isinstance(data, dict):
            raise TypeError(f"Expected a mapping for {cls.KIND}, got {type(data).__name__}.")
        version = data.get("FormatVersion")
        return cls(
            name=str(data.get("Name", "App")),
            format_version=None if version is None else str(version),
            properties=dict(data.get("Properties") or {}),
            header=dict(data.get("Header") or {}),
            publish_info=dict(data.get("PublishInfo") or {}),
            extra={k: v for k, v in data.items() if k not in _APP_KEYS},
        )
