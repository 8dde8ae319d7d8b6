"""
Editor State Merge
Overlays a ControlEditorState tree onto a Control tree by node name.
"""
from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Sequence, TypeVar

from msapparchive.model.controls import Control, ControlEditorState

C = TypeVar("C", bound=Control)


def _find_by_name(states: Optional[Sequence[ControlEditorState]], name: str) -> Optional[ControlEditorState]:
    # Exact, case-sensitive match; first one wins
    for state in states or ():
        if state.name == name:
            return state
    return None


def merge_control_editor_state(control: C, editor_state: ControlEditorState) -> C:
    """
    Return a copy of `control` with editor state attached to every node that
    has a same-named counterpart in `editor_state` (pre-order, depth-first).

    Neither input is modified. The attached states carry no children.
    Editor nodes without a matching control are dropped, controls without a
    matching editor node keep no editor state.
    """
    attached = replace(editor_state, controls=None, data=dict(editor_state.data))

    if not control.controls:
        return replace(control, editor_state=attached)

    children: List[Control] = []
    for child in control.controls:
        child_state = _find_by_name(editor_state.controls, child.name)
        if child_state is None:
            children.append(child)
            continue
        children.append(merge_control_editor_state(child, child_state))

    return replace(control, editor_state=attached, controls=children)
