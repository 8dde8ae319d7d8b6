"""
Entry Payload Codecs
====================
Two independent encode/decode pairs are used for archive entries:

YamlCodec:
    Structural documents (App, Screen). Each document is a single-key mapping
    naming its kind, e.g. ``{"Screen": {"Name": "Screen1", ...}}``.
EditorStateCodec:
    Editor metadata json documents, wrapped under a single "TopParent" field.

Codecs raise plain exceptions (yaml.YAMLError, json.JSONDecodeError, ValueError,
TypeError). The archive wraps them into PersistenceException with the entry name.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Protocol, Type, TypeVar

import yaml

from msapparchive.config import TOP_PARENT_FIELD
from msapparchive.model.controls import ControlEditorState

T = TypeVar("T")


class StructuralCodec(Protocol):
    def serialize(self, value: Any) -> str: ...
    def deserialize(self, text: str, kind: Type[T]) -> T: ...


class YamlCodec:
    """PyYAML based codec for App/Screen documents."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def serialize(self, value: Any) -> str:
        kind = getattr(type(value), "KIND", None)
        if kind is None or not hasattr(value, "to_dict"):
            raise TypeError(f"Cannot serialize object of type {type(value).__name__}.")
        document = {kind: value.to_dict()}
        return yaml.safe_dump(
            document,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
            indent=self.indent,
        )

    def deserialize(self, text: str, kind: Type[T]) -> T:
        document = yaml.safe_load(text)
        if document is None:
            raise ValueError("Document is empty.")
        if not isinstance(document, dict) or len(document) != 1:
            raise TypeError("Expected a document with a single top-level key.")

        expected = getattr(kind, "KIND")
        (found, body), = document.items()
        if found != expected:
            raise TypeError(f"Expected a '{expected}' document, found '{found}'.")
        if body is None:
            raise ValueError(f"'{expected}' document has no content.")

        return kind.from_dict(body)


class EditorStateCodec:
    """Json codec for the top level control editor state files."""

    def deserialize_top_parent(self, text: str) -> ControlEditorState:
        document = json.loads(text)
        if not isinstance(document, dict):
            raise TypeError("Expected a json object.")
        top_parent = document.get(TOP_PARENT_FIELD)
        if top_parent is None:
            raise ValueError(f"Missing '{TOP_PARENT_FIELD}' field.")
        return ControlEditorState.from_dict(top_parent)

    def serialize_top_parent(self, state: ControlEditorState) -> str:
        document: Dict[str, Any] = {TOP_PARENT_FIELD: state.to_dict()}
        return json.dumps(document, indent=2, ensure_ascii=False)
