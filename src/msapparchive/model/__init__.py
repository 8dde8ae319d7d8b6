"""
The MODEL layer contains pure data structures.
It has NO knowledge of the archive container or the codecs.
"""
from msapparchive.model.controls import App, Control, ControlEditorState, Screen

__all__ = ["App", "Control", "ControlEditorState", "Screen"]
