"""
Entry Path Canonicalization
Archive entries are addressed case-insensitively and separator-insensitively.
"""
from __future__ import annotations

# Characters whose full lowercase expands to several code points, mapped to
# their single code point (simple) lowercase instead
_SIMPLE_LOWER = {"\u0130": "i"}


def _simple_lower(ch: str) -> str:
    lowered = ch.lower()
    if len(lowered) == 1:
        return lowered
    return _SIMPLE_LOWER.get(ch, ch)


def normalize_path(path: str) -> str:
    """
    Map a raw entry name to its canonical key.

    Trims whitespace, turns backslashes into forward slashes, strips
    leading/trailing slashes and lower-cases the result one character at a
    time, so the key never changes length and final sigma stays 'σ'.
    Example: " Src\\Controls\\App.fx.yaml/ " -> "src/controls/app.fx.yaml"
    """
    trimmed = path.strip().replace("\\", "/").strip("/")
    return "".join(_simple_lower(ch) for ch in trimmed)


def join_entry_path(*parts: str) -> str:
    """Join raw path segments with the archive separator ('/')."""
    return "/".join(part.strip("/\\") for part in parts if part)
