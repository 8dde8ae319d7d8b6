"""
Configuration & Path Layout
===========================
This module serves as the central registry for the fixed entry layout of an
.msapp archive and the constants shared by the codecs.

Why is this file needed?
------------------------
1. Abstraction: It prevents hardcoded entry names (e.g., "Src/Controls/1.fx.yaml")
   scattered throughout the loader and saver.
2. Interop: The layout is a contract with archives produced by other tools,
   so it must live in exactly one place.

Exports:
    Directories: Names of the well-known top-level archive directories.
    APP_FILE_NAME (str): Name of the single app entry.
    ENTRY_ENCODING (str): Text encoding of every document entry.
"""
import zipfile

from msapparchive.persistence.paths import join_entry_path


class Directories:
    SRC = "Src"
    CONTROLS = "Controls"
    COMPONENTS = "Components"
    APP_TESTS = "AppTests"
    REFERENCES = "References"
    RESOURCES = "Resources"


# File extensions
YAML_FILE_EXTENSION: str = ".yaml"
YAML_FX_FILE_EXTENSION: str = ".fx.yaml"
JSON_FILE_EXTENSION: str = ".json"

# For app entry name is always "1.fx.yaml"
APP_FILE_NAME: str = "1.fx.yaml"

# Codec settings
ENTRY_ENCODING: str = "utf-8"
ENTRY_READ_ENCODING: str = "utf-8-sig"  # accepts entries written with a BOM
ZIP_COMPRESSION: int = zipfile.ZIP_DEFLATED

# Wrapper field of the editor state json documents
TOP_PARENT_FIELD: str = "TopParent"


def controls_source_dir() -> str:
    """Directory holding the structural (yaml) documents."""
    return join_entry_path(Directories.SRC, Directories.CONTROLS)


def app_entry_path() -> str:
    return join_entry_path(Directories.SRC, Directories.CONTROLS, APP_FILE_NAME)


def screen_entry_path(screen_name: str) -> str:
    return join_entry_path(Directories.SRC, Directories.CONTROLS, f"{screen_name}{YAML_FX_FILE_EXTENSION}")
