"""
App Loader
==========
Assembles an App from the entries of an open archive.

Phases (sequential, no branching back):
1. Locate the app entry (Src/Controls/1.fx.yaml). Absent -> no app (new archive).
2. Decode the app document.
3. Decode every screen document under Src/Controls.
4. Decode every top level control editor state under Controls.
   Two files naming the same top parent are rejected.
5. Merge the editor state into the matching screens.

Any decode failure raises PersistenceException naming the entry.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional

from msapparchive import config
from msapparchive.model.controls import App, ControlEditorState, Screen
from msapparchive.persistence.errors import PersistenceException
from msapparchive.persistence.merge import merge_control_editor_state
from msapparchive.persistence.paths import normalize_path

if TYPE_CHECKING:
    from msapparchive.persistence.archive import MsappArchive

logger = logging.getLogger(__name__)


class AppLoader:
    def __init__(self, archive: MsappArchive):
        self._archive = archive

    def load(self) -> Optional[App]:
        # --- 1. LOCATE APP ENTRY ---
        app_entry = self._archive.get_entry(config.app_entry_path())
        if app_entry is None:
            logger.info("Archive has no app entry, nothing to load.")
            return None

        # --- 2. DECODE APP ---
        app = self._archive.deserialize(app_entry, App)

        # --- 3. & 4. SCREENS AND EDITOR STATE ---
        screens = self._load_screens()
        editor_states = self._load_editor_states()

        # --- 5. MERGE ---
        app.screens = self._merge(screens, editor_states)
        logger.info(f"Loaded app '{app.name}' with {len(app.screens)} screen(s).")
        return app

    def _load_screens(self) -> Dict[str, Screen]:
        logger.info("Loading top level screens from Yaml.")
        app_key = normalize_path(config.app_entry_path())

        screens: Dict[str, Screen] = {}
        for entry in self._archive.list_under(config.controls_source_dir(), config.YAML_FILE_EXTENSION):
            # Skip the app file
            if normalize_path(entry.filename) == app_key:
                continue

            screen = self._archive.deserialize(entry, Screen)
            if screen.name in screens:
                logger.warning(f"Duplicate screen name '{screen.name}' in {entry.filename}, replacing earlier screen.")
            screens[screen.name] = screen
            logger.debug(f"Loaded screen '{screen.name}' from {entry.filename}")
        return screens

    def _load_editor_states(self) -> Dict[str, ControlEditorState]:
        logger.info("Loading top level controls editor state.")

        states: Dict[str, ControlEditorState] = {}
        entries = self._archive.list_under(
            config.Directories.CONTROLS, config.JSON_FILE_EXTENSION, recursive=False
        )
        for entry in entries:
            state = self._archive.deserialize_editor_state(entry)
            if state.name in states:
                raise PersistenceException(
                    f"Duplicate control editor state '{state.name}'.", file_name=entry.filename
                )
            states[state.name] = state
        return states

    @staticmethod
    def _merge(screens: Dict[str, Screen], editor_states: Dict[str, ControlEditorState]) -> List[Screen]:
        merged: List[Screen] = []
        for name, screen in screens.items():
            editor_state = editor_states.pop(name, None)
            if editor_state is None:
                merged.append(screen)
                continue
            merged.append(merge_control_editor_state(screen, editor_state))

        if editor_states:
            logger.debug(f"Dropping editor state without matching screen: {sorted(editor_states)}")
        return merged
