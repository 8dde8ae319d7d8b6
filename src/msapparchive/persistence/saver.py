"""
App Saver
Writes an App back into an archive: one app entry plus one entry per screen.
Editor state is not persisted.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from msapparchive import config
from msapparchive.model.controls import App

if TYPE_CHECKING:
    from msapparchive.persistence.archive import MsappArchive

logger = logging.getLogger(__name__)


class AppSaver:
    def __init__(self, archive: MsappArchive):
        self._archive = archive

    def save(self, app: Optional[App]) -> None:
        """
        Entry creation conflicts (e.g. two screens sharing a name) abort the
        save. Entries written before the failure stay in the archive.
        """
        if app is None:
            raise RuntimeError("App is not set.")

        logger.info(f"Saving app '{app.name}' with {len(app.screens)} screen(s).")

        # App document, screens are written separately
        app_entry = self._archive.create_entry(config.app_entry_path())
        self._archive.serialize(app_entry, app)

        for screen in app.screens:
            screen_entry = self._archive.create_entry(config.screen_entry_path(screen.name))
            self._archive.serialize(screen_entry, screen)
            logger.debug(f"Saved screen '{screen.name}' to {screen_entry.filename}")
