"""Command-line interface: inspect the app stored in an .msapp archive."""
import argparse
import logging
import sys
from typing import List, Optional

from msapparchive.logging_config import setup_logging
from msapparchive.persistence.archive import MsappArchive
from msapparchive.persistence.errors import PersistenceException

logger = logging.getLogger(__name__)


def _describe(archive: MsappArchive) -> List[str]:
    lines = [
        f"Archive: {archive.name}",
        f"Entries: {len(archive.canonical_entries)}",
        f"Size: {archive.compressed_size} bytes compressed, {archive.decompressed_size} bytes decompressed",
    ]

    app = archive.app
    if app is None:
        lines.append("No app found in archive.")
        return lines

    lines.append(f"App: {app.name} (format version {app.format_version or 'unknown'})")
    for screen in app.screens:
        controls = sum(1 for _ in screen.walk()) - 1
        with_state = sum(1 for c in screen.walk() if c.editor_state is not None)
        lines.append(f"  Screen '{screen.name}': {controls} control(s), {with_state} node(s) with editor state")
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="msapparchive", description=__doc__)
    parser.add_argument("archive", help="Path to the .msapp file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    args = parser.parse_args(argv)

    setup_logging(level=logging.DEBUG if args.verbose else logging.WARNING, log_file=args.log_file)

    try:
        with MsappArchive.open(args.archive) as archive:
            print("\n".join(_describe(archive)))
    except (PersistenceException, OSError) as e:
        logger.error(f"Failed to read archive: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
