from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigFile:
    """A user configuration file (e.g. ~/.zshrc) that steps edit.

    Steps share the same file through this resource instead of opening it
    ad hoc, so every edit goes through the same presence check.
    """

    path: Path
    dry_run: bool = False

    def read_text(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""

    def contains(self, needle: str) -> bool:
        return needle in self.read_text()

    def append_if_absent(self, block: str, *, marker: str | None = None) -> bool:
        """Append block unless marker (default: the block itself) is present.

        Returns True if the file was (or, in dry-run, would be) changed.
        """

        needle = (marker or block).strip()
        if not needle:
            raise ValueError("append_if_absent needs a non-empty block or marker")

        current = self.read_text()
        if needle in current:
            logger.info("%s already contains %r", self.path, needle)
            return False

        if self.dry_run:
            logger.info("Would append %d line(s) to %s", len(block.strip().splitlines()), self.path)
            return True

        parts: list[str] = []
        if current and not current.endswith("\n"):
            parts.append("\n")
        if current:
            parts.append("\n")
        parts.append(block.strip("\n") + "\n")

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write("".join(parts))
        logger.info("Appended %r block to %s", needle, self.path)
        return True

    def write(self, contents: str) -> None:
        if self.dry_run:
            logger.info("Would write %s", self.path)
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(contents, encoding="utf-8")
        logger.info("Wrote %s", self.path)
