"""On-disk JSON snapshot of every Content Item (the Fallback Store)."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from app.content.models import ContentItem

logger = logging.getLogger(__name__)

SIZE_WARNING_KB = 500


class FallbackWriteError(Exception):
    """Raised when the snapshot could not be written (e.g. read-only filesystem)."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to write fallback file {path}: {reason}")


@dataclass(frozen=True)
class FallbackStats:
    exists: bool
    size_kb: int = 0
    article_count: int = 0
    last_modified: str | None = None
    error: str | None = None


def _parse_items(raw: Any, path: Path) -> list[ContentItem]:
    if not isinstance(raw, list):
        logger.warning("Fallback file is not a JSON array", extra={"path": str(path)})
        return []
    items: list[ContentItem] = []
    for entry in raw:
        try:
            items.append(ContentItem.model_validate(entry))
        except ValidationError:
            entry_id = entry.get("id") if isinstance(entry, dict) else None
            logger.warning(
                "Skipping malformed fallback entry",
                extra={"path": str(path), "entry_id": entry_id},
            )
    return items


def _read_items(path: Path) -> list[ContentItem]:
    if not path.exists():
        logger.info("No fallback file found", extra={"path": str(path)})
        return []
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Failed to read fallback file", extra={"path": str(path), "error": str(e)})
        return []
    return _parse_items(raw, path)


def _write_atomic(path: Path, payload: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(payload)
        os.replace(tmp_name, path)
    except OSError:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class FallbackStore:
    """Reads and wholesale-overwrites the snapshot file and its legacy mirror.

    There is no locking: concurrent ``save`` calls race and the last writer wins.
    Each individual file is replaced atomically, so a reader never sees a
    half-written array.
    """

    def __init__(self, path: str | Path, legacy_path: str | Path | None = None) -> None:
        self.path = Path(path)
        self.legacy_path = Path(legacy_path) if legacy_path is not None else None

    async def load(self) -> list[ContentItem]:
        """Items from the primary file; ``[]`` when it is missing or unreadable."""
        return await asyncio.to_thread(_read_items, self.path)

    async def load_legacy(self) -> list[ContentItem]:
        """Items from the legacy mirror, or from the primary file when there is none."""
        return await asyncio.to_thread(_read_items, self.legacy_path or self.path)

    @staticmethod
    def serialize(items: list[ContentItem]) -> str:
        return json.dumps([item.to_store() for item in items], indent=2, ensure_ascii=False) + "\n"

    async def save(self, items: list[ContentItem]) -> None:
        payload = self.serialize(items)
        targets = [self.path]
        if self.legacy_path is not None and self.legacy_path != self.path:
            targets.append(self.legacy_path)
        for target in targets:
            try:
                await asyncio.to_thread(_write_atomic, target, payload)
            except OSError as e:
                raise FallbackWriteError(target, str(e)) from e

        size_kb = round(len(payload.encode("utf-8")) / 1024)
        logger.info(
            "Fallback file updated",
            extra={"path": str(self.path), "item_count": len(items), "size_kb": size_kb},
        )
        if size_kb > SIZE_WARNING_KB:
            logger.warning(
                "Fallback file is getting large",
                extra={"path": str(self.path), "size_kb": size_kb},
            )

    def _stats(self) -> FallbackStats:
        if not self.path.exists():
            return FallbackStats(exists=False)
        try:
            stat = self.path.stat()
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            return FallbackStats(exists=False, error=str(e))
        return FallbackStats(
            exists=True,
            size_kb=round(stat.st_size / 1024),
            article_count=len(raw) if isinstance(raw, list) else 0,
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=UTC).isoformat(),
        )

    async def stats(self) -> FallbackStats:
        return await asyncio.to_thread(self._stats)
