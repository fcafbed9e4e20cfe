"""
JSON document store with crash-safe writes and a public mirror.

Each logical dataset lives in one pretty-printed JSON file under DATA_DIR.
Writes go to a temporary file in the same directory and are renamed over
the target, so readers only ever see the old or the new content. Most
documents are mirrored into PUBLIC_DATA_DIR, which the frontend serves
directly under /data.

Concurrency: request handlers and the daily job share one event loop.
`update()` serialises read-modify-write cycles per key with an asyncio
lock; conflicting writers still resolve as last-write-wins.
"""
import asyncio
import copy
import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from backend.config import get_settings
from backend.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DocumentSpec:
    filename: str
    mirrored: bool = True


DOCUMENTS: Dict[str, DocumentSpec] = {
    "today": DocumentSpec("todaysserving.json", mirrored=False),
    "modelData": DocumentSpec("dataformodel.json"),
    "events": DocumentSpec("events.json"),
    "predicted": DocumentSpec("predicted.json"),
    "predictedWeekly": DocumentSpec("predicted_weekly.json"),
    "metricsWeekly": DocumentSpec("metrics_weekly.json"),
    "metricsMonthly": DocumentSpec("metrics_monthly.json"),
    "foodItems": DocumentSpec("foodItems.json"),
    "reserved": DocumentSpec("reserved.json"),
    "cart": DocumentSpec("cart.json"),
    "requests": DocumentSpec("requests.json"),
    "feedback": DocumentSpec("feedback.json"),
}


def _spec(key: str) -> DocumentSpec:
    try:
        return DOCUMENTS[key]
    except KeyError:
        raise KeyError(f"Unknown document key: {key}")


def atomic_write_json(path: Path, data: Any) -> None:
    """Write `data` as JSON to `path` via temp file + rename."""
    payload = json.dumps(data, indent=2, ensure_ascii=False)
    fd, tmp_name = tempfile.mkstemp(
        dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            tmp.write(payload)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


class DocumentStore:
    def __init__(self, data_dir: Path, public_dir: Path):
        self.data_dir = Path(data_dir)
        self.public_dir = Path(public_dir)
        self._locks: Dict[str, asyncio.Lock] = {}

    def ensure_dirs(self) -> None:
        for directory in (self.data_dir, self.public_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def data_path(self, key: str) -> Path:
        return self.data_dir / _spec(key).filename

    def public_path(self, key: str) -> Path:
        return self.public_dir / _spec(key).filename

    def lock(self, key: str) -> asyncio.Lock:
        _spec(key)
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    # --- primitives ---

    def read(self, key: str, fallback: Any = None) -> Any:
        """
        Read a document. A missing or corrupt file is replaced by `fallback`,
        which is returned; `null` content also yields `fallback`. A list or
        dict fallback also fixes the expected top-level shape: a document
        of another shape counts as corrupt.
        """
        if fallback is None:
            fallback = []
        path = self.data_path(key)

        if not path.exists():
            self._write_path(path, fallback)
            return copy.deepcopy(fallback)

        try:
            raw = path.read_text(encoding="utf-8")
            data = json.loads(raw) if raw.strip() else None
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Invalid JSON in {path}, resetting to fallback: {e}")
            self._write_path(path, fallback)
            return copy.deepcopy(fallback)

        if data is None:
            return copy.deepcopy(fallback)
        if isinstance(fallback, (list, dict)) and not isinstance(data, type(fallback)):
            logger.error(
                f"Unexpected document shape in {path}: expected {type(fallback).__name__}, "
                f"got {type(data).__name__}; resetting to fallback"
            )
            self._write_path(path, fallback)
            return copy.deepcopy(fallback)
        return data

    def write(self, key: str, data: Any) -> None:
        """Atomic write to the primary location only"""
        self._write_path(self.data_path(key), data)

    def write_and_mirror(self, key: str, data: Any) -> None:
        """Atomic write to the primary location, then to the public mirror
        unless the document is mirror-exempt."""
        self.write(key, data)
        if _spec(key).mirrored:
            self._write_path(self.public_path(key), data)

    def write_both(self, key: str, data: Any) -> None:
        """Write both locations, ignoring the mirror exemption"""
        self.write(key, data)
        self._write_path(self.public_path(key), data)

    async def update(
        self,
        key: str,
        mutate: Callable[[Any], Any],
        fallback: Any = None,
        mirror: bool = True,
    ) -> Any:
        """
        Read-modify-write under the per-key lock. `mutate` receives the current
        document and returns the new one (returning None keeps the in-place
        modified document). Returns what was written.
        """
        async with self.lock(key):
            current = self.read(key, fallback)
            result = mutate(current)
            if result is None:
                result = current
            if mirror:
                self.write_and_mirror(key, result)
            else:
                self.write(key, result)
            return result

    def _write_path(self, path: Path, data: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        atomic_write_json(path, data)


_store: Optional[DocumentStore] = None


def get_document_store() -> DocumentStore:
    """Dependency returning the process-wide store built from settings"""
    global _store
    if _store is None:
        settings = get_settings()
        _store = DocumentStore(settings.DATA_DIR, settings.PUBLIC_DATA_DIR)
        _store.ensure_dirs()
    return _store
