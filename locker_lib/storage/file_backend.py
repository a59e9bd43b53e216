"""Simple file-backed storage backend.

This backend stores each physical key as a text file under
`<data_dir>/<quoted key>.val` and is the default ``local`` driver. Keys are
percent-quoted so that any string (separators, slashes) maps to a single file
name and can be recovered when listing. Writes are atomic: the value is
written to a temporary file which then replaces the target.
"""
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Iterator, Optional
from urllib.parse import quote, unquote

from .base import StorageBackend, QuotaExceededError

logger = logging.getLogger(__name__)

SUFFIX = ".val"


class FileStorage(StorageBackend):
    def __init__(self, data_dir: str | Path = "./data/locker", quota_bytes: Optional[int] = None) -> None:
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.quota_bytes = quota_bytes

    def _path_for(self, key: str) -> Path:
        return self.data_dir / f"{quote(key, safe='')}{SUFFIX}"

    def _used_bytes(self, excluding: Path) -> int:
        total = 0
        for p in self.data_dir.iterdir():
            if p.is_file() and p.suffix == SUFFIX and p != excluding:
                total += p.stat().st_size
        return total

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        data = str(value).encode("utf-8")
        if self.quota_bytes is not None and self._used_bytes(path) + len(data) > self.quota_bytes:
            raise QuotaExceededError(f"quota of {self.quota_bytes} bytes exceeded writing {key!r}")
        tmp = path.with_suffix(path.suffix + ".tmp")
        with open(tmp, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        tmp.replace(path)
        logger.debug("FileStorage wrote %s (%d bytes)", path, len(data))

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        if path.exists():
            path.unlink()

    def clear(self) -> None:
        for p in self.data_dir.iterdir():
            if p.is_file() and p.suffix == SUFFIX:
                p.unlink()

    def keys(self) -> Iterator[str]:
        for p in sorted(self.data_dir.iterdir()):
            if p.is_file() and p.suffix == SUFFIX:
                yield unquote(p.name[: -len(SUFFIX)])

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._path_for(key).exists()

    def configure(self, **options) -> None:
        # Allow overriding the data directory and quota at runtime.
        data_dir = options.get("data_dir") or options.get("path")
        if data_dir:
            self.data_dir = Path(data_dir)
            self.data_dir.mkdir(parents=True, exist_ok=True)
        if "quota_bytes" in options:
            self.quota_bytes = options["quota_bytes"]
