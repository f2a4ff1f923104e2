"""Keyed, file-based cache for expensive survey result sets.

Identifier sweeps and employment fetches take minutes and count against the
registry's rate limits, so their results are persisted under a logical key
chosen by the caller (e.g. ``"chemistry-identifiers"``) and reloaded on the
next run. There is no expiry: an entry lives until it is deleted.

Each entry is a parquet file plus a ``.meta.json`` sidecar. Writes go to a
temporary file that is moved into place, so a failed write never leaves a
half-written entry behind.
"""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd
from loguru import logger

from ...exceptions import FileSystemError, ErrorCode
from ..common.path_utils import ensure_dir, slugify


class ResultCache:
    """Durable key -> DataFrame store with presence-only invalidation."""

    def __init__(self, cache_dir: str | Path, enabled: bool = True):
        """Initialize the cache.

        Args:
            cache_dir: Directory to store cache files
            enabled: When False, ``load`` always misses and ``store`` is a no-op
        """
        self.cache_dir = Path(cache_dir)
        self.enabled = enabled

        if self.enabled:
            ensure_dir(self.cache_dir)
            logger.debug(f"ResultCache initialized at {self.cache_dir}")

    def _stem(self, key: str) -> str:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:12]
        return f"{slugify(key)}-{digest}"

    def _get_cache_path(self, key: str) -> Path:
        return self.cache_dir / f"{self._stem(key)}.parquet"

    def _get_metadata_path(self, key: str) -> Path:
        return self.cache_dir / f"{self._stem(key)}.meta.json"

    def exists(self, key: str) -> bool:
        """True when a complete entry (data + metadata) is stored under ``key``."""
        if not self.enabled:
            return False
        return self._get_cache_path(key).exists() and self._get_metadata_path(key).exists()

    def load(self, key: str) -> pd.DataFrame | None:
        """Return the stored DataFrame for ``key``, or None on a miss.

        Raises:
            FileSystemError: If the entry exists but cannot be read
        """
        if not self.exists(key):
            logger.debug(f"Cache miss for '{key}'")
            return None

        cache_path = self._get_cache_path(key)
        try:
            df = pd.read_parquet(cache_path)
        except (OSError, ValueError) as e:
            raise FileSystemError(
                f"Failed to read cache entry '{key}': {e}",
                file_path=str(cache_path),
                operation="load",
                cause=e,
            ) from e

        logger.info(f"Cache hit for '{key}' ({len(df)} rows)")
        return df

    def store(self, key: str, df: pd.DataFrame, **metadata: Any) -> None:
        """Store ``df`` under ``key``, overwriting any previous entry.

        Raises:
            FileSystemError: If the entry cannot be written
        """
        if not self.enabled:
            return

        cache_path = self._get_cache_path(key)
        metadata_path = self._get_metadata_path(key)
        metadata_dict = {
            "key": key,
            "stored_at": datetime.now().isoformat(),
            "row_count": len(df),
            "columns": [str(c) for c in df.columns],
            **metadata,
        }

        try:
            self._atomic_write(cache_path, lambda p: df.to_parquet(p, index=False))
            self._atomic_write(
                metadata_path,
                lambda p: p.write_text(json.dumps(metadata_dict, indent=2, default=str)),
            )
        except (OSError, ValueError, TypeError) as e:
            cache_path.unlink(missing_ok=True)
            metadata_path.unlink(missing_ok=True)
            raise FileSystemError(
                f"Failed to write cache entry '{key}': {e}",
                file_path=str(cache_path),
                operation="store",
                status_code=ErrorCode.FILE_WRITE_FAILED,
                cause=e,
            ) from e

        logger.info(f"Cached {len(df)} rows under '{key}'")

    def _atomic_write(self, target: Path, writer: Callable[[Path], Any]) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self.cache_dir, suffix=".tmp")
        os.close(fd)
        tmp_path = Path(tmp_name)
        try:
            writer(tmp_path)
            os.replace(tmp_path, target)
        finally:
            tmp_path.unlink(missing_ok=True)

    def metadata(self, key: str) -> dict[str, Any] | None:
        """Sidecar metadata for ``key``, or None on a miss or unreadable sidecar."""
        if not self.exists(key):
            return None
        try:
            return json.loads(self._get_metadata_path(key).read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Unreadable metadata for cache entry '{key}': {e}")
            return None

    def load_or_compute(
        self, key: str, compute: Callable[[], pd.DataFrame], **metadata: Any
    ) -> pd.DataFrame:
        """Return the cached frame for ``key``; otherwise compute, store and return it.

        ``metadata`` is written to the sidecar only when the frame is computed.
        A failing ``compute`` propagates and leaves the cache untouched.
        """
        cached = self.load(key)
        if cached is not None:
            return cached
        df = compute()
        self.store(key, df, **metadata)
        return df

    def delete(self, key: str) -> bool:
        """Remove the entry for ``key``. Returns True if anything was deleted."""
        removed = False
        for path in (self._get_cache_path(key), self._get_metadata_path(key)):
            if path.exists():
                path.unlink()
                removed = True
        if removed:
            logger.info(f"Deleted cache entry '{key}'")
        return removed

    def entries(self) -> list[dict[str, Any]]:
        """Metadata of every stored entry, sorted by key."""
        if not self.cache_dir.exists():
            return []

        entries = []
        for metadata_path in self.cache_dir.glob("*.meta.json"):
            try:
                metadata = json.loads(metadata_path.read_text())
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Skipping unreadable cache metadata {metadata_path.name}: {e}")
                continue
            data_path = metadata_path.with_name(
                metadata_path.name.replace(".meta.json", ".parquet")
            )
            if not data_path.exists():
                continue
            metadata["size_bytes"] = data_path.stat().st_size
            entries.append(metadata)
        return sorted(entries, key=lambda m: str(m.get("key", "")))

    def keys(self) -> list[str]:
        """Logical keys of every stored entry."""
        return [str(m["key"]) for m in self.entries() if "key" in m]

    def clear(self) -> int:
        """Delete every entry. Returns the number of entries removed."""
        count = 0
        for key in self.keys():
            if self.delete(key):
                count += 1
        return count
