"""
On-disk cache for chunked change-mode answers.
Each entry is <key>.json holding the chunks as lists of edit dicts.
Entries expire after the configured TTL and the directory is capped in size.
"""
from __future__ import annotations

import hashlib
import json
import logging
import re
import time
from pathlib import Path
from typing import List, Optional

from ..core.config import Settings
from .parse import ChangeModeEdit


KEY_RE = re.compile(r"^[0-9a-f]{8}$")


class ChunkCache:
    def __init__(self, settings: Settings):
        self.cache_dir: Path = settings.cache_dir
        self.ttl_seconds = settings.chunk_ttl_seconds
        self.max_files = settings.chunk_max_files
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger(__name__)

    def _path(self, key: str) -> Path:
        return self.cache_dir / f"{key}.json"

    def _make_key(self, prompt: str) -> str:
        content = f"{prompt}::{time.time_ns()}"
        return hashlib.sha256(content.encode("utf-8")).hexdigest()[:8]

    def store(self, prompt: str, chunks: List[List[ChangeModeEdit]]) -> str:
        self.purge_expired()
        key = self._make_key(prompt)
        payload = {
            "created_at": time.time(),
            "prompt": prompt,
            "chunks": [[edit.to_dict() for edit in chunk] for chunk in chunks],
        }
        self._path(key).write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        self.logger.info("Cached %d chunks under key %s", len(chunks), key)
        self._enforce_limit()
        return key

    def load(self, key: str) -> Optional[List[List[ChangeModeEdit]]]:
        # only names _make_key can produce map to files
        if not KEY_RE.match(key or ""):
            self.logger.warning("Rejected malformed chunk cache key %r", key)
            return None
        path = self._path(key)
        if not path.exists():
            self.logger.info("Chunk cache miss for key %s", key)
            return None
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            created_at = float(payload["created_at"])
            chunks = [[ChangeModeEdit.from_dict(item) for item in chunk] for chunk in payload["chunks"]]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            self.logger.warning("Unreadable chunk cache entry %s: %s", path, exc)
            return None
        if time.time() - created_at > self.ttl_seconds:
            self.logger.info("Chunk cache entry %s expired", key)
            path.unlink(missing_ok=True)
            return None
        return chunks

    def purge_expired(self) -> int:
        removed = 0
        cutoff = time.time() - self.ttl_seconds
        for path in self.cache_dir.glob("*.json"):
            try:
                if path.stat().st_mtime < cutoff:
                    path.unlink()
                    removed += 1
            except FileNotFoundError:
                continue
        if removed:
            self.logger.debug("Purged %d expired chunk cache entries", removed)
        return removed

    def _enforce_limit(self):
        stamped = []
        for path in self.cache_dir.glob("*.json"):
            try:
                stamped.append((path.stat().st_mtime, path))
            except FileNotFoundError:
                continue
        entries = [path for _, path in sorted(stamped, key=lambda item: item[0])]
        excess = len(entries) - self.max_files
        for path in entries[:max(excess, 0)]:
            path.unlink(missing_ok=True)
            self.logger.debug("Evicted chunk cache entry %s", path.name)

    def clear(self):
        for path in self.cache_dir.glob("*.json"):
            path.unlink(missing_ok=True)
