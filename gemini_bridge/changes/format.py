"""
Turn change-mode output into pages of edit suggestions.

``ChunkFormatter.format`` has two entry points folded into one call:

- fresh output: parse the raw answer, validate, chunk, cache when it spans
  more than one page, and return the requested (or first) page;
- cached output: ``raw`` is empty and ``cache_key``/``chunk_index`` identify a
  page of an earlier answer.

Problems (cache miss, bad page number, nothing parsed) come back as result text
so the caller can show them to the user.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .cache import ChunkCache
from .chunk import chunk_edits
from .parse import ChangeModeEdit, parse_change_mode_output, summarize_edits, validate_edits


@dataclass
class ChangeModeResult:
    text: str
    edits: List[ChangeModeEdit] = field(default_factory=list)
    chunk_index: int = 1
    total_chunks: int = 1
    cache_key: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return self.chunk_index < self.total_chunks

    def __str__(self) -> str:
        return self.text


def render_edit(edit: ChangeModeEdit, position: int, count: int) -> str:
    return "\n".join(
        [
            f"**Edit {position}/{count}: {edit.filename}** "
            f"(lines {edit.old_start_line}-{edit.old_end_line})",
            "Replace this exact text:",
            "```",
            edit.old_code,
            "```",
            "With this text:",
            "```",
            edit.new_code,
            "```",
        ]
    )


class ChunkFormatter:
    def __init__(self, cache: ChunkCache, max_chars: int = 20000):
        self.cache = cache
        self.max_chars = max_chars
        self.logger = logging.getLogger(__name__)

    def format(
        self,
        raw: str,
        chunk_index: Optional[int] = None,
        cache_key: Optional[str] = None,
        prompt: str = "",
    ) -> ChangeModeResult:
        if chunk_index and cache_key:
            return self._from_cache(cache_key, chunk_index)
        return self._from_output(raw, chunk_index, prompt)

    def _from_cache(self, cache_key: str, chunk_index: int) -> ChangeModeResult:
        pages = self.cache.load(cache_key)
        if pages is None:
            return ChangeModeResult(
                text=(
                    f"No cached edits found for cache key '{cache_key}'. The entry may have "
                    f"expired ({self.cache.ttl_seconds // 60} minute lifetime) or never existed. "
                    "Re-run the original request with changeMode enabled."
                ),
                chunk_index=chunk_index,
                total_chunks=0,
                cache_key=cache_key,
            )
        if not 1 <= chunk_index <= len(pages):
            return ChangeModeResult(
                text=f"Chunk {chunk_index} does not exist for cache key '{cache_key}'. Valid chunks: 1-{len(pages)}.",
                chunk_index=chunk_index,
                total_chunks=len(pages),
                cache_key=cache_key,
            )
        return self._page(pages[chunk_index - 1], chunk_index, len(pages), cache_key)

    def _from_output(self, raw: str, chunk_index: Optional[int], prompt: str) -> ChangeModeResult:
        edits = parse_change_mode_output(raw)
        if not edits:
            self.logger.info("No edit blocks found in change-mode output (%d chars)", len(raw or ""))
            return ChangeModeResult(
                text=(
                    "No edits found in Gemini's response. Ask for specific file changes, "
                    "or run without changeMode for a free-form answer.\n\n"
                    f"Raw response:\n{raw}"
                ),
            )
        problems = validate_edits(edits)
        if problems:
            return ChangeModeResult(text="Edit validation failed:\n" + "\n".join(problems), edits=edits)

        chunks = chunk_edits(edits, max_chars=self.max_chars)
        total = len(chunks)
        cache_key = None
        if total > 1:
            cache_key = self.cache.store(prompt, [chunk.edits for chunk in chunks])
        index = chunk_index if chunk_index and 1 <= chunk_index <= total else 1
        result = self._page(chunks[index - 1].edits, index, total, cache_key)
        if total == 1:
            result.text = f"{result.text}\n\n{summarize_edits(edits)}"
        return result

    def _page(self, edits: List[ChangeModeEdit], index: int, total: int, cache_key: Optional[str]) -> ChangeModeResult:
        header = "[CHANGE MODE OUTPUT - apply these edits exactly as written]"
        if total > 1:
            header += f"\nChunk {index} of {total}"
        body = [render_edit(edit, n, len(edits)) for n, edit in enumerate(edits, start=1)]
        text = "\n\n".join([header, *body])
        if index < total:
            text += (
                f"\n\nMore edits remain. Apply these, then call fetch-chunk with "
                f"cacheKey=\"{cache_key}\" and chunkIndex={index + 1}."
            )
        elif total > 1:
            text += "\n\nThis was the last chunk."
        return ChangeModeResult(text=text, edits=list(edits), chunk_index=index, total_chunks=total, cache_key=cache_key)
