"""
Size-bounded chunker for change-mode edits.
Edits for the same file stay together when the whole file group fits.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .parse import ChangeModeEdit


EDIT_OVERHEAD_CHARS = 200


@dataclass
class EditChunk:
    edits: List[ChangeModeEdit] = field(default_factory=list)
    index: int = 1
    total: int = 1
    has_more: bool = False
    estimated_chars: int = 0


def estimate_edit_size(edit: ChangeModeEdit) -> int:
    return len(edit.filename) + len(edit.old_code) + len(edit.new_code) + EDIT_OVERHEAD_CHARS


def _group_by_file(edits: List[ChangeModeEdit]) -> Dict[str, List[ChangeModeEdit]]:
    groups: Dict[str, List[ChangeModeEdit]] = {}
    for edit in edits:
        groups.setdefault(edit.filename, []).append(edit)
    return groups


def chunk_edits(edits: List[ChangeModeEdit], max_chars: int = 20000) -> List[EditChunk]:
    chunks: List[EditChunk] = []
    current = EditChunk()

    def flush():
        nonlocal current
        if current.edits:
            chunks.append(current)
            current = EditChunk()

    for group in _group_by_file(edits).values():
        group_size = sum(estimate_edit_size(e) for e in group)
        if current.estimated_chars + group_size <= max_chars:
            current.edits.extend(group)
            current.estimated_chars += group_size
            continue
        if group_size <= max_chars:
            flush()
            current.edits.extend(group)
            current.estimated_chars = group_size
            continue
        # file group alone is over budget: fill edit by edit
        for edit in group:
            size = estimate_edit_size(edit)
            if current.edits and current.estimated_chars + size > max_chars:
                flush()
            current.edits.append(edit)
            current.estimated_chars += size
    flush()

    if not chunks:
        chunks.append(EditChunk())
    for n, chunk in enumerate(chunks, start=1):
        chunk.index = n
        chunk.total = len(chunks)
        chunk.has_more = n < len(chunks)
    return chunks
