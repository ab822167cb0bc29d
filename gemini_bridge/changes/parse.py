"""
Parse change-mode answers into edit records.
Blocks look like ``**FILE: path:line**`` followed by OLD:/NEW: sections and ``**END**``.
"""
from __future__ import annotations

import re
from collections import Counter
from dataclasses import asdict, dataclass
from typing import Dict, List


BLOCK_RE = re.compile(
    r"\*\*FILE:\s*(?P<filename>[^\n*]+?):(?P<line>\d+)\s*\*\*[ \t]*\n"
    r"(?P<body>.*?)"
    r"^\s*\*\*END\*\*",
    re.DOTALL | re.MULTILINE,
)
OLD_NEW_RE = re.compile(r"^\s*OLD:[ \t]*\n(?P<old>.*?)^\s*NEW:[ \t]*\n?(?P<new>.*)\Z", re.DOTALL | re.MULTILINE)
FENCE_RE = re.compile(r"^\s*```[\w.+-]*\s*$")


@dataclass
class ChangeModeEdit:
    filename: str
    old_start_line: int
    old_end_line: int
    old_code: str
    new_start_line: int
    new_end_line: int
    new_code: str

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "ChangeModeEdit":
        return cls(**data)


def _unwrap_block(body: str) -> str:
    """Drop one fence pair wrapping the whole OLD/NEW body; fences inside a section are file content."""
    lines = body.strip("\n").splitlines()
    if len(lines) >= 2 and FENCE_RE.match(lines[0]) and FENCE_RE.match(lines[-1]):
        lines = lines[1:-1]
    return "\n".join(lines) + "\n"


def _span(start: int, code: str) -> int:
    if not code:
        return start
    return start + len(code.splitlines()) - 1


def parse_change_mode_output(text: str) -> List[ChangeModeEdit]:
    edits: List[ChangeModeEdit] = []
    for match in BLOCK_RE.finditer(text or ""):
        sections = OLD_NEW_RE.search(_unwrap_block(match.group("body")))
        if not sections:
            continue
        start = int(match.group("line"))
        old_code = sections.group("old").strip("\n")
        new_code = sections.group("new").strip("\n")
        edits.append(
            ChangeModeEdit(
                filename=match.group("filename").strip(),
                old_start_line=start,
                old_end_line=_span(start, old_code),
                old_code=old_code,
                new_start_line=start,
                new_end_line=_span(start, new_code),
                new_code=new_code,
            )
        )
    return edits


def validate_edits(edits: List[ChangeModeEdit]) -> List[str]:
    problems = []
    for n, edit in enumerate(edits, start=1):
        if not edit.filename:
            problems.append(f"Edit {n}: missing filename")
        if edit.old_start_line < 1:
            problems.append(f"Edit {n} ({edit.filename}): line numbers start at 1, got {edit.old_start_line}")
        if not edit.old_code and not edit.new_code:
            problems.append(f"Edit {n} ({edit.filename}): both OLD and NEW are empty")
    return problems


def summarize_edits(edits: List[ChangeModeEdit]) -> str:
    per_file = Counter(edit.filename for edit in edits)
    lines = [f"Summary: {len(edits)} edit(s) across {len(per_file)} file(s)"]
    for filename, count in per_file.items():
        lines.append(f"- {filename}: {count} edit(s)")
    return "\n".join(lines)
