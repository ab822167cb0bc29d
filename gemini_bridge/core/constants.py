"""
Shared constants: model choices, gemini CLI flags, and user-facing message text.
"""
from __future__ import annotations

from enum import Enum


class GeminiModel(str, Enum):
    PRO = "gemini-2.5-pro"
    PRO_1_5 = "gemini-1.5-pro"
    FLASH_1_5 = "gemini-1.5-flash"


DEFAULT_MODEL = GeminiModel.PRO

# gemini CLI flags
FLAG_MODEL = "-m"
FLAG_SANDBOX = "-s"
FLAG_PROMPT = "-p"

GEMINI_RESPONSE = "Gemini response:"
NO_PROMPT_PROVIDED = (
    "Please provide a prompt for analysis. Use @ syntax to include files "
    "(e.g., '@largefile.js explain what this does') or ask general questions"
)

# Substrings the CLI prints when the model's request quota is exhausted.
QUOTA_MARKERS = ("Quota exceeded", "RESOURCE_EXHAUSTED", "status 429")

CHANGE_MODE_INSTRUCTIONS = """\
[CHANGE MODE]
Answer the request below with concrete file edits only. Do not run tools that
write files; describe every change as one or more edit blocks instead.

Use exactly this block format for every edit:

**FILE: <relative/path>:<first line number of OLD>**
OLD:
<the exact existing lines, copied verbatim including indentation>
NEW:
<the replacement lines>
**END**

Rules:
- OLD must match the current file text exactly so it can be replaced as-is.
- Use one block per contiguous region; repeat the FILE header for each block.
- For a new file use line 1 and leave OLD empty.
- Do not put code fences around OLD or NEW; fences there are taken as file text.
- Text outside edit blocks is ignored.

Request:
{prompt}
"""
