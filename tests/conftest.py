import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gemini_bridge.core.config import Settings  # noqa: E402


@pytest.fixture
def settings(tmp_path):
    return Settings(
        gemini_command="gemini",
        cache_dir=tmp_path / "chunks",
        data_dir=tmp_path / "data",
        timeout_seconds=5,
    )
