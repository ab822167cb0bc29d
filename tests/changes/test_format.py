import pytest

from gemini_bridge.changes.cache import ChunkCache
from gemini_bridge.changes.format import ChangeModeResult, ChunkFormatter
from gemini_bridge.changes.parse import ChangeModeEdit


def block(filename, line, old, new):
    return f"**FILE: {filename}:{line}**\nOLD:\n{old}\nNEW:\n{new}\n**END**\n"


@pytest.fixture
def cache(settings):
    return ChunkCache(settings)


@pytest.fixture
def formatter(cache):
    return ChunkFormatter(cache, max_chars=20000)


def test_single_page_answer(formatter, cache):
    raw = block("a.py", 2, "x = 1", "x = 2")

    result = formatter.format(raw, None, None, "bump x")

    assert isinstance(result, ChangeModeResult)
    assert (result.chunk_index, result.total_chunks, result.cache_key) == (1, 1, None)
    assert not result.has_more
    assert "**Edit 1/1: a.py** (lines 2-2)" in result.text
    assert "x = 1" in result.text and "x = 2" in result.text
    assert "Summary: 1 edit(s) across 1 file(s)" in result.text
    assert "fetch-chunk" not in result.text
    assert str(result) == result.text
    assert list(cache.cache_dir.glob("*.json")) == []


def test_no_edits_returns_raw_output(formatter):
    result = formatter.format("Just use a dict.", None, None, "p")

    assert result.edits == []
    assert result.text.startswith("No edits found")
    assert "Just use a dict." in result.text


def test_validation_failure_lists_problems(formatter):
    result = formatter.format(block("a.py", 0, "x", "y"), None, None, "p")

    assert result.text.startswith("Edit validation failed:")
    assert "line numbers start at 1" in result.text


def multi_page_raw():
    body = "v" * 300
    return "".join(block(f"f{n}.py", 1, body, body) for n in range(4))


def test_multi_page_answer_is_cached(cache):
    formatter = ChunkFormatter(cache, max_chars=900)

    first = formatter.format(multi_page_raw(), None, None, "big change")

    assert first.total_chunks == 4
    assert first.chunk_index == 1
    assert first.cache_key
    assert first.has_more
    assert "Chunk 1 of 4" in first.text
    assert f'cacheKey="{first.cache_key}" and chunkIndex=2' in first.text
    assert len(cache.load(first.cache_key)) == 4


def test_fresh_answer_honours_requested_page(cache):
    formatter = ChunkFormatter(cache, max_chars=900)

    result = formatter.format(multi_page_raw(), 3, None, "big change")

    assert result.chunk_index == 3
    assert [e.filename for e in result.edits] == ["f2.py"]


def test_fresh_answer_out_of_range_page_falls_back_to_first(cache):
    formatter = ChunkFormatter(cache, max_chars=900)

    result = formatter.format(multi_page_raw(), 9, None, "big change")

    assert result.chunk_index == 1


def test_cached_page_retrieval(cache):
    formatter = ChunkFormatter(cache, max_chars=900)
    first = formatter.format(multi_page_raw(), None, None, "big change")

    last = formatter.format("", 4, first.cache_key, "big change")

    assert last.chunk_index == 4
    assert last.total_chunks == 4
    assert [e.filename for e in last.edits] == ["f3.py"]
    assert "This was the last chunk." in last.text
    assert not last.has_more


def test_cache_miss_is_reported(formatter):
    result = formatter.format("", 2, "nope0000", "p")

    assert result.total_chunks == 0
    assert "No cached edits found for cache key 'nope0000'" in result.text
    assert "10 minute" in result.text


def test_cached_page_out_of_range(formatter, cache):
    key = cache.store("p", [[ChangeModeEdit("a.py", 1, 1, "x", 1, 1, "y")]])

    result = formatter.format("", 5, key, "p")

    assert "Valid chunks: 1-1" in result.text
    assert result.edits == []


def test_path_like_cache_key_reports_miss(formatter, cache):
    outside = cache.cache_dir.parent / "other.json"
    outside.write_text(
        '{"created_at": 9e18, "prompt": "", "chunks": [[{"filename": "SECRET.py", "old_start_line": 1, '
        '"old_end_line": 1, "old_code": "x", "new_start_line": 1, "new_end_line": 1, "new_code": "y"}]]}',
        encoding="utf-8",
    )

    result = formatter.format("", 1, "../other", "p")

    assert "No cached edits found for cache key '../other'" in result.text
    assert "SECRET.py" not in result.text
    assert outside.exists()
