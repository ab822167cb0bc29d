from gemini_bridge.changes.chunk import EDIT_OVERHEAD_CHARS, chunk_edits, estimate_edit_size
from gemini_bridge.changes.parse import ChangeModeEdit


def make_edit(filename, size, line=1):
    return ChangeModeEdit(filename, line, line, "o" * size, line, line, "")


def test_empty_input_yields_single_empty_chunk():
    chunks = chunk_edits([])

    assert len(chunks) == 1
    assert chunks[0].edits == []
    assert (chunks[0].index, chunks[0].total, chunks[0].has_more) == (1, 1, False)


def test_small_edits_share_one_chunk():
    edits = [make_edit("a.py", 10), make_edit("b.py", 10)]

    chunks = chunk_edits(edits, max_chars=10_000)

    assert len(chunks) == 1
    assert chunks[0].edits == edits
    assert chunks[0].estimated_chars == sum(estimate_edit_size(e) for e in edits)


def test_file_groups_stay_together():
    # a.py group fits alone but not next to b.py
    edits = [
        make_edit("a.py", 300, line=1),
        make_edit("b.py", 300, line=1),
        make_edit("a.py", 300, line=50),
    ]
    budget = 2 * (300 + 4 + EDIT_OVERHEAD_CHARS)

    chunks = chunk_edits(edits, max_chars=budget)

    assert [[(e.filename, e.old_start_line) for e in c.edits] for c in chunks] == [
        [("a.py", 1), ("a.py", 50)],
        [("b.py", 1)],
    ]
    assert [c.index for c in chunks] == [1, 2]
    assert [c.total for c in chunks] == [2, 2]
    assert [c.has_more for c in chunks] == [True, False]


def test_oversized_group_is_split_per_edit():
    edits = [make_edit("big.py", 400, line=n) for n in (1, 2, 3)]
    per_edit = estimate_edit_size(edits[0])

    chunks = chunk_edits(edits, max_chars=2 * per_edit)

    assert [len(c.edits) for c in chunks] == [2, 1]


def test_single_edit_larger_than_budget_gets_own_chunk():
    edits = [make_edit("a.py", 10), make_edit("huge.py", 5000), make_edit("c.py", 10)]

    chunks = chunk_edits(edits, max_chars=1000)

    assert [[e.filename for e in c.edits] for c in chunks] == [["a.py"], ["huge.py"], ["c.py"]]
