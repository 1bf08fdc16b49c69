import pytest

from conftest import make_entry
from vocabdeck.service.sorting import SortKey, SortSpec


@pytest.fixture
def entries():
    return [
        make_entry(1, english="banana", chapter=2, recently_missed_percent=10.0),
        make_entry(2, english="Apple", chapter=1, recently_missed_percent=10.0),
        make_entry(3, english=None, chapter=2, recently_missed_percent=5.0),
        make_entry(4, english="cherry", chapter=10, recently_missed_percent=10.0),
        make_entry(5, english="apple", chapter=1, recently_missed_percent=0.0),
    ]


def ids(rows):
    return [e.vocab_id for e in rows]


def test_empty_spec_keeps_input_order(entries):
    assert ids(SortSpec().apply(entries)) == [1, 2, 3, 4, 5]


def test_numbers_compare_numerically(entries):
    spec = SortSpec([SortKey("chapter")])
    assert ids(spec.apply(entries)) == [2, 5, 1, 3, 4]


def test_text_ignores_case_and_is_stable(entries):
    spec = SortSpec([SortKey("english")])
    # "Apple" and "apple" tie; input order 2 before 5 is kept
    assert ids(spec.apply(entries)) == [2, 5, 1, 4, 3]


def test_nulls_last_in_both_directions(entries):
    assert ids(SortSpec([SortKey("english", descending=True)]).apply(entries))[-1] == 3
    assert ids(SortSpec([SortKey("english")]).apply(entries))[-1] == 3


def test_descending_keeps_ties_in_input_order(entries):
    spec = SortSpec([SortKey("recently_missed_percent", descending=True)])
    assert ids(spec.apply(entries)) == [1, 2, 4, 3, 5]


def test_first_non_zero_key_decides(entries):
    spec = SortSpec([SortKey("recently_missed_percent", descending=True), SortKey("chapter", descending=True)])
    assert ids(spec.apply(entries)) == [4, 1, 2, 3, 5]


def test_unknown_column_rejected():
    with pytest.raises(ValueError):
        SortSpec([SortKey("nope")])


class TestToggle:

    def test_cycle_asc_desc_none(self):
        spec = SortSpec()
        spec.toggle("chapter")
        assert spec.describe() == [{"column": "chapter", "direction": "asc"}]
        spec.toggle("chapter")
        assert spec.describe() == [{"column": "chapter", "direction": "desc"}]
        spec.toggle("chapter")
        assert spec.describe() == []

    def test_single_toggle_replaces_other_keys(self):
        spec = SortSpec([SortKey("english")])
        spec.toggle("chapter")
        assert [k.column_id for k in spec.keys] == ["chapter"]

    def test_multi_toggle_appends_and_keeps_position(self):
        spec = SortSpec([SortKey("english")])
        spec.toggle("chapter", multi=True)
        spec.toggle("english", multi=True)
        assert spec.describe() == [
            {"column": "english", "direction": "desc"},
            {"column": "chapter", "direction": "asc"},
        ]
        spec.toggle("english", multi=True)
        assert spec.describe() == [{"column": "chapter", "direction": "asc"}]
