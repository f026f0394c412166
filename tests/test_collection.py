import pytest

from bibsmith.core import (
    CanonicalEntry,
    FormatDetectionError,
    create_entry,
    delete_entries,
    filter_entries,
    merge_entries,
    read_entries,
    sort_entries,
    update_entry,
)


def _entry(entry_id: str, **fields: object) -> CanonicalEntry:
    payload: dict[str, object] = {"id": entry_id, "type": "article-journal", **fields}
    return CanonicalEntry.model_validate(payload)


LIBRARY = [
    _entry(
        "knuth1984",
        author=[{"family": "Knuth", "given": "Donald E."}],
        issued={"date-parts": [[1984]]},
        keyword="typesetting, tex",
    ),
    _entry(
        "vanrossum1995",
        type="report",
        author=[{"family": "Rossum", "given": "Guido", "non-dropping-particle": "van"}],
        issued={"date-parts": [[1995, 5]]},
        DOI="10.5555/Python",
    ),
    _entry("anon", title="Untitled"),
]


def test_read_entries_detects_the_format() -> None:
    entries = read_entries("@book{b1, title = {Book}, year = {2001}}")
    assert [entry.id for entry in entries] == ["b1"]
    assert entries[0].type == "book"
    assert read_entries("TY  - BOOK\nID  - r1\nER  - \n", "ris")[0].id == "r1"


def test_read_entries_requires_a_known_format() -> None:
    with pytest.raises(FormatDetectionError):
        read_entries("nothing to see here")


def test_filter_entries() -> None:
    assert [e.id for e in filter_entries(LIBRARY, author="knuth")] == ["knuth1984"]
    assert [e.id for e in filter_entries(LIBRARY, author="van rossum")] == ["vanrossum1995"]
    assert [e.id for e in filter_entries(LIBRARY, year=1995)] == ["vanrossum1995"]
    assert [e.id for e in filter_entries(LIBRARY, entry_type="report")] == ["vanrossum1995"]
    assert [e.id for e in filter_entries(LIBRARY, keyword="TeX")] == ["knuth1984"]
    assert [e.id for e in filter_entries(LIBRARY, entry_id="anon")] == ["anon"]
    assert filter_entries(LIBRARY, author="knuth", year=1995) == []
    assert filter_entries(LIBRARY) == LIBRARY


def test_create_entry_requires_id_and_type() -> None:
    entry = create_entry({"id": "new", "type": "book", "title": "Fresh", "container-title": "S"})
    assert entry.title == "Fresh"
    assert entry.container_title == "S"
    with pytest.raises(ValueError, match="'id'"):
        create_entry({"type": "book"})
    with pytest.raises(ValueError, match="'type'"):
        create_entry({"id": "x"})


def test_update_entry_returns_a_copy() -> None:
    original = LIBRARY[0]
    updated = update_entry(original, {"title": "The TeXbook", "keyword": None, "id": "other"})
    assert updated.id == "knuth1984"
    assert updated.title == "The TeXbook"
    assert updated.keyword is None
    assert updated.author == original.author
    assert original.title is None
    assert original.keyword == "typesetting, tex"


def test_delete_entries() -> None:
    remaining = delete_entries(LIBRARY, ["anon", "missing"])
    assert [entry.id for entry in remaining] == ["knuth1984", "vanrossum1995"]
    assert len(LIBRARY) == 3


def test_merge_entries_by_id_and_doi() -> None:
    duplicate_id = _entry("anon", title="Second copy")
    same_doi = _entry("python-report", DOI=" 10.5555/python ")
    merged = merge_entries([LIBRARY, [duplicate_id, same_doi]])
    assert [entry.id for entry in merged] == ["knuth1984", "vanrossum1995", "anon", "python-report"]
    assert merged[2].title == "Untitled"

    by_doi = merge_entries([LIBRARY, [duplicate_id, same_doi]], by="doi")
    assert [entry.id for entry in by_doi] == ["knuth1984", "vanrossum1995", "anon"]


def test_sort_entries() -> None:
    assert [e.id for e in sort_entries(LIBRARY)] == ["anon", "knuth1984", "vanrossum1995"]
    assert [e.id for e in sort_entries(LIBRARY, "author")] == ["anon", "knuth1984", "vanrossum1995"]
    assert [e.id for e in sort_entries(LIBRARY, "year")] == ["vanrossum1995", "knuth1984", "anon"]
    with pytest.raises(ValueError, match="Unknown sort key"):
        sort_entries(LIBRARY, "title")  # type: ignore[arg-type]
