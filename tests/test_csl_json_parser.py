import json

from bibsmith.core import BibFormat, validate
from bibsmith.core.parsers import CslJsonParser
from bibsmith.core.parsers.csl import resolve_item_type


def test_parse_array_of_entries() -> None:
    text = json.dumps(
        [
            {
                "id": "doe2023",
                "type": "article-journal",
                "title": "Graphs",
                "author": [{"family": "Doe", "given": "John"}, "Jane Smith"],
                "issued": {"date-parts": [[2023, 5]]},
                "accessed": "2024-01-02",
                "x-shelf": "B12",
            }
        ]
    )

    result = CslJsonParser().parse(text)

    assert result.stats.successful == 1
    entry = result.entries[0]
    assert entry.author[1].given == "Jane"
    assert entry.issued.date_parts == ((2023, 5),)
    assert entry.accessed.date_parts == ((2024, 1, 2),)
    assert entry.get("x-shelf") == "B12"
    assert entry.source_format is BibFormat.CSL_JSON


def test_parse_single_object() -> None:
    result = CslJsonParser().parse('{"id": 42, "type": "book", "title": "Solo"}')
    assert [entry.id for entry in result.entries] == ["42"]


def test_literal_dates_become_raw() -> None:
    text = json.dumps([{"id": "a", "type": "book", "issued": {"literal": "Spring 1990"}}])
    entry = CslJsonParser().parse(text).entries[0]
    assert entry.issued.raw == "Spring 1990"


def test_type_spelling_is_normalised() -> None:
    assert resolve_item_type("ARTICLE_JOURNAL") == "article-journal"
    assert resolve_item_type("legal-case") == "legal_case"
    assert resolve_item_type("novel") is None


def test_unknown_type_falls_back_with_warning() -> None:
    result = CslJsonParser().parse('[{"id": "n", "type": "novel"}]')
    entry = result.entries[0]
    assert entry.type == "article"
    assert entry.format_metadata.original_type == "novel"
    warning = result.warnings[0]
    assert warning.severity == "warning"
    assert warning.type == "validation-error"
    assert warning.field == "type"


def test_numeric_values_in_text_fields_are_kept_as_strings() -> None:
    text = '[{"id":"a","type":"book","title":"T","page":45,"ISBN":9780262033848,"volume":3}]'
    result = CslJsonParser().parse(text)
    assert result.stats.successful == 1
    assert result.stats.failed == 0
    entry = result.entries[0]
    assert entry.page == "45"
    assert entry.isbn == "9780262033848"
    assert entry.volume == 3


def test_invalid_items_are_dropped() -> None:
    text = json.dumps(
        [
            {"id": "ok", "type": "book"},
            {"type": "book"},
            {"id": "notype"},
            "not an object",
            {"id": "bad-date", "type": "book", "issued": {"date-parts": [[1, 2, 3, 4]]}},
        ]
    )
    result = CslJsonParser().parse(text)
    assert [entry.id for entry in result.entries] == ["ok"]
    assert result.stats.total == 5
    assert result.stats.failed == 4
    assert {error.entry_id for error in result.errors} == {"unknown", "notype", "bad-date"}


def test_invalid_json_is_a_document_error() -> None:
    result = CslJsonParser().parse("[{")
    assert result.entries == ()
    assert result.errors[0].message.startswith("Invalid JSON")


def test_empty_array() -> None:
    result = CslJsonParser().parse("[]")
    assert result.entries == ()
    assert result.warnings == ()


def test_validate() -> None:
    assert validate('[{"id": "a", "type": "book"}]', "csl-json") == []
    messages = [issue.message for issue in validate('[{"title": "x"}, 3]', "csl-json")]
    assert messages == [
        "Item 1 is missing 'id'.",
        "Entry is missing 'type'.",
        "Item 2 is not an object.",
    ]
    assert validate("nope", "csl-json")[0].message.startswith("Invalid JSON")
