from collections.abc import Mapping
import textwrap
from typing import Any

import pytest

from bibsmith.core import (
    BibFormat,
    CanonicalEntry,
    UnsupportedFormatError,
    conversion_notes,
    convert,
    detect_format,
    get_generator,
    supported_formats,
)


def _doc(content: str) -> str:
    return textwrap.dedent(content).strip() + "\n"


class RecordingEmitter:
    debug_enabled = True

    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.errors: list[str] = []
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warnings.append(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self.errors.append(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))


BIBTEX = _doc(
    """
    @article{doe2023,
      author = {Doe, Jane},
      title = {A Study},
      journal = {Journal of Tests},
      year = {2023}
    }
    """
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        (BIBTEX, BibFormat.BIBTEX),
        ("@dataset{d1, title = {Data}, date = {2020}}", BibFormat.BIBLATEX),
        ("% comment\n@string{j = {Journal}}\n@book{b, title = {B}}", BibFormat.BIBTEX),
        ("TY  - JOUR\nTI  - Title\nER  - \n", BibFormat.RIS),
        ('[{"id": "a", "type": "book"}]', BibFormat.CSL_JSON),
        ('{"id": "a", "type": "book"}', BibFormat.CSL_JSON),
        ("\ufeff<?xml version='1.0'?><xml><records><record></record></records></xml>", BibFormat.ENDNOTE),
        ("<records><record></record></records>", BibFormat.ENDNOTE),
    ],
)
def test_detect_format(text: str, expected: BibFormat) -> None:
    assert detect_format(text) is expected


@pytest.mark.parametrize(
    "text",
    ["", "   \n", "plain prose", '{"title": "no id"}', "[{broken", "@comment{only a comment}"],
)
def test_detect_format_returns_none_when_unsure(text: str) -> None:
    assert detect_format(text) is None


def test_supported_formats_lists_every_format() -> None:
    assert supported_formats() == list(BibFormat)


def test_convert_bibtex_to_ris() -> None:
    converted = convert(BIBTEX, "bibtex", "ris")
    assert converted.output.splitlines() == [
        "TY  - JOUR",
        "ID  - doe2023",
        "AU  - Doe, Jane",
        "TI  - A Study",
        "JO  - Journal of Tests",
        "PY  - 2023",
        "ER  - ",
    ]
    assert converted.result.stats.successful == 1
    assert converted.warnings == ()


def test_convert_rejects_unknown_formats() -> None:
    with pytest.raises(UnsupportedFormatError):
        convert(BIBTEX, "bibtex", "docx")
    with pytest.raises(UnsupportedFormatError):
        convert(BIBTEX, "mods", "ris")


def test_type_downgrade_note() -> None:
    text = '[{"id": "d1", "type": "dataset", "title": "Measurements"}]'
    converted = convert(text, "csl-json", "bibtex")
    assert converted.output.startswith("@misc{d1,")
    notes = [warning for warning in converted.warnings if warning.type == "type-downgrade"]
    assert len(notes) == 1
    assert notes[0].severity == "info"
    assert notes[0].field == "type"
    assert notes[0].message == "Type 'dataset' is written as 'misc' in bibtex."

    biblatex = convert(text, "csl-json", "biblatex")
    assert biblatex.output.startswith("@dataset{d1,")
    assert not [warning for warning in biblatex.warnings if warning.type == "type-downgrade"]


def test_field_loss_note() -> None:
    text = '[{"id": "c1", "type": "paper-conference", "title": "Talk", "event": "PyCon"}]'
    converted = convert(text, "csl-json", "ris")
    assert "PyCon" not in converted.output
    losses = [warning for warning in converted.warnings if warning.type == "field-loss"]
    assert [(note.field, note.message) for note in losses] == [
        ("event", "Field 'event' has no ris equivalent.")
    ]


def test_encoding_loss_note_for_bibtex_targets() -> None:
    text = '[{"id": "t1", "type": "book", "title": "東京 Studies", "publisher": "Café Press"}]'
    converted = convert(text, "csl-json", "bibtex")
    encoding = [warning for warning in converted.warnings if warning.type == "encoding-loss"]
    assert [note.field for note in encoding] == ["title"]
    assert "publisher = {Caf\\'{e} Press}" in converted.output

    ris = convert(text, "csl-json", "ris")
    assert not [warning for warning in ris.warnings if warning.type == "encoding-loss"]


def test_custom_fields_are_reported_when_leaving_their_format() -> None:
    text = "TY  - JOUR\nID  - a1\nTI  - Title\nZZ  - private\nER  - \n"
    converted = convert(text, "ris", "bibtex")
    assert "private" not in converted.output
    messages = [warning.message for warning in converted.warnings]
    assert "Custom ris field 'ZZ' is not carried over to bibtex." in messages

    same = convert(text, "ris", "ris")
    assert "ZZ  - private" in same.output
    assert same.warnings == ()


def test_bibtex_custom_fields_survive_biblatex() -> None:
    text = "@article{a, title = {T}, year = {2020}, mynote = {kept}}"
    converted = convert(text, "bibtex", "biblatex")
    assert "mynote = {kept}" in converted.output
    assert not [warning for warning in converted.warnings if warning.type == "field-loss"]


def test_csl_target_has_no_loss_notes() -> None:
    text = "TY  - JOUR\nID  - a1\nTI  - Title\nZZ  - private\nER  - \n"
    converted = convert(text, "ris", "csl-json")
    assert converted.warnings == ()


def test_notes_leave_statistics_untouched() -> None:
    text = '[{"id": "d1", "type": "dataset"}, {"id": "d2", "type": "software"}]'
    converted = convert(text, "csl-json", "bibtex")
    assert len(converted.warnings) == 2
    stats = converted.result.stats
    assert (stats.total, stats.successful, stats.with_warnings, stats.failed) == (2, 2, 0, 0)


def test_partial_failure_still_converts_remaining_entries() -> None:
    text = '[{"id": "ok", "type": "book", "title": "Fine"}, {"type": "book"}]'
    converted = convert(text, "csl-json", "ris")
    assert "ID  - ok" in converted.output
    assert converted.result.stats.failed == 1
    assert [warning.entry_id for warning in converted.result.errors] == ["unknown"]


def test_convert_reports_to_emitter() -> None:
    emitter = RecordingEmitter()
    text = '[{"id": "d1", "type": "dataset"}, {"type": "book"}]'
    convert(text, "csl-json", "bibtex", emitter=emitter)

    assert emitter.errors == ["unknown: Item 2 is missing 'id'."]
    assert emitter.warnings == []
    names = [name for name, _ in emitter.events]
    assert names == ["conversion_note", "conversion"]
    assert emitter.events[-1][1] == {
        "source": "csl-json",
        "target": "bibtex",
        "total": 2,
        "successful": 1,
        "withWarnings": 0,
        "failed": 1,
    }


def test_conversion_notes_without_source_metadata() -> None:
    entry = CanonicalEntry.model_validate({"id": "w", "type": "webpage", "title": "Home"})
    notes = conversion_notes([entry], get_generator("ris"))
    assert notes == []
    notes = conversion_notes([entry], get_generator(BibFormat.BIBTEX))
    assert [note.type for note in notes] == ["type-downgrade"]
