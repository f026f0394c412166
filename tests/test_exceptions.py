import pytest

from bibsmith.core import BibFormat, BibsmithError, UnsupportedFormatError
from bibsmith.core.exceptions import RecordSyntaxError, exception_hint, exception_messages


def test_unsupported_format_lists_known_formats() -> None:
    with pytest.raises(UnsupportedFormatError) as info:
        BibFormat.coerce("docx")
    assert isinstance(info.value, ValueError)
    assert isinstance(info.value, BibsmithError)
    assert "Unsupported format 'docx'" in str(info.value)
    assert "csl-json" in str(info.value)


def test_record_syntax_error_keeps_entry_id() -> None:
    error = RecordSyntaxError("Unbalanced braces.", entry_id="doe2023")
    assert error.entry_id == "doe2023"
    assert str(error) == "Unbalanced braces."


def test_exception_messages_follow_the_cause_chain() -> None:
    try:
        try:
            raise OSError("disk unplugged\nsecond line")
        except OSError as exc:
            raise BibsmithError("Unable to read refs.bib") from exc
    except BibsmithError as exc:
        caught = exc

    assert exception_messages(caught) == ["Unable to read refs.bib", "disk unplugged"]
    assert exception_hint(caught) == "disk unplugged"
    assert exception_hint(BibsmithError("")) is None
