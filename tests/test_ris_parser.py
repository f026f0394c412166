import textwrap

from bibsmith.core import validate
from bibsmith.core.parsers import RISParser


def _ris(content: str) -> str:
    return textwrap.dedent(content).strip() + "\n"


SAMPLE = _ris(
    """
    TY  - JOUR
    AU  - Doe, John
    AU  - Smith, Jane
    TI  - A study of
      continuation lines
    T2  - Journal of Tests
    PY  - 2023
    DA  - 2023/03/15
    SP  - 5
    EP  - 12
    SN  - 1234-5678
    KW  - alpha
    KW  - beta
    ZZ  - custom value
    ER  - 
    """
)


def test_parse_collects_repeated_tags() -> None:
    result = RISParser().parse(SAMPLE)

    assert result.stats.successful == 1
    entry = result.entries[0]
    assert entry.type == "article-journal"
    assert [person.family for person in entry.author] == ["Doe", "Smith"]
    assert entry.title == "A study of continuation lines"
    assert entry.container_title == "Journal of Tests"
    assert entry.issued.date_parts == ((2023, 3, 15),)
    assert entry.page == "5-12"
    assert entry.issn == "1234-5678"
    assert entry.keyword == "alpha, beta"
    assert entry.custom_fields == {"ZZ": "custom value"}


def test_ids_come_from_id_tag_or_are_synthesised() -> None:
    text = _ris(
        """
        TY  - BOOK
        ID  - smith99
        TI  - Tagged
        ER  - 

        TY  - JOUR
        AU  - Doe, John
        PY  - 2023
        ER  - 

        TY  - JOUR
        AU  - Doe, Jane
        PY  - 2023
        ER  - 

        TY  - GEN
        TI  - Anonymous
        ER  - 
        """
    )
    result = RISParser().parse(text)
    assert [entry.id for entry in result.entries] == ["smith99", "doe2023", "doe2023a", "entry4"]
    assert result.entries[0].type == "book"


def test_isbn_and_aliases() -> None:
    text = _ris(
        """
        TY  - BOOK
        A1  - Knuth, Donald E.
        T1  - The Art of Computer Programming
        Y1  - 1968
        SN  - 978-0-201-89683-1
        ER  - 
        """
    )
    entry = RISParser().parse(text).entries[0]
    assert entry.author[0].family == "Knuth"
    assert entry.title == "The Art of Computer Programming"
    assert entry.issued.year == 1968
    assert entry.isbn == "978-0-201-89683-1"
    assert entry.id == "knuth1968"


def test_unterminated_record_is_dropped() -> None:
    text = _ris(
        """
        TY  - JOUR
        TI  - Closed
        ER  - 
        TY  - JOUR
        ID  - open1
        TI  - Never closed
        """
    )
    result = RISParser().parse(text)
    assert [entry.title for entry in result.entries] == ["Closed"]
    assert result.stats.total == 2
    assert result.stats.failed == 1
    assert result.errors[0].entry_id == "open1"


def test_document_without_records() -> None:
    result = RISParser().parse("hello world\n")
    assert result.entries == ()
    assert len(result.errors) == 1


def test_validate_pairs_ty_and_er() -> None:
    assert validate(SAMPLE, "ris") == []
    messages = [issue.message for issue in validate("TY  - JOUR\nTI  - X\n", "ris")]
    assert messages == ["Found 1 TY tags but 0 ER tags."]
    assert [issue.message for issue in validate("", "ris")] == ["No RIS records found."]
