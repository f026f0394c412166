import textwrap

from bibsmith.core import validate
from bibsmith.core.parsers import EndNoteParser


def _xml(content: str) -> str:
    return textwrap.dedent(content).strip() + "\n"


SAMPLE = _xml(
    """
    <?xml version="1.0" encoding="UTF-8"?>
    <xml><records>
    <record>
      <ref-type name="Journal Article">17</ref-type>
      <contributors>
        <authors>
          <author><style face="normal" font="default" size="100%">Doe, John</style></author>
          <author>Smith, Jane</author>
        </authors>
      </contributors>
      <titles>
        <title>Deep &amp; Wide Learning</title>
        <secondary-title>Journal of Tests</secondary-title>
      </titles>
      <dates><year>2021</year><pub-dates><date>2021-06-01</date></pub-dates></dates>
      <volume>7</volume>
      <pages>100-110</pages>
      <keywords><keyword>ml</keyword><keyword>nets</keyword></keywords>
      <urls><related-urls><url>https://example.org/paper</url></related-urls></urls>
      <custom1>extra</custom1>
    </record>
    <record>
      <ref-type>6</ref-type>
      <titles><title>Untitled Book</title></titles>
    </record>
    </records></xml>
    """
)


def test_parse_reads_nested_elements() -> None:
    result = EndNoteParser().parse(SAMPLE)

    assert result.stats.total == 2
    assert result.stats.successful == 2
    entry = result.entries[0]
    assert entry.type == "article-journal"
    assert [person.family for person in entry.author] == ["Doe", "Smith"]
    assert entry.title == "Deep & Wide Learning"
    assert entry.container_title == "Journal of Tests"
    assert entry.issued.date_parts == ((2021, 6, 1),)
    assert entry.volume == "7"
    assert entry.page == "100-110"
    assert entry.keyword == "ml, nets"
    assert entry.url == "https://example.org/paper"
    assert entry.custom_fields == {"custom1": "extra"}


def test_ids_are_synthesised_from_title_and_year() -> None:
    first, second = EndNoteParser().parse(SAMPLE).entries
    assert first.id == "deep2021"
    assert second.id == "entry2"


def test_synthesised_id_keeps_non_ascii_letters() -> None:
    text = _xml(
        """
        <records>
        <record><titles><title>Über-Sichten, revisited</title></titles>
          <dates><year>2020</year></dates></record>
        <record><titles><title>"Quoted": a study</title></titles>
          <dates><year>2019</year></dates></record>
        </records>
        """
    )
    assert [entry.id for entry in EndNoteParser().parse(text).entries] == [
        "übersichten2020",
        "quoted2019",
    ]


def test_numeric_ref_type_without_name() -> None:
    second = EndNoteParser().parse(SAMPLE).entries[1]
    assert second.type == "book"
    assert second.format_metadata.original_type == "Book"


def test_unclosed_record_is_dropped() -> None:
    text = _xml(
        """
        <records>
        <record><titles><title>Open</title></titles>
        <record><titles><title>Closed</title></titles></record>
        </records>
        """
    )
    result = EndNoteParser().parse(text)
    assert [entry.title for entry in result.entries] == ["Closed"]
    assert result.stats.failed == 1
    assert "closing </record>" in result.errors[0].message


def test_document_without_records() -> None:
    result = EndNoteParser().parse("<xml></xml>")
    assert result.entries == ()
    assert len(result.errors) == 1


def test_validate() -> None:
    assert validate(SAMPLE, "endnote") == []
    messages = [issue.message for issue in validate("<xml></xml>", "endnote")]
    assert "No <record> elements found in EndNote XML." in messages
    warnings = validate("<record></record>", "endnote")
    assert [issue.severity for issue in warnings] == ["warning"]
