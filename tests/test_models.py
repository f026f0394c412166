from pydantic import ValidationError
import pytest

from bibsmith.core import CanonicalEntry, Person, StructuredDate


def _entry(**fields: object) -> CanonicalEntry:
    return CanonicalEntry.model_validate({"id": "doe2023", "type": "book", **fields})


def test_entry_reads_wire_names() -> None:
    entry = _entry(**{"container-title": "Series", "DOI": "10.1/x"})
    assert entry.container_title == "Series"
    assert entry.get("container-title") == "Series"
    assert entry.get("DOI") == "10.1/x"
    assert entry.get("publisher", "n/a") == "n/a"


def test_entry_rejects_unknown_type() -> None:
    with pytest.raises(ValidationError):
        CanonicalEntry.model_validate({"id": "x", "type": "novel"})


def test_entry_requires_non_empty_id() -> None:
    with pytest.raises(ValidationError):
        CanonicalEntry.model_validate({"id": "", "type": "book"})


def test_entry_is_frozen() -> None:
    entry = _entry(title="Original")
    with pytest.raises(ValidationError):
        entry.title = "Changed"  # type: ignore[misc]


def test_extra_keys_survive_json() -> None:
    entry = _entry(**{"x-shelf": "B12"})
    assert entry.get("x-shelf") == "B12"
    assert entry.to_json_dict()["x-shelf"] == "B12"


def test_populated_fields_skip_identity() -> None:
    entry = _entry(title="T", volume=3)
    assert dict(entry.populated_fields()) == {"title": "T", "volume": 3}


def test_to_json_dict_uses_aliases_and_drops_metadata() -> None:
    entry = _entry(
        issued={"date-parts": [[2024, 3]]},
        author=[{"family": "Doe", "non-dropping-particle": "van"}],
        _formatMetadata={"source": "bibtex", "originalType": "book"},
    )
    payload = entry.to_json_dict()
    assert payload["issued"] == {"date-parts": [[2024, 3]]}
    assert payload["author"] == [{"family": "Doe", "non-dropping-particle": "van"}]
    assert "_formatMetadata" not in payload
    with_metadata = entry.to_json_dict(include_metadata=True)
    assert with_metadata["_formatMetadata"]["originalType"] == "book"


def test_person_shapes_do_not_mix() -> None:
    with pytest.raises(ValidationError):
        Person(literal="WHO", family="Organization")
    with pytest.raises(ValidationError):
        Person()


def test_structured_date_shape() -> None:
    with pytest.raises(ValidationError):
        StructuredDate.model_validate({"date-parts": [[2024]], "raw": "2024"})
    with pytest.raises(ValidationError):
        StructuredDate.model_validate({"date-parts": [[2020], [2021], [2022]]})
    date = StructuredDate.model_validate({"date-parts": [[2020, 1], [2021]]})
    assert date.is_range
    assert date.year == 2020
    assert StructuredDate.from_parts(2024, day=5).date_parts == ((2024,),)
