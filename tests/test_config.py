from pathlib import Path
import textwrap

from pydantic import ValidationError
import pytest

from bibsmith.core import ConfigurationError, GeneratorOptions, load_options, options_from_mapping


def _write(path: Path, content: str) -> Path:
    path.write_text(textwrap.dedent(content).strip() + "\n", encoding="utf-8")
    return path


def test_defaults() -> None:
    options = GeneratorOptions()
    assert options.indent == "  "
    assert options.line_ending == "\n"
    assert not options.sort
    assert not options.include_metadata
    assert not options.protect_titles


def test_line_ending_aliases() -> None:
    assert GeneratorOptions(line_ending="crlf").line_ending == "\r\n"
    assert GeneratorOptions(line_ending="LF").line_ending == "\n"
    with pytest.raises(ValidationError):
        GeneratorOptions(line_ending="\r")


def test_unknown_options_are_rejected() -> None:
    with pytest.raises(ConfigurationError, match="Invalid generator options"):
        options_from_mapping({"colour": "blue"})


def test_merged_ignores_missing_overrides() -> None:
    base = GeneratorOptions(indent="\t", sort=True)
    merged = base.merged(sort=None, protect_titles=True)
    assert merged.indent == "\t"
    assert merged.sort
    assert merged.protect_titles
    assert not base.protect_titles


def test_load_options_from_yaml(tmp_path: Path) -> None:
    config = _write(
        tmp_path / "bibsmith.yml",
        """
        indent: "    "
        line-ending: crlf
        sort: true
        protect-titles: true
        """,
    )
    options = load_options(config)
    assert options == GeneratorOptions(
        indent="    ", line_ending="\r\n", sort=True, protect_titles=True
    )


def test_load_options_under_namespace(tmp_path: Path) -> None:
    config = _write(
        tmp_path / "project.yml",
        """
        bibsmith:
          include-metadata: true
        other-tool:
          verbose: true
        """,
    )
    assert load_options(config).include_metadata


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    config = tmp_path / "empty.yml"
    config.write_text("", encoding="utf-8")
    assert load_options(config) == GeneratorOptions()


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("indent: [unclosed", "Invalid YAML"),
        ("- a\n- b\n", "must contain a mapping"),
        ("sort: maybe\n", "Invalid generator options"),
    ],
)
def test_invalid_configuration(tmp_path: Path, content: str, message: str) -> None:
    config = tmp_path / "broken.yml"
    config.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError, match=message):
        load_options(config)


def test_missing_configuration_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Unable to read"):
        load_options(tmp_path / "absent.yml")
