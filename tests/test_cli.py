from pathlib import Path
import json
import textwrap

from typer.testing import CliRunner

from bibsmith.ui.cli import app
from bibsmith.version import get_version


def _write(path: Path, content: str) -> Path:
    path.write_text(textwrap.dedent(content).strip() + "\n", encoding="utf-8")
    return path


def _bib(tmp_path: Path) -> Path:
    return _write(
        tmp_path / "refs.bib",
        """
        @article{zeta2020,
          author = {Doe, Jane},
          title = {Later Work},
          journal = {Journal of Tests},
          year = {2020}
        }

        @book{alpha1999,
          author = {Roe, Richard},
          title = {Early Work},
          publisher = {Example Press},
          year = {1999}
        }
        """,
    )


def test_convert_to_stdout(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["convert", str(_bib(tmp_path)), "--to", "ris"])
    assert result.exit_code == 0, result.stderr
    assert result.stdout.startswith("TY  - JOUR\nID  - zeta2020\n")
    assert "TY  - BOOK\nID  - alpha1999\n" in result.stdout


def test_convert_to_csl_json_with_metadata(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["convert", str(_bib(tmp_path)), "-t", "csl-json", "--sort", "--include-metadata"],
    )
    assert result.exit_code == 0, result.stderr
    payload = json.loads(result.stdout)
    assert [item["id"] for item in payload] == ["alpha1999", "zeta2020"]
    assert payload[0]["_formatMetadata"]["originalType"] == "book"


def test_convert_writes_output_file(tmp_path: Path) -> None:
    runner = CliRunner()
    target = tmp_path / "out" / "refs.xml"
    result = runner.invoke(
        app, ["convert", str(_bib(tmp_path)), "--to", "endnote", "--output", str(target)]
    )
    assert result.exit_code == 0, result.stderr
    assert result.stdout == ""
    assert "Wrote 2 of 2 entries to refs.xml (endnote)." in result.stderr
    content = target.read_text(encoding="utf-8")
    assert "<ref-type name=\"Book\">6</ref-type>" in content


def test_convert_honours_crlf_and_config(tmp_path: Path) -> None:
    config = _write(tmp_path / "bibsmith.yml", "sort: true\nindent: \"    \"\n")
    runner = CliRunner()
    result = runner.invoke(
        app, ["convert", str(_bib(tmp_path)), "--to", "bibtex", "--config", str(config), "--crlf"]
    )
    assert result.exit_code == 0, result.stderr
    output = result.stdout_bytes.decode("utf-8")
    assert output.startswith("@book{alpha1999,\r\n    author = {Roe, Richard},\r\n")
    assert output.endswith("}\r\n")


def test_convert_reports_invalid_config(tmp_path: Path) -> None:
    config = _write(tmp_path / "bibsmith.yml", "colour: blue\n")
    runner = CliRunner()
    result = runner.invoke(
        app, ["convert", str(_bib(tmp_path)), "--to", "ris", "--config", str(config)]
    )
    assert result.exit_code == 1
    assert "Invalid generator options" in result.stderr


def test_convert_rejects_unknown_target(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["convert", str(_bib(tmp_path)), "--to", "docx"])
    assert result.exit_code == 2
    assert result.stdout == ""


def test_convert_requires_detectable_format(tmp_path: Path) -> None:
    notes = _write(tmp_path / "notes.txt", "just some prose")
    runner = CliRunner()
    result = runner.invoke(app, ["convert", str(notes), "--to", "ris"])
    assert result.exit_code == 1
    assert "Unable to detect" in result.stderr


def test_convert_fails_on_unparseable_document(tmp_path: Path) -> None:
    broken = _write(tmp_path / "broken.json", "[{")
    runner = CliRunner()
    result = runner.invoke(app, ["convert", str(broken), "--to", "bibtex"])
    assert result.exit_code == 1
    assert "Invalid JSON" in result.stderr
    assert result.stdout == ""


def test_convert_reports_dropped_records(tmp_path: Path) -> None:
    source = _write(
        tmp_path / "items.json",
        '[{"id": "d1", "type": "dataset", "title": "Data"}, {"type": "book"}]',
    )
    runner = CliRunner()
    result = runner.invoke(app, ["-v", "convert", str(source), "--to", "bibtex"])
    assert result.exit_code == 0, result.stderr
    assert result.stdout.startswith("@misc{d1,")
    assert "missing 'id'" in result.stderr
    assert "d1: Type 'dataset'" in result.stderr


def test_validate_exit_codes(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["validate", str(_bib(tmp_path))])
    assert result.exit_code == 0, result.stderr
    assert "refs.bib: valid bibtex document." in result.stdout

    broken = _write(tmp_path / "broken.ris", "TY  - JOUR\nTI  - Open record")
    result = runner.invoke(app, ["validate", str(broken)])
    assert result.exit_code == 1
    assert "error(s) found (ris)" in result.stdout


def test_show_lists_entries(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["show", str(_bib(tmp_path))])
    assert result.exit_code == 0, result.stderr
    assert "zeta2020" in result.stdout
    assert "alpha1999" in result.stdout
    assert "Statistics (bibtex)" in result.stdout


def test_show_with_explicit_format(tmp_path: Path) -> None:
    source = _write(tmp_path / "refs.txt", "TY  - BOOK\nID  - r1\nTI  - Manual\nER  - ")
    runner = CliRunner()
    result = runner.invoke(app, ["show", str(source), "--from", "ris"])
    assert result.exit_code == 0, result.stderr
    assert "r1" in result.stdout


def test_formats_command() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["formats"])
    assert result.exit_code == 0, result.stderr
    for identifier in ("bibtex", "biblatex", "csl-json", "ris", "endnote"):
        assert identifier in result.stdout


def test_version_option() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == f"bibsmith {get_version()}"
