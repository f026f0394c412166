"""BibTeX and BibLaTeX reader built on a brace and quote aware scanner.

Entries are located by walking the document once. Outside an entry anything
that is not an ``@`` starts nothing: free text and ``%`` comments are
skipped. Inside an entry the scanner tracks brace depth and quoted values, so
braces inside field values never close the entry.

Recovery
: An entry that is not closed before the next line starting with
  ``@type{`` (or before the end of the document) is reported as a malformed
  record and scanning resumes at that next entry.

Macros
: ``@string`` definitions are substituted into later bare references, and
  ``#`` concatenates the pieces of a value. ``@comment`` and ``@preamble``
  blocks are skipped.
"""

from __future__ import annotations

from collections.abc import Iterator
import logging
import re
from typing import Any, ClassVar

from ..codecs import dates, latex, names
from ..exceptions import DocumentSyntaxError, RecordSyntaxError
from ..formats import BibFormat
from ..issues import ConversionWarning
from ..mappings import canonical_field_for, get_field_mapping, normalize_to_csl_type
from ..models import CanonicalEntry
from .base import BaseParser, EntryDraft, RawRecord, collapse_whitespace, validation_issue


logger = logging.getLogger(__name__)

_ENTRY_START_RE = re.compile(r"@\s*([A-Za-z][\w-]*)\s*([{(])")
_LINE_ENTRY_START_RE = re.compile(r"^[ \t]*@\s*[A-Za-z][\w-]*\s*[{(]", re.MULTILINE)
_TOKEN_RE = re.compile(r"[^\s\"#%'(),={}]+")
_SPECIAL_BLOCKS = frozenset({"comment", "preamble", "string"})
_DATE_FIELDS = frozenset({"year", "month", "day", "date"})
_VERBATIM_FIELDS = frozenset({"DOI", "URL"})


class _Cursor:
    """Position-tracking reader over the body of one entry."""

    __slots__ = ("pos", "text")

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_space(self) -> None:
        """Advance past whitespace and ``%`` comments running to end of line."""
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == "%":
                newline = self.text.find("\n", self.pos)
                self.pos = len(self.text) if newline == -1 else newline + 1
            elif char.isspace():
                self.pos += 1
            else:
                break

    def token(self) -> str | None:
        match = _TOKEN_RE.match(self.text, self.pos)
        if match is None:
            return None
        self.pos = match.end()
        return match.group(0)

    def delimited(self) -> str:
        """Read a ``{...}`` or ``"..."`` value and return its raw content."""
        opener = self.text[self.pos]
        closer = "}" if opener == "{" else '"'
        start = self.pos + 1
        depth = 0
        index = start
        while index < len(self.text):
            char = self.text[index]
            if char == "\\":
                index += 2
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                if depth == 0:
                    if closer == "}":
                        self.pos = index + 1
                        return self.text[start:index]
                    raise RecordSyntaxError("Unbalanced '}' inside a quoted value.")
                depth -= 1
            elif char == '"' and closer == '"' and depth == 0:
                self.pos = index + 1
                return self.text[start:index]
            index += 1
        raise RecordSyntaxError(f"Unterminated field value starting with '{opener}'.")


def _read_value(cursor: _Cursor, strings: dict[str, str]) -> str:
    pieces: list[str] = []
    while True:
        cursor.skip_space()
        char = cursor.peek()
        if char in ("{", '"'):
            pieces.append(cursor.delimited())
        else:
            token = cursor.token()
            if token is None:
                raise RecordSyntaxError("Expected a field value.")
            if token.isdigit():
                pieces.append(token)
            else:
                pieces.append(strings.get(token.lower(), token))
        cursor.skip_space()
        if cursor.peek() != "#":
            return "".join(pieces)
        cursor.pos += 1


def _read_fields(cursor: _Cursor, strings: dict[str, str]) -> list[tuple[str, str]]:
    fields: list[tuple[str, str]] = []
    while True:
        cursor.skip_space()
        if cursor.at_end():
            return fields
        if cursor.peek() == ",":
            cursor.pos += 1
            continue
        name = cursor.token()
        if name is None:
            raise RecordSyntaxError(f"Unexpected character '{cursor.peek()}' in field list.")
        cursor.skip_space()
        if cursor.peek() != "=":
            raise RecordSyntaxError(f"Expected '=' after field '{name}'.")
        cursor.pos += 1
        fields.append((name.lower(), _read_value(cursor, strings)))
        cursor.skip_space()
        if not cursor.at_end() and cursor.peek() != ",":
            raise RecordSyntaxError(f"Expected ',' after field '{name}'.")


def _find_entry_end(text: str, start: int, closer: str) -> int | None:
    """Return the index closing the entry whose body begins at ``start``.

    ``None`` means the entry runs into the next line-leading ``@type{`` or
    the end of the document without being closed.
    """
    depth = 0
    in_quote = False
    line_start = False
    index = start
    while index < len(text):
        char = text[index]
        if char == "\n":
            line_start = True
            index += 1
            continue
        if line_start and char == "@":
            line_begin = text.rfind("\n", 0, index) + 1
            if _LINE_ENTRY_START_RE.match(text, line_begin):
                return None
        if not char.isspace():
            line_start = False
        if char == "\\":
            index += 2
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            if depth == 0:
                return index if closer == "}" else None
            depth -= 1
        elif char == '"' and depth == 0:
            in_quote = not in_quote
        elif char == ")" and closer == ")" and depth == 0 and not in_quote:
            return index
        index += 1
    return None


def _guess_key(body: str) -> str | None:
    head = body.split(",", 1)[0].strip()
    if head and "=" not in head and not any(char.isspace() for char in head):
        return head
    return None


def _read_entry(
    entry_type: str, body: str, strings: dict[str, str]
) -> tuple[str, list[tuple[str, str]]]:
    cursor = _Cursor(body)
    cursor.skip_space()
    key = cursor.token() if cursor.peek() not in (",", "") else None
    cursor.skip_space()
    if not key or cursor.peek() == "=":
        raise RecordSyntaxError(f"@{entry_type} entry is missing a citation key.")
    try:
        return key, _read_fields(cursor, strings)
    except RecordSyntaxError as exc:
        raise RecordSyntaxError(str(exc), entry_id=key) from exc


def _clean_text(value: str) -> str:
    return latex.decode(latex.unprotect(collapse_whitespace(value)))


def _clean_date_part(value: str) -> str:
    return latex.strip(value).strip("{}")


class BibTeXParser(BaseParser):
    """Parse BibTeX documents into canonical entries."""

    format: ClassVar[BibFormat] = BibFormat.BIBTEX

    def validate(self, text: str) -> list[ConversionWarning]:
        issues: list[ConversionWarning] = []
        depth = 0
        index = 0
        while index < len(text):
            char = text[index]
            if char == "\\":
                index += 2
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth < 0:
                    issues.append(validation_issue(f"Unexpected '}}' at offset {index}."))
                    depth = 0
            index += 1
        if depth > 0:
            issues.append(validation_issue(f"Unbalanced braces: {depth} unclosed '{{'."))
        entry_types = [match.group(1).lower() for match in _ENTRY_START_RE.finditer(text)]
        if not [name for name in entry_types if name not in _SPECIAL_BLOCKS]:
            issues.append(validation_issue("No BibTeX entries found."))
        return issues

    # --------------------------------------------------------------------- scanning

    def _locate_records(self, text: str) -> Iterator[RawRecord]:
        strings: dict[str, str] = {}
        position = 0
        blocks = 0
        index = 0
        while index < len(text):
            char = text[index]
            if char == "%":
                newline = text.find("\n", index)
                index = len(text) if newline == -1 else newline + 1
                continue
            match = _ENTRY_START_RE.match(text, index) if char == "@" else None
            if match is None:
                index += 1
                continue

            entry_type = match.group(1).lower()
            blocks += 1
            closer = "}" if match.group(2) == "{" else ")"
            body_start = match.end()
            end = _find_entry_end(text, body_start, closer)
            if end is None:
                next_entry = _LINE_ENTRY_START_RE.search(text, body_start)
                resume = next_entry.start() if next_entry else len(text)
                index = resume
                if entry_type in _SPECIAL_BLOCKS:
                    logger.debug("Skipping unterminated @%s block", entry_type)
                    continue
                position += 1
                body = text[body_start:resume]
                yield RawRecord(
                    position=position,
                    text=body,
                    entry_id=_guess_key(body),
                    error=f"Unterminated @{entry_type} entry: missing closing '{closer}'.",
                )
                continue

            body = text[body_start:end]
            index = end + 1
            if entry_type == "string":
                _define_strings(body, strings)
                continue
            if entry_type in ("comment", "preamble"):
                continue

            position += 1
            try:
                key, fields = _read_entry(entry_type, body, strings)
            except RecordSyntaxError as exc:
                yield RawRecord(
                    position=position,
                    text=body,
                    entry_id=exc.entry_id or _guess_key(body),
                    error=str(exc),
                )
                continue
            yield RawRecord(
                position=position, text=body, entry_id=key, payload=(entry_type, fields)
            )

        if not blocks and text.strip():
            raise DocumentSyntaxError("No BibTeX entries found.")

    # --------------------------------------------------------------------- records

    def _parse_record(
        self, record: RawRecord, seen_ids: set[str]
    ) -> tuple[CanonicalEntry, list[ConversionWarning]]:
        entry_type, raw_fields = record.payload
        draft = EntryDraft(
            id=record.entry_id,
            type=normalize_to_csl_type(entry_type, self.format),
            source=self.format,
            original_type=entry_type,
        )
        date_fields: dict[str, str] = {}
        for name, value in raw_fields:
            if name in _DATE_FIELDS:
                date_fields.setdefault(name, _clean_date_part(value))
                continue
            canonical = canonical_field_for(name, self.format)
            if canonical is None or canonical in draft.fields:
                draft.custom_fields.setdefault(name, value)
                continue
            draft.set(canonical, _convert_field(canonical, value))

        if date_fields.get("date"):
            issued = dates.parse(date_fields["date"])
        else:
            issued = dates.parse_bibtex(
                date_fields.get("year"), date_fields.get("month"), date_fields.get("day")
            )
        draft.set("issued", issued)
        return draft.build(), draft.warnings


def _define_strings(body: str, strings: dict[str, str]) -> None:
    try:
        fields = _read_fields(_Cursor(body), strings)
    except RecordSyntaxError as exc:
        logger.debug("Ignoring malformed @string definition: %s", exc)
        return
    for name, value in fields:
        strings[name] = value


def _convert_field(canonical: str, value: str) -> Any:
    mapping = get_field_mapping(canonical)
    transform = mapping.transform if mapping else "none"
    if transform == "name":
        return tuple(names.parse_list(latex.decode(collapse_whitespace(value))))
    if transform == "date":
        return dates.parse(_clean_date_part(value))
    if canonical in _VERBATIM_FIELDS:
        return value.strip().replace("\\_", "_")
    return _clean_text(value)


class BibLaTeXParser(BibTeXParser):
    """BibLaTeX shares the BibTeX grammar; only the provenance label differs."""

    format: ClassVar[BibFormat] = BibFormat.BIBLATEX


__all__ = ["BibLaTeXParser", "BibTeXParser"]
