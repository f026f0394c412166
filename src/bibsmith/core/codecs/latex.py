"""Bidirectional mapping between LaTeX escapes and Unicode text.

Decoding is table driven. Every known escape (accents with or without braces,
ligatures, escaped specials, quotes, dashes, symbols and Greek letters) is
compiled into one alternation sorted longest-first and applied in a single left
to right pass, so ``---`` is never consumed as ``--`` followed by ``-``. Unknown
commands are matched by trailing catch-all branches and copied through
unchanged.

Encoding only produces braced forms (``\\'{e}``, ``\\ss{}``) so the output
always decodes back to the same character. Characters missing from the table
are handed to pylatexenc.
"""

from __future__ import annotations

from functools import lru_cache
import re
import string
import unicodedata

from pylatexenc.latexencode import unicode_to_latex


# Accent command -> combining mark. Symbol accents attach directly to their
# argument (``\'e``); letter accents need a separator (``\v c``).
_ACCENT_MARKS: dict[str, str] = {
    "`": "\u0300",
    "'": "\u0301",
    "^": "\u0302",
    "~": "\u0303",
    "=": "\u0304",
    "u": "\u0306",
    ".": "\u0307",
    '"': "\u0308",
    "r": "\u030a",
    "H": "\u030b",
    "v": "\u030c",
    "c": "\u0327",
    "k": "\u0328",
}

_DOTLESS_BASES: dict[str, str] = {"\\i": "i", "\\j": "j"}

_LETTER_MACROS: dict[str, str] = {
    "\\ss": "ß",
    "\\ae": "æ",
    "\\AE": "Æ",
    "\\oe": "œ",
    "\\OE": "Œ",
    "\\o": "ø",
    "\\O": "Ø",
    "\\l": "ł",
    "\\L": "Ł",
    "\\aa": "å",
    "\\AA": "Å",
    "\\i": "ı",
    "\\j": "ȷ",
    "\\dh": "ð",
    "\\DH": "Ð",
    "\\th": "þ",
    "\\TH": "Þ",
    "\\textregistered": "®",
    "\\texttrademark": "™",
    "\\textcopyright": "©",
    "\\pounds": "£",
    "\\textsterling": "£",
    "\\euro": "€",
    "\\texteuro": "€",
    "\\dots": "…",
    "\\ldots": "…",
    "\\textellipsis": "…",
    "\\textemdash": "—",
    "\\textendash": "–",
    "\\S": "§",
    "\\P": "¶",
    "\\dag": "†",
    "\\ddag": "‡",
    "\\textdegree": "°",
    "\\guillemotleft": "«",
    "\\guillemotright": "»",
    "\\textexclamdown": "¡",
    "\\textquestiondown": "¿",
    "\\textbackslash": "\\",
    "\\textasciitilde": "~",
    "\\textasciicircum": "^",
}

_GREEK_MACROS: dict[str, str] = {
    "\\alpha": "α",
    "\\beta": "β",
    "\\gamma": "γ",
    "\\delta": "δ",
    "\\epsilon": "ε",
    "\\zeta": "ζ",
    "\\eta": "η",
    "\\theta": "θ",
    "\\iota": "ι",
    "\\kappa": "κ",
    "\\lambda": "λ",
    "\\mu": "μ",
    "\\nu": "ν",
    "\\xi": "ξ",
    "\\pi": "π",
    "\\rho": "ρ",
    "\\sigma": "σ",
    "\\tau": "τ",
    "\\upsilon": "υ",
    "\\phi": "φ",
    "\\chi": "χ",
    "\\psi": "ψ",
    "\\omega": "ω",
    "\\Gamma": "Γ",
    "\\Delta": "Δ",
    "\\Theta": "Θ",
    "\\Lambda": "Λ",
    "\\Xi": "Ξ",
    "\\Pi": "Π",
    "\\Sigma": "Σ",
    "\\Phi": "Φ",
    "\\Psi": "Ψ",
    "\\Omega": "Ω",
}

# Escaped specials and punctuation that are not control words.
_SYMBOL_ESCAPES: dict[str, str] = {
    "\\&": "&",
    "\\%": "%",
    "\\$": "$",
    "\\#": "#",
    "\\_": "_",
    "\\{": "{",
    "\\}": "}",
    "\\~{}": "~",
    "\\^{}": "^",
    "\\,": "\u2009",
    "\\ ": " ",
    "``": "\u201c",
    "''": "\u201d",
    "---": "—",
    "--": "–",
    "~": "\u00a0",
    "{}": "",
}

_RESERVED_CHARS_RE = re.compile(r"([&%$#_])")
_HYPHEN_RUN_RE = re.compile(r"-(?=-)")
_HAS_COMMAND_RE = re.compile(r"\\(?:[A-Za-z]+|[^A-Za-z])")
_COMMAND_WRAPPER_RE = re.compile(r"\\[A-Za-z]+\{([^{}]*)\}")
_BARE_COMMAND_RE = re.compile(r"\\[A-Za-z]+")
_ESCAPED_PAIR_RE = re.compile(r"\\(.)", re.DOTALL)
_WHITESPACE_RE = re.compile(r"\s+")
_UPPERCASE_RUN_RE = re.compile(r"\b([A-Z]{2,})\b")
_BRACE_GROUP_RE = re.compile(r"(\\[A-Za-z]+|\\[^A-Za-z])?\{([^{}]*)\}")


def _compose(base: str, mark: str) -> str | None:
    composed = unicodedata.normalize("NFC", base + mark)
    if len(composed) == 1 and composed != base:
        return composed
    return None


def _accent_forms(accent: str, argument: str) -> list[str]:
    """Return every spelling of ``accent`` applied to ``argument`` that decode accepts."""
    forms = [f"\\{accent}{{{argument}}}", f"{{\\{accent}{{{argument}}}}}"]
    if accent.isalpha():
        forms.append(f"\\{accent} {argument}")
        forms.append(f"{{\\{accent} {argument}}}")
    else:
        forms.append(f"\\{accent}{argument}")
        forms.append(f"{{\\{accent}{argument}}}")
    return forms


@lru_cache(maxsize=1)
def _tables() -> tuple[dict[str, str], dict[str, str]]:
    """Build the (decode, encode) tables once per process."""
    decode_table: dict[str, str] = {}
    encode_table: dict[str, str] = {}

    for accent, mark in _ACCENT_MARKS.items():
        for base in string.ascii_letters:
            composed = _compose(base, mark)
            if composed is None:
                continue
            for form in _accent_forms(accent, base):
                decode_table.setdefault(form, composed)
            encode_table.setdefault(composed, f"\\{accent}{{{base}}}")
        for macro, base in _DOTLESS_BASES.items():
            composed = _compose(base, mark)
            if composed is None:
                continue
            for form in _accent_forms(accent, macro):
                decode_table.setdefault(form, composed)

    for macro, char in {**_LETTER_MACROS, **_GREEK_MACROS}.items():
        decode_table.setdefault(macro, char)
        decode_table.setdefault(f"{{{macro}}}", char)
        encode_table.setdefault(char, f"{macro}{{}}")
    for macro, char in _GREEK_MACROS.items():
        decode_table.setdefault(f"${macro}$", char)
        encode_table[char] = f"${macro}$"

    # Preferred spellings where several macros decode to the same character.
    encode_table.update(
        {
            "£": "\\pounds{}",
            "€": "\\texteuro{}",
            "…": "\\ldots{}",
            "—": "---",
            "–": "--",
            "\u201c": "``",
            "\u201d": "''",
            "\u00a0": "~",
            "\u2009": "\\,",
        }
    )
    decode_table.update(_SYMBOL_ESCAPES)
    return decode_table, encode_table


def _key_pattern(key: str) -> str:
    pattern = re.escape(key)
    if re.search(r"\\[A-Za-z]+$", key):
        # A control word ends at the first non-letter and may swallow an empty group.
        pattern += r"(?![A-Za-z])(?:\{\})?"
    return pattern


@lru_cache(maxsize=1)
def _decode_pattern() -> re.Pattern[str]:
    decode_table, _ = _tables()
    branches = [_key_pattern(key) for key in sorted(decode_table, key=len, reverse=True)]
    # Unknown control words and symbols are consumed so their arguments stay intact.
    branches.append(r"\\[A-Za-z]+")
    branches.append(r"\\[^A-Za-z]")
    return re.compile("|".join(branches), re.DOTALL)


def decode(text: str) -> str:
    """Replace every known LaTeX escape in ``text`` with its Unicode equivalent."""
    if not text:
        return text
    decode_table, _ = _tables()

    def _replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if token in decode_table:
            return decode_table[token]
        if token.endswith("{}") and token[:-2] in decode_table:
            return decode_table[token[:-2]]
        return token

    return _decode_pattern().sub(_replace, text)


def encode(text: str) -> str:
    """Escape BibTeX specials and rewrite non-ASCII characters as braced macros."""
    if not text:
        return text
    _, encode_table = _tables()
    escaped = _RESERVED_CHARS_RE.sub(r"\\\1", text).replace("~", "\\~{}")
    # An empty group keeps ASCII hyphen runs from reading back as dashes.
    escaped = _HYPHEN_RUN_RE.sub("-{}", escaped)
    parts: list[str] = []
    for char in escaped:
        if ord(char) < 128:
            parts.append(char)
            continue
        replacement = encode_table.get(char)
        if replacement is None:
            replacement = unicode_to_latex(char, non_ascii_only=True, unknown_char_warning=False)
        parts.append(replacement)
    return "".join(parts)


def has_commands(text: str) -> bool:
    """Return whether ``text`` contains a backslash command or escaped symbol."""
    if not text:
        return False
    return _HAS_COMMAND_RE.search(text) is not None


def strip(text: str) -> str:
    """Reduce ``text`` to plain Unicode, dropping formatting commands."""
    if not text:
        return text
    result = decode(text)
    previous = None
    while previous != result:
        previous = result
        result = _COMMAND_WRAPPER_RE.sub(r"\1", result)
    result = _BARE_COMMAND_RE.sub("", result)
    result = _ESCAPED_PAIR_RE.sub(r"\1", result)
    return _WHITESPACE_RE.sub(" ", result).strip()


def protect(text: str) -> str:
    """Wrap runs of two or more capitals in braces to preserve their case."""
    if not text:
        return text
    return _UPPERCASE_RUN_RE.sub(r"{\1}", text)


def unprotect(text: str) -> str:
    """Remove one level of case-protecting braces.

    Groups that carry a command argument (``\\'{e}``, ``\\emph{x}``) are left
    alone, as are empty groups; only free-standing groups without nested braces
    are unwrapped.
    """
    if not text:
        return text

    def _replace(match: re.Match[str]) -> str:
        if match.group(1) or not match.group(2):
            return match.group(0)
        return match.group(2)

    return _BRACE_GROUP_RE.sub(_replace, text)


__all__ = ["decode", "encode", "has_commands", "protect", "strip", "unprotect"]
