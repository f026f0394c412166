"""Parse free-text personal and corporate names into `Person` records."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from ..models import Person


NameStyle = Literal["bibtex", "natural"]

PARTICLES: frozenset[str] = frozenset(
    {
        "von",
        "van",
        "de",
        "di",
        "del",
        "della",
        "da",
        "le",
        "la",
        "el",
        "al",
        "bin",
        "ibn",
        "ter",
        "op",
        "aan",
        "dos",
        "das",
    }
)

SUFFIXES: frozenset[str] = frozenset({"jr", "sr", "ii", "iii", "iv", "v", "vi", "esq", "phd", "md"})


def is_particle(word: str) -> bool:
    """Particles are matched exactly, so ``Van`` is part of a family name."""
    return word in PARTICLES


def is_suffix(word: str) -> bool:
    return word.replace(".", "").lower() in SUFFIXES


def _enclosed_in_braces(text: str) -> bool:
    if len(text) < 2 or text[0] != "{" or text[-1] != "}":
        return False
    depth = 0
    for index, char in enumerate(text):
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0 and index != len(text) - 1:
                return False
    return depth == 0


def _split_top_level(text: str, delimiter: str) -> list[str]:
    """Split on ``delimiter`` wherever it occurs outside braces."""
    parts: list[str] = []
    depth = 0
    start = 0
    index = 0
    while index < len(text):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth = max(depth - 1, 0)
        elif depth == 0 and text.startswith(delimiter, index):
            parts.append(text[start:index])
            index += len(delimiter)
            start = index
            continue
        index += 1
    parts.append(text[start:])
    return parts


def _words(text: str) -> list[str]:
    words: list[str] = []
    current: list[str] = []
    depth = 0
    for char in text:
        if char == "{":
            depth += 1
        elif char == "}":
            depth = max(depth - 1, 0)
        if char.isspace() and depth == 0:
            if current:
                words.append("".join(current))
                current = []
            continue
        current.append(char)
    if current:
        words.append("".join(current))
    return words


def _join(words: Iterable[str]) -> str | None:
    text = " ".join(words)
    return text or None


def _parse_family_segment(segment: str) -> tuple[str | None, str | None]:
    """Split ``[particles] Family`` into (particle, family)."""
    particles: list[str] = []
    family: list[str] = []
    for word in _words(segment):
        if not family and is_particle(word):
            particles.append(word)
        else:
            family.append(word)
    if not family:
        family, particles = particles, []
    return _join(particles), _join(family)


def _parse_inverted(text: str) -> Person:
    parts = [part.strip() for part in _split_top_level(text, ",")]
    if len(parts) == 2 and parts[1] and is_suffix(parts[1]) and len(_words(parts[0])) > 1:
        # "Given Family, Jr." is natural order with a trailing suffix.
        person = _parse_natural(parts[0])
        return person.model_copy(update={"suffix": parts[1]})
    particle, family = _parse_family_segment(parts[0])
    given = parts[1] if len(parts) > 1 and parts[1] else None
    suffix = ", ".join(part for part in parts[2:] if part) or None
    if family is None and given is None and suffix is None:
        return Person(literal=text)
    return Person(
        family=family,
        given=given,
        non_dropping_particle=particle,
        suffix=suffix,
    )


def _parse_natural(text: str) -> Person:
    words = _words(text)
    suffixes: list[str] = []
    while len(words) > 1 and is_suffix(words[-1]):
        suffixes.insert(0, words.pop())
    if len(words) == 1:
        return Person(family=words[0], suffix=_join(suffixes))

    given: list[str] = []
    particles: list[str] = []
    family: list[str] = []
    in_particles = False
    for word in words[:-1]:
        if is_suffix(word):
            suffixes.append(word)
        elif in_particles:
            (particles if is_particle(word) and not family else family).append(word)
        elif is_particle(word):
            in_particles = True
            particles.append(word)
        else:
            given.append(word)
    family.append(words[-1])
    return Person(
        family=_join(family),
        given=_join(given),
        non_dropping_particle=_join(particles),
        suffix=_join(suffixes),
    )


def parse(raw: str) -> Person:
    """Parse a single name.

    ``{Acme Corp}`` becomes a literal, ``von Neumann, John`` is read in
    inverted order and ``Ludwig van Beethoven`` in natural order. Never raises:
    input that yields no name parts is kept as a literal.
    """
    text = " ".join(raw.split())
    if not text:
        return Person(literal="")
    if _enclosed_in_braces(text):
        return Person(literal=text[1:-1])
    if "," in text:
        return _parse_inverted(text)
    return _parse_natural(text)


def serialize(person: Person, style: NameStyle = "bibtex") -> str:
    """Render ``person`` as ``Family, Given`` (bibtex) or ``Given Family`` (natural)."""
    if person.literal is not None:
        return f"{{{person.literal}}}" if style == "bibtex" else person.literal

    family = " ".join(
        part
        for part in (person.non_dropping_particle, person.dropping_particle, person.family)
        if part
    )
    if style == "natural":
        text = " ".join(part for part in (person.given, family) if part)
        return f"{text}, {person.suffix}" if person.suffix else text

    parts = [family]
    if person.given:
        parts.append(person.given)
    if person.suffix:
        if not person.given:
            parts.append("")
        parts.append(person.suffix)
    return ", ".join(parts)


def parse_list(text: str, delimiter: str = " and ") -> list[Person]:
    """Split ``text`` on ``delimiter`` outside braces and parse each non-empty name."""
    if not text or not text.strip():
        return []
    return [parse(part) for part in _split_top_level(text, delimiter) if part.strip()]


def serialize_list(
    persons: Iterable[Person], delimiter: str = " and ", style: NameStyle = "bibtex"
) -> str:
    return delimiter.join(serialize(person, style) for person in persons)


__all__ = [
    "PARTICLES",
    "SUFFIXES",
    "NameStyle",
    "is_particle",
    "is_suffix",
    "parse",
    "parse_list",
    "serialize",
    "serialize_list",
]
