from bibsmith.core.codecs import latex


def test_decode_accent_forms() -> None:
    assert latex.decode(r"Caf\'{e}") == "Café"
    assert latex.decode(r"Caf\'e") == "Café"
    assert latex.decode(r"M{\"u}ller") == "Müller"
    assert latex.decode(r"Dvo\v{r}\'ak") == "Dvořák"


def test_decode_prefers_longest_dash() -> None:
    assert latex.decode("1990---2000") == "1990—2000"
    assert latex.decode("pp. 1--10") == "pp. 1–10"


def test_decode_ligatures_specials_and_greek() -> None:
    assert latex.decode(r"Stra\ss{}e") == "Straße"
    assert latex.decode(r"R\&D at 50\%") == "R&D at 50%"
    assert latex.decode(r"$\alpha$-helix") == "α-helix"
    assert latex.decode("``quoted''") == "“quoted”"


def test_decode_leaves_unknown_commands() -> None:
    assert latex.decode(r"\mycommand{x} and \emph{y}") == r"\mycommand{x} and \emph{y}"


def test_encode_escapes_specials_and_non_ascii() -> None:
    assert latex.encode("Café & Co") == r"Caf\'{e} \& Co"
    assert latex.encode("50%_off #1") == r"50\%\_off \#1"
    assert latex.encode("Straße") == r"Stra\ss{}e"
    assert latex.encode("α") == r"$\alpha$"
    assert latex.encode("1990—2000") == "1990---2000"


def test_encode_output_decodes_to_the_original() -> None:
    text = "Müller — Ünïcödé façade, Øresund & Łódź"
    assert latex.decode(latex.encode(text)) == text


def test_encode_never_emits_unbraced_accents() -> None:
    encoded = latex.encode("é")
    assert encoded == r"\'{e}"
    assert r"\'e" not in encoded


def test_has_commands() -> None:
    assert latex.has_commands(r"\emph{x}")
    assert latex.has_commands(r"R\&D")
    assert not latex.has_commands("plain text")
    assert not latex.has_commands("")


def test_strip_unwraps_nested_commands() -> None:
    assert latex.strip(r"\textbf{\emph{Bold}} text") == "Bold text"
    assert latex.strip(r"Caf\'{e}  \LaTeX\ rocks") == "Café rocks"
    assert latex.strip(r"  50\% of   the \#1 ") == "50% of the #1"


def test_protect_and_unprotect() -> None:
    protected = latex.protect("The DNA and RNA of E. coli")
    assert protected == "The {DNA} and {RNA} of E. coli"
    assert latex.unprotect(protected) == "The DNA and RNA of E. coli"


def test_unprotect_keeps_command_arguments() -> None:
    assert latex.unprotect(r"Caf\'{e} {NASA}") == r"Caf\'{e} NASA"


def test_encode_keeps_ascii_tilde_and_hyphen_runs() -> None:
    text = "Pre--post ~approx, a---b"
    encoded = latex.encode(text)
    assert encoded == r"Pre-{}-post \~{}approx, a-{}-{}-b"
    assert latex.decode(latex.unprotect(encoded)) == text
    assert latex.encode("1–10 and 1-10") == "1--10 and 1-10"


def test_decode_drops_empty_groups() -> None:
    assert latex.decode("foo{}bar") == "foobar"
    assert latex.unprotect("a-{}-b") == "a-{}-b"
