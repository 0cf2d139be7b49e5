"""Parses cantus firmi written as whitespace-separated pitch tokens.

Each token is a letter A-G (either case), an optional accidental ("#" or "b")
and a single octave digit 0-8:

>>> [str(p) for p in parse_cantus("D4 f4 E4 d4 Bb3 c#4 D4")]
['D4', 'F4', 'E4', 'D4', 'B♭3', 'C♯4', 'D4']

Anything else is an error; there is no attempt at recovery:

>>> parse_cantus("C4 H4")
Traceback (most recent call last):
species_contrapuntist.parser.NotationParseError: unexpected pitch letter 'H' in token 'H4' at offset 3
"""
import logging
import re
import typing as t
from pathlib import Path

from species_contrapuntist.pitch_utils.pitches import Accidental, Note, Pitch, PitchBase

LOGGER = logging.getLogger(__name__)

TOKEN_RE = re.compile(r"\S+")

ACCIDENTALS = {"#": Accidental.SHARP, "b": Accidental.FLAT}
OCTAVES = "012345678"


class NotationParseError(ValueError):
    pass


def _parse_letter(token: str, offset: int) -> PitchBase:
    letter = token[0]
    if letter.upper() not in PitchBase.__members__:
        raise NotationParseError(
            f"unexpected pitch letter {letter!r} in token {token!r} at offset {offset}"
        )
    return PitchBase.from_letter(letter)


def _parse_note(token: str, offset: int = 0) -> t.Tuple[Note, int]:
    """Returns the note at the start of `token` and the number of characters read."""
    base = _parse_letter(token, offset)
    if len(token) > 1 and token[1] in ACCIDENTALS:
        return Note(base, ACCIDENTALS[token[1]]), 2
    return Note(base), 1


def parse_note(token: str) -> Note:
    """Parses a note name without an octave (e.g., a scale root).

    >>> parse_note("eb")
    Note(Eb)
    >>> parse_note("E5")
    Traceback (most recent call last):
    species_contrapuntist.parser.NotationParseError: unexpected characters '5' after note in token 'E5'
    """
    token = token.strip()
    if not token:
        raise NotationParseError("empty note name")
    note, n_read = _parse_note(token)
    if token[n_read:]:
        raise NotationParseError(
            f"unexpected characters {token[n_read:]!r} after note in token {token!r}"
        )
    return note


def parse_pitch(token: str, offset: int = 0) -> Pitch:
    """
    >>> parse_pitch("g#5")
    Pitch(G#5)
    >>> parse_pitch("Bb")
    Traceback (most recent call last):
    species_contrapuntist.parser.NotationParseError: unexpected end of token 'Bb' at offset 0
    >>> parse_pitch("C9")
    Traceback (most recent call last):
    species_contrapuntist.parser.NotationParseError: unexpected octave '9' in token 'C9' at offset 0
    """
    if not token:
        raise NotationParseError(f"empty token at offset {offset}")
    note, n_read = _parse_note(token, offset)
    if n_read >= len(token):
        raise NotationParseError(f"unexpected end of token {token!r} at offset {offset}")
    octave = token[n_read]
    if octave not in OCTAVES:
        if n_read == 1 and not octave.isdigit():
            raise NotationParseError(
                f"unexpected pitch modifier {octave!r} in token {token!r} at offset {offset}"
            )
        raise NotationParseError(
            f"unexpected octave {octave!r} in token {token!r} at offset {offset}"
        )
    if len(token) > n_read + 1:
        raise NotationParseError(
            f"unexpected characters {token[n_read + 1:]!r} after octave in token "
            f"{token!r} at offset {offset}"
        )
    return Pitch(note, int(octave))


def parse_cantus(text: str) -> t.Tuple[Pitch, ...]:
    """
    >>> parse_cantus("  ")
    ()
    """
    out = tuple(
        parse_pitch(match.group(), match.start()) for match in TOKEN_RE.finditer(text)
    )
    LOGGER.debug(f"parsed {len(out)} pitches")
    return out


def read_cantus(path: t.Union[str, Path]) -> t.Tuple[Pitch, ...]:
    with open(path) as inf:
        text = inf.read()
    return parse_cantus(text)
