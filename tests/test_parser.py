import pytest

from species_contrapuntist.parser import (
    NotationParseError,
    parse_cantus,
    parse_note,
    parse_pitch,
    read_cantus,
)
from species_contrapuntist.pitch_utils.pitches import Accidental, Pitch, PitchBase


@pytest.mark.parametrize(
    "token, base, accidental, octave",
    [
        ("C4", PitchBase.C, Accidental.NATURAL, 4),
        ("c#4", PitchBase.C, Accidental.SHARP, 4),
        ("Bb3", PitchBase.B, Accidental.FLAT, 3),
        ("bb3", PitchBase.B, Accidental.FLAT, 3),
        ("G0", PitchBase.G, Accidental.NATURAL, 0),
        ("A8", PitchBase.A, Accidental.NATURAL, 8),
    ],
)
def test_parse_pitch(token, base, accidental, octave):
    pitch = parse_pitch(token)
    assert pitch.note.base is base
    assert pitch.note.accidental is accidental
    assert pitch.octave == octave


@pytest.mark.parametrize(
    "token, message",
    [
        ("", "empty token at offset 0"),
        ("H4", "unexpected pitch letter 'H'"),
        ("4C", "unexpected pitch letter '4'"),
        ("C", "unexpected end of token 'C'"),
        ("C#", "unexpected end of token 'C#'"),
        ("Cx4", "unexpected pitch modifier 'x'"),
        ("C9", "unexpected octave '9'"),
        ("C#-1", "unexpected octave '-'"),
        ("C44", "unexpected characters '4' after octave"),
        ("C4,", "unexpected characters ','"),
    ],
)
def test_parse_pitch_errors(token, message):
    with pytest.raises(NotationParseError, match=message):
        parse_pitch(token)


def test_parse_errors_are_value_errors():
    with pytest.raises(ValueError):
        parse_pitch("Z1")


def test_parse_cantus():
    cantus = parse_cantus("D4 F4\tE4\n  D4 ")
    assert [p.ascii() for p in cantus] == ["D4", "F4", "E4", "D4"]
    assert isinstance(cantus, tuple)
    assert parse_cantus("") == ()


def test_parse_cantus_reports_offset():
    with pytest.raises(NotationParseError, match="at offset 6"):
        parse_cantus("D4 F4 Q4 D4")


def test_parse_note():
    assert parse_note(" F# ").pitch_class == 6
    for bad in ("", "X", "F#4"):
        with pytest.raises(NotationParseError):
            parse_note(bad)


def test_read_cantus(tmp_path):
    path = tmp_path / "cantus.txt"
    path.write_text("C4 D4 E4 D4 C4\n")
    cantus = read_cantus(path)
    assert cantus == tuple(
        Pitch.from_semitones_from_middle_c(n) for n in (0, 2, 4, 2, 0)
    )
