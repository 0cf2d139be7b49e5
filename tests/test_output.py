import pandas as pd
import pytest

from species_contrapuntist.output import (
    counterpoint_to_homodf,
    counterpoint_to_mididf,
    counterpoint_to_music21,
    format_ascii,
    format_line,
    to_music21_pitch,
    write_output,
)
from species_contrapuntist.parser import parse_cantus, parse_pitch, read_cantus
from species_contrapuntist.pitch_utils.types import ABOVE, BELOW

CANTUS = parse_cantus("C4 D4 E4 D4 C4")
COUNTERPOINT = parse_cantus("G4 F4 G4 B4 C5")


def test_format():
    assert format_line(parse_cantus("C#4 Bb3")) == "C♯4 B♭3"
    assert format_ascii(parse_cantus("C#4 Bb3")) == "C#4 Bb3"
    assert parse_cantus(format_ascii(COUNTERPOINT)) == COUNTERPOINT


@pytest.mark.parametrize("direction", [ABOVE, BELOW])
def test_homodf_voices_are_ordered_low_to_high(direction):
    df = counterpoint_to_homodf(CANTUS, COUNTERPOINT, direction)
    voices = [c for c in df.columns if c not in ("onset", "release")]
    if direction is ABOVE:
        assert voices == ["cantus", "counterpoint"]
    else:
        assert voices == ["counterpoint", "cantus"]
    assert df.onset.tolist() == [0.0, 4.0, 8.0, 12.0, 16.0]
    assert df.release.tolist() == [4.0, 8.0, 12.0, 16.0, 20.0]
    assert df.counterpoint.tolist() == [67, 65, 67, 71, 72]


def test_mididf():
    mididf = counterpoint_to_mididf(CANTUS, COUNTERPOINT, ABOVE, note_dur=1.0)
    assert list(mididf.columns) == ["onset", "type", "pitch", "release", "track"]
    assert len(mididf) == 10
    assert mididf[mididf.track == 1].pitch.tolist() == [67, 65, 67, 71, 72]
    assert mididf[mididf.track == 2].pitch.tolist() == [60, 62, 64, 62, 60]
    assert (mididf.release - mididf.onset == 1.0).all()


def test_music21_score():
    score = counterpoint_to_music21(CANTUS, COUNTERPOINT, BELOW)
    parts = list(score.parts)
    assert [p.partName for p in parts] == ["Cantus", "Counterpoint"]
    upper_notes = list(parts[0].flatten().notes)
    assert [n.pitch.midi for n in upper_notes] == [60, 62, 64, 62, 60]
    assert all(n.quarterLength == 4.0 for n in upper_notes)


def test_to_music21_pitch():
    assert to_music21_pitch(parse_pitch("F#5")).nameWithOctave == "F#5"
    assert to_music21_pitch(parse_pitch("Eb2")).midi == 39


def test_write_csv(tmp_path):
    path = tmp_path / "out.csv"
    write_output(path, CANTUS, COUNTERPOINT, ABOVE)
    df = pd.read_csv(path)
    assert df.pitch.tolist()[:2] == [67, 60]


def test_write_txt(tmp_path):
    path = tmp_path / "out.txt"
    write_output(path, CANTUS, COUNTERPOINT, ABOVE)
    lines = path.read_text().splitlines()
    assert lines == ["C4 D4 E4 D4 C4", "G4 F4 G4 B4 C5"]
    # The file can be read back by the parser
    assert read_cantus(path) == CANTUS + COUNTERPOINT


def test_write_midi(tmp_path):
    path = tmp_path / "out.mid"
    write_output(path, CANTUS, COUNTERPOINT, ABOVE)
    assert path.exists()
    assert path.stat().st_size > 0


def test_unknown_suffix(tmp_path):
    with pytest.raises(ValueError):
        write_output(tmp_path / "out.wav", CANTUS, COUNTERPOINT, ABOVE)
