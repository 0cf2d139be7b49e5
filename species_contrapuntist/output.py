import logging
import typing as t
from pathlib import Path

import music21
import pandas as pd

from species_contrapuntist.pitch_utils.pitches import Accidental, Pitch
from species_contrapuntist.pitch_utils.types import ABOVE, Direction
from species_contrapuntist.utils.homodf_to_mididf import homodf_to_mididf

LOGGER = logging.getLogger(__name__)

WHOLE_NOTE = 4.0

_MUSIC21_ACCIDENTALS = {
    Accidental.DOUBLE_FLAT: "--",
    Accidental.FLAT: "-",
    Accidental.NATURAL: "",
    Accidental.SHARP: "#",
    Accidental.DOUBLE_SHARP: "##",
}


def format_line(pitches: t.Iterable[Pitch]) -> str:
    """
    >>> from species_contrapuntist.parser import parse_cantus
    >>> format_line(parse_cantus("C4 Eb4 F#3"))
    'C4 E♭4 F♯3'
    """
    return " ".join(str(p) for p in pitches)


def format_ascii(pitches: t.Iterable[Pitch]) -> str:
    return " ".join(p.ascii() for p in pitches)


def _voices_low_to_high(
    cantus: t.Sequence[Pitch], counterpoint: t.Sequence[Pitch], direction: Direction
) -> t.List[t.Tuple[str, t.Sequence[Pitch]]]:
    if direction is ABOVE:
        return [("cantus", cantus), ("counterpoint", counterpoint)]
    return [("counterpoint", counterpoint), ("cantus", cantus)]


def counterpoint_to_homodf(
    cantus: t.Sequence[Pitch],
    counterpoint: t.Sequence[Pitch],
    direction: Direction,
    note_dur: float = WHOLE_NOTE,
) -> pd.DataFrame:
    """
    >>> from species_contrapuntist.parser import parse_cantus
    >>> df = counterpoint_to_homodf(
    ...     parse_cantus("C4 D4 C4"), parse_cantus("C3 B2 C3"), Direction.BELOW
    ... )
    >>> list(df.columns)
    ['onset', 'release', 'counterpoint', 'cantus']
    >>> df.counterpoint.tolist()
    [48, 47, 48]
    """
    assert len(cantus) == len(counterpoint)
    out_dict: t.Dict[str, t.List[t.Any]] = {
        "onset": [i * note_dur for i in range(len(cantus))],
        "release": [(i + 1) * note_dur for i in range(len(cantus))],
    }
    for name, pitches in _voices_low_to_high(cantus, counterpoint, direction):
        out_dict[name] = [p.midi_number for p in pitches]
    return pd.DataFrame(out_dict)


def counterpoint_to_mididf(
    cantus: t.Sequence[Pitch],
    counterpoint: t.Sequence[Pitch],
    direction: Direction,
    note_dur: float = WHOLE_NOTE,
) -> pd.DataFrame:
    return homodf_to_mididf(
        counterpoint_to_homodf(cantus, counterpoint, direction, note_dur)
    )


def to_music21_pitch(pitch: Pitch) -> music21.pitch.Pitch:
    """
    >>> from species_contrapuntist.parser import parse_pitch
    >>> to_music21_pitch(parse_pitch("Bb3")).nameWithOctave
    'B-3'
    """
    name = (
        f"{pitch.note.base.name}{_MUSIC21_ACCIDENTALS[pitch.note.accidental]}"
        f"{pitch.octave}"
    )
    return music21.pitch.Pitch(name)


def counterpoint_to_music21(
    cantus: t.Sequence[Pitch],
    counterpoint: t.Sequence[Pitch],
    direction: Direction,
    note_dur: float = WHOLE_NOTE,
) -> music21.stream.Score:
    score = music21.stream.Score()
    # Parts are listed from the top of the system down
    for name, pitches in reversed(_voices_low_to_high(cantus, counterpoint, direction)):
        part = music21.stream.Part()
        part.partName = name.capitalize()
        for pitch in pitches:
            note = music21.note.Note(to_music21_pitch(pitch))
            note.quarterLength = note_dur
            part.append(note)
        score.insert(0, part)
    return score


def write_output(
    path: t.Union[str, Path],
    cantus: t.Sequence[Pitch],
    counterpoint: t.Sequence[Pitch],
    direction: Direction,
):
    path = Path(path)
    suffix = path.suffix.lower()
    LOGGER.info(f"writing {path}")
    if suffix == ".csv":
        counterpoint_to_mididf(cantus, counterpoint, direction).to_csv(
            path, index=False
        )
    elif suffix in (".mid", ".midi"):
        counterpoint_to_music21(cantus, counterpoint, direction).write(
            "midi", fp=str(path)
        )
    elif suffix in (".xml", ".musicxml"):
        counterpoint_to_music21(cantus, counterpoint, direction).write(
            "musicxml", fp=str(path)
        )
    elif suffix == ".txt":
        with open(path, "w") as outf:
            outf.write(format_ascii(cantus) + "\n")
            outf.write(format_ascii(counterpoint) + "\n")
    else:
        raise ValueError(f"Don't know how to write a file with suffix {suffix!r}")
