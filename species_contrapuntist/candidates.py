"""Raw (unfiltered) candidate pitches for each position of the counterpoint.

All offsets are in semitones away from the simultaneous cantus note, in the
direction of the counterpoint.

>>> from species_contrapuntist.parser import parse_pitch
>>> [str(p) for p in opening_candidates(parse_pitch("D4"), BELOW)]
['D4', 'G3', 'D3']
>>> [str(p) for p in closing_candidates(parse_pitch("D4"), ABOVE)]
['D4', 'D5']
"""
import typing as t
from dataclasses import dataclass

from species_contrapuntist.pitch_utils.pitches import Interval, Pitch
from species_contrapuntist.pitch_utils.types import (
    ABOVE,
    BELOW,
    Direction,
    Semitones,
    SettingsBase,
)

OCTAVE = 12

OPENING_OFFSETS: t.Tuple[Semitones, ...] = (
    Interval.UNISON.semitones,
    Interval.PERFECT_FIFTH.semitones,
    OCTAVE,
)
CLOSING_OFFSETS: t.Tuple[Semitones, ...] = (Interval.UNISON.semitones, OCTAVE)
INTERIOR_OFFSETS: t.Tuple[Semitones, ...] = (
    Interval.PERFECT_FIFTH.semitones,
    Interval.MINOR_THIRD.semitones,
    Interval.MAJOR_THIRD.semitones,
    Interval.MINOR_SIXTH.semitones,
    Interval.MAJOR_SIXTH.semitones,
    OCTAVE,
)
COMPOUND_THIRD_OFFSETS: t.Tuple[Semitones, ...] = (
    OCTAVE + Interval.MINOR_THIRD.semitones,
    OCTAVE + Interval.MAJOR_THIRD.semitones,
)


@dataclass
class CandidateSettings(SettingsBase):
    # Besides simple consonances, allow tenths against the cantus in the
    # interior of the line
    allow_compound_thirds: bool = True


def _offset_pitches(
    cantus_note: Pitch, direction: Direction, offsets: t.Iterable[Semitones]
) -> t.List[Pitch]:
    return [cantus_note.transpose(direction.sign * offset) for offset in offsets]


def opening_candidates(cantus_note: Pitch, direction: Direction) -> t.List[Pitch]:
    return _offset_pitches(cantus_note, direction, OPENING_OFFSETS)


def closing_candidates(cantus_note: Pitch, direction: Direction) -> t.List[Pitch]:
    return _offset_pitches(cantus_note, direction, CLOSING_OFFSETS)


def interior_offsets(settings: CandidateSettings) -> t.Tuple[Semitones, ...]:
    if settings.allow_compound_thirds:
        return INTERIOR_OFFSETS + COMPOUND_THIRD_OFFSETS
    return INTERIOR_OFFSETS


def interior_candidates(
    cantus_note: Pitch, direction: Direction, settings: CandidateSettings
) -> t.List[Pitch]:
    """
    >>> from species_contrapuntist.parser import parse_pitch
    >>> e4 = parse_pitch("E4")
    >>> [str(p) for p in interior_candidates(e4, ABOVE, CandidateSettings())]
    ['B4', 'G4', 'G♯4', 'C5', 'C♯5', 'E5', 'G5', 'G♯5']
    >>> settings = CandidateSettings(allow_compound_thirds=False)
    >>> [str(p) for p in interior_candidates(e4, BELOW, settings)]
    ['A3', 'C♯4', 'C4', 'G♯3', 'G3', 'E3']
    """
    return _offset_pitches(cantus_note, direction, interior_offsets(settings))


def allowed_offsets(
    position: int, n_positions: int, settings: CandidateSettings
) -> t.Tuple[Semitones, ...]:
    if position == n_positions - 1:
        return CLOSING_OFFSETS
    if position == 0:
        return OPENING_OFFSETS
    return interior_offsets(settings)


def signed_offset(pitch: Pitch, cantus_note: Pitch, direction: Direction) -> Semitones:
    """Distance of `pitch` from `cantus_note`, positive on the side of `direction`.

    >>> from species_contrapuntist.parser import parse_pitch
    >>> signed_offset(parse_pitch("A3"), parse_pitch("C4"), BELOW)
    3
    >>> signed_offset(parse_pitch("A3"), parse_pitch("C4"), ABOVE)
    -3
    """
    return direction.sign * (
        pitch.semitones_from_middle_c() - cantus_note.semitones_from_middle_c()
    )
