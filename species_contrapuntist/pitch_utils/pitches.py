"""Immutable pitch values.

A `Pitch` is a spelled note plus an octave. Pitches compare, hash and order by
their sounding position, so enharmonic spellings in the same octave are equal:

>>> c4 = Pitch(Note(PitchBase.C), 4)
>>> b_sharp_3 = Pitch(Note(PitchBase.B, Accidental.SHARP), 3)
>>> c4 == b_sharp_3
True
>>> str(b_sharp_3)
'B♯3'

Octave numbers change at C, as in scientific pitch notation.
"""
from __future__ import annotations

import typing as t
from dataclasses import dataclass
from enum import Enum, IntEnum
from functools import total_ordering
from types import MappingProxyType

from species_contrapuntist.pitch_utils.types import PitchClass, Semitones

TET = 12
MIDDLE_C_OCTAVE = 4
MIDDLE_C_MIDI_NUMBER = 60


class PitchBase(Enum):
    # Values are semitones above C
    C = 0
    D = 2
    E = 4
    F = 5
    G = 7
    A = 9
    B = 11

    @classmethod
    def from_letter(cls, letter: str) -> PitchBase:
        """
        >>> PitchBase.from_letter("g")
        <PitchBase.G: 7>
        """
        return cls[letter.upper()]


class Accidental(Enum):
    DOUBLE_FLAT = -2
    FLAT = -1
    NATURAL = 0
    SHARP = 1
    DOUBLE_SHARP = 2

    @property
    def glyph(self) -> str:
        return _ACCIDENTAL_GLYPHS[self]

    @property
    def ascii(self) -> str:
        return _ACCIDENTAL_ASCII[self]


_ACCIDENTAL_GLYPHS = MappingProxyType(
    {
        Accidental.DOUBLE_FLAT: "𝄫",
        Accidental.FLAT: "♭",
        Accidental.NATURAL: "",
        Accidental.SHARP: "♯",
        Accidental.DOUBLE_SHARP: "𝄪",
    }
)

_ACCIDENTAL_ASCII = MappingProxyType(
    {
        Accidental.DOUBLE_FLAT: "bb",
        Accidental.FLAT: "b",
        Accidental.NATURAL: "",
        Accidental.SHARP: "#",
        Accidental.DOUBLE_SHARP: "##",
    }
)

# Spelling used when a note is made from a bare semitone count
_SHARP_SPELLINGS: t.Tuple[t.Tuple[PitchBase, Accidental], ...] = (
    (PitchBase.C, Accidental.NATURAL),
    (PitchBase.C, Accidental.SHARP),
    (PitchBase.D, Accidental.NATURAL),
    (PitchBase.D, Accidental.SHARP),
    (PitchBase.E, Accidental.NATURAL),
    (PitchBase.F, Accidental.NATURAL),
    (PitchBase.F, Accidental.SHARP),
    (PitchBase.G, Accidental.NATURAL),
    (PitchBase.G, Accidental.SHARP),
    (PitchBase.A, Accidental.NATURAL),
    (PitchBase.A, Accidental.SHARP),
    (PitchBase.B, Accidental.NATURAL),
)


class Interval(IntEnum):
    """Simple (octave-reduced) chromatic intervals.

    >>> Interval.from_semitones(16)
    <Interval.MAJOR_THIRD: 4>
    >>> str(Interval.MAJOR_THIRD.inverse())
    'minor sixth'
    >>> Interval.PERFECT_FIFTH.add(Interval.PERFECT_FOURTH)
    <Interval.UNISON: 0>
    """

    UNISON = 0
    MINOR_SECOND = 1
    MAJOR_SECOND = 2
    MINOR_THIRD = 3
    MAJOR_THIRD = 4
    PERFECT_FOURTH = 5
    TRITONE = 6
    PERFECT_FIFTH = 7
    MINOR_SIXTH = 8
    MAJOR_SIXTH = 9
    MINOR_SEVENTH = 10
    MAJOR_SEVENTH = 11

    @classmethod
    def from_semitones(cls, semitones: Semitones) -> Interval:
        return cls(semitones % TET)

    @property
    def semitones(self) -> Semitones:
        return int(self.value)

    def inverse(self) -> Interval:
        return Interval.from_semitones(TET - self.semitones)

    def add(self, other: Interval) -> Interval:
        return Interval.from_semitones(self.semitones + other.semitones)

    def __str__(self):
        return self.name.lower().replace("_", " ")


@dataclass(frozen=True, eq=False)
class Note:
    """A spelled pitch-class.

    >>> Note(PitchBase.E, Accidental.FLAT).pitch_class
    3
    >>> Note(PitchBase.C, Accidental.FLAT).semitones_from_c()
    -1
    >>> Note(PitchBase.C, Accidental.FLAT) == Note(PitchBase.B)
    True
    """

    base: PitchBase
    accidental: Accidental = Accidental.NATURAL

    def semitones_from_c(self) -> Semitones:
        return self.base.value + self.accidental.value

    @property
    def pitch_class(self) -> PitchClass:
        return self.semitones_from_c() % TET

    @classmethod
    def from_semitones_from_c(cls, semitones: Semitones) -> Note:
        """Spells the pitch-class `semitones % 12` using sharps.

        >>> str(Note.from_semitones_from_c(-2))
        'A♯'
        """
        return cls(*_SHARP_SPELLINGS[semitones % TET])

    def add(self, interval: Interval) -> Note:
        return Note.from_semitones_from_c(self.semitones_from_c() + interval.semitones)

    def ascii(self) -> str:
        return f"{self.base.name}{self.accidental.ascii}"

    def __eq__(self, other):
        if not isinstance(other, Note):
            return NotImplemented
        return self.pitch_class == other.pitch_class

    def __hash__(self):
        return hash(self.pitch_class)

    def __str__(self):
        return f"{self.base.name}{self.accidental.glyph}"

    def __repr__(self):
        return f"{self.__class__.__name__}({self.ascii()})"


@total_ordering
@dataclass(frozen=True, eq=False)
class Pitch:
    note: Note
    octave: int

    def semitones_from_middle_c(self) -> Semitones:
        """
        >>> Pitch(Note(PitchBase.A), 3).semitones_from_middle_c()
        -3
        >>> Pitch(Note(PitchBase.C, Accidental.FLAT), 5).semitones_from_middle_c()
        11
        """
        return self.note.semitones_from_c() + (self.octave - MIDDLE_C_OCTAVE) * TET

    @property
    def midi_number(self) -> int:
        return self.semitones_from_middle_c() + MIDDLE_C_MIDI_NUMBER

    @property
    def pitch_class(self) -> PitchClass:
        return self.note.pitch_class

    @classmethod
    def from_semitones_from_middle_c(cls, semitones: Semitones) -> Pitch:
        """
        >>> str(Pitch.from_semitones_from_middle_c(-1))
        'B3'
        >>> str(Pitch.from_semitones_from_middle_c(12))
        'C5'
        >>> str(Pitch.from_semitones_from_middle_c(-11))
        'C♯3'
        """
        octaves, pc = divmod(semitones, TET)
        return cls(Note.from_semitones_from_c(pc), MIDDLE_C_OCTAVE + octaves)

    @classmethod
    def from_midi(cls, midi_number: int) -> Pitch:
        return cls.from_semitones_from_middle_c(midi_number - MIDDLE_C_MIDI_NUMBER)

    def transpose(self, semitones: Semitones) -> Pitch:
        """
        >>> str(Pitch(Note(PitchBase.E), 4).transpose(-16))
        'C3'
        """
        return Pitch.from_semitones_from_middle_c(
            self.semitones_from_middle_c() + semitones
        )

    def add(self, interval: Interval) -> Pitch:
        return self.transpose(interval.semitones)

    def subtract(self, interval: Interval) -> Pitch:
        return self.transpose(-interval.semitones)

    def interval_to(self, other: Pitch) -> Interval:
        """The interval between two pitches, independent of their order.

        The lower pitch is subtracted from the higher and the result is reduced
        to a simple interval.

        >>> e3 = Pitch(Note(PitchBase.E), 3)
        >>> g4 = Pitch(Note(PitchBase.G), 4)
        >>> str(e3.interval_to(g4)), str(g4.interval_to(e3))
        ('minor third', 'minor third')
        >>> c4 = Pitch(Note(PitchBase.C), 4)
        >>> str(c4.interval_to(Pitch(Note(PitchBase.B), 3)))
        'minor second'
        """
        lower, higher = sorted((self, other))
        return Interval.from_semitones(
            higher.semitones_from_middle_c() - lower.semitones_from_middle_c()
        )

    def ascii(self) -> str:
        return f"{self.note.ascii()}{self.octave}"

    def __eq__(self, other):
        if not isinstance(other, Pitch):
            return NotImplemented
        return self.semitones_from_middle_c() == other.semitones_from_middle_c()

    def __lt__(self, other):
        if not isinstance(other, Pitch):
            return NotImplemented
        return self.semitones_from_middle_c() < other.semitones_from_middle_c()

    def __hash__(self):
        return hash(self.semitones_from_middle_c())

    def __str__(self):
        return f"{self.note}{self.octave}"

    def __repr__(self):
        return f"{self.__class__.__name__}({self.ascii()})"
