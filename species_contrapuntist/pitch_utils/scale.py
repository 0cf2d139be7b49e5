from __future__ import annotations

import typing as t
from enum import Enum
from functools import cached_property

from species_contrapuntist.parser import parse_note
from species_contrapuntist.pitch_utils.pitches import TET, Interval, Note, Pitch
from species_contrapuntist.pitch_utils.types import PitchClass

m2 = Interval.MINOR_SECOND
M2 = Interval.MAJOR_SECOND
m3 = Interval.MINOR_THIRD


class ScaleType(Enum):
    IONIAN = (M2, M2, m2, M2, M2, M2, m2)
    DORIAN = (M2, m2, M2, M2, M2, m2, M2)
    PHRYGIAN = (m2, M2, M2, M2, m2, M2, M2)
    LYDIAN = (M2, M2, M2, m2, M2, M2, m2)
    MIXOLYDIAN = (M2, M2, m2, M2, M2, m2, M2)
    AEOLIAN = (M2, m2, M2, M2, m2, M2, M2)
    LOCRIAN = (m2, M2, M2, m2, M2, M2, M2)
    MELODIC_MINOR = (M2, m2, M2, M2, M2, M2, m2)
    HARMONIC_MINOR = (M2, m2, M2, M2, m2, m3, m2)
    WHOLE_TONE = (M2, M2, M2, M2, M2, M2)
    PENTATONIC = (M2, M2, m3, M2, m3)
    PHRYGIAN_DOMINANT = (m2, m3, m2, M2, m2, M2, M2)
    HUNGARIAN_MINOR = (M2, m2, m3, m2, m2, m3, m2)

    @property
    def steps(self) -> t.Tuple[Interval, ...]:
        return self.value

    @classmethod
    def from_string(cls, mode: str) -> ScaleType:
        """
        >>> ScaleType.from_string("Harmonic minor").name
        'HARMONIC_MINOR'
        >>> ScaleType.from_string("major").name
        'IONIAN'
        """
        key = mode.strip().upper().replace("-", "_").replace(" ", "_")
        key = _MODE_ALIASES.get(key, key)
        try:
            return cls[key]
        except KeyError:
            raise ValueError(
                f"{mode=} is not one of {[m.name.lower() for m in cls]}"
            )


_MODE_ALIASES = {"MAJOR": "IONIAN", "MINOR": "AEOLIAN", "NATURAL_MINOR": "AEOLIAN"}


class Scale:
    """A root note and a mode.

    >>> scale = Scale(Note.from_semitones_from_c(7), ScaleType.IONIAN)  # G major
    >>> scale.pcs
    (7, 9, 11, 0, 2, 4, 6)
    >>> sorted(scale.member_pitch_classes())
    [0, 2, 4, 6, 7, 9, 11]
    >>> 66 in scale  # F#4 as a midi number
    True
    >>> 65 in scale
    False
    """

    def __init__(self, root: Note, mode: ScaleType = ScaleType.IONIAN):
        steps = mode.steps
        # every mode spans exactly one octave
        assert sum(step.semitones for step in steps) == TET
        self._root = root
        self._mode = mode

    def __repr__(self):
        return f"{self.__class__.__name__}(root={self._root!r}, mode={self._mode.name})"

    @property
    def root(self) -> Note:
        return self._root

    @property
    def mode(self) -> ScaleType:
        return self._mode

    def notes(self) -> t.List[Note]:
        """Spelled scale members, starting on the root and ending on the root again.

        >>> [str(n) for n in Scale(Note.from_semitones_from_c(5), ScaleType.MELODIC_MINOR).notes()]
        ['F', 'G', 'G♯', 'A♯', 'C', 'D', 'E', 'F']
        """
        out = [self._root]
        for step in self._mode.steps:
            out.append(out[-1].add(step))
        return out

    @cached_property
    def pcs(self) -> t.Tuple[PitchClass, ...]:
        return tuple(note.pitch_class for note in self.notes()[:-1])

    @cached_property
    def _pcs_set(self) -> t.FrozenSet[PitchClass]:
        pcs_set = frozenset(self.pcs)
        assert len(pcs_set) == len(self.pcs)
        return pcs_set

    def member_pitch_classes(self) -> t.FrozenSet[PitchClass]:
        return self._pcs_set

    def __len__(self):
        return len(self.pcs)

    def __contains__(self, pitch: t.Union[Pitch, Note, int]):
        if isinstance(pitch, (Pitch, Note)):
            return pitch.pitch_class in self._pcs_set
        return pitch % TET in self._pcs_set

    def index(self, pitch: Pitch) -> int:
        """The scale-degree index of `pitch`, counting from the root in octave 4.

        >>> c_major = Scale(Note.from_semitones_from_c(0))
        >>> c_major.index(Pitch.from_midi(67))
        4
        >>> c_major.index(Pitch.from_midi(59))
        -1
        """
        octaves, pc = divmod(
            pitch.semitones_from_middle_c() - self._root.pitch_class, TET
        )
        try:
            return octaves * len(self) + self.pcs.index(
                (pc + self._root.pitch_class) % TET
            )
        except ValueError:
            raise IndexError(
                f"pitch {pitch} with pitch-class {pitch.pitch_class} is not in scale {self.pcs}"
            )


class ScaleDict:
    """This class exists simply to cache scales.

    When a scale is retrieved, if it does not exist, it is created.

    >>> scale_dict = ScaleDict()
    >>> scale_dict[Note.from_semitones_from_c(2), ScaleType.DORIAN].pcs
    (2, 4, 5, 7, 9, 11, 0)
    >>> scale_dict["D", "dorian"] is scale_dict[Note.from_semitones_from_c(2), ScaleType.DORIAN]
    True
    """

    def __init__(self):
        self._scales: t.Dict[t.Tuple[PitchClass, ScaleType], Scale] = {}

    def __getitem__(self, args: t.Tuple[t.Union[Note, str], t.Union[ScaleType, str]]):
        if not isinstance(args, tuple):
            raise ValueError
        root, mode = args
        if isinstance(root, str):
            root = parse_note(root)
        if isinstance(mode, str):
            mode = ScaleType.from_string(mode)
        key = (root.pitch_class, mode)
        try:
            return self._scales[key]
        except KeyError:
            new_scale = Scale(root, mode)
            self._scales[key] = new_scale
            return new_scale


SCALES = ScaleDict()
