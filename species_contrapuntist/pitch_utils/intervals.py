import typing as t

import numpy as np

from species_contrapuntist.pitch_utils.pitches import Interval, Pitch
from species_contrapuntist.pitch_utils.types import Semitones

PERFECT_CONSONANCES = frozenset({Interval.UNISON, Interval.PERFECT_FIFTH})
THIRDS = frozenset({Interval.MINOR_THIRD, Interval.MAJOR_THIRD})
SIXTHS = frozenset({Interval.MINOR_SIXTH, Interval.MAJOR_SIXTH})
IMPERFECT_CONSONANCES = THIRDS | SIXTHS
CONSONANCES = PERFECT_CONSONANCES | IMPERFECT_CONSONANCES

STEP = Interval.MAJOR_SECOND.semitones
LEAP = Interval.MAJOR_THIRD.semitones
TRITONE = Interval.TRITONE.semitones


def sign(n: Semitones) -> int:
    """
    >>> sign(-5), sign(0), sign(3)
    (-1, 0, 1)
    """
    return int(np.sign(n))


def melodic_motion(src: Pitch, dst: Pitch) -> Semitones:
    """Signed distance in semitones from `src` to `dst`."""
    return dst.semitones_from_middle_c() - src.semitones_from_middle_c()


def is_step(motion: Semitones) -> bool:
    return abs(motion) <= STEP


def is_skip(motion: Semitones) -> bool:
    """Motion larger than a major second.

    >>> is_skip(2), is_skip(-3)
    (False, True)
    """
    return abs(motion) > STEP


def is_leap(motion: Semitones) -> bool:
    """Motion larger than a major third.

    >>> is_leap(4), is_leap(-5)
    (False, True)
    """
    return abs(motion) > LEAP


def harmonic_interval(pitch: Pitch, other: Pitch) -> Interval:
    return pitch.interval_to(other)


def is_perfect_consonance(interval: Interval) -> bool:
    return interval in PERFECT_CONSONANCES


def interval_class_group(interval: Interval) -> t.Optional[str]:
    """Groups imperfect consonances for counting parallel runs.

    >>> interval_class_group(Interval.MAJOR_THIRD)
    'third'
    >>> interval_class_group(Interval.MINOR_SIXTH)
    'sixth'
    >>> interval_class_group(Interval.PERFECT_FIFTH) is None
    True
    """
    if interval in THIRDS:
        return "third"
    if interval in SIXTHS:
        return "sixth"
    return None


def is_similar_motion(motion1: Semitones, motion2: Semitones) -> bool:
    """
    Motion is compared by three-valued sign. Oblique motion (one voice holding
    while the other moves) is therefore never similar, whichever voice moves or
    in which direction, unlike a two-valued sign that lumps a held note in with
    upward motion. Two stationary voices do count as moving "together".

    >>> is_similar_motion(2, 5), is_similar_motion(-2, 5), is_similar_motion(0, 5)
    (True, False, False)
    >>> is_similar_motion(0, 0)
    True
    """
    return sign(motion1) == sign(motion2)


def parallel_run_length(
    intervals: t.Sequence[Interval], candidate_interval: Interval
) -> int:
    """Length of the run of thirds (or of sixths) that `candidate_interval`
    would end, counting backwards through `intervals` until the group changes.

    Intervals that are neither thirds nor sixths have a run length of 1.

    >>> M3, m3, M6 = Interval.MAJOR_THIRD, Interval.MINOR_THIRD, Interval.MAJOR_SIXTH
    >>> parallel_run_length([M6, M3, m3], M3)
    3
    >>> parallel_run_length([M3, M3, M3], Interval.PERFECT_FIFTH)
    1
    """
    group = interval_class_group(candidate_interval)
    count = 1
    if group is None:
        return count
    for interval in reversed(intervals):
        if interval_class_group(interval) != group:
            break
        count += 1
    return count
