"""Voice-leading rules for first-species counterpoint.

Each rule is a predicate `rule(candidate, ctx) -> bool` that returns True if
`candidate` may follow the partial line in `ctx`. The rules are applied in the
order of `RULES` by `apply_rules`; every rule is pure, so the order only
affects how much work is done, not which candidates survive.
"""
import logging
import typing as t
from dataclasses import dataclass
from functools import cached_property, wraps

from species_contrapuntist.candidates import (
    CandidateSettings,
    allowed_offsets,
    signed_offset,
)
from species_contrapuntist.pitch_utils.intervals import (
    TRITONE,
    harmonic_interval,
    is_leap,
    is_perfect_consonance,
    is_similar_motion,
    is_skip,
    is_step,
    melodic_motion,
    parallel_run_length,
    sign,
)
from species_contrapuntist.pitch_utils.pitches import Interval, Pitch
from species_contrapuntist.pitch_utils.scale import Scale
from species_contrapuntist.pitch_utils.types import Direction, Semitones

LOGGER = logging.getLogger(__name__)


@dataclass
class RuleSettings(CandidateSettings):
    # Counterpoint and cantus may be at most a tenth apart
    max_vertical_interval: Semitones = 16
    max_melodic_interval: Semitones = 12
    max_parallel_run: int = 3


@dataclass(frozen=True)
class RuleContext:
    cantus: t.Tuple[Pitch, ...]
    line: t.Tuple[Pitch, ...]
    scale: Scale
    direction: Direction
    settings: RuleSettings

    @property
    def position(self) -> int:
        return len(self.line)

    @property
    def cantus_note(self) -> Pitch:
        return self.cantus[self.position]

    @property
    def is_final(self) -> bool:
        return self.position == len(self.cantus) - 1

    @property
    def prev(self) -> t.Optional[Pitch]:
        return self.line[-1] if self.line else None

    @property
    def prev_prev(self) -> t.Optional[Pitch]:
        return self.line[-2] if len(self.line) > 1 else None

    @property
    def cantus_prev(self) -> t.Optional[Pitch]:
        return self.cantus[self.position - 1] if self.position else None

    @cached_property
    def cantus_motion(self) -> Semitones:
        assert self.cantus_prev is not None
        return melodic_motion(self.cantus_prev, self.cantus_note)

    @cached_property
    def harmonic_intervals(self) -> t.List[Interval]:
        return [
            harmonic_interval(pitch, cantus_note)
            for pitch, cantus_note in zip(self.line, self.cantus)
        ]

    def motion_to(self, candidate: Pitch) -> Semitones:
        assert self.prev is not None
        return melodic_motion(self.prev, candidate)


Rule = t.Callable[[Pitch, RuleContext], bool]


def requires_previous(rule: Rule) -> Rule:
    """Rules about motion are vacuously satisfied by the first note."""

    @wraps(rule)
    def wrapped(candidate: Pitch, ctx: RuleContext) -> bool:
        if ctx.prev is None:
            return True
        return rule(candidate, ctx)

    return wrapped


def in_scale(candidate: Pitch, ctx: RuleContext) -> bool:
    return candidate in ctx.scale


@requires_previous
def no_parallel_or_direct_perfects(candidate: Pitch, ctx: RuleContext) -> bool:
    """Both voices may not move in the same direction into a unison, octave or
    fifth. This forbids parallel as well as direct ("hidden") perfect
    consonances."""
    if not is_perfect_consonance(harmonic_interval(candidate, ctx.cantus_note)):
        return True
    return not is_similar_motion(ctx.motion_to(candidate), ctx.cantus_motion)


@requires_previous
def within_register_ceiling(candidate: Pitch, ctx: RuleContext) -> bool:
    distance = melodic_motion(ctx.cantus_note, candidate)
    return abs(distance) <= ctx.settings.max_vertical_interval


@requires_previous
def limit_parallel_imperfect_runs(candidate: Pitch, ctx: RuleContext) -> bool:
    run_length = parallel_run_length(
        ctx.harmonic_intervals, harmonic_interval(candidate, ctx.cantus_note)
    )
    return run_length <= ctx.settings.max_parallel_run


@requires_previous
def no_similar_skips(candidate: Pitch, ctx: RuleContext) -> bool:
    motion = ctx.motion_to(candidate)
    if not (is_skip(motion) and is_skip(ctx.cantus_motion)):
        return True
    return sign(motion) != sign(ctx.cantus_motion)


@requires_previous
def limit_repeated_pitches(candidate: Pitch, ctx: RuleContext) -> bool:
    if ctx.prev_prev is None:
        return True
    return not (candidate == ctx.prev == ctx.prev_prev)


@requires_previous
def within_max_leap(candidate: Pitch, ctx: RuleContext) -> bool:
    return abs(ctx.motion_to(candidate)) <= ctx.settings.max_melodic_interval


@requires_previous
def no_tritone_leap(candidate: Pitch, ctx: RuleContext) -> bool:
    return abs(ctx.motion_to(candidate)) != TRITONE


@requires_previous
def stepwise_approach_to_final(candidate: Pitch, ctx: RuleContext) -> bool:
    if not ctx.is_final:
        return True
    return is_step(ctx.motion_to(candidate))


@requires_previous
def recover_from_leap(candidate: Pitch, ctx: RuleContext) -> bool:
    """After a leap the line must turn around by step."""
    if ctx.prev_prev is None:
        return True
    assert ctx.prev is not None
    prev_motion = melodic_motion(ctx.prev_prev, ctx.prev)
    if not is_leap(prev_motion):
        return True
    motion = ctx.motion_to(candidate)
    return is_step(motion) and sign(motion) == -sign(prev_motion)


RULES: t.Tuple[Rule, ...] = (
    in_scale,
    no_parallel_or_direct_perfects,
    within_register_ceiling,
    limit_parallel_imperfect_runs,
    no_similar_skips,
    limit_repeated_pitches,
    within_max_leap,
    no_tritone_leap,
    stepwise_approach_to_final,
    recover_from_leap,
)


def apply_rules(
    candidates: t.Iterable[Pitch], ctx: RuleContext, rules: t.Sequence[Rule] = RULES
) -> t.List[Pitch]:
    """Returns the candidates that pass every rule, in their original order.

    The argument is not modified.
    """
    survivors = list(candidates)
    for rule in rules:
        if not survivors:
            break
        remaining = []
        for candidate in survivors:
            if rule(candidate, ctx):
                remaining.append(candidate)
            else:
                LOGGER.debug(
                    f"{rule.__name__} rejected {candidate} at position {ctx.position}"
                )
        survivors = remaining
    return survivors


def find_violations(
    cantus: t.Sequence[Pitch],
    line: t.Sequence[Pitch],
    scale: Scale,
    direction: Direction,
    settings: t.Optional[RuleSettings] = None,
) -> t.List[t.Tuple[int, str]]:
    """Checks a complete counterpoint against the cantus.

    Returns a list of `(position, rule_name)` pairs, which is empty if the line
    is valid. Besides the names of `RULES`, the rule name can be
    "length", "opening", "closing" or "vertical_consonance" if the vertical
    interval at a position is not one that the search would have proposed.

    >>> from species_contrapuntist.parser import parse_cantus
    >>> from species_contrapuntist.pitch_utils.scale import SCALES
    >>> from species_contrapuntist.pitch_utils.types import ABOVE
    >>> c_major = SCALES["C", "ionian"]
    >>> cantus = parse_cantus("C4 D4 E4 D4 C4")
    >>> find_violations(cantus, parse_cantus("C5 B4 G4 B4 C5"), c_major, ABOVE)
    []
    >>> find_violations(cantus, parse_cantus("G4 A4 B4 B4 B4"), c_major, ABOVE)  # doctest: +NORMALIZE_WHITESPACE
    [(1, 'no_parallel_or_direct_perfects'), (2, 'no_parallel_or_direct_perfects'),
     (4, 'closing'), (4, 'limit_repeated_pitches')]
    """
    if settings is None:
        settings = RuleSettings()
    if len(line) != len(cantus):
        return [(min(len(line), len(cantus)), "length")]
    cantus = tuple(cantus)
    out = []
    for i, pitch in enumerate(line):
        offsets = allowed_offsets(i, len(cantus), settings)
        if signed_offset(pitch, cantus[i], direction) not in offsets:
            if i == len(cantus) - 1:
                out.append((i, "closing"))
            elif i == 0:
                out.append((i, "opening"))
            else:
                out.append((i, "vertical_consonance"))
        ctx = RuleContext(cantus, tuple(line[:i]), scale, direction, settings)
        for rule in RULES:
            if not rule(pitch, ctx):
                out.append((i, rule.__name__))
    return out
