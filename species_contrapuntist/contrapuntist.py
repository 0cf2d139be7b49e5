import logging
import random
import time
import typing as t
from dataclasses import dataclass

from species_contrapuntist.candidates import (
    closing_candidates,
    interior_candidates,
    opening_candidates,
)
from species_contrapuntist.pitch_utils.pitches import Pitch
from species_contrapuntist.pitch_utils.scale import Scale
from species_contrapuntist.pitch_utils.types import Direction
from species_contrapuntist.rules import RuleContext, RuleSettings, apply_rules
from species_contrapuntist.utils.recursion import (
    DeadEnd,
    SearchBudgetExhausted,
    append_attempt,
)

LOGGER = logging.getLogger(__name__)


@dataclass
class FirstSpeciesSettings(RuleSettings):
    # The search is exponential in the length of the cantus in the worst case.
    # `max_steps` bounds the number of candidate pitches tried and `timeout`
    # the wall-clock seconds; either can be None to disable it.
    max_steps: t.Optional[int] = 200_000
    timeout: t.Optional[float] = None
    save_deadends: bool = False
    max_deadends_to_save: int = 100


class FirstSpeciesContrapuntist:
    """Writes a first-species counterpoint against a cantus firmus.

    The search is depth-first: at each position the raw candidates are
    filtered by the rules in `species_contrapuntist.rules`, shuffled, and tried
    in turn. A position that runs out of candidates raises `DeadEnd`, which
    undoes the previous choice so the next candidate there can be tried.

    Calling the contrapuntist returns the counterpoint as a tuple of pitches, or
    None if no counterpoint exists. `SearchBudgetExhausted` is raised if the
    search is abandoned before reaching either conclusion.

    Args:
        settings: thresholds for the rules and the search budget.
        rng: source of randomness used to order the candidates. Pass a seeded
            `random.Random` for reproducible output.
    """

    def __init__(
        self,
        settings: t.Optional[FirstSpeciesSettings] = None,
        rng: t.Optional[random.Random] = None,
    ):
        if settings is None:
            settings = FirstSpeciesSettings()
        self.settings = settings
        self._rng = random.Random() if rng is None else rng

        self._cantus: t.Tuple[Pitch, ...] = ()
        self._scale: t.Optional[Scale] = None
        self._direction: t.Optional[Direction] = None
        self._line: t.List[Pitch] = []
        self._start_time = 0.0
        self.n_steps = 0
        # For debugging
        self.deadends: t.List[t.Dict[str, t.Any]] = []

    # -----------------------------------------------------------------------------------
    # Candidates
    # -----------------------------------------------------------------------------------

    def _context(self) -> RuleContext:
        assert self._scale is not None and self._direction is not None
        return RuleContext(
            self._cantus,
            tuple(self._line),
            self._scale,
            self._direction,
            self.settings,
        )

    def _shuffled(self, candidates: t.List[Pitch]) -> t.List[Pitch]:
        return self._rng.sample(candidates, len(candidates))

    def opening_step(self, ctx: RuleContext) -> t.List[Pitch]:
        # A one-note cantus begins and ends on the same note, so its opening
        #   must also satisfy the closing rule. The closing candidates are a
        #   subset of the opening ones.
        if ctx.is_final:
            raw = closing_candidates(ctx.cantus_note, ctx.direction)
        else:
            raw = opening_candidates(ctx.cantus_note, ctx.direction)
        return self._shuffled(apply_rules(raw, ctx))

    def step(self, ctx: RuleContext) -> t.List[Pitch]:
        assert ctx.position > 0
        if ctx.is_final:
            raw = closing_candidates(ctx.cantus_note, ctx.direction)
        else:
            raw = interior_candidates(ctx.cantus_note, ctx.direction, self.settings)
        return self._shuffled(apply_rules(raw, ctx))

    # -----------------------------------------------------------------------------------
    # Search
    # -----------------------------------------------------------------------------------

    def _count_step(self):
        self.n_steps += 1
        max_steps = self.settings.max_steps
        if max_steps is not None and self.n_steps > max_steps:
            raise SearchBudgetExhausted(
                f"gave up after trying {max_steps} candidates", n_steps=self.n_steps
            )
        timeout = self.settings.timeout
        if timeout is not None and time.monotonic() - self._start_time > timeout:
            raise SearchBudgetExhausted(
                f"gave up after {timeout} seconds", n_steps=self.n_steps
            )

    def _dead_end(self, position: int) -> DeadEnd:
        if not self.settings.save_deadends:
            return DeadEnd(f"no candidates left at position {position}")
        return DeadEnd(
            f"no candidates left at position {position}",
            save_deadends_to=self.deadends,
            max_deadends_to_save=self.settings.max_deadends_to_save,
            position=position,
            line=tuple(self._line),
        )

    def _recurse(self):
        if len(self._line) == len(self._cantus):
            return
        ctx = self._context()
        for pitch in self.step(ctx):
            self._count_step()
            LOGGER.debug(
                f"{self.__class__.__name__} trying {pitch} at position {ctx.position}"
            )
            with append_attempt(self._line, pitch):
                self._recurse()
                return
        LOGGER.debug("reached dead end")
        raise self._dead_end(ctx.position)

    def __call__(
        self, cantus: t.Sequence[Pitch], scale: Scale, direction: Direction
    ) -> t.Optional[t.Tuple[Pitch, ...]]:
        if not cantus:
            raise ValueError("cantus firmus must contain at least one pitch")
        self._cantus = tuple(cantus)
        self._scale = scale
        self._direction = direction
        self._line = []
        self.n_steps = 0
        self.deadends = []
        self._start_time = time.monotonic()

        ctx = self._context()
        for opening in self.opening_step(ctx):
            self._count_step()
            LOGGER.debug(f"{self.__class__.__name__} trying opening pitch {opening}")
            with append_attempt(self._line, opening):
                self._recurse()
                LOGGER.info(
                    f"found counterpoint {direction} cantus after {self.n_steps} steps"
                )
                return tuple(self._line)

        LOGGER.info(
            f"no counterpoint {direction} cantus exists in {scale} "
            f"(exhausted after {self.n_steps} steps)"
        )
        return None


def compose(
    cantus: t.Sequence[Pitch],
    scale: Scale,
    direction: Direction,
    settings: t.Optional[FirstSpeciesSettings] = None,
    seed: t.Optional[int] = None,
) -> t.Optional[t.Tuple[Pitch, ...]]:
    """
    >>> from species_contrapuntist.parser import parse_cantus
    >>> from species_contrapuntist.pitch_utils.scale import SCALES
    >>> from species_contrapuntist.pitch_utils.types import BELOW
    >>> cantus = parse_cantus("D4 F4 E4 D4 G4 F4 A4 G4 F4 E4 D4")
    >>> counterpoint = compose(cantus, SCALES["D", "dorian"], BELOW, seed=42)
    >>> len(counterpoint) == len(cantus)
    True
    """
    contrapuntist = FirstSpeciesContrapuntist(settings, rng=random.Random(seed))
    return contrapuntist(cantus, scale, direction)
