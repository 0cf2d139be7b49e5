import itertools
import random

import pytest

import species_contrapuntist.contrapuntist as mod
from species_contrapuntist.candidates import signed_offset
from species_contrapuntist.parser import parse_cantus
from species_contrapuntist.pitch_utils.intervals import is_leap, is_step, sign
from species_contrapuntist.pitch_utils.scale import SCALES
from species_contrapuntist.pitch_utils.types import ABOVE, BELOW
from species_contrapuntist.rules import RuleContext, find_violations
from species_contrapuntist.utils.recursion import SearchBudgetExhausted

C_MAJOR = SCALES["C", "major"]
D_DORIAN = SCALES["D", "dorian"]

SHORT_CANTUS = "C4 D4 E4 D4 C4"
DORIAN_CANTUS = "D4 F4 E4 D4 G4 F4 A4 G4 F4 E4 D4"


class IdentityRandom(random.Random):
    """Leaves candidates in the order in which they are generated."""

    def sample(self, population, k, **kwargs):
        return list(population)[:k]


@pytest.fixture(
    params=[
        (SHORT_CANTUS, C_MAJOR, ABOVE),
        (SHORT_CANTUS, C_MAJOR, BELOW),
        (DORIAN_CANTUS, D_DORIAN, BELOW),
    ]
)
def cantus_scale_direction(request):
    cantus, scale, direction = request.param
    return parse_cantus(cantus), scale, direction


@pytest.mark.parametrize("seed", range(8))
def test_contrapuntist(cantus_scale_direction, seed):
    cantus, scale, direction = cantus_scale_direction
    contrapuntist = mod.FirstSpeciesContrapuntist(rng=random.Random(seed))
    counterpoint = contrapuntist(cantus, scale, direction)
    assert counterpoint is not None
    assert isinstance(counterpoint, tuple)
    assert len(counterpoint) == len(cantus)
    assert find_violations(cantus, counterpoint, scale, direction) == []
    for pitch in counterpoint:
        assert pitch in scale
    for prev, cur in zip(counterpoint, counterpoint[1:]):
        motion = cur.semitones_from_middle_c() - prev.semitones_from_middle_c()
        assert abs(motion) <= 12
        assert abs(motion) != 6
    assert signed_offset(counterpoint[0], cantus[0], direction) in (0, 7, 12)
    assert signed_offset(counterpoint[-1], cantus[-1], direction) in (0, 12)


def test_same_seed_same_counterpoint():
    cantus = parse_cantus(DORIAN_CANTUS)
    results = {
        mod.compose(cantus, D_DORIAN, BELOW, seed=17),
        mod.compose(cantus, D_DORIAN, BELOW, seed=17),
    }
    assert len(results) == 1


def test_golden_counterpoint_with_unshuffled_candidates():
    contrapuntist = mod.FirstSpeciesContrapuntist(
        mod.FirstSpeciesSettings(save_deadends=True), rng=IdentityRandom()
    )
    counterpoint = contrapuntist(parse_cantus(SHORT_CANTUS), C_MAJOR, ABOVE)
    assert counterpoint == parse_cantus("G4 F4 G4 B4 C5")
    # C4 F4 is the first partial line that can't be continued
    assert contrapuntist.deadends[0] == {
        "position": 2,
        "line": parse_cantus("C4 F4"),
    }


def test_single_note_cantus():
    cantus = parse_cantus("C4")
    for seed in range(10):
        counterpoint = mod.compose(cantus, C_MAJOR, BELOW, seed=seed)
        assert counterpoint in (parse_cantus("C4"), parse_cantus("C3"))
    contrapuntist = mod.FirstSpeciesContrapuntist(rng=IdentityRandom())
    assert contrapuntist(cantus, C_MAJOR, BELOW) == parse_cantus("C4")
    # C isn't in D major, so neither the unison nor the octave is available
    contrapuntist = mod.FirstSpeciesContrapuntist(rng=random.Random(0))
    assert contrapuntist(cantus, SCALES["D", "major"], BELOW) is None
    assert contrapuntist.n_steps == 0


def test_no_opening_candidates():
    contrapuntist = mod.FirstSpeciesContrapuntist(rng=random.Random(0))
    # C#, G# and C# are all outside of C major
    assert contrapuntist(parse_cantus("C#4 D4 E4 D4 C4"), C_MAJOR, ABOVE) is None
    assert contrapuntist.n_steps == 0


def test_exhaustive_search_reports_no_solution():
    contrapuntist = mod.FirstSpeciesContrapuntist(rng=random.Random(0))
    # Every opening is tried, but nothing can end against C#
    assert contrapuntist(parse_cantus("C4 C#4"), C_MAJOR, ABOVE) is None
    assert contrapuntist.n_steps == 3


def test_step_after_leap_recovers():
    contrapuntist = mod.FirstSpeciesContrapuntist(rng=random.Random(0))
    ctx = RuleContext(
        parse_cantus("A3 C4 D4 C4"),
        parse_cantus("A4 E4"),
        C_MAJOR,
        ABOVE,
        contrapuntist.settings,
    )
    assert contrapuntist.step(ctx) == list(parse_cantus("F4"))


@pytest.mark.parametrize("seed", range(10))
def test_leaps_are_recovered(seed):
    cantus = parse_cantus(DORIAN_CANTUS)
    counterpoint = mod.compose(cantus, D_DORIAN, BELOW, seed=seed)
    assert counterpoint is not None
    for a, b, c in zip(counterpoint, counterpoint[1:], counterpoint[2:]):
        leap = b.semitones_from_middle_c() - a.semitones_from_middle_c()
        if is_leap(leap):
            motion = c.semitones_from_middle_c() - b.semitones_from_middle_c()
            assert is_step(motion)
            assert sign(motion) == -sign(leap)


def test_step_limit():
    settings = mod.FirstSpeciesSettings(max_steps=1)
    contrapuntist = mod.FirstSpeciesContrapuntist(settings, rng=random.Random(0))
    with pytest.raises(SearchBudgetExhausted) as exc_info:
        contrapuntist(parse_cantus(SHORT_CANTUS), C_MAJOR, ABOVE)
    assert isinstance(exc_info.value, TimeoutError)
    assert exc_info.value.n_steps == 2


def test_timeout(monkeypatch):
    clock = itertools.count()
    monkeypatch.setattr(mod.time, "monotonic", lambda: next(clock))
    settings = mod.FirstSpeciesSettings(timeout=0.5)
    contrapuntist = mod.FirstSpeciesContrapuntist(settings, rng=random.Random(0))
    with pytest.raises(SearchBudgetExhausted):
        contrapuntist(parse_cantus(SHORT_CANTUS), C_MAJOR, ABOVE)


def test_no_budget():
    settings = mod.FirstSpeciesSettings(max_steps=None, timeout=None)
    counterpoint = mod.compose(
        parse_cantus(SHORT_CANTUS), C_MAJOR, ABOVE, settings=settings, seed=1
    )
    assert counterpoint is not None


def test_empty_cantus():
    with pytest.raises(ValueError):
        mod.compose((), C_MAJOR, ABOVE)


def test_contrapuntist_can_be_reused():
    contrapuntist = mod.FirstSpeciesContrapuntist(rng=random.Random(5))
    first = contrapuntist(parse_cantus(SHORT_CANTUS), C_MAJOR, ABOVE)
    second = contrapuntist(parse_cantus(DORIAN_CANTUS), D_DORIAN, BELOW)
    assert first is not None and len(first) == 5
    assert second is not None and len(second) == 11
