from species_contrapuntist.contrapuntist import (
    FirstSpeciesContrapuntist,
    FirstSpeciesSettings,
    compose,
)
from species_contrapuntist.parser import (
    NotationParseError,
    parse_cantus,
    parse_pitch,
)
from species_contrapuntist.pitch_utils.pitches import Interval, Note, Pitch
from species_contrapuntist.pitch_utils.scale import SCALES, Scale, ScaleType
from species_contrapuntist.pitch_utils.types import ABOVE, BELOW, Direction
from species_contrapuntist.rules import RULES, find_violations
from species_contrapuntist.utils.recursion import SearchBudgetExhausted

__version__ = "0.1.0"
