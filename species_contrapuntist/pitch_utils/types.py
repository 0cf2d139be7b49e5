import typing as t
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

PitchClass = int
Semitones = int


@dataclass
class SettingsBase:
    pass


class Direction(Enum):
    """Which side of the cantus firmus the counterpoint is written on.

    >>> Direction.ABOVE.sign
    1
    >>> Direction.from_string("Below").sign
    -1
    """

    ABOVE = 1
    BELOW = -1

    @property
    def sign(self) -> int:
        return self.value

    @classmethod
    def from_string(cls, direction: str) -> "Direction":
        try:
            return direction_string_to_enum[direction.lower()]
        except KeyError:
            raise ValueError(
                f"{direction=} is not one of {sorted(direction_string_to_enum)}"
            )

    def __str__(self):
        return self.name.lower()


ABOVE = Direction.ABOVE
BELOW = Direction.BELOW

direction_string_to_enum: t.Mapping[str, Direction] = MappingProxyType(
    {
        "above": ABOVE,
        "up": ABOVE,
        "below": BELOW,
        "down": BELOW,
    }
)
