"""Component kinds and raw samples as delivered by a sample store."""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional, Tuple

# Timestamp used for data logged without a time (matches the store's static slot)
STATIC_TIME = -(2 ** 63)


class ComponentKind(Enum):
    """Independently queryable component streams of one entity."""
    SCALAR = auto()                 # Analog value
    DISCRETE_STATE = auto()         # Class id of a state starting at this time
    DISCRETE_STATE_INIT = auto()    # Class id of the state before the first change
    DISCRETE_STATE_NORMAL = auto()  # Class id rendered as the steady-state line
    EVENT = auto()                  # One or more class ids of punctual events


DISCRETE_KINDS = (
    ComponentKind.DISCRETE_STATE,
    ComponentKind.DISCRETE_STATE_INIT,
    ComponentKind.DISCRETE_STATE_NORMAL,
)


@dataclass(frozen=True)
class Sample:
    """One (time, value-bag) entry of a component stream."""

    time: int
    values: Tuple[Any, ...]

    def single(self) -> Optional[Any]:
        """The only value of the bag, or None when the bag is empty or multi-valued."""
        if len(self.values) != 1:
            return None
        return self.values[0]

    @property
    def is_static(self) -> bool:
        return self.time == STATIC_TIME


@dataclass(frozen=True)
class WaveformPoint:
    """A single loggable component value.

    Use the factory classmethods rather than building one by hand.
    """

    kind: ComponentKind
    value: Any

    @classmethod
    def scalar(cls, value: float) -> 'WaveformPoint':
        return cls(ComponentKind.SCALAR, float(value))

    @classmethod
    def discrete_state(cls, class_id: int) -> 'WaveformPoint':
        return cls(ComponentKind.DISCRETE_STATE, int(class_id))

    @classmethod
    def discrete_state_init(cls, class_id: int) -> 'WaveformPoint':
        return cls(ComponentKind.DISCRETE_STATE_INIT, int(class_id))

    @classmethod
    def discrete_state_normal(cls, class_id: int) -> 'WaveformPoint':
        return cls(ComponentKind.DISCRETE_STATE_NORMAL, int(class_id))

    @classmethod
    def event(cls, class_id: int) -> 'WaveformPoint':
        return cls(ComponentKind.EVENT, int(class_id))
