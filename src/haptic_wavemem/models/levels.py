"""
Playback Levels
===============

Closed enumerations for frame gain and timebase, plus the explicit tables
that map them to their 2-bit wire values.

Wire values are NEVER derived from enum ordinals. Two incompatible mappings
have been observed across revisions of the waveform memory format, so both
are kept as named profiles and selected through configuration:

    Profile       Gain FULL/3Q/HALF/QUARTER   Timebase 5.44/10.88/21.76/43.52
    attenuation   0 / 1 / 2 / 3               0 / 1 / 2 / 3
    ordinal       3 / 2 / 1 / 0               0 / 1 / 2 / 3

Example:
    from haptic_wavemem.models.levels import Gain, Timebase, get_wire_mapping

    mapping = get_wire_mapping("attenuation")
    mapping.gain_bits(Gain.HALF)        # 2
    mapping.timebase_bits(Timebase.MS_21_76)  # 2
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping


class Gain(str, Enum):
    """
    Gain multiplier applied to a frame's snippet amplitude.

    Attributes:
        FULL: 1.0x (default)
        THREE_QUARTER: 0.75x
        HALF: 0.5x
        QUARTER: 0.25x
    """

    FULL = "FULL"
    THREE_QUARTER = "THREE_QUARTER"
    HALF = "HALF"
    QUARTER = "QUARTER"

    @property
    def factor(self) -> float:
        """Nominal amplitude multiplier."""
        return _GAIN_FACTORS[self]


class Timebase(str, Enum):
    """
    Duration unit multiplying each point's TIME field during playback.

    Attributes:
        MS_5_44: 5.44 ms (default)
        MS_10_88: 10.88 ms
        MS_21_76: 21.76 ms
        MS_43_52: 43.52 ms
    """

    MS_5_44 = "MS_5_44"
    MS_10_88 = "MS_10_88"
    MS_21_76 = "MS_21_76"
    MS_43_52 = "MS_43_52"

    @property
    def milliseconds(self) -> float:
        """Nominal duration of one timebase unit."""
        return _TIMEBASE_MS[self]


_GAIN_FACTORS: Dict[Gain, float] = {
    Gain.FULL: 1.0,
    Gain.THREE_QUARTER: 0.75,
    Gain.HALF: 0.5,
    Gain.QUARTER: 0.25,
}

_TIMEBASE_MS: Dict[Timebase, float] = {
    Timebase.MS_5_44: 5.44,
    Timebase.MS_10_88: 10.88,
    Timebase.MS_21_76: 21.76,
    Timebase.MS_43_52: 43.52,
}

DEFAULT_GAIN = Gain.FULL
DEFAULT_TIMEBASE = Timebase.MS_5_44


@dataclass(frozen=True, eq=False)
class WireMapping:
    """
    Table-driven mapping between playback levels and 2-bit wire values.

    Attributes:
        name: Profile name (used in configuration)
        gain: Gain level -> wire bits
        timebase: Timebase level -> wire bits
    """

    name: str
    gain: Mapping[Gain, int]
    timebase: Mapping[Timebase, int]
    _gain_reverse: Mapping[int, Gain] = field(init=False, repr=False, compare=False)
    _timebase_reverse: Mapping[int, Timebase] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate that both tables are complete 2-bit bijections."""
        for label, table, levels in (
            ("gain", self.gain, Gain),
            ("timebase", self.timebase, Timebase),
        ):
            if set(table) != set(levels):
                raise ValueError(f"{self.name}: {label} table must cover every level")
            if sorted(table.values()) != [0, 1, 2, 3]:
                raise ValueError(f"{self.name}: {label} wire values must be 0-3, each used once")

        object.__setattr__(self, "gain", MappingProxyType(dict(self.gain)))
        object.__setattr__(self, "timebase", MappingProxyType(dict(self.timebase)))
        object.__setattr__(
            self, "_gain_reverse", MappingProxyType({v: k for k, v in self.gain.items()})
        )
        object.__setattr__(
            self, "_timebase_reverse", MappingProxyType({v: k for k, v in self.timebase.items()})
        )

    def gain_bits(self, gain: Gain) -> int:
        return self.gain[gain]

    def timebase_bits(self, timebase: Timebase) -> int:
        return self.timebase[timebase]

    def gain_from_bits(self, bits: int) -> Gain:
        return self._gain_reverse[bits & 0x03]

    def timebase_from_bits(self, bits: int) -> Timebase:
        return self._timebase_reverse[bits & 0x03]


ATTENUATION_MAPPING = WireMapping(
    name="attenuation",
    gain={
        Gain.FULL: 0,
        Gain.THREE_QUARTER: 1,
        Gain.HALF: 2,
        Gain.QUARTER: 3,
    },
    timebase={
        Timebase.MS_5_44: 0,
        Timebase.MS_10_88: 1,
        Timebase.MS_21_76: 2,
        Timebase.MS_43_52: 3,
    },
)

ORDINAL_MAPPING = WireMapping(
    name="ordinal",
    gain={
        Gain.QUARTER: 0,
        Gain.HALF: 1,
        Gain.THREE_QUARTER: 2,
        Gain.FULL: 3,
    },
    timebase={
        Timebase.MS_5_44: 0,
        Timebase.MS_10_88: 1,
        Timebase.MS_21_76: 2,
        Timebase.MS_43_52: 3,
    },
)

DEFAULT_MAPPING = ATTENUATION_MAPPING

WIRE_MAPPINGS: Dict[str, WireMapping] = {
    ATTENUATION_MAPPING.name: ATTENUATION_MAPPING,
    ORDINAL_MAPPING.name: ORDINAL_MAPPING,
}


def get_wire_mapping(name: str) -> WireMapping:
    """
    Look up a wire mapping profile by name.

    Raises:
        KeyError: If no profile has that name
    """
    try:
        return WIRE_MAPPINGS[name]
    except KeyError:
        raise KeyError(
            f"Unknown wire mapping '{name}'. Available: {', '.join(sorted(WIRE_MAPPINGS))}"
        ) from None
