"""
Label Conversion Configuration
==============================

Settings that control how symbols are placed in the label file. A single
LabelConfig is built once (usually from command-line options) and passed
to the classifier.

Defaults match a typical iNES cartridge viewed in Mesen:
- base_offset 0x10: Mesen strips the 16-byte iNES header from its PRG-ROM
  view, so ROM file offsets are shifted down by that amount
- expansion_ram WORK_RAM: labels in $6000-$7FFF are Work RAM labels
"""

from dataclasses import dataclass
from enum import Enum

from dbg2mlb.errors import InvalidConfigurationError

DEFAULT_BASE_OFFSET = 0x10


class ExpansionRam(str, Enum):
    """How the $6000-$7FFF cartridge RAM window is labelled."""
    WORK_RAM = "W"      # Expansion Work RAM
    SAVE_RAM = "S"      # Battery backed Save RAM

    @classmethod
    def parse(cls, text: str) -> "ExpansionRam":
        """
        Parse a mode selection.

        Accepts W, S, WORK, SAVE, WORKRAM and SAVERAM in any case.

        Raises:
            InvalidConfigurationError: For anything else
        """
        key = text.strip().upper().replace("-", "").replace("_", "")
        aliases = {
            "W": cls.WORK_RAM,
            "WORK": cls.WORK_RAM,
            "WORKRAM": cls.WORK_RAM,
            "S": cls.SAVE_RAM,
            "SAVE": cls.SAVE_RAM,
            "SAVERAM": cls.SAVE_RAM,
        }
        try:
            return aliases[key]
        except KeyError:
            raise InvalidConfigurationError(
                f"invalid expansion RAM type '{text}'; use W (Work RAM) or S (Save RAM)"
            ) from None

    def get_description(self) -> str:
        descriptions = {
            ExpansionRam.WORK_RAM: "Work RAM",
            ExpansionRam.SAVE_RAM: "Battery backed Save RAM",
        }
        return descriptions[self]


def parse_base_offset(text: str) -> int:
    """
    Parse a ROM base offset.

    Accepts decimal ("16"), 0x hex ("0x10") and $ hex ("$10").

    Raises:
        InvalidConfigurationError: If the value is not a non-negative integer
    """
    value_str = text.strip()
    try:
        if value_str.startswith("$"):
            value = int(value_str[1:], 16)
        elif value_str.lower().startswith("0x"):
            value = int(value_str[2:], 16)
        else:
            value = int(value_str)
    except ValueError:
        raise InvalidConfigurationError(
            f"invalid base offset '{text}'; use an integer such as 16 or 0x10"
        ) from None

    if value < 0:
        raise InvalidConfigurationError(f"base offset must not be negative (got {value})")
    return value


@dataclass(frozen=True)
class LabelConfig:
    """
    Conversion settings.

    Attributes:
        base_offset: Subtracted from every PRG-ROM label (default: 0x10)
        expansion_ram: Region used for $6000-$7FFF labels (default: Work RAM)
        emit_ranges: Write multi-byte labels as start-end ranges (default: off)
    """
    base_offset: int = DEFAULT_BASE_OFFSET
    expansion_ram: ExpansionRam = ExpansionRam.WORK_RAM
    emit_ranges: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.base_offset, bool) or not isinstance(self.base_offset, int):
            raise InvalidConfigurationError(
                f"base offset must be an integer (got {self.base_offset!r})"
            )
        if self.base_offset < 0:
            raise InvalidConfigurationError(
                f"base offset must not be negative (got {self.base_offset})"
            )
        if not isinstance(self.expansion_ram, ExpansionRam):
            raise InvalidConfigurationError(
                f"invalid expansion RAM type {self.expansion_ram!r}"
            )

    @classmethod
    def from_strings(
        cls,
        base: str | None = None,
        expansion_ram: str | None = None,
        emit_ranges: bool = False,
    ) -> "LabelConfig":
        """Build a config from command-line style strings; None means default."""
        return cls(
            base_offset=parse_base_offset(base) if base is not None else DEFAULT_BASE_OFFSET,
            expansion_ram=ExpansionRam.parse(expansion_ram) if expansion_ram is not None else ExpansionRam.WORK_RAM,
            emit_ranges=emit_ranges,
        )
