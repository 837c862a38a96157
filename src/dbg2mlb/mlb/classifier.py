"""
Symbol Classifier
=================

Sorts label symbols into the NES memory regions Mesen knows about and
computes the value written to the label file.

NES CPU Memory Map
------------------
    $0000-$1FFF  Internal 2KB RAM (mirrored)            -> R
    $2000-$5FFF  PPU/APU/IO registers, expansion area   -> G
    $6000-$7FFF  Cartridge RAM (Work or Save RAM)       -> W / S
    $8000-$FFFF  PRG-ROM                                -> P

RAM and register labels keep their CPU address. PRG-ROM labels are
written as offsets into the PRG-ROM image, which requires the segment
lookup done by AddressResolver.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional
import logging

from dbg2mlb.dbginfo.records import Symbol
from dbg2mlb.dbginfo.store import EntryStore
from dbg2mlb.errors import InconsistentRomSymbolError
from dbg2mlb.mlb.config import ExpansionRam, LabelConfig
from dbg2mlb.mlb.resolver import AddressResolver

logger = logging.getLogger(__name__)

REGISTER_START = 0x2000
EXPANSION_RAM_START = 0x6000
PRG_ROM_START = 0x8000


class MemoryRegion(str, Enum):
    """Mesen label types, valued by their .mlb tag."""
    PRG_ROM = "P"           # PRG ROM labels
    INTERNAL_RAM = "R"      # NES internal 2KB RAM
    SAVE_RAM = "S"          # Battery backed Save RAM
    WORK_RAM = "W"          # Cartridge Work RAM
    REGISTER = "G"          # Hardware register labels

    @property
    def tag(self) -> str:
        return self.value

    def get_description(self) -> str:
        descriptions = {
            MemoryRegion.PRG_ROM: "PRG-ROM",
            MemoryRegion.INTERNAL_RAM: "Internal RAM",
            MemoryRegion.SAVE_RAM: "Save RAM",
            MemoryRegion.WORK_RAM: "Work RAM",
            MemoryRegion.REGISTER: "Register",
        }
        return descriptions[self]


def classify_address(value: int, expansion_ram: ExpansionRam = ExpansionRam.WORK_RAM) -> MemoryRegion:
    """
    Return the region a CPU address belongs to.

    Example:
        >>> classify_address(0x0300)
        <MemoryRegion.INTERNAL_RAM: 'R'>
        >>> classify_address(0x6000, ExpansionRam.SAVE_RAM)
        <MemoryRegion.SAVE_RAM: 'S'>
    """
    if value < REGISTER_START:
        return MemoryRegion.INTERNAL_RAM
    if value < EXPANSION_RAM_START:
        return MemoryRegion.REGISTER
    if value < PRG_ROM_START:
        if expansion_ram is ExpansionRam.SAVE_RAM:
            return MemoryRegion.SAVE_RAM
        return MemoryRegion.WORK_RAM
    return MemoryRegion.PRG_ROM


@dataclass(frozen=True)
class ResolvedSymbol:
    """
    A label ready to be written to the .mlb file.

    Attributes:
        region: Memory region (label type)
        value: Address or PRG-ROM offset written to the file
        name: Label name (None for unnamed symbols)
        value_end: Last address of a multi-byte label (optional)
        comment: Trailing comment (optional)
        symbol_id: Id of the source symbol
    """
    region: MemoryRegion
    value: int
    name: Optional[str] = None
    value_end: Optional[int] = None
    comment: Optional[str] = None
    symbol_id: Optional[int] = None


class SymbolClassifier:
    """
    Turns stored symbols into ResolvedSymbols.

    Usage:
        classifier = SymbolClassifier(store, LabelConfig())
        for label in classifier.classify_all():
            print(label.region.tag, hex(label.value), label.name)
    """

    def __init__(self, store: EntryStore, config: Optional[LabelConfig] = None):
        self.store = store
        self.config = config if config is not None else LabelConfig()
        self.resolver = AddressResolver(store)

    def classify(self, symbol: Symbol) -> Optional[ResolvedSymbol]:
        """
        Classify one symbol.

        Returns:
            The resolved label, or None if the symbol is not a label (equates,
            imports and other symbol types are not written)

        Raises:
            InconsistentRomSymbolError: If a PRG-ROM label cannot be placed in
                the ROM image
            ResolutionError: If the symbol's scope, span or segment is missing
        """
        if not symbol.is_label:
            logger.debug(f"Skipping {symbol.describe()} of type {symbol.symbol_type}")
            return None

        address = symbol.value
        region = classify_address(address, self.config.expansion_ram)
        value = address

        if region is MemoryRegion.PRG_ROM:
            value = self._rom_offset(symbol, address)

        value_end = None
        if self.config.emit_ranges:
            size = symbol.size
            if size is not None and size > 1:
                value_end = value + size - 1

        return ResolvedSymbol(
            region=region,
            value=value,
            name=symbol.name,
            value_end=value_end,
            comment=symbol.comment,
            symbol_id=symbol.id,
        )

    def _rom_offset(self, symbol: Symbol, address: int) -> int:
        placement = self.resolver.resolve_segment(symbol)
        if placement is None:
            raise InconsistentRomSymbolError(
                symbol.name, address, "belongs to a segment that is not in the ROM image"
            )

        value = placement.to_image(address) - self.config.base_offset
        if value < 0:
            raise InconsistentRomSymbolError(
                symbol.name,
                address,
                f"resolves to negative ROM offset {value} "
                f"(seg {placement.segment_id}, base offset {self.config.base_offset})",
            )
        return value

    def classify_all(self) -> Iterator[ResolvedSymbol]:
        """Yield every label in symbol id order."""
        for symbol in self.store.symbols():
            resolved = self.classify(symbol)
            if resolved is not None:
                yield resolved
