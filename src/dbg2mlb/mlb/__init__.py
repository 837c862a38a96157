"""
Mesen Label Generation
======================

Turns the tables read from an ld65 debug file into Mesen .mlb labels.

This package provides:
- **LabelConfig**: Base offset and expansion RAM settings
- **AddressResolver**: Symbol -> scope -> span -> segment lookup
- **SymbolClassifier**: Region classification and PRG-ROM offset arithmetic
- **format_label / generate_labels / convert_file**: .mlb output

Quick Start
-----------
    >>> from dbg2mlb.mlb import LabelConfig, ExpansionRam, convert_file
    >>> config = LabelConfig(base_offset=0x10, expansion_ram=ExpansionRam.SAVE_RAM)
    >>> result = convert_file("cart.dbg", "cart.mlb", config)
    >>> print(result.describe())
"""

from dbg2mlb.mlb.config import (
    DEFAULT_BASE_OFFSET,
    ExpansionRam,
    LabelConfig,
    parse_base_offset,
)
from dbg2mlb.mlb.resolver import AddressResolver, ImageOffset
from dbg2mlb.mlb.classifier import (
    MemoryRegion,
    ResolvedSymbol,
    SymbolClassifier,
    classify_address,
)
from dbg2mlb.mlb.writer import (
    ConversionResult,
    format_label,
    generate_labels,
    write_labels,
    write_lines,
    convert_file,
)

__all__ = [
    "DEFAULT_BASE_OFFSET",
    "ExpansionRam",
    "LabelConfig",
    "parse_base_offset",
    "AddressResolver",
    "ImageOffset",
    "MemoryRegion",
    "ResolvedSymbol",
    "SymbolClassifier",
    "classify_address",
    "ConversionResult",
    "format_label",
    "generate_labels",
    "write_labels",
    "write_lines",
    "convert_file",
]
