"""
dbg2mlb - ld65 Debug File to Mesen Label Converter
==================================================

This package converts the debug information file written by the cc65
linker (ld65) into a Mesen label file (.mlb), so that symbols from a
ca65 project show up in the Mesen NES debugger.

Not every feature of the debug file has a Mesen counterpart (anonymous
labels, for example), so those parts are left out of the label file.

Main Components
---------------
- **dbginfo**: Debug file decoding and the id-indexed entry store
- **mlb**: Address resolution, region classification and .mlb output
- **cli**: The dbg2mlb command

Quick Start
-----------
Convert a debug file:
    >>> from dbg2mlb import convert_file, LabelConfig
    >>> result = convert_file("cart.dbg", "cart.mlb", LabelConfig())
    >>> print(result.describe())

Or use the command-line tool:
    $ dbg2mlb cart.dbg cart.mlb -b 0x10 -e S

Reference Documentation
-----------------------
- ld65 debug info: https://cc65.github.io/doc/debugging.html
- Mesen label files: https://www.mesen.ca/docs/debugging/debuggerintegration.html

Version History
---------------
1.0.0 - Initial release
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from dbg2mlb.errors import (
    Dbg2MlbError,
    DebugFileError,
    UnknownRecordKindError,
    MalformedRecordError,
    ResolutionError,
    UnresolvedScopeError,
    MissingEntryError,
    MissingSegmentError,
    MissingSpanError,
    MissingScopeError,
    MissingSymbolError,
    MissingFileError,
    InconsistentRomSymbolError,
    ConversionIOError,
    SourceUnavailableError,
    SinkUnavailableError,
    InvalidConfigurationError,
)

from dbg2mlb.dbginfo import (
    EntryStore,
    RecordKind,
    decode_fields,
    read_debug_file,
    read_string,
)

from dbg2mlb.mlb import (
    AddressResolver,
    ExpansionRam,
    LabelConfig,
    MemoryRegion,
    ResolvedSymbol,
    SymbolClassifier,
    ConversionResult,
    convert_file,
    format_label,
    generate_labels,
)

__all__ = [
    "__version__",
    # Errors
    "Dbg2MlbError",
    "DebugFileError",
    "UnknownRecordKindError",
    "MalformedRecordError",
    "ResolutionError",
    "UnresolvedScopeError",
    "MissingEntryError",
    "MissingSegmentError",
    "MissingSpanError",
    "MissingScopeError",
    "MissingSymbolError",
    "MissingFileError",
    "InconsistentRomSymbolError",
    "ConversionIOError",
    "SourceUnavailableError",
    "SinkUnavailableError",
    "InvalidConfigurationError",
    # Debug file
    "EntryStore",
    "RecordKind",
    "decode_fields",
    "read_debug_file",
    "read_string",
    # Labels
    "AddressResolver",
    "ExpansionRam",
    "LabelConfig",
    "MemoryRegion",
    "ResolvedSymbol",
    "SymbolClassifier",
    "ConversionResult",
    "convert_file",
    "format_label",
    "generate_labels",
]
