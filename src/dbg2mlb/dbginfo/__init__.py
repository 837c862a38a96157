"""
ld65 Debug File Handling
========================

This package reads the debug information files written by the cc65
linker (`ld65 --dbgfile cart.dbg`) into in-memory tables.

This package provides:
- **decode_fields**: Decode the key=value,... part of a debug file line
- **EntryStore**: Id-indexed tables of files, segments, spans, scopes and symbols
- **read_debug_file**: Load a store from a .dbg file on disk
- **Entry views**: Typed read-only access to Segment, Span, Scope and Symbol records

Quick Start
-----------
    >>> from dbg2mlb.dbginfo import read_debug_file
    >>> store = read_debug_file("cart.dbg")
    >>> for symbol in store.symbols():
    ...     print(symbol.name, hex(symbol.value))
"""

from dbg2mlb.dbginfo.records import (
    RecordKind,
    DebugEntry,
    SourceFile,
    Segment,
    Span,
    Scope,
    Symbol,
    decode_fields,
    parse_hex,
    parse_dec,
)
from dbg2mlb.dbginfo.store import EntryStore
from dbg2mlb.dbginfo.reader import (
    split_line,
    iter_records,
    read_stream,
    read_string,
    read_debug_file,
)

__all__ = [
    "RecordKind",
    "DebugEntry",
    "SourceFile",
    "Segment",
    "Span",
    "Scope",
    "Symbol",
    "decode_fields",
    "parse_hex",
    "parse_dec",
    "EntryStore",
    "split_line",
    "iter_records",
    "read_stream",
    "read_string",
    "read_debug_file",
]
