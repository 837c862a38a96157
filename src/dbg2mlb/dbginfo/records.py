"""
ld65 Debug File Record Definitions
==================================

This module defines the record kinds found in a ca65/ld65 debug file
(produced by `ld65 --dbgfile`), the field decoder, and typed read-only
views over decoded records.

Debug File Lines
----------------
Every line of a debug file has the form:

    kind<TAB>key=value,key=value,...

For example:

    seg     id=0,name="CODE",start=0x008000,size=0x0123,addrsize=absolute,type=ro,oname="cart.nes",ooffs=16
    span    id=0,seg=0,start=0,size=3
    scope   id=0,name="",mod=0,size=3,span=0+4
    sym     id=0,name="reset",addrsize=absolute,scope=0,def=1,val=0x8000,seg=0,type=lab

Values are kept as strings after decoding. Entry views parse numeric
fields only when they are read, so a malformed field in a record that is
never used does not stop a conversion.

Reference
---------
- ld65 debug info: https://cc65.github.io/doc/debugging.html
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import logging

from dbg2mlb.errors import MalformedRecordError, RecordLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Record Kinds
# =============================================================================

class RecordKind(str, Enum):
    """
    Record kinds that may appear at the start of a debug file line.

    Only VERSION, INFO, FILE, SCOPE, SEG, SPAN and SYM are stored; the
    remaining kinds are accepted and discarded.
    """
    VERSION = "version"     # Debug file format version
    INFO = "info"           # Entry counts for every table
    CSYM = "csym"           # C symbols
    FILE = "file"           # Source files used for linking
    LIB = "lib"             # Libraries
    LINE = "line"           # Source line to span mapping
    MOD = "mod"             # Modules (translation units)
    SCOPE = "scope"         # Lexical scopes
    SEG = "seg"             # Segments
    SPAN = "span"           # Spans within segments
    SYM = "sym"             # Assembler symbols
    TYPE = "type"           # Type descriptors

    @classmethod
    def from_name(cls, name: str) -> Optional["RecordKind"]:
        """Return the kind for a line prefix, or None if unrecognized."""
        try:
            return cls(name)
        except ValueError:
            return None

    def is_indexed(self) -> bool:
        """True for kinds stored in an id-keyed table."""
        return self in INDEXED_KINDS

    def is_ignored(self) -> bool:
        """True for kinds that are accepted but not stored."""
        return self in IGNORED_KINDS


INDEXED_KINDS = frozenset({
    RecordKind.FILE,
    RecordKind.SCOPE,
    RecordKind.SEG,
    RecordKind.SPAN,
    RecordKind.SYM,
})

IGNORED_KINDS = frozenset({
    RecordKind.CSYM,
    RecordKind.LIB,
    RecordKind.LINE,
    RecordKind.MOD,
    RecordKind.TYPE,
})


# =============================================================================
# Field Decoding
# =============================================================================

def decode_fields(text: str) -> dict[str, str]:
    """
    Decode a comma-separated list of key=value pairs.

    Double-quoted values have their quotes removed, and commas inside
    quotes do not split a pair. A pair with no '=' maps its key to an
    empty string. Empty pairs (for example after a trailing comma) are
    skipped.

    Args:
        text: The field part of a debug file line

    Returns:
        Mapping of field name to raw string value

    Example:
        >>> decode_fields('id=0,name="foo",val=0x8000')
        {'id': '0', 'name': 'foo', 'val': '0x8000'}
    """
    fields: dict[str, str] = {}

    for pair in _split_pairs(text):
        if not pair:
            continue
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep:
            logger.debug(f"Field '{key}' has no value, treating as empty")
        fields[key] = _unquote(value)

    return fields


def _split_pairs(text: str) -> list[str]:
    """Split on commas that are not inside double quotes."""
    pairs = []
    current = []
    in_quotes = False

    for ch in text:
        if ch == '"':
            in_quotes = not in_quotes
            current.append(ch)
        elif ch == "," and not in_quotes:
            pairs.append("".join(current))
            current = []
        else:
            current.append(ch)

    pairs.append("".join(current))
    return pairs


def _unquote(value: str) -> str:
    return value.replace('"', "")


def parse_hex(text: str) -> int:
    """
    Parse a hex number as written in debug files.

    Accepts an optional 0x or $ prefix: "0x8000", "8000" and "$8000" all
    give 0x8000.

    Raises:
        ValueError: If the text is not a hex number
    """
    text = text.strip()
    if text.startswith("$"):
        text = text[1:]
    return int(text, 16)


def parse_dec(text: str) -> int:
    """Parse a decimal number. Raises ValueError if the text is not one."""
    return int(text.strip(), 10)


# =============================================================================
# Entry Views
# =============================================================================

@dataclass(frozen=True)
class DebugEntry:
    """
    Read-only view over one decoded id-indexed record.

    Attributes:
        id: The record's id field
        fields: All decoded fields, values as raw strings
        location: Where the record was read from (optional)
    """
    id: int
    fields: dict[str, str] = field(repr=False, compare=False)
    location: Optional[RecordLocation] = field(default=None, repr=False, compare=False)

    kind = "entry"

    def has(self, key: str) -> bool:
        return key in self.fields

    def get(self, key: str) -> Optional[str]:
        return self.fields.get(key)

    def require(self, key: str) -> str:
        """Return a field that must be present."""
        try:
            return self.fields[key]
        except KeyError:
            raise MalformedRecordError(
                f"{self.kind} {self.id} has no '{key}' field",
                location=self.location,
            ) from None

    def hex_field(self, key: str) -> int:
        return self._number(key, parse_hex, "hex")

    def dec_field(self, key: str) -> int:
        return self._number(key, parse_dec, "decimal")

    def int_list_field(self, key: str) -> list[int]:
        """Parse a '+'-joined list of decimal ids, such as "0+4+12"."""
        raw = self.require(key)
        try:
            return [parse_dec(part) for part in raw.split("+") if part.strip()]
        except ValueError:
            raise MalformedRecordError(
                f"{self.kind} {self.id} field '{key}' is not an id list: '{raw}'",
                location=self.location,
            ) from None

    def _number(self, key: str, parser, description: str) -> int:
        raw = self.require(key)
        try:
            return parser(raw)
        except ValueError:
            raise MalformedRecordError(
                f"{self.kind} {self.id} field '{key}' is not a {description} number: '{raw}'",
                location=self.location,
            ) from None


@dataclass(frozen=True)
class SourceFile(DebugEntry):
    """Source file used for linking. Stored but not used by resolution."""

    kind = "file"

    @property
    def name(self) -> Optional[str]:
        return self.get("name")

    @property
    def size(self) -> int:
        return self.dec_field("size")

    @property
    def mtime(self) -> int:
        return self.hex_field("mtime")


@dataclass(frozen=True)
class Segment(DebugEntry):
    """
    Contiguous chunk of the memory map.

    A segment with an ooffs field was written to the output image at that
    file offset. Segments without one (RAM, BSS, zero page) are not part
    of the ROM image.
    """

    kind = "seg"

    @property
    def name(self) -> Optional[str]:
        return self.get("name")

    @property
    def start(self) -> int:
        return self.hex_field("start")

    @property
    def size(self) -> int:
        return self.hex_field("size")

    @property
    def has_image_offset(self) -> bool:
        return self.has("ooffs")

    @property
    def output_offset(self) -> int:
        return self.dec_field("ooffs")

    @property
    def output_name(self) -> Optional[str]:
        return self.get("oname")


@dataclass(frozen=True)
class Span(DebugEntry):
    """Sub-range of exactly one segment."""

    kind = "span"

    @property
    def segment_id(self) -> int:
        return self.dec_field("seg")

    @property
    def start(self) -> int:
        return self.dec_field("start")

    @property
    def size(self) -> int:
        return self.dec_field("size")


@dataclass(frozen=True)
class Scope(DebugEntry):
    """Lexical scope covering one or more spans."""

    kind = "scope"

    @property
    def name(self) -> Optional[str]:
        return self.get("name")

    @property
    def span_ids(self) -> list[int]:
        ids = self.int_list_field("span")
        if not ids:
            raise MalformedRecordError(
                f"scope {self.id} has an empty span list",
                location=self.location,
            )
        return ids


@dataclass(frozen=True)
class Symbol(DebugEntry):
    """
    Assembler symbol.

    A symbol either names its scope directly or names a parent symbol
    (cheap local labels) whose scope it shares.
    """

    kind = "sym"

    @property
    def name(self) -> Optional[str]:
        name = self.get("name")
        return name if name else None

    @property
    def symbol_type(self) -> Optional[str]:
        return self.get("type")

    @property
    def is_label(self) -> bool:
        return self.symbol_type == "lab"

    @property
    def value(self) -> int:
        return self.hex_field("val")

    @property
    def scope_id(self) -> Optional[int]:
        return self.dec_field("scope") if self.has("scope") else None

    @property
    def parent_id(self) -> Optional[int]:
        return self.dec_field("parent") if self.has("parent") else None

    @property
    def size(self) -> Optional[int]:
        return self.dec_field("size") if self.has("size") else None

    @property
    def comment(self) -> Optional[str]:
        return self.get("comment")

    def describe(self) -> str:
        return f"sym '{self.name}' (id {self.id})" if self.name else f"sym {self.id}"


ENTRY_TYPES: dict[RecordKind, type[DebugEntry]] = {
    RecordKind.FILE: SourceFile,
    RecordKind.SCOPE: Scope,
    RecordKind.SEG: Segment,
    RecordKind.SPAN: Span,
    RecordKind.SYM: Symbol,
}
