"""
Debug Information Entry Store
=============================

The EntryStore holds the tables built while a debug file is read. Records
arrive one at a time through record(); each kind is routed through an
explicit handler map keyed by RecordKind.

Table Layout
------------
- version, info: single decoded records, replaced when seen again
- file, scope, seg, span, sym: dicts mapping integer id to a typed entry
- csym, lib, line, mod, type: counted and discarded

The store only grows while the file is being read. Once ingest is
complete it is used read-only by the resolver and classifier.

Usage Example
-------------
    >>> store = EntryStore()
    >>> store.record("seg", "id=0,start=0x8000,ooffs=16")
    >>> store.segment(0).start
    32768
"""

from collections import Counter
from typing import Callable, Iterator, Optional, Union
import logging

from dbg2mlb.dbginfo.records import (
    ENTRY_TYPES,
    DebugEntry,
    RecordKind,
    Scope,
    Segment,
    SourceFile,
    Span,
    Symbol,
    decode_fields,
    parse_dec,
)
from dbg2mlb.errors import (
    MalformedRecordError,
    MissingEntryError,
    MissingFileError,
    MissingScopeError,
    MissingSegmentError,
    MissingSpanError,
    MissingSymbolError,
    RecordLocation,
    UnknownRecordKindError,
)

logger = logging.getLogger(__name__)

# Oldest debug file format this converter has been checked against.
MINIMUM_SUPPORTED_VERSION = (2, 0)


class EntryStore:
    """
    Id-indexed tables of debug file records.

    Attributes:
        version: Decoded version record (empty until seen)
        info: Decoded info record with per-table counts (empty until seen)
        ignored: Number of discarded records per kind
    """

    def __init__(self) -> None:
        self.version: dict[str, str] = {}
        self.info: dict[str, str] = {}
        self.ignored: Counter = Counter()
        self._tables: dict[RecordKind, dict[int, DebugEntry]] = {
            kind: {} for kind in ENTRY_TYPES
        }
        self._handlers: dict[RecordKind, Callable[[RecordKind, dict[str, str], Optional[RecordLocation]], None]] = {
            RecordKind.VERSION: self._record_version,
            RecordKind.INFO: self._record_info,
            RecordKind.CSYM: self._record_ignored,
            RecordKind.FILE: self._record_indexed,
            RecordKind.LIB: self._record_ignored,
            RecordKind.LINE: self._record_ignored,
            RecordKind.MOD: self._record_ignored,
            RecordKind.SCOPE: self._record_indexed,
            RecordKind.SEG: self._record_indexed,
            RecordKind.SPAN: self._record_indexed,
            RecordKind.SYM: self._record_indexed,
            RecordKind.TYPE: self._record_ignored,
        }

    # =========================================================================
    # Ingest
    # =========================================================================

    def record(
        self,
        kind: Union[str, RecordKind],
        raw_fields: str,
        location: Optional[RecordLocation] = None,
    ) -> None:
        """
        Decode one record and merge it into the matching table.

        Args:
            kind: Record kind, as found at the start of the line
            raw_fields: The key=value,... part of the line
            location: Where the line came from, for error messages

        Raises:
            UnknownRecordKindError: If kind is not a known record kind
            MalformedRecordError: If an indexed record has no usable id
        """
        record_kind = kind if isinstance(kind, RecordKind) else RecordKind.from_name(kind)
        if record_kind is None:
            raise UnknownRecordKindError(str(kind), location=location)

        handler = self._handlers[record_kind]
        handler(record_kind, decode_fields(raw_fields), location)

    def _record_version(self, kind, fields, location) -> None:
        self.version = fields
        logger.info(self.describe_version())

        try:
            version = (parse_dec(fields.get("major", "")), parse_dec(fields.get("minor", "")))
        except ValueError:
            logger.warning(f"Unreadable debug file version: {fields}")
            return
        if version < MINIMUM_SUPPORTED_VERSION:
            logger.warning(
                f"Debug file version {version[0]}.{version[1]} is older than "
                f"{MINIMUM_SUPPORTED_VERSION[0]}.{MINIMUM_SUPPORTED_VERSION[1]}"
            )

    def _record_info(self, kind, fields, location) -> None:
        # info precedes the tables; start them afresh
        self.info = fields
        for table in self._tables.values():
            table.clear()
        logger.debug(f"Debug file info: {fields}")

    def _record_ignored(self, kind, fields, location) -> None:
        self.ignored[kind.value] += 1

    def _record_indexed(self, kind, fields, location) -> None:
        raw_id = fields.get("id")
        if raw_id is None:
            raise MalformedRecordError(f"{kind.value} record has no id", location=location)
        try:
            entry_id = parse_dec(raw_id)
        except ValueError:
            raise MalformedRecordError(
                f"{kind.value} record has a non-numeric id '{raw_id}'",
                location=location,
            ) from None
        if entry_id < 0:
            raise MalformedRecordError(
                f"{kind.value} record has a negative id {entry_id}",
                location=location,
            )

        table = self._tables[kind]
        if entry_id in table:
            logger.warning(f"Duplicate {kind.value} id {entry_id}, keeping the later record")
        table[entry_id] = ENTRY_TYPES[kind](id=entry_id, fields=fields, location=location)

    # =========================================================================
    # Lookups
    # =========================================================================

    def segment(self, segment_id: int, referrer: Optional[str] = None) -> Segment:
        return self._lookup(RecordKind.SEG, segment_id, MissingSegmentError, referrer)

    def span(self, span_id: int, referrer: Optional[str] = None) -> Span:
        return self._lookup(RecordKind.SPAN, span_id, MissingSpanError, referrer)

    def scope(self, scope_id: int, referrer: Optional[str] = None) -> Scope:
        return self._lookup(RecordKind.SCOPE, scope_id, MissingScopeError, referrer)

    def symbol(self, symbol_id: int, referrer: Optional[str] = None) -> Symbol:
        return self._lookup(RecordKind.SYM, symbol_id, MissingSymbolError, referrer)

    def file(self, file_id: int, referrer: Optional[str] = None) -> SourceFile:
        return self._lookup(RecordKind.FILE, file_id, MissingFileError, referrer)

    def _lookup(
        self,
        kind: RecordKind,
        entry_id: int,
        error: type[MissingEntryError],
        referrer: Optional[str],
    ):
        try:
            return self._tables[kind][entry_id]
        except KeyError:
            raise error(entry_id, referrer) from None

    # =========================================================================
    # Iteration and Reporting
    # =========================================================================

    def symbols(self) -> Iterator[Symbol]:
        """Iterate symbols in ascending id order."""
        table = self._tables[RecordKind.SYM]
        for symbol_id in sorted(table):
            yield table[symbol_id]

    def segments(self) -> Iterator[Segment]:
        table = self._tables[RecordKind.SEG]
        for segment_id in sorted(table):
            yield table[segment_id]

    def count(self, kind: Union[str, RecordKind]) -> int:
        """Number of stored (or, for ignored kinds, discarded) records."""
        record_kind = kind if isinstance(kind, RecordKind) else RecordKind(kind)
        if record_kind in self._tables:
            return len(self._tables[record_kind])
        return self.ignored[record_kind.value]

    def describe_version(self) -> str:
        if not self.version:
            return "CC65 Debug (unknown version)"
        return f"CC65 Debug v{self.version.get('major', '?')}.{self.version.get('minor', '?')}"

    def summary(self) -> dict[str, int]:
        """Per-kind record counts, stored and ignored."""
        counts = {kind.value: len(table) for kind, table in self._tables.items()}
        counts.update(self.ignored)
        return counts
