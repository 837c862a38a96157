"""
dbg2mlb Error Hierarchy
=======================

This module defines the exception hierarchy for the whole converter.
All exceptions inherit from Dbg2MlbError, allowing callers to catch every
conversion failure with a single except clause.

Exception Hierarchy
-------------------
Dbg2MlbError (base)
├── DebugFileError (debug file content)
│   ├── UnknownRecordKindError - line starts with an unrecognized kind
│   └── MalformedRecordError - missing id, bad number, empty span list
├── ResolutionError (symbol address resolution)
│   ├── UnresolvedScopeError - symbol has neither scope nor parent scope
│   ├── MissingEntryError - reference to an id that was never defined
│   │   ├── MissingSegmentError
│   │   ├── MissingSpanError
│   │   ├── MissingScopeError
│   │   ├── MissingSymbolError
│   │   └── MissingFileError
│   └── InconsistentRomSymbolError - PRG-ROM label outside the ROM image
├── ConversionIOError (file access)
│   ├── SourceUnavailableError - debug file cannot be read
│   └── SinkUnavailableError - label file cannot be written
└── InvalidConfigurationError - bad base offset or expansion RAM mode

Every conversion error is fatal. The converter either writes a complete
label file or reports exactly one of these errors and writes nothing.

Error messages follow this format when the offending record is known:
    cart.dbg:42: error: span 7 referenced by scope 3 is not defined
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Dbg2MlbError(Exception):
    """
    Base exception for all dbg2mlb errors.

        try:
            convert_file("cart.dbg", "cart.mlb")
        except Dbg2MlbError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Record Location Tracking
# =============================================================================

@dataclass(frozen=True)
class RecordLocation:
    """
    Position of a record inside a debug file.

    Attributes:
        filename: Name of the debug file (or "<input>" for string input)
        line: Line number (1-indexed)
    """
    filename: str
    line: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}"


class LocatedError(Dbg2MlbError):
    """
    Error that can point at the debug file record it came from.

    Attributes:
        message: The error description
        location: Record that triggered the error (optional)
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[RecordLocation] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Debug File Exceptions
# =============================================================================

class DebugFileError(LocatedError):
    """Base exception for problems with debug file content."""
    pass


class UnknownRecordKindError(DebugFileError):
    """
    A line names a record kind the converter does not know.

    ca65/ld65 may add record kinds in future versions. Known but unused
    kinds are accepted silently, so this error only fires for kinds that
    are genuinely unrecognized (usually a file that is not a debug file).
    """

    def __init__(
        self,
        kind: str,
        location: Optional[RecordLocation] = None,
    ):
        self.kind = kind
        super().__init__(
            f"unknown record kind '{kind}'",
            location=location,
            hint="is this an ld65 debug file (ld65 --dbgfile)?",
        )


class MalformedRecordError(DebugFileError):
    """
    A record is missing a field resolution needs, or a field is unparsable.

    Examples:
        - sym record without an id
        - seg record whose start is not a hex number
        - scope record with an empty span list
    """
    pass


# =============================================================================
# Resolution Exceptions
# =============================================================================

class ResolutionError(Dbg2MlbError):
    """Base exception for failures while resolving symbol addresses."""
    pass


class UnresolvedScopeError(ResolutionError):
    """
    A symbol has no scope of its own and no parent to inherit one from.
    """

    def __init__(self, symbol_id: int, name: Optional[str] = None, reason: str = ""):
        self.symbol_id = symbol_id
        self.name = name
        label = f"'{name}' (id {symbol_id})" if name else f"id {symbol_id}"
        message = f"cannot determine scope of symbol {label}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MissingEntryError(ResolutionError):
    """
    Reference to a table entry that was never defined.

    Attributes:
        kind: Record kind of the missing entry ("seg", "span", ...)
        entry_id: The dangling id
        referrer: Description of what referenced it (optional)
    """

    kind = "entry"

    def __init__(self, entry_id: int, referrer: Optional[str] = None):
        self.entry_id = entry_id
        self.referrer = referrer
        message = f"{self.kind} {entry_id} is not defined"
        if referrer:
            message = f"{self.kind} {entry_id} referenced by {referrer} is not defined"
        super().__init__(message)


class MissingSegmentError(MissingEntryError):
    kind = "seg"


class MissingSpanError(MissingEntryError):
    kind = "span"


class MissingScopeError(MissingEntryError):
    kind = "scope"


class MissingSymbolError(MissingEntryError):
    kind = "sym"


class MissingFileError(MissingEntryError):
    kind = "file"


class InconsistentRomSymbolError(ResolutionError):
    """
    A label in the PRG-ROM address range cannot be placed in the ROM image.

    Raised when the segment backing the label has no output file offset
    (ooffs), i.e. it was never written to the ROM file, or when the image
    offset arithmetic produces a negative position.
    """

    def __init__(self, name: Optional[str], value: int, reason: str):
        self.name = name
        self.value = value
        self.reason = reason
        label = f"'{name}'" if name else "<unnamed>"
        super().__init__(f"PRG-ROM label {label} at ${value:04X} {reason}")


# =============================================================================
# I/O Exceptions
# =============================================================================

class ConversionIOError(Dbg2MlbError):
    """Base exception for input/output failures."""

    action = "cannot access"

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{self.action} '{path}': {reason}")


class SourceUnavailableError(ConversionIOError):
    """The debug file cannot be opened or read. Nothing is processed."""

    action = "cannot read debug file"


class SinkUnavailableError(ConversionIOError):
    """The label file cannot be opened or written after a successful parse."""

    action = "cannot write label file"


# =============================================================================
# Configuration Exceptions
# =============================================================================

class InvalidConfigurationError(Dbg2MlbError):
    """
    Invalid conversion settings.

    Raised when the base offset is negative or not a number, or the
    expansion RAM mode is not one of W (Work RAM) or S (Save RAM).
    """
    pass
