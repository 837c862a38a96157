"""
Debug File Reader
=================

Reads a ca65/ld65 debug file line by line and feeds every record into an
EntryStore. The file is read sequentially in a single pass; nothing is
resolved until the whole file has been consumed.
"""

from pathlib import Path
from typing import Iterable, Iterator, Optional, TextIO, Union
import io
import logging

from dbg2mlb.dbginfo.store import EntryStore
from dbg2mlb.errors import RecordLocation, SourceUnavailableError

logger = logging.getLogger(__name__)


def split_line(line: str) -> Optional[tuple[str, str]]:
    """
    Split a debug file line into (kind, field string).

    Returns None for blank lines. A line without a TAB is a record with
    an empty field string.

    Example:
        >>> split_line('span\\tid=0,seg=0,start=0,size=3\\n')
        ('span', 'id=0,seg=0,start=0,size=3')
    """
    line = line.rstrip("\r\n")
    if not line.strip():
        return None
    kind, _, fields = line.partition("\t")
    return kind.strip(), fields


def iter_records(lines: Iterable[str], filename: str = "<input>") -> Iterator[tuple[str, str, RecordLocation]]:
    """Yield (kind, field string, location) for every non-blank line."""
    for line_number, line in enumerate(lines, start=1):
        parts = split_line(line)
        if parts is None:
            continue
        kind, fields = parts
        yield kind, fields, RecordLocation(filename, line_number)


def read_stream(stream: TextIO, filename: str = "<input>", store: Optional[EntryStore] = None) -> EntryStore:
    """
    Populate a store from an open text stream.

    Args:
        stream: Text stream positioned at the start of the debug file
        filename: Name used in error messages
        store: Existing store to add to (a new one is created if omitted)

    Returns:
        The populated store
    """
    if store is None:
        store = EntryStore()

    for kind, fields, location in iter_records(stream, filename):
        store.record(kind, fields, location)

    logger.debug(f"Read {filename}: {store.summary()}")
    return store


def read_string(text: str, filename: str = "<input>") -> EntryStore:
    """Populate a new store from debug file text held in memory."""
    return read_stream(io.StringIO(text), filename)


def read_debug_file(filepath: Union[str, Path]) -> EntryStore:
    """
    Read a debug file from disk.

    Args:
        filepath: Path to the .dbg file

    Returns:
        The populated store

    Raises:
        SourceUnavailableError: If the file cannot be opened or read
        DebugFileError: If the file content is invalid
    """
    filepath = Path(filepath)
    logger.debug(f"Reading debug file {filepath}")

    try:
        stream = filepath.open("r", encoding="utf-8", errors="replace")
    except OSError as e:
        raise SourceUnavailableError(str(filepath), e.strerror or str(e)) from e

    with stream:
        try:
            return read_stream(stream, filepath.name)
        except OSError as e:
            raise SourceUnavailableError(str(filepath), e.strerror or str(e)) from e
