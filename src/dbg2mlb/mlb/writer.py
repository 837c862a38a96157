"""
Mesen Label File Writer
=======================

Formats resolved labels as Mesen .mlb lines and runs the full conversion
from debug file to label file.

MLB Line Format
---------------
    <type>:<hex address>[-<hex end>]:<name>[:<comment>]

For example:

    R:10:player_x
    G:2000:PPUCTRL
    P:3f0:nmi_handler

Addresses are lowercase hex without padding. Every line is built before
the output file is opened, so a failed conversion never leaves a partial
label file behind.
"""

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, TextIO, Union
import logging

from dbg2mlb.dbginfo.reader import read_debug_file
from dbg2mlb.dbginfo.store import EntryStore
from dbg2mlb.errors import SinkUnavailableError
from dbg2mlb.mlb.classifier import MemoryRegion, ResolvedSymbol, SymbolClassifier
from dbg2mlb.mlb.config import LabelConfig

logger = logging.getLogger(__name__)


def format_label(label: ResolvedSymbol) -> str:
    """
    Format one label as an .mlb line (without the newline).

    Example:
        >>> format_label(ResolvedSymbol(MemoryRegion.REGISTER, 0x2010, "foo"))
        'G:2010:foo'
    """
    address = f"{label.value:x}"
    if label.value_end is not None:
        address = f"{address}-{label.value_end:x}"

    line = f"{label.region.tag}:{address}:{label.name or ''}"
    if label.comment is not None:
        line += f":{label.comment}"
    return line


@dataclass
class ConversionResult:
    """
    Summary of a finished conversion.

    Attributes:
        lines: The .mlb lines, without newlines
        symbols_read: Number of symbol records in the debug file
        regions: Number of labels written per region
        version: Debug file version banner
    """
    lines: list[str] = field(default_factory=list)
    symbols_read: int = 0
    regions: Counter = field(default_factory=Counter)
    version: str = ""

    @property
    def labels_written(self) -> int:
        return len(self.lines)

    def describe(self) -> str:
        parts = [
            f"{self.regions[region]} {region.get_description()}"
            for region in MemoryRegion
            if self.regions[region]
        ]
        detail = f" ({', '.join(parts)})" if parts else ""
        return f"{self.labels_written} labels from {self.symbols_read} symbols{detail}"


def generate_labels(store: EntryStore, config: Optional[LabelConfig] = None) -> ConversionResult:
    """
    Resolve every label symbol in a store and format the .mlb lines.

    Raises:
        ResolutionError: If any label cannot be resolved
    """
    classifier = SymbolClassifier(store, config)
    result = ConversionResult(
        symbols_read=store.count("sym"),
        version=store.describe_version(),
    )

    for label in classifier.classify_all():
        result.lines.append(format_label(label))
        result.regions[label.region] += 1

    return result


def write_lines(lines: Iterable[str], stream: TextIO) -> None:
    for line in lines:
        stream.write(line + "\n")


def write_labels(lines: Iterable[str], filepath: Union[str, Path]) -> None:
    """
    Write .mlb lines to a file.

    Raises:
        SinkUnavailableError: If the file cannot be opened or written
    """
    filepath = Path(filepath)
    try:
        with filepath.open("w", encoding="utf-8", newline="\n") as f:
            write_lines(lines, f)
    except OSError as e:
        raise SinkUnavailableError(str(filepath), e.strerror or str(e)) from e
    logger.debug(f"Wrote {filepath}")


def convert_file(
    input_path: Union[str, Path],
    output_path: Union[str, Path, None],
    config: Optional[LabelConfig] = None,
) -> ConversionResult:
    """
    Convert a debug file to a label file.

    Args:
        input_path: The ld65 .dbg file
        output_path: The .mlb file to write, or None to only build the lines
        config: Conversion settings (defaults if omitted)

    Returns:
        The conversion summary, including all lines

    Raises:
        Dbg2MlbError: On any failure; the output file is not written
    """
    store = read_debug_file(input_path)
    result = generate_labels(store, config)

    if output_path is not None:
        write_labels(result.lines, output_path)

    logger.info(f"Converted {Path(input_path).name}: {result.describe()}")
    return result
