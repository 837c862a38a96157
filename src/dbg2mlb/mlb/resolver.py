"""
Symbol Address Resolver
=======================

Finds the segment a symbol physically lives in, so that a runtime address
can be translated to a position in the assembled ROM image.

Resolution walks three levels of indirection:

    symbol --scope (or parent's scope)--> scope
    scope  --span list----------------->  span
    span   --seg------------------------>  segment

A scope can cover several spans, possibly in different segments. The
span with the numerically smallest id is chosen, whatever order the
span list is written in.

Note: the chosen span is not checked to contain the symbol's value. For
scopes that straddle segments with different bases this can pick the
wrong segment.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from dbg2mlb.dbginfo.records import Scope, Symbol
from dbg2mlb.dbginfo.store import EntryStore
from dbg2mlb.errors import UnresolvedScopeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageOffset:
    """
    Placement of a segment in the output image.

    Attributes:
        base: The segment's start address in the CPU address space
        offset: The segment's file offset in the output image (ooffs)
        segment_id: Id of the segment that was chosen
    """
    base: int
    offset: int
    segment_id: int

    def to_image(self, address: int) -> int:
        """Translate a runtime address inside this segment to an image offset."""
        return address - self.base + self.offset


class AddressResolver:
    """
    Resolves symbols to the segment that backs them.

    The resolver only reads from the store.

    Usage:
        resolver = AddressResolver(store)
        placement = resolver.resolve_segment(symbol)
        if placement is not None:
            file_offset = placement.to_image(symbol.value)
    """

    def __init__(self, store: EntryStore):
        self.store = store

    def resolve_scope_id(self, symbol: Symbol) -> int:
        """
        Return the scope id of a symbol, inheriting from its parent if needed.

        Raises:
            UnresolvedScopeError: If neither the symbol nor its parent has a scope
            MissingSymbolError: If the parent id does not exist
        """
        scope_id = symbol.scope_id
        if scope_id is not None:
            return scope_id

        parent_id = symbol.parent_id
        if parent_id is None:
            raise UnresolvedScopeError(symbol.id, symbol.name, "no scope or parent field")

        parent = self.store.symbol(parent_id, referrer=symbol.describe())
        scope_id = parent.scope_id
        if scope_id is None:
            raise UnresolvedScopeError(
                symbol.id, symbol.name, f"parent {parent.describe()} has no scope"
            )
        return scope_id

    @staticmethod
    def select_span_id(scope: Scope) -> int:
        """Pick the lowest span id the scope covers."""
        return min(scope.span_ids)

    def resolve_segment(self, symbol: Symbol) -> Optional[ImageOffset]:
        """
        Find the segment backing a symbol.

        Args:
            symbol: The symbol to resolve

        Returns:
            The segment's base and image offset, or None if the segment is
            not part of the output image (it has no ooffs field)

        Raises:
            UnresolvedScopeError: If the symbol's scope cannot be determined
            MissingEntryError: If any scope, span or segment id is dangling
        """
        referrer = symbol.describe()
        scope_id = self.resolve_scope_id(symbol)
        scope = self.store.scope(scope_id, referrer=referrer)

        span_id = self.select_span_id(scope)
        span = self.store.span(span_id, referrer=f"scope {scope_id}")

        segment_id = span.segment_id
        segment = self.store.segment(segment_id, referrer=f"span {span_id}")

        if not segment.has_image_offset:
            logger.debug(
                f"{referrer}: scope {scope_id} -> span {span_id} -> seg {segment_id} "
                f"(not in output image)"
            )
            return None

        placement = ImageOffset(
            base=segment.start,
            offset=segment.output_offset,
            segment_id=segment_id,
        )
        logger.debug(
            f"{referrer}: scope {scope_id} -> span {span_id} -> seg {segment_id} "
            f"(start ${placement.base:04X}, ooffs {placement.offset})"
        )
        return placement
