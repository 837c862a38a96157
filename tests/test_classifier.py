"""
Symbol Classifier Tests
=======================

Tests for region classification, PRG-ROM offset arithmetic and label
filtering.

Test Categories
---------------
1. Region boundaries for every part of the NES address map
2. Label filtering (only type=lab symbols are written)
3. PRG-ROM placement through the resolver
4. Inconsistent input (ROM labels outside the ROM image)
5. Address ranges
"""

import pytest

from dbg2mlb.dbginfo import read_string
from dbg2mlb.errors import (
    InconsistentRomSymbolError,
    MissingSpanError,
)
from dbg2mlb.mlb.classifier import (
    MemoryRegion,
    ResolvedSymbol,
    SymbolClassifier,
    classify_address,
)
from dbg2mlb.mlb.config import ExpansionRam, LabelConfig


def store_from(*lines: str):
    return read_string("\n".join(lines) + "\n")


def rom_store(value: int, start: str = "0x8000", ooffs: str = "16"):
    """One label in a single ROM segment."""
    return store_from(
        f"seg\tid=0,name=\"CODE\",start={start},size=0x4000,ooffs={ooffs}",
        "span\tid=0,seg=0,start=0,size=64",
        "scope\tid=0,name=\"\",span=0",
        f"sym\tid=0,name=\"label\",scope=0,val=0x{value:04X},type=lab",
    )


# =============================================================================
# Region Boundaries
# =============================================================================

class TestClassifyAddress:
    """Test classify_address() across the address map."""

    @pytest.mark.parametrize("value,region", [
        (0x0000, MemoryRegion.INTERNAL_RAM),
        (0x07FF, MemoryRegion.INTERNAL_RAM),
        (0x1FFF, MemoryRegion.INTERNAL_RAM),
        (0x2000, MemoryRegion.REGISTER),
        (0x4017, MemoryRegion.REGISTER),
        (0x5FFF, MemoryRegion.REGISTER),
        (0x6000, MemoryRegion.WORK_RAM),
        (0x7FFF, MemoryRegion.WORK_RAM),
        (0x8000, MemoryRegion.PRG_ROM),
        (0xFFFF, MemoryRegion.PRG_ROM),
    ])
    def test_work_ram_mode(self, value, region):
        assert classify_address(value, ExpansionRam.WORK_RAM) is region

    @pytest.mark.parametrize("value", [0x6000, 0x6ABC, 0x7FFF])
    def test_save_ram_mode(self, value):
        assert classify_address(value, ExpansionRam.SAVE_RAM) is MemoryRegion.SAVE_RAM

    @pytest.mark.parametrize("value", [0x1FFF, 0x2000, 0x8000])
    def test_mode_only_affects_expansion_window(self, value):
        assert classify_address(value, ExpansionRam.SAVE_RAM) is classify_address(value, ExpansionRam.WORK_RAM)

    def test_region_tags(self):
        assert [r.tag for r in MemoryRegion] == ["P", "R", "S", "W", "G"]


# =============================================================================
# Label Filtering
# =============================================================================

class TestLabelFiltering:
    """Only type=lab symbols produce labels."""

    @pytest.mark.parametrize("symbol_type", ["equ", "imp", ""])
    def test_non_labels_return_none(self, symbol_type):
        store = store_from(f"sym\tid=0,name=\"x\",scope=0,val=0x8000,type={symbol_type}")
        assert SymbolClassifier(store).classify(store.symbol(0)) is None

    def test_missing_type_returns_none(self):
        store = store_from("sym\tid=0,name=\"x\",scope=0,val=0x10")
        assert SymbolClassifier(store).classify(store.symbol(0)) is None

    def test_equate_in_rom_range_is_not_resolved(self):
        """An equate with a dangling scope is dropped before any lookup."""
        store = store_from("sym\tid=0,name=\"BIG\",scope=99,val=0xC000,type=equ")
        assert SymbolClassifier(store).classify(store.symbol(0)) is None

    def test_classify_all_skips_non_labels(self, sample_store):
        names = [label.name for label in SymbolClassifier(sample_store).classify_all()]
        assert "PPUCTRL" not in names
        assert names == ["player_x", "reset", "@loop", "save_slot", "nmi", "PPUMASK_REG"]


# =============================================================================
# Non-ROM Regions
# =============================================================================

class TestNonRomLabels:
    """RAM and register labels keep their declared value."""

    def test_internal_ram(self, sample_store):
        label = SymbolClassifier(sample_store).classify(sample_store.symbol(0))
        assert label == ResolvedSymbol(
            region=MemoryRegion.INTERNAL_RAM, value=0x10, name="player_x", symbol_id=0,
        )

    def test_expansion_ram_follows_config(self, sample_store):
        work = SymbolClassifier(sample_store).classify(sample_store.symbol(4))
        save = SymbolClassifier(
            sample_store, LabelConfig(expansion_ram=ExpansionRam.SAVE_RAM)
        ).classify(sample_store.symbol(4))
        assert work.region is MemoryRegion.WORK_RAM
        assert save.region is MemoryRegion.SAVE_RAM
        assert work.value == save.value == 0x6000

    def test_register_skips_segment_lookup(self):
        """The example from the ld65 docs: a register label in a non-ROM segment."""
        store = store_from(
            "info\tsym=1",
            "sym\tid=0,name=\"foo\",addrsize=absolute,scope=0,val=2010,type=lab",
            "scope\tid=0,span=0",
            "span\tid=0,seg=0,start=0,size=10",
            "seg\tid=0,start=2000,size=10",
        )
        label = SymbolClassifier(store).classify(store.symbol(0))
        assert label.region is MemoryRegion.REGISTER
        assert label.value == 0x2010

    def test_ram_label_with_dangling_scope(self):
        """RAM labels never touch the scope table."""
        store = store_from("sym\tid=0,name=\"tmp\",scope=42,val=0x0300,type=lab")
        label = SymbolClassifier(store).classify(store.symbol(0))
        assert label.value == 0x300


# =============================================================================
# PRG-ROM Placement
# =============================================================================

class TestRomLabels:
    """PRG-ROM labels become offsets into the ROM image."""

    def test_round_trip_example(self):
        """0x8010 - 0x10 + 16 - 0x8000 = 0x10"""
        store = rom_store(0x8010)
        label = SymbolClassifier(store, LabelConfig(base_offset=0x10)).classify(store.symbol(0))
        assert label.region is MemoryRegion.PRG_ROM
        assert label.value == 0x10

    def test_base_offset_zero(self):
        store = rom_store(0x8010)
        label = SymbolClassifier(store, LabelConfig(base_offset=0)).classify(store.symbol(0))
        assert label.value == 0x20

    def test_second_bank(self):
        """A bank at $C000 written after 16KB of PRG-ROM."""
        store = rom_store(0xC123, start="0xC000", ooffs="16400")
        label = SymbolClassifier(store).classify(store.symbol(0))
        assert label.value == 0x4123

    def test_local_label_uses_parent_scope(self, sample_store):
        label = SymbolClassifier(sample_store).classify(sample_store.symbol(3))
        assert label.name == "@loop"
        assert label.value == 0x14

    def test_multi_span_scope(self, sample_store):
        label = SymbolClassifier(sample_store).classify(sample_store.symbol(5))
        assert label.value == 0x20

    def test_segment_not_in_image(self):
        store = store_from(
            "seg\tid=0,name=\"RAMCODE\",start=0x8000,size=0x100,type=rw",
            "span\tid=0,seg=0,start=0,size=16",
            "scope\tid=0,span=0",
            "sym\tid=0,name=\"trampoline\",scope=0,val=0x8004,type=lab",
        )
        with pytest.raises(InconsistentRomSymbolError, match="not in the ROM image") as exc:
            SymbolClassifier(store).classify(store.symbol(0))
        assert exc.value.name == "trampoline"
        assert exc.value.value == 0x8004

    def test_negative_offset(self):
        """A headerless image with the default iNES base offset."""
        store = rom_store(0x8000, ooffs="0")
        with pytest.raises(InconsistentRomSymbolError, match="negative ROM offset"):
            SymbolClassifier(store).classify(store.symbol(0))

    def test_dangling_span_is_reported(self):
        store = store_from(
            "scope\tid=0,span=3",
            "sym\tid=0,name=\"x\",scope=0,val=0x8000,type=lab",
        )
        with pytest.raises(MissingSpanError):
            SymbolClassifier(store).classify(store.symbol(0))


# =============================================================================
# Ranges and Comments
# =============================================================================

class TestRangesAndComments:

    def test_ranges_disabled_by_default(self, sample_store):
        label = SymbolClassifier(sample_store).classify(sample_store.symbol(2))
        assert label.value_end is None

    def test_rom_range(self, sample_store):
        config = LabelConfig(emit_ranges=True)
        label = SymbolClassifier(sample_store, config).classify(sample_store.symbol(2))
        assert (label.value, label.value_end) == (0x10, 0x2F)

    def test_ram_range(self, sample_store):
        config = LabelConfig(emit_ranges=True)
        label = SymbolClassifier(sample_store, config).classify(sample_store.symbol(4))
        assert (label.value, label.value_end) == (0x6000, 0x6001)

    def test_single_byte_has_no_range(self, sample_store):
        config = LabelConfig(emit_ranges=True)
        label = SymbolClassifier(sample_store, config).classify(sample_store.symbol(0))
        assert label.value_end is None

    def test_comment_carried(self):
        store = store_from("sym\tid=0,name=\"frame\",val=0x20,type=lab,comment=\"vblank count\"")
        label = SymbolClassifier(store).classify(store.symbol(0))
        assert label.comment == "vblank count"
