"""
Shared Test Fixtures
====================

A small but realistic ld65 debug file used across the test modules.

Memory layout of the sample:
    seg 0 ZEROPAGE  $0000  RAM, not in the ROM image
    seg 1 HEADER    $0000  iNES header, ooffs 0
    seg 2 CODE      $8000  PRG-ROM, ooffs 16
    seg 3 SRAM      $6000  cartridge RAM, not in the ROM image

Scope 0 covers spans 3, 1 and 0, written out of order. Span 0 is in CODE,
so every scope 0 label in PRG-ROM is placed relative to CODE.
"""

import pytest

from dbg2mlb.dbginfo import EntryStore, read_string


SAMPLE_DBG = "\n".join([
    'version\tmajor=2,minor=0',
    'info\tcsym=0,file=2,lib=0,line=3,mod=1,scope=2,seg=4,span=4,sym=7,type=1',
    'file\tid=0,name="main.s",size=1234,mtime=0x5F3E2A10,mod=0',
    'file\tid=1,name="nes.inc",size=321,mtime=0x5F3E2A10,mod=0',
    'line\tid=0,file=0,line=10,span=0',
    'line\tid=1,file=0,line=11,span=2',
    'line\tid=2,file=0,line=12',
    'mod\tid=0,name="main.o",file=0',
    'seg\tid=0,name="ZEROPAGE",start=0x000000,size=0x0010,addrsize=zeropage,type=rw',
    'seg\tid=1,name="HEADER",start=0x000000,size=0x0010,addrsize=absolute,type=ro,oname="cart.nes",ooffs=0',
    'seg\tid=2,name="CODE",start=0x008000,size=0x0100,addrsize=absolute,type=ro,oname="cart.nes",ooffs=16',
    'seg\tid=3,name="SRAM",start=0x006000,size=0x0100,addrsize=absolute,type=rw',
    'span\tid=0,seg=2,start=0,size=16',
    'span\tid=1,seg=0,start=0,size=4',
    'span\tid=2,seg=2,start=16,size=32',
    'span\tid=3,seg=3,start=0,size=2',
    'scope\tid=0,name="",mod=0,size=54,span=3+1+0',
    'scope\tid=1,name="reset",mod=0,type=scope,size=32,parent=0,span=2',
    'sym\tid=0,name="player_x",addrsize=zeropage,size=1,scope=0,def=1,val=0x10,seg=0,type=lab',
    'sym\tid=1,name="PPUCTRL",addrsize=absolute,scope=0,def=2,val=0x2000,type=equ',
    'sym\tid=2,name="reset",addrsize=absolute,size=32,scope=1,def=3,val=0x8010,seg=2,type=lab',
    'sym\tid=3,name="@loop",addrsize=absolute,parent=2,def=4,val=0x8014,seg=2,type=lab',
    'sym\tid=4,name="save_slot",addrsize=absolute,size=2,scope=0,def=5,val=0x6000,seg=3,type=lab',
    'sym\tid=5,name="nmi",addrsize=absolute,scope=0,def=6,val=0x8020,seg=2,type=lab',
    'sym\tid=6,name="PPUMASK_REG",addrsize=absolute,scope=0,def=7,val=0x2001,type=lab',
    'type\tid=0,val="800920"',
    '',
])

# Expected .mlb output for SAMPLE_DBG with default settings
SAMPLE_MLB_LINES = [
    "R:10:player_x",
    "P:10:reset",
    "P:14:@loop",
    "W:6000:save_slot",
    "P:20:nmi",
    "G:2001:PPUMASK_REG",
]


@pytest.fixture
def sample_dbg_text() -> str:
    return SAMPLE_DBG


@pytest.fixture
def sample_store() -> EntryStore:
    return read_string(SAMPLE_DBG, "sample.dbg")


@pytest.fixture
def sample_dbg_file(tmp_path):
    """Write the sample debug file to a temporary directory."""
    path = tmp_path / "cart.dbg"
    path.write_text(SAMPLE_DBG)
    return path


@pytest.fixture
def sample_mlb_lines() -> list[str]:
    return list(SAMPLE_MLB_LINES)
