import pytest

from oslab.multi_level_pt import (
    PTE_R,
    PTE_V,
    PTE_W,
    PageFault,
    PageTableNode,
    Sv39PageTable,
)


def test_extract_vpn():
    va = 0x7FFFFFF000
    assert Sv39PageTable.extract_vpn(va, 2) == 0x1FF
    assert Sv39PageTable.extract_vpn(va, 1) == 0x1FF
    assert Sv39PageTable.extract_vpn(va, 0) == 0x1FF


def test_extract_vpn_simple():
    va = 0x1000
    assert Sv39PageTable.extract_vpn(va, 2) == 0
    assert Sv39PageTable.extract_vpn(va, 1) == 0
    assert Sv39PageTable.extract_vpn(va, 0) == 1


def test_extract_vpn_level2():
    va = 0x40000000
    assert Sv39PageTable.extract_vpn(va, 2) == 1
    assert Sv39PageTable.extract_vpn(va, 1) == 0
    assert Sv39PageTable.extract_vpn(va, 0) == 0


def test_map_and_translate_single():
    pt = Sv39PageTable()
    pt.map_page(0x1000, 0x80001000, PTE_V | PTE_R)
    assert pt.translate(0x1000) == 0x80001000


def test_translate_with_offset():
    pt = Sv39PageTable()
    pt.map_page(0x2000, 0x90000000, PTE_V | PTE_R | PTE_W)
    assert pt.translate(0x2ABC) == 0x90000ABC


def test_translate_page_fault():
    pt = Sv39PageTable()
    with pytest.raises(PageFault) as info:
        pt.translate(0x1000)
    assert info.value.va == 0x1000


def test_multiple_mappings():
    pt = Sv39PageTable()
    pt.map_page(0x0000_1000, 0x8000_1000, PTE_V | PTE_R)
    pt.map_page(0x0000_2000, 0x8000_5000, PTE_V | PTE_R | PTE_W)
    pt.map_page(0x0040_0000, 0x9000_0000, PTE_V | PTE_R)
    assert pt.translate(0x1234) == 0x80001234
    assert pt.translate(0x2000) == 0x80005000
    assert pt.translate(0x400100) == 0x90000100


def test_map_overwrite():
    pt = Sv39PageTable()
    pt.map_page(0x1000, 0x80001000, PTE_V | PTE_R)
    assert pt.translate(0x1000) == 0x80001000
    pt.map_page(0x1000, 0x90002000, PTE_V | PTE_R)
    assert pt.translate(0x1000) == 0x90002000


def test_superpage_mapping():
    pt = Sv39PageTable()
    pt.map_superpage(0x200000, 0x80200000, PTE_V | PTE_R | PTE_W)
    assert pt.translate(0x200000) == 0x80200000
    assert pt.translate(0x200ABC) == 0x80200ABC
    assert pt.translate(0x2FF000) == 0x802FF000


def test_superpage_and_normal_coexist():
    pt = Sv39PageTable()
    pt.map_superpage(0x0, 0x80000000, PTE_V | PTE_R)
    pt.map_page(0x40000000, 0x90001000, PTE_V | PTE_R)
    assert pt.translate(0x100) == 0x80000100
    assert pt.translate(0x40000000) == 0x90001000


def test_superpage_requires_alignment():
    pt = Sv39PageTable()
    with pytest.raises(ValueError, match="va must be 2MB-aligned"):
        pt.map_superpage(0x1000, 0x80200000, PTE_V | PTE_R)
    with pytest.raises(ValueError, match="pa must be 2MB-aligned"):
        pt.map_superpage(0x200000, 0x80201000, PTE_V | PTE_R)


def test_non_leaf_at_level_zero_faults():
    pt = Sv39PageTable()
    pt.map_page(0x3000, 0x80003000, PTE_V)
    with pytest.raises(PageFault):
        pt.translate(0x3000)


def test_unmapped_neighbour_faults():
    pt = Sv39PageTable()
    pt.map_page(0x1000, 0x80001000, PTE_V | PTE_R)
    with pytest.raises(PageFault):
        pt.translate(0x2000)


def test_root_ppn_and_empty_node():
    pt = Sv39PageTable()
    assert pt.root_ppn == 0x80000
    node = PageTableNode()
    assert len(node.entries) == 512
    assert set(node.entries) == {0}