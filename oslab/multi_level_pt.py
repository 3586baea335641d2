"""A simulated RISC-V SV39 three-level page table.

A 39-bit virtual address holds three 9-bit page number fields, VPN[2],
VPN[1] and VPN[0], above a 12-bit page offset. Page-table pages live in a
simulated physical memory keyed by physical page number.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from oslab.pte_flags import PPN_SHIFT, PTE_R, PTE_V, PTE_W, PTE_X, is_leaf, is_valid

__all__ = [
    "PAGE_SIZE",
    "PT_ENTRIES",
    "PTE_R",
    "PTE_V",
    "PTE_W",
    "PTE_X",
    "PageFault",
    "PageTableNode",
    "Sv39PageTable",
]

PAGE_SIZE = 4096
PT_ENTRIES = 512

_PAGE_SHIFT = 12
_VPN_BITS = 9
_VPN_MASK = PT_ENTRIES - 1
_SUPERPAGE_SIZE = PAGE_SIZE * PT_ENTRIES
_ROOT_PPN = 0x80000


class PageFault(Exception):
    """Raised when a page table walk finds no valid mapping."""

    def __init__(self, va: int) -> None:
        super().__init__(f"page fault at virtual address {va:#x}")
        self.va = va


@dataclass
class PageTableNode:
    """One page-table page of 512 entries."""

    entries: list[int] = field(default_factory=lambda: [0] * PT_ENTRIES)


class Sv39PageTable:
    """Three-level page table with a bump allocator for table pages."""

    def __init__(self) -> None:
        self.root_ppn = _ROOT_PPN
        self._next_ppn = _ROOT_PPN + 1
        self._nodes: dict[int, PageTableNode] = {self.root_ppn: PageTableNode()}

    def _alloc_node(self) -> int:
        ppn = self._next_ppn
        self._next_ppn += 1
        self._nodes[ppn] = PageTableNode()
        return ppn

    @staticmethod
    def extract_vpn(va: int, level: int) -> int:
        """Return the 9-bit page number field of ``va`` for ``level`` (2, 1 or 0)."""
        return (va >> (_PAGE_SHIFT + level * _VPN_BITS)) & _VPN_MASK

    def _node(self, ppn: int) -> PageTableNode:
        try:
            return self._nodes[ppn]
        except KeyError:
            raise LookupError(f"no page table at physical page {ppn:#x}") from None

    def _table_for(self, va: int, leaf_level: int) -> PageTableNode:
        """Walk down to the table holding the leaf entry, creating tables as needed."""
        node_ppn = self.root_ppn
        for level in range(2, leaf_level, -1):
            node = self._node(node_ppn)
            index = self.extract_vpn(va, level)
            pte = node.entries[index]
            if is_valid(pte):
                node_ppn = pte >> PPN_SHIFT
            else:
                node_ppn = self._alloc_node()
                node.entries[index] = (node_ppn << PPN_SHIFT) | PTE_V
        return self._node(node_ppn)

    def map_page(self, va: int, pa: int, flags: int) -> None:
        """Map the 4 KiB page holding ``va`` to the one holding ``pa``."""
        table = self._table_for(va, 0)
        table.entries[self.extract_vpn(va, 0)] = ((pa >> _PAGE_SHIFT) << PPN_SHIFT) | flags

    def map_superpage(self, va: int, pa: int, flags: int) -> None:
        """Map a 2 MiB superpage with a leaf entry at level 1.

        Both ``va`` and ``pa`` must be 2 MiB aligned.
        """
        if va % _SUPERPAGE_SIZE:
            raise ValueError("va must be 2MB-aligned")
        if pa % _SUPERPAGE_SIZE:
            raise ValueError("pa must be 2MB-aligned")
        table = self._table_for(va, 1)
        table.entries[self.extract_vpn(va, 1)] = ((pa >> _PAGE_SHIFT) << PPN_SHIFT) | flags

    def translate(self, va: int) -> int:
        """Walk the table and return the physical address for ``va``.

        Raises :class:`PageFault` if no valid leaf entry maps it.
        """
        node_ppn = self.root_ppn
        for level in (2, 1, 0):
            node = self._nodes.get(node_ppn)
            if node is None:
                raise PageFault(va)
            pte = node.entries[self.extract_vpn(va, level)]
            if not is_valid(pte):
                raise PageFault(va)
            if is_leaf(pte):
                offset_mask = (1 << (_PAGE_SHIFT + level * _VPN_BITS)) - 1
                return ((pte >> PPN_SHIFT) << _PAGE_SHIFT) | (va & offset_mask)
            node_ppn = pte >> PPN_SHIFT
        raise PageFault(va)