"""Address translation through a simple single-level page table.

A 32-bit virtual address splits into a 20-bit virtual page number (the
high bits) and a 12-bit offset within a 4 KiB page. The page table maps
virtual page numbers to physical page numbers.
"""

from __future__ import annotations

from dataclasses import dataclass

PAGE_SIZE = 4096
PAGE_OFFSET_BITS = 12

PTE_VALID = 1 << 0
PTE_READ = 1 << 1
PTE_WRITE = 1 << 2

_OFFSET_MASK = (1 << PAGE_OFFSET_BITS) - 1
_U32_LIMIT = 1 << 32


class PageFault(Exception):
    """Raised when a virtual address falls on an unmapped or invalid page."""

    def __init__(self, va: int) -> None:
        super().__init__(f"page fault at virtual address {va:#x}")
        self.va = va


class PermissionDenied(Exception):
    """Raised when a write hits a page that is not writable."""

    def __init__(self, va: int) -> None:
        super().__init__(f"write to read-only page at virtual address {va:#x}")
        self.va = va


@dataclass(frozen=True)
class PageTableEntry:
    """One mapping: a physical page number and its flag bits."""

    ppn: int
    flags: int


def _check_u32(name: str, value: int) -> int:
    if not 0 <= value < _U32_LIMIT:
        raise ValueError(f"{name} must fit in 32 unsigned bits, got {value:#x}")
    return value


def va_to_vpn(va: int) -> int:
    """Return the virtual page number of ``va``."""
    return va >> PAGE_OFFSET_BITS


def va_to_offset(va: int) -> int:
    """Return the offset of ``va`` within its page."""
    return va & _OFFSET_MASK


def make_pa(ppn: int, offset: int) -> int:
    """Combine a physical page number and an offset into a physical address."""
    pa = ppn * PAGE_SIZE + offset
    if pa >= _U32_LIMIT:
        raise OverflowError(f"physical address {pa:#x} does not fit in 32 bits")
    return pa


class SingleLevelPageTable:
    """A flat page table holding up to ``max_pages`` virtual pages."""

    def __init__(self, max_pages: int) -> None:
        if max_pages < 0:
            raise ValueError(f"max_pages must not be negative, got {max_pages}")
        self._entries: list[PageTableEntry | None] = [None] * max_pages

    def _check_vpn(self, vpn: int) -> int:
        if not 0 <= vpn < len(self._entries):
            raise IndexError(
                f"virtual page {vpn} is outside a table of {len(self._entries)} pages"
            )
        return vpn

    def map(self, vpn: int, ppn: int, flags: int) -> None:
        """Map virtual page ``vpn`` to physical page ``ppn`` with ``flags``."""
        self._entries[self._check_vpn(vpn)] = PageTableEntry(ppn, flags)

    def unmap(self, vpn: int) -> None:
        """Remove the mapping of virtual page ``vpn``."""
        self._entries[self._check_vpn(vpn)] = None

    def lookup(self, vpn: int) -> PageTableEntry | None:
        """Return the entry for ``vpn``, or ``None`` if it is unmapped."""
        return self._entries[self._check_vpn(vpn)]

    def translate(self, va: int, is_write: bool) -> int:
        """Translate ``va`` to a physical address.

        Raises :class:`PageFault` for an unmapped or invalid page and
        :class:`PermissionDenied` for a write to a non-writable page.
        """
        _check_u32("va", va)
        entry = self.lookup(va_to_vpn(va))
        if entry is None or not entry.flags & PTE_VALID:
            raise PageFault(va)
        if is_write and not entry.flags & PTE_WRITE:
            raise PermissionDenied(va)
        return make_pa(entry.ppn, va_to_offset(va))