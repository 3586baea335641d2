"""Building and decoding RISC-V SV39 page table entries.

Layout of a 64-bit entry: bits 0-7 hold the flags V R W X U G A D,
bits 8-9 are reserved for software, bits 10-53 hold the 44-bit physical
page number, and bits 54-63 are reserved.
"""

from __future__ import annotations

PTE_V = 1 << 0  # valid
PTE_R = 1 << 1  # readable
PTE_W = 1 << 2  # writable
PTE_X = 1 << 3  # executable
PTE_U = 1 << 4  # user accessible
PTE_G = 1 << 5  # global
PTE_A = 1 << 6  # accessed
PTE_D = 1 << 7  # dirty

PPN_SHIFT = 10
PPN_MASK = (1 << 44) - 1
FLAGS_MASK = 0xFF


def make_pte(ppn: int, flags: int) -> int:
    """Build an entry from a physical page number and the low eight flag bits."""
    return ((ppn & PPN_MASK) << PPN_SHIFT) | (flags & FLAGS_MASK)


def extract_ppn(pte: int) -> int:
    """Return the physical page number stored in ``pte``."""
    return (pte >> PPN_SHIFT) & PPN_MASK


def extract_flags(pte: int) -> int:
    """Return the low eight flag bits of ``pte``."""
    return pte & FLAGS_MASK


def is_valid(pte: int) -> bool:
    """Return whether the V bit is set."""
    return bool(pte & PTE_V)


def is_leaf(pte: int) -> bool:
    """Return whether any of R, W or X is set, i.e. the entry maps a page."""
    return bool(pte & (PTE_R | PTE_W | PTE_X))


def check_permission(pte: int, read: bool, write: bool, execute: bool) -> bool:
    """Return whether ``pte`` is valid and grants every requested access."""
    if not is_valid(pte):
        return False
    flags = extract_flags(pte)
    required = (read, PTE_R), (write, PTE_W), (execute, PTE_X)
    return all(flags & bit for wanted, bit in required if wanted)