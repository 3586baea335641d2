"""A simulated translation lookaside buffer and the MMU that uses it.

The TLB caches virtual-to-physical page translations tagged with an
address space identifier (ASID). It has a fixed number of slots and
replaces entries in first-in, first-out order. The MMU consults the TLB
first and falls back to its page table on a miss, refilling the TLB.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class TlbEntry:
    """One TLB slot: a cached translation and whether it is valid."""

    valid: bool = False
    asid: int = 0
    vpn: int = 0
    ppn: int = 0
    flags: int = 0

    def matches(self, vpn: int, asid: int) -> bool:
        """Return whether this slot holds a valid translation for ``vpn`` in ``asid``."""
        return self.valid and self.vpn == vpn and self.asid == asid


@dataclass
class TlbStats:
    """Hit and miss counters for TLB lookups."""

    hits: int = 0
    misses: int = 0

    def hit_rate(self) -> float:
        """Return hits divided by lookups, or 0.0 when nothing was looked up."""
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class Tlb:
    """A fixed-size TLB with FIFO replacement."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._entries = [TlbEntry() for _ in range(capacity)]
        self._fifo_ptr = 0
        self.stats = TlbStats()

    def _find(self, vpn: int, asid: int) -> TlbEntry | None:
        return next((e for e in self._entries if e.matches(vpn, asid)), None)

    def lookup(self, vpn: int, asid: int) -> int | None:
        """Return the cached physical page for ``vpn`` in ``asid``, or ``None`` on a miss.

        Every call counts as a hit or a miss in :attr:`stats`.
        """
        entry = self._find(vpn, asid)
        if entry is None:
            self.stats.misses += 1
            return None
        self.stats.hits += 1
        return entry.ppn

    def insert(self, vpn: int, ppn: int, asid: int, flags: int) -> None:
        """Cache a translation.

        An existing valid entry for the same ``(vpn, asid)`` is updated in
        place; otherwise the slot next in FIFO order is overwritten.
        """
        existing = self._find(vpn, asid)
        if existing is not None:
            existing.ppn = ppn
            existing.flags = flags
            return
        self._entries[self._fifo_ptr] = TlbEntry(True, asid, vpn, ppn, flags)
        self._fifo_ptr = (self._fifo_ptr + 1) % self.capacity

    def flush_all(self) -> None:
        """Invalidate every entry."""
        for entry in self._entries:
            entry.valid = False

    def flush_by_vpn(self, vpn: int) -> None:
        """Invalidate every entry for ``vpn``, whatever its ASID."""
        for entry in self._entries:
            if entry.vpn == vpn:
                entry.valid = False

    def flush_by_asid(self, asid: int) -> None:
        """Invalidate every entry belonging to ``asid``."""
        for entry in self._entries:
            if entry.asid == asid:
                entry.valid = False

    def valid_count(self) -> int:
        """Return the number of valid entries."""
        return sum(entry.valid for entry in self._entries)


@dataclass(frozen=True)
class PageMapping:
    """A page table entry used by the simulated MMU."""

    vpn: int
    ppn: int
    flags: int


@dataclass
class Mmu:
    """Translates virtual pages through a TLB backed by a simple page table."""

    tlb: Tlb
    current_asid: int = 0
    _page_table: list[tuple[int, PageMapping]] = field(default_factory=list, repr=False)

    def __init__(self, tlb_capacity: int) -> None:
        self.tlb = Tlb(tlb_capacity)
        self.current_asid = 0
        self._page_table = []

    def add_mapping(self, asid: int, vpn: int, ppn: int, flags: int) -> None:
        """Add a page table entry mapping ``vpn`` to ``ppn`` in ``asid``."""
        self._page_table.append((asid, PageMapping(vpn, ppn, flags)))

    def switch_asid(self, new_asid: int) -> None:
        """Make ``new_asid`` the current address space."""
        self.current_asid = new_asid

    def translate(self, vpn: int) -> int | None:
        """Return the physical page for ``vpn`` in the current address space.

        A TLB miss walks the page table and refills the TLB. Returns
        ``None`` when the page is not mapped at all.
        """
        asid = self.current_asid
        ppn = self.tlb.lookup(vpn, asid)
        if ppn is not None:
            return ppn
        mapping = next(
            (m for a, m in self._page_table if a == asid and m.vpn == vpn), None
        )
        if mapping is None:
            return None
        self.tlb.insert(vpn, mapping.ppn, asid, mapping.flags)
        return mapping.ppn