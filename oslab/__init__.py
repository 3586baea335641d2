"""Models of operating-system mechanisms: atomics, locks, green threads, async tasks, page tables and TLBs."""

__version__ = "0.1.0"