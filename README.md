# oslab

Small, self-contained Python models of the mechanisms an operating system is
built from: atomic counters, locks, a cooperative scheduler, asynchronous
tasks, page tables and a TLB. Each module is a short simulation with its own
test suite. The package has no runtime dependencies.

## Contents

### Concurrency primitives

- `oslab.atomic_counter` – `AtomicCounter`, a 64-bit unsigned counter safe to
  share between threads. `increment` and `decrement` return the value from
  before the change and wrap around at the 64-bit limits; `get` reads the
  value. `compare_and_swap(expected, new_val)` returns `expected` on success
  and otherwise raises `CasFailed`, whose `actual` attribute holds the current
  value. `fetch_multiply` multiplies in a compare-and-swap loop, returns the
  old value and raises `OverflowError` if the product does not fit in 64 bits.
- `oslab.atomic_ordering` – `FlagChannel` passes one 32-bit value from a
  producer to a consumer: `produce` stores the value and marks the channel
  ready, `consume` blocks until it is ready and returns the value, `reset`
  clears both. `OnceCell` holds a 32-bit value set at most once: `init`
  returns whether this call set it, `get` returns the value or `None`.
- `oslab.spinlock` – `SpinLock` with explicit `lock()` (spins, then returns
  the protected data), `unlock()` and `try_lock()` (returns whether the lock
  was taken). The protected value is the lock's `data` attribute.
- `oslab.spinlock_guard` – a `SpinLock` whose `lock()` returns a `SpinGuard`.
  The guard exposes the protected value as `value` and releases the lock on
  `release()` or when its `with` block ends, even if the block raises. Using
  a guard after release raises `RuntimeError`.
- `oslab.rwlock` – a writer-priority `RwLock`: `read()` returns a `ReadGuard`
  and many readers may hold it at once; `write()` returns a `WriteGuard` with
  exclusive access. While a writer is waiting, no new readers are admitted.
  Both guards are context managers with a `value` property and `release()`.

### Scheduling

- `oslab.green_threads` – a cooperative round-robin `Scheduler`. `spawn(entry)`
  registers a callable; `run()` schedules until every spawned thread is
  finished and re-raises the first exception an entry raised. Inside an
  entry, `yield_now()` hands the processor to the next ready thread (it does
  nothing when no scheduler is running). `Scheduler.states` reports each
  spawned thread's `ThreadState` (`READY`, `RUNNING`, `FINISHED`). Only one
  green thread runs at a time.

### Async programming

- `oslab.basic_future` – hand-written awaitables: `CountDown(n)` suspends `n`
  times and then returns `"liftoff!"`; `YieldOnce()` suspends once and returns
  `None`.
- `oslab.async_tasks` – `concurrent_squares(n)` squares `0..n-1` in separate
  tasks and returns the results in order; `parallel_sleep_tasks(n,
  duration_ms)` runs `n` tasks that sleep concurrently and returns their ids
  sorted.
- `oslab.async_channel` – `producer_consumer(items)` sends items through a
  bounded `asyncio.Queue` from one task to another and returns them in order;
  `fan_in(n_producers)` collects one `"producer {id}: message"` from each
  producer task and returns them sorted.
- `oslab.select_timeout` – `with_timeout(awaitable, timeout_ms)` returns the
  result, or `None` (cancelling the awaitable) if it takes too long;
  `race(first, second)` returns the result of whichever finishes first and
  cancels the other.

### Virtual memory

- `oslab.pte_flags` – build and inspect RISC-V SV39 page-table entries with
  the flag constants `PTE_V`, `PTE_R`, `PTE_W`, `PTE_X`, `PTE_U`, `PTE_G`,
  `PTE_A`, `PTE_D` and the functions `make_pte`, `extract_ppn`,
  `extract_flags`, `is_valid`, `is_leaf` and `check_permission`.
- `oslab.page_table_walk` – `SingleLevelPageTable(max_pages)` with `map`,
  `unmap`, `lookup` (returns a `PageTableEntry` or `None`) and
  `translate(va, is_write)`, which returns a physical address or raises
  `PageFault` (unmapped or invalid page) or `PermissionDenied` (write to a
  non-writable page). Page numbers outside the table raise `IndexError`.
  Helpers: `va_to_vpn`, `va_to_offset`, `make_pa`.
- `oslab.multi_level_pt` – a three-level `Sv39PageTable` that allocates
  table pages as needed: `map_page` for 4 KiB pages, `map_superpage` for
  2 MiB pages (both addresses must be 2 MiB aligned, else `ValueError`),
  `translate` for a full walk that raises `PageFault` when no valid leaf maps
  the address, and the static `extract_vpn(va, level)`.
- `oslab.tlb_sim` – a `Tlb(capacity)` with ASID-tagged `TlbEntry` slots and
  FIFO replacement: `lookup`, `insert` (updates an existing entry for the
  same page and ASID in place), `flush_all`, `flush_by_vpn`, `flush_by_asid`,
  `valid_count`, and hit/miss counters in `stats` (`TlbStats.hit_rate()`).
  `Mmu(tlb_capacity)` keeps a page table (`add_mapping`), a current ASID
  (`switch_asid`) and `translate(vpn)`, which checks the TLB first, walks the
  page table on a miss, refills the TLB and returns `None` for an unmapped
  page.

## Examples

```python
from oslab.spinlock_guard import SpinLock

lock = SpinLock([])
with lock.lock() as guard:
    guard.value.append(1)
```

```python
from oslab.multi_level_pt import Sv39PageTable, PTE_V, PTE_R

pt = Sv39PageTable()
pt.map_page(0x2000, 0x90000000, PTE_V | PTE_R)
assert pt.translate(0x2ABC) == 0x90000ABC
```

```python
from oslab.tlb_sim import Mmu

mmu = Mmu(4)
mmu.add_mapping(1, 0x100, 0x200, 0x7)
mmu.switch_asid(1)
assert mmu.translate(0x100) == 0x200   # miss, filled from the page table
assert mmu.translate(0x100) == 0x200   # hit
assert mmu.tlb.stats.hits == 1
```

```python
import asyncio
from oslab.select_timeout import with_timeout

async def answer():
    return 42

assert asyncio.run(with_timeout(answer(), 100)) == 42
```

## What it does not do

These are models for reading and experimenting, not working system code.
There is no command-line program. Green threads are cooperative and run one
at a time on ordinary Python threads; no registers or machine stacks are
switched. Page tables and the TLB are simulated in Python dictionaries and
lists and never touch real memory.

## Running the tests

```
pip install -e ".[test]"
pytest
```