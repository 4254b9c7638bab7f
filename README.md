# osdrills

Small, self-contained Python models of the mechanisms an operating system is
built from. Each module covers one idea and can be read, used and tested on
its own. The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## What is inside

### Concurrency primitives

- `osdrills.atomic_counter`: `AtomicCounter`, an unsigned 64-bit counter with
  `increment` and `decrement` (both return the previous value and wrap around
  on overflow), `get`, `compare_and_swap` (returns the previous value, or
  raises `CompareExchangeError` whose `actual` attribute holds the value found)
  and a compare-and-swap loop `fetch_multiply`, which raises `OverflowError`
  when the product would not fit in 64 bits.
- `osdrills.atomic_ordering`: `FlagChannel`, a producer/consumer hand-off of
  one 32-bit value (`produce`, a blocking `consume`, `reset`), and `OnceCell`,
  whose first `init` stores a value and returns `True`; later calls return
  `False`. `get` returns the value or `None`.
- `osdrills.spinlock`: `SpinLock` with explicit `lock`, `unlock` and
  `try_lock`. `lock` and a successful `try_lock` return the `Cell` holding the
  data; its `value` attribute can be read and replaced. `try_lock` returns
  `None` if the lock is busy.
- `osdrills.spinlock_guard`: `GuardedSpinLock`, whose `lock()` returns a
  `SpinGuard`. The guard exposes the data as `value` and releases the lock on
  `release()`, at the end of a `with` block (even when an exception escapes)
  or when it is garbage-collected. Using `value` after release raises
  `RuntimeError`.
- `osdrills.rwlock`: a writer-priority `RwLock`. `read()` and `write()` return
  `RwLockReadGuard` and `RwLockWriteGuard`, which work the same way as
  `SpinGuard`; only the write guard lets `value` be replaced. Once a writer is
  waiting, new readers hold back until it has run.

```python
from osdrills.spinlock_guard import GuardedSpinLock

lock = GuardedSpinLock([])
with lock.lock() as guard:
    guard.value.append(1)
```

### Cooperative scheduling

- `osdrills.green_threads`: a round-robin `Scheduler`. Entries are registered
  with `spawn(entry)`, give up the processor with `yield_now()`, and `run()`
  returns once every spawned entry has reached `ThreadState.FINISHED`. Only
  one entry executes at any moment. An exception raised by an entry stops the
  run and is raised again from `run()`. `yield_now()` does nothing when no
  scheduler is running.

```python
from osdrills.green_threads import Scheduler, yield_now

order = []

def task(name):
    def entry():
        order.append(name + "1")
        yield_now()
        order.append(name + "2")
    return entry

sched = Scheduler()
sched.spawn(task("a"))
sched.spawn(task("b"))
sched.run()
```

### Async building blocks

- `osdrills.basic_future`: hand-written awaitables `CountDown(count)`, which
  hands control back to the event loop once per remaining count and then
  resolves to `"liftoff!"`, and `YieldOnce`, which hands control back once and
  resolves to `None`.
- `osdrills.async_tasks`: `concurrent_squares(n)` returns `[i * i for i in
  range(n)]` computed in separate tasks; `parallel_sleep_tasks(n,
  duration_ms)` runs `n` tasks that sleep concurrently and returns their ids
  sorted.
- `osdrills.async_channel`: `producer_consumer(items)` passes the items
  through a bounded queue from one task to another and returns them in order;
  `fan_in(n_producers)` collects `"producer {i}: message"` from each producer
  task and returns the messages sorted. `fan_in` needs at least one producer
  and raises `ValueError` otherwise.
- `osdrills.select_timeout`: `with_timeout(awaitable, timeout_ms)` returns the
  result or `None` on expiry; `race(f1, f2)` returns the result of whichever
  finishes first and cancels the other.

```python
import asyncio
from osdrills.select_timeout import race

async def value_after(delay, value):
    await asyncio.sleep(delay)
    return value

print(asyncio.run(race(value_after(0.01, "fast"), value_after(0.2, "slow"))))
```

### Paging

- `osdrills.pte_flags`: RISC-V SV39 page-table entries. `PteFlags` (also
  available as `PTE_V`, `PTE_R`, `PTE_W`, `PTE_X`, `PTE_U`, `PTE_G`, `PTE_A`,
  `PTE_D`), `make_pte`, `extract_ppn`, `extract_flags`, `is_valid`, `is_leaf`
  and `check_permission`.
- `osdrills.page_table_walk`: a `SingleLevelPageTable` with 4 KiB pages and
  32-bit addresses. `map`, `unmap` and `lookup` work on virtual page numbers
  and raise `IndexError` outside the table; `translate(va, is_write)` returns
  the physical address or raises `PageFault` or `PermissionDenied`. Helpers
  `va_to_vpn`, `va_to_offset` and `make_pa`.
- `osdrills.multi_level_pt`: an `Sv39PageTable` built from `PageTableNode`s,
  with 4 KiB `map_page`, 2 MiB `map_superpage` (raises `ValueError` on
  misaligned addresses), the static `extract_vpn` and a three-level
  `translate` that raises `PageFault` on an invalid entry.
- `osdrills.tlb_sim`: a FIFO `Tlb` of `TlbEntry` slots with `TlbStats`
  hit/miss counting and `hit_rate`, `insert`, `lookup`, `valid_count` and
  flushes by all, VPN or ASID; plus an `Mmu` that checks the TLB, falls back
  to its list of `PageMapping`s on a miss and refills the TLB. `Mmu.translate`
  returns `None` for an unmapped page.

```python
from osdrills.multi_level_pt import Sv39PageTable
from osdrills.pte_flags import PteFlags

pt = Sv39PageTable()
pt.map_page(0x2000, 0x90000000, PteFlags.V | PteFlags.R | PteFlags.W)
assert pt.translate(0x2ABC) == 0x90000ABC
```

## What it does not do

`osdrills` is a library only: it has no command-line tool. The models run on
ordinary Python threads and event loops and do not touch real hardware. Green
threads switch by handing control between threads, not by saving registers,
and the page tables and TLB are in-memory simulations, not a working MMU.