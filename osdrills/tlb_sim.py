"""A simulated translation lookaside buffer and the MMU that fills it.

The TLB caches virtual-to-physical page translations tagged with an address
space identifier (ASID). It has a fixed number of slots and replaces them in
first-in, first-out order. The MMU looks a page up in the TLB first, walks
its page table on a miss and then refills the TLB.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

_U16_MAX = (1 << 16) - 1


def _check_asid(asid: int) -> int:
    if not 0 <= asid <= _U16_MAX:
        raise ValueError(f"asid must fit in 16 unsigned bits, got {asid}")
    return asid


@dataclass
class TlbEntry:
    """One TLB slot; a default-constructed entry is empty and invalid."""

    valid: bool = False
    asid: int = 0
    vpn: int = 0
    ppn: int = 0
    flags: int = 0

    def matches(self, vpn: int, asid: int) -> bool:
        """Whether this slot holds a valid translation of ``vpn`` in ``asid``."""
        return self.valid and self.vpn == vpn and self.asid == asid


@dataclass
class TlbStats:
    """Counts of lookups that hit and missed."""

    hits: int = 0
    misses: int = 0

    def hit_rate(self) -> float:
        """Fraction of lookups that hit, or 0.0 when nothing was looked up."""
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class Tlb:
    """Fixed-size TLB with first-in, first-out replacement."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must not be negative, got {capacity}")
        self.capacity = capacity
        self._entries = [TlbEntry() for _ in range(capacity)]
        self._fifo_ptr = 0
        self.stats = TlbStats()

    def _find(self, vpn: int, asid: int) -> Optional[TlbEntry]:
        return next((e for e in self._entries if e.matches(vpn, asid)), None)

    def lookup(self, vpn: int, asid: int) -> Optional[int]:
        """Return the cached physical page number, or None on a miss.

        Every call counts as either a hit or a miss in :attr:`stats`.
        """
        entry = self._find(vpn, asid)
        if entry is None:
            self.stats.misses += 1
            return None
        self.stats.hits += 1
        return entry.ppn

    def insert(self, vpn: int, ppn: int, asid: int, flags: int) -> None:
        """Cache a translation.

        An existing valid entry for the same page and ASID is updated in
        place; otherwise the slot next in FIFO order is overwritten.
        """
        _check_asid(asid)
        existing = self._find(vpn, asid)
        if existing is not None:
            existing.ppn = ppn
            existing.flags = flags
            return
        if self.capacity == 0:
            raise ValueError("cannot insert into a TLB with no slots")
        self._entries[self._fifo_ptr] = TlbEntry(True, asid, vpn, ppn, flags)
        self._fifo_ptr = (self._fifo_ptr + 1) % self.capacity

    def flush_all(self) -> None:
        """Invalidate every entry."""
        for entry in self._entries:
            entry.valid = False

    def flush_by_vpn(self, vpn: int) -> None:
        """Invalidate the entries for ``vpn`` in any address space."""
        for entry in self._entries:
            if entry.vpn == vpn:
                entry.valid = False

    def flush_by_asid(self, asid: int) -> None:
        """Invalidate every entry belonging to address space ``asid``."""
        for entry in self._entries:
            if entry.asid == asid:
                entry.valid = False

    def valid_count(self) -> int:
        """Return the number of valid entries."""
        return sum(1 for entry in self._entries if entry.valid)


@dataclass(frozen=True)
class PageMapping:
    """A page table entry of the simplified MMU."""

    vpn: int
    ppn: int
    flags: int


@dataclass
class Mmu:
    """Translates virtual page numbers through a TLB backed by a page table."""

    tlb: Tlb
    current_asid: int = 0
    _page_table: list[tuple[int, PageMapping]] = field(default_factory=list, repr=False)

    def __init__(self, tlb_capacity: int) -> None:
        self.tlb = Tlb(tlb_capacity)
        self.current_asid = 0
        self._page_table = []

    def add_mapping(self, asid: int, vpn: int, ppn: int, flags: int) -> None:
        """Add a mapping of ``vpn`` to ``ppn`` in address space ``asid``."""
        self._page_table.append((_check_asid(asid), PageMapping(vpn, ppn, flags)))

    def switch_asid(self, new_asid: int) -> None:
        """Make ``new_asid`` the current address space."""
        self.current_asid = _check_asid(new_asid)

    def translate(self, vpn: int) -> Optional[int]:
        """Return the physical page number for ``vpn``, or None on a page fault.

        A TLB miss walks the page table and caches what it finds.
        """
        asid = self.current_asid
        cached = self.tlb.lookup(vpn, asid)
        if cached is not None:
            return cached
        mapping = next(
            (m for owner, m in self._page_table if owner == asid and m.vpn == vpn),
            None,
        )
        if mapping is None:
            return None
        self.tlb.insert(vpn, mapping.ppn, asid, mapping.flags)
        return mapping.ppn