"""Address translation through a single-level page table.

A 32-bit virtual address splits into a 20-bit virtual page number (high
bits) and a 12-bit offset within a 4 KiB page.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

PAGE_SIZE = 4096
PAGE_OFFSET_BITS = 12

PTE_VALID = 1 << 0
PTE_READ = 1 << 1
PTE_WRITE = 1 << 2

_OFFSET_MASK = (1 << PAGE_OFFSET_BITS) - 1
_U32_MAX = (1 << 32) - 1


class PageFault(Exception):
    """Raised when a virtual page is unmapped or its entry is not valid."""

    def __init__(self, va: int) -> None:
        super().__init__(f"page fault at virtual address {va:#x}")
        self.va = va


class PermissionDenied(Exception):
    """Raised when writing to a page whose entry does not allow writes."""

    def __init__(self, va: int) -> None:
        super().__init__(f"write not permitted at virtual address {va:#x}")
        self.va = va


@dataclass(frozen=True)
class PageTableEntry:
    """Mapping of one virtual page to a physical page number with flags."""

    ppn: int
    flags: int


def _check_u32(value: int, name: str) -> int:
    if not 0 <= value <= _U32_MAX:
        raise ValueError(f"{name} must fit in 32 unsigned bits, got {value}")
    return value


def va_to_vpn(va: int) -> int:
    """Return the virtual page number of a virtual address."""
    return _check_u32(va, "va") >> PAGE_OFFSET_BITS


def va_to_offset(va: int) -> int:
    """Return the offset within its page of a virtual address."""
    return _check_u32(va, "va") & _OFFSET_MASK


def make_pa(ppn: int, offset: int) -> int:
    """Combine a physical page number and an offset into a physical address.

    Raises OverflowError if the result does not fit in 32 bits.
    """
    pa = ppn * PAGE_SIZE + offset
    if not 0 <= pa <= _U32_MAX:
        raise OverflowError(f"physical address {pa:#x} does not fit in 32 bits")
    return pa


class SingleLevelPageTable:
    """A flat table holding an optional entry for each of ``max_pages`` pages."""

    def __init__(self, max_pages: int) -> None:
        if max_pages < 0:
            raise ValueError(f"max_pages must not be negative, got {max_pages}")
        self._entries: list[Optional[PageTableEntry]] = [None] * max_pages

    def __len__(self) -> int:
        return len(self._entries)

    def _check_vpn(self, vpn: int) -> int:
        if not 0 <= vpn < len(self._entries):
            raise IndexError(
                f"virtual page {vpn} is outside a table of {len(self._entries)} pages"
            )
        return vpn

    def map(self, vpn: int, ppn: int, flags: int) -> None:
        """Map virtual page ``vpn`` to physical page ``ppn`` with ``flags``."""
        _check_u32(ppn, "ppn")
        self._entries[self._check_vpn(vpn)] = PageTableEntry(ppn, int(flags))

    def unmap(self, vpn: int) -> None:
        """Remove any mapping of virtual page ``vpn``."""
        self._entries[self._check_vpn(vpn)] = None

    def lookup(self, vpn: int) -> Optional[PageTableEntry]:
        """Return the entry for virtual page ``vpn``, or None if unmapped."""
        return self._entries[self._check_vpn(vpn)]

    def translate(self, va: int, is_write: bool) -> int:
        """Translate a virtual address to a physical address.

        Raises :class:`PageFault` if the page is unmapped or not valid, and
        :class:`PermissionDenied` when writing to a page without write access.
        """
        entry = self.lookup(va_to_vpn(va))
        if entry is None or not entry.flags & PTE_VALID:
            raise PageFault(va)
        if is_write and not entry.flags & PTE_WRITE:
            raise PermissionDenied(va)
        return make_pa(entry.ppn, va_to_offset(va))