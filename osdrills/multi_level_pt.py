"""A simulated RISC-V SV39 three-level page table.

A 39-bit virtual address splits into VPN[2] (bits 38-30), VPN[1] (bits
29-21), VPN[0] (bits 20-12) and a 12-bit page offset. Table pages live in a
dictionary keyed by physical page number, standing in for physical memory.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from osdrills.page_table_walk import PageFault
from osdrills.pte_flags import PTE_R, PTE_V, PTE_W, PTE_X

PAGE_SIZE = 4096
PT_ENTRIES = 512

_PPN_SHIFT = 10
_LEAF_BITS = int(PTE_R | PTE_W | PTE_X)
_VALID = int(PTE_V)
_SUPERPAGE_SIZE = PAGE_SIZE * PT_ENTRIES
_SUPERPAGE_OFFSET_MASK = (1 << 21) - 1


@dataclass
class PageTableNode:
    """One page of page table: 512 raw 64-bit entries."""

    entries: list[int] = field(default_factory=lambda: [0] * PT_ENTRIES)


class Sv39PageTable:
    """Three-level page table with 4 KiB pages and 2 MiB superpages."""

    def __init__(self) -> None:
        self.root_ppn = 0x80000
        self._next_ppn = 0x80001
        self._nodes: dict[int, PageTableNode] = {self.root_ppn: PageTableNode()}

    def _alloc_node(self) -> int:
        ppn = self._next_ppn
        self._next_ppn += 1
        self._nodes[ppn] = PageTableNode()
        return ppn

    def _node(self, ppn: int) -> PageTableNode:
        try:
            return self._nodes[ppn]
        except KeyError:
            raise KeyError(f"no page table page at physical page {ppn:#x}") from None

    def _next_level(self, node: PageTableNode, index: int) -> int:
        """Return the child table of ``node[index]``, creating it if absent."""
        pte = node.entries[index]
        if pte & _VALID:
            return pte >> _PPN_SHIFT
        child = self._alloc_node()
        node.entries[index] = (child << _PPN_SHIFT) | _VALID
        return child

    @staticmethod
    def extract_vpn(va: int, level: int) -> int:
        """Return the 9-bit virtual page number of ``va`` for ``level`` (2, 1 or 0)."""
        return (va >> (12 + level * 9)) & 0x1FF

    def map_page(self, va: int, pa: int, flags: int) -> None:
        """Map the 4 KiB page containing ``va`` to the one containing ``pa``."""
        l1_ppn = self._next_level(self._node(self.root_ppn), self.extract_vpn(va, 2))
        l0_ppn = self._next_level(self._node(l1_ppn), self.extract_vpn(va, 1))
        self._node(l0_ppn).entries[self.extract_vpn(va, 0)] = (
            (pa >> 12) << _PPN_SHIFT
        ) | int(flags)

    def map_superpage(self, va: int, pa: int, flags: int) -> None:
        """Map a 2 MiB superpage with a leaf entry at level 1.

        Both addresses must be 2 MiB aligned; otherwise ValueError is raised.
        """
        if va % _SUPERPAGE_SIZE:
            raise ValueError("va must be 2MB-aligned")
        if pa % _SUPERPAGE_SIZE:
            raise ValueError("pa must be 2MB-aligned")
        l1_ppn = self._next_level(self._node(self.root_ppn), self.extract_vpn(va, 2))
        self._node(l1_ppn).entries[self.extract_vpn(va, 1)] = (
            (pa >> 12) << _PPN_SHIFT
        ) | int(flags)

    def translate(self, va: int) -> int:
        """Walk the table and return the physical address for ``va``.

        Raises :class:`PageFault` when an entry on the way is not valid.
        """
        offset = va & 0xFFF

        l2_pte = self._node(self.root_ppn).entries[self.extract_vpn(va, 2)]
        if not l2_pte & _VALID:
            raise PageFault(va)
        if l2_pte & _LEAF_BITS:
            return ((l2_pte >> _PPN_SHIFT) << 12) | offset

        l1_pte = self._node(l2_pte >> _PPN_SHIFT).entries[self.extract_vpn(va, 1)]
        if not l1_pte & _VALID:
            raise PageFault(va)
        if l1_pte & _LEAF_BITS:
            return ((l1_pte >> _PPN_SHIFT) << 12) | (va & _SUPERPAGE_OFFSET_MASK)

        l0_pte = self._node(l1_pte >> _PPN_SHIFT).entries[self.extract_vpn(va, 0)]
        if not l0_pte & _VALID:
            raise PageFault(va)
        return ((l0_pte >> _PPN_SHIFT) << 12) | offset