"""Building and decoding RISC-V SV39 page table entries.

Layout of a 64-bit entry: bits 0-7 are the flags V R W X U G A D, bits 8-9
are reserved for software, bits 10-53 hold the 44-bit physical page number.
"""

from __future__ import annotations

import enum


class PteFlags(enum.IntFlag):
    V = 1 << 0  # valid
    R = 1 << 1  # readable
    W = 1 << 2  # writable
    X = 1 << 3  # executable
    U = 1 << 4  # user accessible
    G = 1 << 5  # global
    A = 1 << 6  # accessed
    D = 1 << 7  # dirty


PTE_V = PteFlags.V
PTE_R = PteFlags.R
PTE_W = PteFlags.W
PTE_X = PteFlags.X
PTE_U = PteFlags.U
PTE_G = PteFlags.G
PTE_A = PteFlags.A
PTE_D = PteFlags.D

_PPN_SHIFT = 10
_PPN_MASK = (1 << 44) - 1
_U64_MASK = (1 << 64) - 1


def make_pte(ppn: int, flags: int) -> int:
    """Build an entry from a physical page number (truncated to 44 bits) and flags."""
    return (((ppn & _PPN_MASK) << _PPN_SHIFT) | int(flags)) & _U64_MASK


def extract_ppn(pte: int) -> int:
    """Return the 44-bit physical page number stored in an entry."""
    return (pte >> _PPN_SHIFT) & _PPN_MASK


def extract_flags(pte: int) -> PteFlags:
    """Return the low eight flag bits of an entry."""
    return PteFlags(pte & 0xFF)


def is_valid(pte: int) -> bool:
    """Whether the entry has its V bit set."""
    return bool(pte & PteFlags.V)


def is_leaf(pte: int) -> bool:
    """Whether the entry maps a page (any of R, W, X set) rather than a table."""
    return bool(pte & (PteFlags.R | PteFlags.W | PteFlags.X))


def check_permission(pte: int, read: bool, write: bool, execute: bool) -> bool:
    """Whether the entry is valid and grants every requested kind of access."""
    if not is_valid(pte):
        return False
    required = (
        (PteFlags.R if read else PteFlags(0))
        | (PteFlags.W if write else PteFlags(0))
        | (PteFlags.X if execute else PteFlags(0))
    )
    return pte & required == required