import pytest

from osdrills.tlb_sim import Mmu, PageMapping, Tlb, TlbEntry, TlbStats


def test_tlb_empty_lookup():
    tlb = Tlb(4)
    assert tlb.lookup(0x100, 0) is None
    assert tlb.stats.misses == 1
    assert tlb.stats.hits == 0


def test_tlb_insert_and_lookup():
    tlb = Tlb(4)
    tlb.insert(0x100, 0x200, 1, 0x7)
    assert tlb.lookup(0x100, 1) == 0x200
    assert tlb.stats.hits == 1


def test_tlb_asid_isolation():
    tlb = Tlb(4)
    tlb.insert(0x100, 0x200, 1, 0x7)
    tlb.insert(0x100, 0x300, 2, 0x7)
    assert tlb.lookup(0x100, 1) == 0x200
    assert tlb.lookup(0x100, 2) == 0x300


def test_tlb_miss_wrong_asid():
    tlb = Tlb(4)
    tlb.insert(0x100, 0x200, 1, 0x7)
    assert tlb.lookup(0x100, 99) is None
    assert tlb.stats.misses == 1


def test_tlb_fifo_eviction():
    tlb = Tlb(2)
    tlb.insert(0x10, 0x20, 0, 0x7)
    tlb.insert(0x30, 0x40, 0, 0x7)
    tlb.insert(0x50, 0x60, 0, 0x7)
    assert tlb.lookup(0x10, 0) is None
    assert tlb.lookup(0x30, 0) == 0x40
    assert tlb.lookup(0x50, 0) == 0x60


def test_tlb_update_existing():
    tlb = Tlb(4)
    tlb.insert(0x100, 0x200, 1, 0x3)
    tlb.insert(0x100, 0x999, 1, 0x7)
    assert tlb.lookup(0x100, 1) == 0x999
    assert tlb.valid_count() == 1


def test_tlb_valid_count():
    tlb = Tlb(4)
    assert tlb.valid_count() == 0
    tlb.insert(0x1, 0x10, 0, 0x7)
    assert tlb.valid_count() == 1
    tlb.insert(0x2, 0x20, 0, 0x7)
    assert tlb.valid_count() == 2


def test_valid_count_never_exceeds_capacity():
    tlb = Tlb(3)
    for vpn in range(10):
        tlb.insert(vpn, vpn + 100, 0, 0x7)
    assert tlb.valid_count() == 3
    assert [tlb.lookup(vpn, 0) for vpn in (7, 8, 9)] == [107, 108, 109]


def test_insert_into_zero_capacity_raises():
    tlb = Tlb(0)
    assert tlb.lookup(0x1, 0) is None
    with pytest.raises(ValueError):
        tlb.insert(0x1, 0x10, 0, 0x7)


def test_negative_capacity_raises():
    with pytest.raises(ValueError):
        Tlb(-1)


def test_flush_all():
    tlb = Tlb(4)
    tlb.insert(0x1, 0x10, 0, 0x7)
    tlb.insert(0x2, 0x20, 1, 0x7)
    tlb.insert(0x3, 0x30, 2, 0x7)
    assert tlb.valid_count() == 3
    tlb.flush_all()
    assert tlb.valid_count() == 0
    assert tlb.lookup(0x1, 0) is None


def test_flush_by_vpn():
    tlb = Tlb(4)
    tlb.insert(0x100, 0x200, 1, 0x7)
    tlb.insert(0x100, 0x300, 2, 0x7)
    tlb.insert(0x999, 0x400, 1, 0x7)
    tlb.flush_by_vpn(0x100)
    assert tlb.lookup(0x100, 1) is None
    assert tlb.lookup(0x100, 2) is None
    assert tlb.lookup(0x999, 1) == 0x400


def test_flush_by_asid():
    tlb = Tlb(4)
    tlb.insert(0x1, 0x10, 1, 0x7)
    tlb.insert(0x2, 0x20, 1, 0x7)
    tlb.insert(0x3, 0x30, 2, 0x7)
    tlb.flush_by_asid(1)
    assert tlb.lookup(0x1, 1) is None
    assert tlb.lookup(0x2, 1) is None
    assert tlb.lookup(0x3, 2) == 0x30


def test_flush_by_vpn_then_reinsert():
    tlb = Tlb(4)
    tlb.insert(0x100, 0x200, 1, 0x7)
    tlb.flush_by_vpn(0x100)
    assert tlb.lookup(0x100, 1) is None
    tlb.insert(0x100, 0x500, 1, 0x7)
    assert tlb.lookup(0x100, 1) == 0x500


def test_hit_rate_without_lookups_is_zero():
    assert TlbStats().hit_rate() == 0.0


def test_hit_rate_from_counts():
    assert TlbStats(hits=3, misses=1).hit_rate() == pytest.approx(0.75)


def test_default_entry_is_invalid():
    entry = TlbEntry()
    assert entry.valid is False
    assert entry.matches(0, 0) is False


def test_page_mapping_fields():
    mapping = PageMapping(vpn=0x1, ppn=0x10, flags=0x7)
    assert (mapping.vpn, mapping.ppn, mapping.flags) == (0x1, 0x10, 0x7)


def test_mmu_basic_translate():
    mmu = Mmu(4)
    mmu.current_asid = 1
    mmu.add_mapping(1, 0x100, 0x200, 0x7)

    assert mmu.translate(0x100) == 0x200
    assert mmu.tlb.stats.misses == 1
    assert mmu.tlb.stats.hits == 0

    assert mmu.translate(0x100) == 0x200
    assert mmu.tlb.stats.hits == 1


def test_mmu_page_fault():
    mmu = Mmu(4)
    mmu.current_asid = 1
    assert mmu.translate(0x999) is None


def test_mmu_asid_switch():
    mmu = Mmu(4)
    mmu.add_mapping(1, 0x100, 0x200, 0x7)
    mmu.add_mapping(2, 0x100, 0x300, 0x7)
    mmu.switch_asid(1)
    assert mmu.translate(0x100) == 0x200
    mmu.switch_asid(2)
    assert mmu.translate(0x100) == 0x300


def test_mmu_flush_on_asid_switch():
    mmu = Mmu(4)
    mmu.add_mapping(1, 0x100, 0x200, 0x7)
    mmu.add_mapping(2, 0x100, 0x300, 0x7)

    mmu.switch_asid(1)
    assert mmu.translate(0x100) == 0x200

    mmu.switch_asid(2)
    mmu.tlb.flush_by_asid(1)

    old_misses = mmu.tlb.stats.misses
    assert mmu.translate(0x100) == 0x300
    assert mmu.tlb.stats.misses == old_misses + 1


def test_mmu_hit_rate():
    mmu = Mmu(4)
    mmu.current_asid = 0
    mmu.add_mapping(0, 0x1, 0x10, 0x7)

    mmu.translate(0x1)
    for _ in range(9):
        mmu.translate(0x1)

    assert mmu.tlb.stats.hits == 9
    assert mmu.tlb.stats.misses == 1
    assert abs(mmu.tlb.stats.hit_rate() - 0.9) < 1e-9


def test_mmu_thrashing():
    mmu = Mmu(2)
    mmu.current_asid = 0
    mmu.add_mapping(0, 0x1, 0x10, 0x7)
    mmu.add_mapping(0, 0x2, 0x20, 0x7)
    mmu.add_mapping(0, 0x3, 0x30, 0x7)

    for vpn in [1, 2, 3, 1, 2, 3]:
        mmu.translate(vpn)

    assert mmu.tlb.stats.misses == 6
    assert mmu.tlb.stats.hits == 0


def test_mmu_rejects_out_of_range_asid():
    mmu = Mmu(4)
    with pytest.raises(ValueError):
        mmu.switch_asid(1 << 16)
    with pytest.raises(ValueError):
        mmu.add_mapping(-1, 0x1, 0x10, 0x7)