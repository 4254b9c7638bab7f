import functools

import pytest

from osdrills.green_threads import Scheduler, yield_now


def _task_a_sum(total):
    total.append(1)
    yield_now()
    total.append(10)
    yield_now()
    total.append(100)


def _task_b_sum(total):
    total.append(1)
    yield_now()
    total.append(10)


def _task_a_order(order):
    order.append("a1")
    yield_now()
    order.append("a2")
    yield_now()
    order.append("a3")


def _task_b_order(order):
    order.append("b1")
    yield_now()
    order.append("b2")


def _helper(order, tag):
    order.append(tag + "-before")
    yield_now()
    order.append(tag + "-after")


def test_scheduler_runs_all():
    total = []
    sched = Scheduler()
    sched.spawn(functools.partial(_task_a_sum, total))
    sched.spawn(functools.partial(_task_b_sum, total))
    sched.run()
    assert sum(total) == 122


def test_round_robin_order():
    order = []
    sched = Scheduler()
    sched.spawn(functools.partial(_task_a_order, order))
    sched.spawn(functools.partial(_task_b_order, order))
    sched.run()
    assert order == ["a1", "b1", "a2", "b2", "a3"]


def test_single_thread():
    flag = []
    sched = Scheduler()
    sched.spawn(lambda: flag.append(42))
    sched.run()
    assert flag == [42]


def test_yield_outside_scheduler_does_not_run_threads():
    ran = []
    sched = Scheduler()
    sched.spawn(lambda: ran.append(True))
    yield_now()
    assert ran == []
    sched.run()
    assert ran == [True]


def test_yield_from_nested_call():
    order = []
    sched = Scheduler()
    sched.spawn(functools.partial(_helper, order, "x"))
    sched.spawn(functools.partial(_helper, order, "y"))
    sched.run()
    assert order == ["x-before", "y-before", "x-after", "y-after"]


def test_exception_in_green_thread_is_raised_by_run():
    def broken():
        raise ValueError("boom")

    sched = Scheduler()
    sched.spawn(broken)
    with pytest.raises(ValueError, match="boom"):
        sched.run()


def test_scheduler_can_be_reused_after_run():
    results = []
    sched = Scheduler()
    sched.spawn(lambda: results.append(1))
    sched.run()
    sched.spawn(lambda: results.append(2))
    sched.run()
    assert results == [1, 2]