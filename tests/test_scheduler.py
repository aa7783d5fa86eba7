from src.campus_admin.campus_admin.notifications.scheduler import DeadlineScheduler


def test_callbacks_fire_in_deadline_order(fake_clock):
    sched = DeadlineScheduler(clock=fake_clock)
    fired = []
    sched.call_later(300, lambda: fired.append("slow"))
    sched.call_later(100, lambda: fired.append("fast"))

    fake_clock.advance(99)
    assert sched.run_due() == 0

    fake_clock.advance(1)
    assert sched.run_due() == 1
    assert fired == ["fast"]

    fake_clock.advance(500)
    sched.run_due()
    assert fired == ["fast", "slow"]
    assert sched.pending == 0


def test_ties_keep_registration_order(fake_clock):
    sched = DeadlineScheduler(clock=fake_clock)
    fired = []
    for name in ("a", "b", "c"):
        sched.call_later(10, lambda n=name: fired.append(n))

    sched.run_due(fake_clock() + 10)

    assert fired == ["a", "b", "c"]


def test_cancelled_handle_never_fires(fake_clock):
    sched = DeadlineScheduler(clock=fake_clock)
    fired = []
    handle = sched.call_later(10, lambda: fired.append(1))
    handle.cancel()

    fake_clock.advance(50)
    assert sched.run_due() == 0
    assert fired == []
    assert not handle.active


def test_clear_cancels_everything(fake_clock):
    sched = DeadlineScheduler(clock=fake_clock)
    h1 = sched.call_later(10, lambda: None)
    h2 = sched.call_later(20, lambda: None)

    sched.clear()

    assert h1.cancelled and h2.cancelled
    assert sched.pending == 0
