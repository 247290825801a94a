import asyncio
import logging

import pytest

from storefront.session import (
    ActivityMonitor,
    AsyncioScheduler,
    EventTarget,
    InteractionKind,
    MonitorState,
    TRACKED_INTERACTIONS,
    EXPIRY_MESSAGE,
)

MINUTE_MS = 60 * 1000
THRESHOLD_S = 30 * 60


class ManualClock:
    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now


class _Handle:
    def __init__(self, when: int, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Planificateur simulé: les callbacks s'exécutent quand l'horloge avance."""

    def __init__(self, clock: ManualClock):
        self.clock = clock
        self.handles = []

    def call_later(self, delay, callback):
        h = _Handle(self.clock.now + int(delay * 1000), callback)
        self.handles.append(h)
        return h

    @property
    def pending(self):
        return [h for h in self.handles if not h.cancelled and not h.fired]

    async def advance(self, ms: int):
        target = self.clock.now + ms
        while True:
            due = sorted((h for h in self.pending if h.when <= target), key=lambda h: h.when)
            if not due:
                break
            h = due[0]
            self.clock.now = h.when
            h.fired = True
            res = h.callback()
            if asyncio.iscoroutine(res):
                await res
        self.clock.now = target


class FakeAuth:
    def __init__(self, fail: bool = False):
        self.calls = 0
        self.fail = fail

    async def sign_out(self):
        self.calls += 1
        if self.fail:
            raise RuntimeError("network down")


class FakeNavigator:
    def __init__(self):
        self.paths = []

    def navigate(self, path):
        self.paths.append(path)


class FakeNotifier:
    def __init__(self):
        self.messages = []

    def alert(self, message):
        self.messages.append(message)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return ManualScheduler(clock)


@pytest.fixture
def auth():
    return FakeAuth()


@pytest.fixture
def navigator():
    return FakeNavigator()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def monitor(auth, navigator, notifier, clock, scheduler):
    return ActivityMonitor(auth, navigator, notifier, events=EventTarget(), clock=clock, scheduler=scheduler)


def test_remaining_time_is_full_threshold_right_after_activity(monitor, clock):
    monitor.start_monitoring()
    for step_ms in (0, 1500, 7 * MINUTE_MS, 29 * MINUTE_MS + 999, 45 * MINUTE_MS):
        clock.now += step_ms
        monitor.track_activity()
        assert THRESHOLD_S - 1 <= monitor.get_remaining_time() <= THRESHOLD_S


def test_remaining_time_counts_down_in_whole_seconds(monitor, clock):
    monitor.start_monitoring()
    clock.now += 10 * MINUTE_MS + 500
    assert monitor.get_remaining_time() == THRESHOLD_S - 10 * 60 - 1


def test_remaining_time_never_negative(monitor, clock):
    monitor.start_monitoring()
    clock.now += 5 * 60 * MINUTE_MS
    assert monitor.get_remaining_time() == 0


@pytest.mark.asyncio
async def test_inactivity_expires_exactly_once(monitor, scheduler, auth, navigator, notifier):
    monitor.start_monitoring()

    await scheduler.advance(29 * MINUTE_MS)
    assert monitor.state == MonitorState.ACTIVE
    assert auth.calls == 0

    await scheduler.advance(1 * MINUTE_MS)
    assert monitor.state == MonitorState.EXPIRED
    assert auth.calls == 1
    assert notifier.messages == [EXPIRY_MESSAGE]
    assert navigator.paths == ["/auth"]
    assert scheduler.pending == []
    assert not monitor.has_pending_check

    # Etat terminal: plus aucune vérification
    await scheduler.advance(120 * MINUTE_MS)
    assert auth.calls == 1
    assert navigator.paths == ["/auth"]


@pytest.mark.asyncio
async def test_stop_before_threshold_prevents_expiry(monitor, scheduler, auth, navigator, notifier):
    monitor.start_monitoring()
    await scheduler.advance(10 * MINUTE_MS)
    monitor.stop_monitoring()

    await scheduler.advance(60 * MINUTE_MS)
    assert monitor.state == MonitorState.IDLE
    assert auth.calls == 0
    assert navigator.paths == []
    assert notifier.messages == []
    assert scheduler.pending == []


@pytest.mark.asyncio
async def test_activity_at_29_minutes_moves_expiry_to_59_minutes(monitor, scheduler, navigator):
    monitor.start_monitoring()

    await scheduler.advance(29 * MINUTE_MS)
    monitor.events.dispatch_event(InteractionKind.KEY_PRESS)

    await scheduler.advance(1 * MINUTE_MS)  # t=30min
    assert monitor.state == MonitorState.ACTIVE
    assert navigator.paths == []

    await scheduler.advance(28 * MINUTE_MS)  # t=58min
    assert monitor.state == MonitorState.ACTIVE
    assert monitor.get_remaining_time() == 60

    await scheduler.advance(1 * MINUTE_MS)  # t=59min
    assert monitor.get_remaining_time() == 0
    assert monitor.state == MonitorState.EXPIRED
    assert navigator.paths == ["/auth"]


def test_start_then_stop_leaves_no_listeners(monitor, clock):
    monitor.start_monitoring()
    monitor.stop_monitoring()
    before = monitor.last_activity_time

    clock.now += 5 * MINUTE_MS
    for kind in TRACKED_INTERACTIONS:
        assert monitor.events.dispatch_event(kind) == 0
        assert monitor.events.listener_count(kind) == 0
    assert monitor.last_activity_time == before


def test_each_interaction_kind_tracks_activity(monitor, clock):
    monitor.start_monitoring()
    for kind in ("mousedown", "keydown", "scroll", "touchstart"):
        clock.now += MINUTE_MS
        monitor.events.dispatch_event(kind)
        assert monitor.last_activity_time == clock.now


def test_untracked_interaction_is_ignored(monitor, clock):
    monitor.start_monitoring()
    before = monitor.last_activity_time
    clock.now += MINUTE_MS
    assert monitor.events.dispatch_event("mousemove") == 0
    assert monitor.last_activity_time == before


def test_start_is_idempotent(monitor, scheduler):
    monitor.start_monitoring()
    monitor.start_monitoring()
    for kind in TRACKED_INTERACTIONS:
        assert monitor.events.listener_count(kind) == 1
    assert len(scheduler.pending) == 1


def test_stop_without_start_is_noop(monitor, scheduler):
    monitor.stop_monitoring()
    assert monitor.state == MonitorState.IDLE
    assert scheduler.handles == []


@pytest.mark.asyncio
async def test_sign_out_failure_still_redirects(clock, scheduler, navigator, notifier, caplog):
    auth = FakeAuth(fail=True)
    monitor = ActivityMonitor(auth, navigator, notifier, clock=clock, scheduler=scheduler)
    monitor.start_monitoring()

    with caplog.at_level(logging.ERROR, logger="storefront.session.monitor"):
        await scheduler.advance(30 * MINUTE_MS)

    assert auth.calls == 1
    assert notifier.messages == [EXPIRY_MESSAGE]
    assert navigator.paths == ["/auth"]
    assert monitor.state == MonitorState.EXPIRED
    assert "sign_out failed" in caplog.text


@pytest.mark.asyncio
async def test_stale_check_after_stop_is_ignored(monitor, auth, clock):
    monitor.start_monitoring()
    monitor.stop_monitoring()
    clock.now += 60 * MINUTE_MS
    await monitor.check_timeout()
    assert auth.calls == 0
    assert not monitor.has_pending_check


@pytest.mark.asyncio
async def test_restart_after_expiry_starts_new_cycle(monitor, scheduler, auth):
    monitor.start_monitoring()
    await scheduler.advance(30 * MINUTE_MS)
    assert monitor.state == MonitorState.EXPIRED

    monitor.start_monitoring()
    assert monitor.state == MonitorState.ACTIVE
    assert monitor.get_remaining_time() == THRESHOLD_S
    for kind in TRACKED_INTERACTIONS:
        assert monitor.events.listener_count(kind) == 1

    await scheduler.advance(30 * MINUTE_MS)
    assert auth.calls == 2


@pytest.mark.asyncio
async def test_asyncio_scheduler_drives_real_event_loop(auth, navigator, notifier):
    monitor = ActivityMonitor(
        auth,
        navigator,
        notifier,
        scheduler=AsyncioScheduler(),
        threshold=0.05,
        poll_interval=0.01,
        auth_path="/login",
    )
    monitor.start_monitoring()
    for _ in range(100):
        await asyncio.sleep(0.01)
        if navigator.paths:
            break
    assert navigator.paths == ["/login"]
    assert auth.calls == 1
    monitor.stop_monitoring()


class BlockingAuth:
    """sign_out suspendu jusqu'à release.set()."""

    def __init__(self):
        self.calls = 0
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def sign_out(self):
        self.calls += 1
        self.entered.set()
        await self.release.wait()


@pytest.mark.asyncio
async def test_restart_during_sign_out_keeps_new_session(clock, scheduler, navigator, notifier):
    auth = BlockingAuth()
    monitor = ActivityMonitor(auth, navigator, notifier, clock=clock, scheduler=scheduler)
    monitor.start_monitoring()
    clock.now += 31 * MINUTE_MS

    expiring = asyncio.create_task(monitor.check_timeout())
    await auth.entered.wait()
    monitor.stop_monitoring()
    monitor.start_monitoring()
    auth.release.set()
    await expiring

    assert auth.calls == 1
    assert monitor.state == MonitorState.ACTIVE
    assert navigator.paths == []
    assert notifier.messages == []
    assert monitor.has_pending_check


@pytest.mark.asyncio
async def test_stop_during_sign_out_skips_redirect(clock, scheduler, navigator, notifier):
    auth = BlockingAuth()
    monitor = ActivityMonitor(auth, navigator, notifier, clock=clock, scheduler=scheduler)
    monitor.start_monitoring()
    clock.now += 30 * MINUTE_MS

    expiring = asyncio.create_task(monitor.check_timeout())
    await auth.entered.wait()
    monitor.stop_monitoring()
    auth.release.set()
    await expiring

    assert monitor.state == MonitorState.IDLE
    assert navigator.paths == []
    assert notifier.messages == []


@pytest.mark.asyncio
async def test_asyncio_scheduler_logs_failed_callback(caplog):
    scheduler = AsyncioScheduler()

    async def _fail():
        raise RuntimeError("navigate exploded")

    with caplog.at_level(logging.ERROR, logger="storefront.session.monitor"):
        scheduler.call_later(0, _fail)
        for _ in range(10):
            await asyncio.sleep(0.01)
            if "callback failed" in caplog.text:
                break

    assert "session.scheduler callback failed" in caplog.text
    assert "navigate exploded" in caplog.text
    assert scheduler._tasks == set()
