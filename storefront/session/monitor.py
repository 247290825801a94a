"""
Moniteur d'inactivité de session.

- Mémorise l'horodatage (ms) de la dernière interaction utilisateur.
- Vérifie toutes les POLL_INTERVAL secondes si INACTIVITY_THRESHOLD est dépassé.
- À l'expiration: déconnexion (auth.sign_out), message bloquant, redirection
  vers la page d'authentification. Aucune vérification n'est replanifiée
  ensuite tant que start_monitoring() n'est pas rappelé.
- La détection peut avoir jusqu'à un POLL_INTERVAL de retard (polling simple).

États: idle -> active (start) -> expired (check) ; active -> idle (stop).
"""
import asyncio
import logging
import math
import time
from enum import Enum
from typing import Any, Callable, Optional, Protocol, Set

from storefront.config import AUTH_ENTRY_PATH
from .events import EventTarget, TRACKED_INTERACTIONS

logger = logging.getLogger(__name__)

# Durées en secondes
INACTIVITY_THRESHOLD = 30 * 60
POLL_INTERVAL = 60

EXPIRY_MESSAGE = "Your session has expired due to inactivity. Please sign in again."


class MonitorState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    EXPIRED = "expired"


class AuthSession(Protocol):
    async def sign_out(self) -> Any: ...


class Navigator(Protocol):
    def navigate(self, path: str) -> None: ...


class Notifier(Protocol):
    def alert(self, message: str) -> None: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle: ...


def now_ms() -> int:
    return int(time.time() * 1000)


class AsyncioScheduler:
    """
    Planificateur par défaut: boucle asyncio courante.
    Si le callback retourne une coroutine, elle est lancée dans une tâche.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        # Références fortes: la boucle ne garde que des weakrefs sur les tâches
        self._tasks: Set[asyncio.Task] = set()

    def call_later(self, delay: float, callback: Callable[[], Any]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()

        def _run():
            res = callback()
            if asyncio.iscoroutine(res):
                task = loop.create_task(res)
                self._tasks.add(task)
                task.add_done_callback(self._task_done)

        return loop.call_later(delay, _run)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("session.scheduler callback failed", exc_info=exc)


class ActivityMonitor:
    def __init__(
        self,
        auth: AuthSession,
        navigator: Navigator,
        notifier: Notifier,
        events: Optional[EventTarget] = None,
        clock: Callable[[], int] = now_ms,
        scheduler: Optional[Scheduler] = None,
        threshold: float = INACTIVITY_THRESHOLD,
        poll_interval: float = POLL_INTERVAL,
        auth_path: str = AUTH_ENTRY_PATH,
    ):
        self.auth = auth
        self.navigator = navigator
        self.notifier = notifier
        self.events = events if events is not None else EventTarget()
        self.clock = clock
        self.scheduler = scheduler or AsyncioScheduler()
        self.threshold = threshold
        self.poll_interval = poll_interval
        self.auth_path = auth_path

        self.last_activity_time: int = clock()
        self.state = MonitorState.IDLE
        self._timeout_handle: Optional[TimerHandle] = None
        # Incrémenté à chaque start/stop: invalide une expiration en cours
        self._generation = 0

    def track_activity(self) -> None:
        self.last_activity_time = self.clock()

    def start_monitoring(self) -> None:
        if self.state == MonitorState.ACTIVE:
            return
        for kind in TRACKED_INTERACTIONS:
            self.events.add_event_listener(kind, self.track_activity)
        self._generation += 1
        self.last_activity_time = self.clock()
        self.state = MonitorState.ACTIVE
        self._schedule_check()

    def stop_monitoring(self) -> None:
        for kind in TRACKED_INTERACTIONS:
            self.events.remove_event_listener(kind, self.track_activity)
        self._cancel_check()
        self.state = MonitorState.IDLE
        self._generation += 1

    def get_remaining_time(self) -> int:
        """Secondes restantes avant expiration (jamais négatif)."""
        elapsed_ms = self.clock() - self.last_activity_time
        remaining_ms = self.threshold * 1000 - elapsed_ms
        return max(0, math.floor(remaining_ms / 1000))

    @property
    def has_pending_check(self) -> bool:
        return self._timeout_handle is not None

    async def check_timeout(self) -> None:
        self._timeout_handle = None
        # Vérification arrivée après stop/expiration: ignorée
        if self.state != MonitorState.ACTIVE:
            return

        elapsed_ms = self.clock() - self.last_activity_time
        if elapsed_ms < self.threshold * 1000:
            self._schedule_check()
            return

        self.state = MonitorState.EXPIRED
        generation = self._generation
        await self._sign_out()
        # stop/start pendant la déconnexion: ce cycle n'est plus le courant
        if generation != self._generation or self.state != MonitorState.EXPIRED:
            return
        self.notifier.alert(EXPIRY_MESSAGE)
        self.navigator.navigate(self.auth_path)

    async def _sign_out(self) -> None:
        # La redirection suffit à sortir l'utilisateur de la vue authentifiée
        try:
            await self.auth.sign_out()
        except Exception:
            logger.exception("session.monitor sign_out failed, redirecting anyway")

    def _schedule_check(self) -> None:
        self._cancel_check()
        self._timeout_handle = self.scheduler.call_later(self.poll_interval, self.check_timeout)

    def _cancel_check(self) -> None:
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None


