"""
Cible d'événements d'interaction utilisateur (équivalent minimal de `window`).
Les écouteurs sont indexés par type d'interaction; dispatch_event appelle
chaque écouteur enregistré pour ce type, dans l'ordre d'enregistrement.
"""
from enum import Enum
from typing import Callable, Dict, List, Union


class InteractionKind(str, Enum):
    POINTER_PRESS = "mousedown"
    KEY_PRESS = "keydown"
    SCROLL = "scroll"
    TOUCH_START = "touchstart"


# Types d'interaction considérés comme "activité"
TRACKED_INTERACTIONS = (
    InteractionKind.POINTER_PRESS,
    InteractionKind.KEY_PRESS,
    InteractionKind.SCROLL,
    InteractionKind.TOUCH_START,
)

Listener = Callable[[], None]


def _kind(kind: Union[InteractionKind, str]) -> str:
    return kind.value if isinstance(kind, InteractionKind) else str(kind)


class EventTarget:
    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = {}

    def add_event_listener(self, kind: Union[InteractionKind, str], listener: Listener) -> None:
        # Comme le DOM: un même écouteur n'est enregistré qu'une fois par type
        listeners = self._listeners.setdefault(_kind(kind), [])
        if listener not in listeners:
            listeners.append(listener)

    def remove_event_listener(self, kind: Union[InteractionKind, str], listener: Listener) -> None:
        listeners = self._listeners.get(_kind(kind)) or []
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, kind: Union[InteractionKind, str]) -> int:
        return len(self._listeners.get(_kind(kind)) or [])

    def dispatch_event(self, kind: Union[InteractionKind, str]) -> int:
        """Appelle les écouteurs du type donné; retourne le nombre d'appels."""
        listeners = list(self._listeners.get(_kind(kind)) or [])
        for listener in listeners:
            listener()
        return len(listeners)
