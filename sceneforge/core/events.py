"""
SceneForge Event Bus

Named lifecycle signals for rendering and application layers. Each
subscription returns a handle; disposing it removes the listener at once.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple
import logging

from blinker import Signal

from .geometry import Point

logger = logging.getLogger(__name__)

EVENT_NAMES: Tuple[str, ...] = (
    "object:added",
    "object:removed",
    "object:modified",
    "object:moving",
    "object:scaling",
    "object:rotating",
    "selection:changed",
    "selection:cleared",
    "mouse:down",
    "mouse:move",
    "mouse:up",
    "before:render",
    "after:render",
)


@dataclass
class ObjectEvent:
    """Payload for object:* signals."""
    target: Any


@dataclass
class PointerEvent:
    """Payload for mouse:* signals."""
    target: Any
    pointer: Optional[Point] = None
    raw: Any = None


@dataclass
class SelectionEvent:
    """Payload for selection:* signals."""
    active_object: Any = None
    active_group: Any = None


@dataclass
class RenderEvent:
    """Payload for before:render / after:render."""
    renderer: Any = None


class Subscription:
    """Handle returned by EventBus.on(); dispose() detaches the listener."""

    def __init__(self, name: str, signal: Signal, receiver: Callable):
        self.name = name
        self._signal: Optional[Signal] = signal
        self._receiver = receiver

    @property
    def active(self) -> bool:
        return self._signal is not None

    def dispose(self) -> None:
        """Remove the listener. Calling it again does nothing."""
        if self._signal is None:
            return
        self._signal.disconnect(self._receiver)
        self._signal = None


class EventBus:
    """
    Publish/subscribe hub backed by one blinker Signal per event name.

    Listeners receive the payload object only. Exceptions raised by a
    listener propagate to the code that emitted the event.
    """

    def __init__(self, names: Tuple[str, ...] = EVENT_NAMES):
        self._signals: Dict[str, Signal] = {name: Signal(name) for name in names}

    def _signal(self, name: str) -> Signal:
        try:
            return self._signals[name]
        except KeyError:
            raise KeyError(f"Unknown event: {name}") from None

    def on(self, name: str, handler: Callable[[Any], None]) -> Subscription:
        """Subscribe ``handler`` to ``name``."""
        signal = self._signal(name)

        def receiver(sender, event=None):
            handler(event)

        # strong reference: the Subscription decides the listener's lifetime
        signal.connect(receiver, weak=False)
        return Subscription(name, signal, receiver)

    def emit(self, name: str, payload: Any = None) -> None:
        """Deliver ``payload`` to every current listener of ``name``."""
        signal = self._signal(name)
        if signal.receivers:
            logger.debug(f"emit {name}")
        signal.send(self, event=payload)

    def listener_count(self, name: str) -> int:
        return len(self._signal(name).receivers)
