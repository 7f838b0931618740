"""
Dispatch Inbox

The dispatch thread reads from exactly one place: an unbounded FIFO fed by
two producers. The EventReader thread pushes X events, the IPC workers push
decoded commands. Items come out strictly in arrival order, whichever
producer they came from.
"""

from __future__ import annotations
import queue
import threading
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Tuple

from Xlib import error

if TYPE_CHECKING:
    from Xlib.display import Display
    from .commands import Command


class Source(Enum):
    """Which producer an inbox item came from."""

    EVENT = "event"
    COMMAND = "command"


class Inbox:
    """Merged channel of protocol events and remote commands."""

    def __init__(self):
        # No maxsize: a burst of input is buffered entirely in memory
        self._queue: "queue.Queue[Tuple[Source, Any]]" = queue.Queue()

    def put_event(self, ev):
        self._queue.put((Source.EVENT, ev))

    def put_command(self, command: "Command"):
        self._queue.put((Source.COMMAND, command))

    def get(self, timeout: Optional[float] = None) -> Tuple[Source, Any]:
        """Block until the next item is available.

        Raises:
            queue.Empty: If timeout is given and nothing arrived in time
        """
        return self._queue.get(timeout=timeout)

    def empty(self) -> bool:
        return self._queue.empty()


class EventReader(threading.Thread):
    """Thread that blocks on the X connection and forwards every event."""

    def __init__(self, display: "Display", inbox: Inbox):
        super().__init__(name="orbitwm-events", daemon=True)
        self.display = display
        self.inbox = inbox

    def run(self):
        while True:
            try:
                ev = self.display.next_event()
            except error.ConnectionClosedError:
                # Display closed on Quit
                return
            self.inbox.put_event(ev)
