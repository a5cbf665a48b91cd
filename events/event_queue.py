"""
Event queue for the shift grid.
Serializes pointer events and delivers them to components in arrival order.
"""
from collections import Counter, deque
from typing import Callable, Deque, Dict, List, Optional
from rich.console import Console
from rich.table import Table

from config import EVENT_HISTORY_LIMIT
from .event import PointerEvent, EventType


class EventQueue:
    """
    FIFO queue between the host's input source and the grid components.

    Features:
    - Strict arrival-order delivery
    - Events posted while dispatching are appended, never delivered re-entrantly
    - Targeted delivery (receiver) or delivery to every subscriber
    - Bounded event history (oldest events drop off first)
    """

    def __init__(self, verbose: bool = True, history_limit: Optional[int] = EVENT_HISTORY_LIMIT):
        """
        Initialize the event queue.

        Args:
            verbose: Whether to print events to console
            history_limit: Delivered events kept for get_history (None keeps all)
        """
        self.subscribers: Dict[str, Callable[[PointerEvent], None]] = {}
        self.event_history: Deque[PointerEvent] = deque(maxlen=history_limit)
        self.verbose = verbose
        self.console = Console()
        self._pending: Deque[PointerEvent] = deque()
        self._next_sequence = 1
        self._dispatching = False

    def register(self, name: str, handler: Callable[[PointerEvent], None]) -> None:
        """
        Register a component to receive events.

        Args:
            name: Unique name of the component
            handler: Callback invoked with each delivered event

        Raises:
            ValueError: If another component already uses the name
        """
        if name in self.subscribers:
            raise ValueError(f"Component '{name}' is already registered")
        self.subscribers[name] = handler
        if self.verbose:
            self.console.print(f"[dim]📡 Component registered: {name}[/dim]")

    def unregister(self, name: str) -> None:
        """Remove a component from the queue."""
        if name in self.subscribers:
            del self.subscribers[name]

    def __len__(self) -> int:
        return len(self._pending)

    def post(self, event: PointerEvent) -> PointerEvent:
        """
        Append an event to the queue without delivering it.

        Args:
            event: The event to enqueue

        Returns:
            The event, with its arrival sequence number set
        """
        event.sequence = self._next_sequence
        self._next_sequence += 1
        self._pending.append(event)
        return event

    def dispatch(self) -> int:
        """
        Deliver queued events until the queue is empty.

        Calling dispatch from inside a handler is a no-op; the outer loop
        picks up anything the handler posted.

        Returns:
            Number of events delivered by this call
        """
        if self._dispatching:
            return 0

        delivered = 0
        self._dispatching = True
        try:
            while self._pending:
                event = self._pending.popleft()
                self.event_history.append(event)
                if self.verbose:
                    self._print_event(event)
                self._deliver(event)
                delivered += 1
        finally:
            self._dispatching = False
        return delivered

    def publish(self, event: PointerEvent) -> PointerEvent:
        """Post an event and dispatch the queue."""
        self.post(event)
        self.dispatch()
        return event

    def _deliver(self, event: PointerEvent) -> None:
        if event.receiver is None:
            for handler in list(self.subscribers.values()):
                handler(event)
        elif event.receiver in self.subscribers:
            self.subscribers[event.receiver](event)
        else:
            self.console.print(
                f"[red]⚠️ Component '{event.receiver}' not found![/red]"
            )

    def _print_event(self, event: PointerEvent) -> None:
        """Pretty print an event to console."""
        type_colors = {
            EventType.POINTER_DOWN: "cyan",
            EventType.POINTER_UP: "cyan",
            EventType.GRID_CLICK: "magenta",
            EventType.CONFIRM: "green",
            EventType.CANCEL: "yellow",
            EventType.DELETE: "red",
        }
        color = type_colors.get(event.event_type, "white")
        self.console.print(f"[{color}]{event}[/{color}]")

    def get_history(self,
                    event_type: Optional[EventType] = None,
                    shift_id: Optional[str] = None) -> List[PointerEvent]:
        """
        Get filtered event history.

        Args:
            event_type: Filter by event type
            shift_id: Filter by shift

        Returns:
            List of delivered events matching the filters
        """
        events = list(self.event_history)

        if event_type:
            events = [e for e in events if e.event_type == event_type]
        if shift_id:
            events = [e for e in events if e.shift_id == shift_id]

        return events

    def print_summary(self) -> None:
        """Print a summary of all delivered events."""
        table = Table(title="📊 Grid Event Summary")
        table.add_column("Event", style="cyan")
        table.add_column("Count", justify="right")

        counts = Counter(e.event_type for e in self.event_history)
        for event_type in EventType:
            if counts[event_type]:
                table.add_row(event_type.value, str(counts[event_type]))

        self.console.print(table)

    def export_log(self) -> List[dict]:
        """Export event history as list of dictionaries."""
        return [event.to_dict() for event in self.event_history]

    def clear_history(self) -> None:
        """Clear event history."""
        self.event_history.clear()
