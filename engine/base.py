"""
Base class for components that consume the grid's event queue.
Provides common functionality for event handling, logging and lifecycle.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional
from rich.console import Console
from pathlib import Path
import logging
import os

from config import config
from events.event import PointerEvent, EventType
from events.event_queue import EventQueue


class ComponentState(Enum):
    """Component lifecycle states."""
    INITIALIZING = "initializing"
    READY = "ready"
    SHUTDOWN = "shutdown"


class GridComponent:
    """
    Base class for grid components.

    Provides:
    - Event delivery from an EventQueue through a per-type handler table
    - Dual logging (console + file)
    - Standard lifecycle methods

    Attributes:
        name: Unique identifier for the component
        event_queue: Queue the component is subscribed to (may be None)
        state: Current lifecycle state
        verbose: Whether log messages are printed to the console
    """

    # Class-level file logger (shared across all components)
    _file_logger: Optional[logging.Logger] = None
    _log_file_path: Optional[str] = None

    @classmethod
    def setup_file_logging(cls, log_dir: str = "output") -> str:
        """
        Set up file logging for all components.

        Args:
            log_dir: Directory for log files

        Returns:
            Path to the log file
        """
        if cls._file_logger is not None:
            return cls._log_file_path

        Path(log_dir).mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = os.path.join(log_dir, f"shiftgrid_log_{timestamp}.txt")

        logger = logging.getLogger("ShiftGridEngine")
        logger.setLevel(logging.DEBUG)

        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

        GridComponent._file_logger = logger
        GridComponent._log_file_path = log_file

        logger.info("=" * 70)
        logger.info("GUARD SHIFT GRID - LOG FILE")
        logger.info(f"Session started: {datetime.now().isoformat()}")
        logger.info("=" * 70)

        return log_file

    @classmethod
    def close_file_logging(cls) -> None:
        """Detach and close the shared file handler."""
        logger = GridComponent._file_logger
        if logger is None:
            return
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        GridComponent._file_logger = None
        GridComponent._log_file_path = None

    def __init__(self, name: str, event_queue: Optional[EventQueue] = None,
                 verbose: Optional[bool] = None):
        """
        Initialize the component.

        Args:
            name: Unique name for this component
            event_queue: Queue to subscribe to (None to drive it directly)
            verbose: Print log messages to the console (config default)
        """
        self.name = name
        self.event_queue = event_queue
        self.verbose = config.verbose if verbose is None else verbose
        self.state = ComponentState.INITIALIZING
        self.console = Console()
        self._event_handlers: Dict[EventType, Callable[[PointerEvent], None]] = {}
        self._events_handled = 0

        if self.event_queue is not None:
            self.event_queue.register(self.name, self._handle_event)

        self._setup_handlers()
        self.state = ComponentState.READY
        self.log("Component initialized and ready", "debug")

    def _setup_handlers(self) -> None:
        """Set up event type handlers. Override in subclasses."""
        self._event_handlers = {}

    def _handle_event(self, event: PointerEvent) -> None:
        """
        Route an incoming event to its handler.

        Args:
            event: The delivered event
        """
        self._events_handled += 1
        handler = self._event_handlers.get(event.event_type)
        if handler:
            handler(event)
        else:
            self._on_unknown_event(event)

    def _on_unknown_event(self, event: PointerEvent) -> None:
        """Handle event types without a handler."""
        self.log(f"Ignored event type: {event.event_type.value}", level="warning")

    # ==================== Lifecycle ====================

    def startup(self) -> None:
        """Re-subscribe to the queue after a shutdown."""
        if self.event_queue is not None and self.name not in self.event_queue.subscribers:
            self.event_queue.register(self.name, self._handle_event)
        self.state = ComponentState.READY
        self.log("🟢 Component started", "success")

    def shutdown(self) -> None:
        """Unsubscribe from the queue and log final status."""
        if self.event_queue is not None:
            self.event_queue.unregister(self.name)
        self.state = ComponentState.SHUTDOWN
        self.log(f"🔴 Component shutdown (events handled: {self._events_handled})", "info")

    def get_metrics(self) -> Dict[str, Any]:
        """
        Get component metrics.

        Returns:
            Dictionary with metrics
        """
        return {
            "name": self.name,
            "state": self.state.value,
            "events_handled": self._events_handled,
        }

    # ==================== Logging ====================

    def log(self, message: str, level: str = "info") -> None:
        """
        Log a message with component context (dual: console + file).

        Args:
            message: The log message
            level: Log level (info, warning, error, debug, success)
        """
        if self.verbose:
            colors = {
                "info": "blue",
                "warning": "yellow",
                "error": "red",
                "debug": "dim",
                "success": "green"
            }
            color = colors.get(level, "white")
            self.console.print(f"[{color}][{self.name}] {message}[/{color}]")

        if GridComponent._file_logger:
            log_level = {
                "info": logging.INFO,
                "warning": logging.WARNING,
                "error": logging.ERROR,
                "debug": logging.DEBUG,
                "success": logging.INFO,
            }.get(level, logging.INFO)

            GridComponent._file_logger.log(log_level, f"[{self.name}] {message}")

    def __str__(self) -> str:
        return f"{self.name} ({self.__class__.__name__}, {self.state.value})"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name='{self.name}')>"
