"""
Configuration for the Guard Shift Grid engine.

Grid geometry, shift duration rules and output settings live here as
dataclasses. Every value can be overridden from the environment; anything
that cannot be parsed falls back to its default with a warning.
"""

import os
import time
import logging
from dataclasses import dataclass, field
from typing import Any, Callable
from functools import wraps

# =============================================================================
# GRID CONSTANTS
# =============================================================================

SLOT_DURATION = 30              # minutes per grid slot
SLOT_HEIGHT = 30                # pixels per grid slot
MIN_SHIFT_DURATION = 30         # minutes
MAX_SHIFT_DURATION = 720        # 12 hours
MINUTES_PER_DAY = 1440
DEFAULT_NEW_SHIFT_MINUTES = 60  # click-to-create default
LONG_SHIFT_MINUTES = 480        # shifts past 8 hours are flagged as long
EVENT_HISTORY_LIMIT = 1000      # delivered events kept per queue
DEFAULT_WINDOW_DAYS = 7         # days shown by a multi-day view


# =============================================================================
# ENVIRONMENT HELPERS
# =============================================================================

def _env_int(name: str, default: int) -> int:
    """
    Read an integer setting from the environment.

    Args:
        name: Environment variable name
        default: Value used when the variable is unset or malformed

    Returns:
        Parsed integer or the default
    """
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logging.warning(f"⚠️  {name}={raw!r} is not an integer, using {default}")
        return default


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag (1/true/yes/on) from the environment."""
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


def _env_str(name: str, default: str) -> str:
    """Read a string setting from the environment."""
    return os.environ.get(name, "").strip() or default


# =============================================================================
# RETRY WITH EXPONENTIAL BACKOFF
# =============================================================================

def retry_with_backoff(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential_base: float = 2.0,
    exceptions: tuple = (Exception,)
) -> Callable:
    """
    Decorator for retrying functions with exponential backoff.

    Used around calls into the remote shift store, which this engine
    never owns.

    Args:
        max_retries: Maximum number of retry attempts
        base_delay: Initial delay between retries (seconds)
        max_delay: Maximum delay between retries (seconds)
        exponential_base: Base for exponential calculation
        exceptions: Tuple of exceptions to catch and retry

    Returns:
        Decorated function with retry logic
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            last_exception = None

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    last_exception = e

                    if attempt < max_retries:
                        delay = min(
                            base_delay * (exponential_base ** attempt),
                            max_delay
                        )

                        logging.warning(
                            f"Attempt {attempt + 1}/{max_retries + 1} failed: {e}. "
                            f"Retrying in {delay:.1f}s..."
                        )
                        time.sleep(delay)
                    else:
                        logging.error(
                            f"All {max_retries + 1} attempts failed. Last error: {e}"
                        )

            raise last_exception

        return wrapper
    return decorator


# =============================================================================
# GRID CONFIGURATION
# =============================================================================

@dataclass
class GridConfig:
    """
    Geometry of the visual day grid.

    Attributes:
        slot_minutes: Time quantum every snap rounds to
        slot_height: Pixel height of one slot
        day_start: First visible clock time ("HH:MM")
        day_end: Last visible clock time ("HH:MM", "24:00" for midnight)
        default_new_shift_minutes: Length of a click-to-create preview
        allow_overlap: Whether moved/resized shifts may overlap their peers
    """
    slot_minutes: int = SLOT_DURATION
    slot_height: int = SLOT_HEIGHT
    day_start: str = "00:00"
    day_end: str = "24:00"
    default_new_shift_minutes: int = DEFAULT_NEW_SHIFT_MINUTES
    allow_overlap: bool = False


# =============================================================================
# SHIFT RULES CONFIGURATION
# =============================================================================

@dataclass
class ShiftRulesConfig:
    """Duration bounds enforced on every move and resize."""

    min_duration: int = MIN_SHIFT_DURATION
    max_duration: int = MAX_SHIFT_DURATION
    day_limit: int = MINUTES_PER_DAY


# =============================================================================
# MAIN APPLICATION CONFIGURATION
# =============================================================================

@dataclass
class AppConfig:
    """Main application configuration."""

    grid: GridConfig = field(default_factory=GridConfig)
    rules: ShiftRulesConfig = field(default_factory=ShiftRulesConfig)

    # Output settings
    output_dir: str = "output"
    verbose: bool = True

    @classmethod
    def load(cls) -> "AppConfig":
        """Load configuration from environment and defaults."""
        grid = GridConfig(
            slot_minutes=_env_int("SHIFTGRID_SLOT_MINUTES", SLOT_DURATION),
            slot_height=_env_int("SHIFTGRID_SLOT_HEIGHT", SLOT_HEIGHT),
            day_start=_env_str("SHIFTGRID_DAY_START", "00:00"),
            day_end=_env_str("SHIFTGRID_DAY_END", "24:00"),
            default_new_shift_minutes=_env_int("SHIFTGRID_NEW_SHIFT_MINUTES",
                                               DEFAULT_NEW_SHIFT_MINUTES),
            allow_overlap=_env_bool("SHIFTGRID_ALLOW_OVERLAP", False),
        )
        rules = ShiftRulesConfig(
            min_duration=_env_int("SHIFTGRID_MIN_DURATION", MIN_SHIFT_DURATION),
            max_duration=_env_int("SHIFTGRID_MAX_DURATION", MAX_SHIFT_DURATION),
        )
        return cls(
            grid=grid,
            rules=rules,
            output_dir=_env_str("SHIFTGRID_OUTPUT_DIR", "output"),
            verbose=_env_bool("SHIFTGRID_VERBOSE", True),
        )


# Global configuration instance
config = AppConfig.load()


# =============================================================================
# USAGE INSTRUCTIONS
# =============================================================================
#
# Override any setting before starting the host application, e.g. a
# business-hours grid with 15 minute slots:
#
#    export SHIFTGRID_DAY_START="08:00"
#    export SHIFTGRID_DAY_END="17:00"
#    export SHIFTGRID_SLOT_MINUTES=15
#
# =============================================================================
