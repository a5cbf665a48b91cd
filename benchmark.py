"""
Frame timing for the Guard Shift Grid engine.

Every pointer move during a drag commits a mutation and the host re-renders
the layout, so the numbers that matter are per frame: how long one frame
takes on average, the slowest frame, and how many frames miss a 60 fps
budget.

Usage:
    python benchmark.py
"""
import random
import statistics
import time
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Dict, List

from rich.console import Console
from rich.table import Table

from engine.layout import calculate_shift_layout
from engine.multi_day_view import MultiDayView
from engine.overlap import find_conflicts
from engine.schedule_view import DayScheduleView
from engine.time_grid import minutes_to_time
from engine.validator import validate_shift_move
from models.shift import Shift

# One frame at 60 fps, in seconds
FRAME_BUDGET = 1 / 60

console = Console()


# =============================================================================
# FRAME TIMING
# =============================================================================

@dataclass
class FrameTiming:
    """
    Timings of one scenario.

    Attributes:
        name: Scenario label
        frames: Frames rendered by one call of the scenario
        times: Wall time of each successful call (seconds)
        failures: Calls that raised
    """
    name: str
    frames: int = 1
    times: List[float] = field(default_factory=list)
    failures: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def frame_times(self) -> List[float]:
        return [t / self.frames for t in self.times]

    @property
    def mean_ms(self) -> float:
        frame_times = self.frame_times
        return statistics.mean(frame_times) * 1000 if frame_times else 0.0

    @property
    def worst_ms(self) -> float:
        frame_times = self.frame_times
        return max(frame_times) * 1000 if frame_times else 0.0

    @property
    def over_budget(self) -> int:
        """Calls whose average frame missed the budget."""
        return sum(1 for t in self.frame_times if t > FRAME_BUDGET)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "calls": len(self.times),
            "frames_per_call": self.frames,
            "mean_frame_ms": round(self.mean_ms, 3),
            "worst_frame_ms": round(self.worst_ms, 3),
            "over_budget": self.over_budget,
            "failures": self.failures,
            "timestamp": self.timestamp.isoformat(),
        }


class Benchmark:
    """
    Runs timed scenarios and reports per-frame cost.

    Usage:
        bench = Benchmark()
        bench.add("Drag", drag_session, iterations=3, frames=120)
        bench.run()
        bench.print_report()
    """

    def __init__(self, verbose: bool = True):
        self.verbose = verbose
        self.scenarios: List[Dict] = []
        self.results: List[FrameTiming] = []

    def add(self, name: str, func: Callable[[], object], iterations: int = 5,
            frames: int = 1) -> "Benchmark":
        """
        Add a scenario.

        Args:
            name: Label shown in the report
            func: Zero-argument callable running the scenario once
            iterations: Number of timed calls
            frames: Frames one call renders, used to get per-frame cost
        """
        if frames < 1:
            raise ValueError(f"frames must be at least 1, got {frames}")
        self.scenarios.append({"name": name, "func": func,
                               "iterations": iterations, "frames": frames})
        return self

    def run(self) -> List[FrameTiming]:
        """Time every scenario. A failing call is counted and skipped."""
        self.results = []

        for scenario in self.scenarios:
            timing = FrameTiming(name=scenario["name"], frames=scenario["frames"])
            for i in range(scenario["iterations"]):
                start = time.perf_counter()
                try:
                    scenario["func"]()
                except Exception as e:
                    timing.failures += 1
                    if self.verbose:
                        console.print(f"[red]  {scenario['name']} call {i + 1} failed: {e}[/red]")
                    continue
                timing.times.append(time.perf_counter() - start)
            self.results.append(timing)

        return self.results

    def print_report(self) -> None:
        """Print one row per scenario."""
        if not self.results:
            console.print("[yellow]No results. Run the benchmark first.[/yellow]")
            return

        table = Table(title=f"⏱️ Frame timing (budget {FRAME_BUDGET * 1000:.1f}ms)")
        table.add_column("Scenario", style="cyan")
        table.add_column("Frames", justify="right")
        table.add_column("Mean", justify="right")
        table.add_column("Worst", justify="right")
        table.add_column("Status")

        for result in self.results:
            if result.failures:
                status = f"[red]❌ {result.failures} failed[/red]"
            elif result.worst_ms / 1000 <= FRAME_BUDGET:
                status = "[green]✅ within budget[/green]"
            else:
                status = f"[yellow]⚠️ {result.over_budget} over budget[/yellow]"
            table.add_row(
                result.name,
                str(result.frames),
                f"{result.mean_ms:.3f}ms",
                f"{result.worst_ms:.3f}ms",
                status,
            )

        console.print(table)

    def get_results_dict(self) -> List[dict]:
        return [r.to_dict() for r in self.results]


# =============================================================================
# SYNTHETIC DATA
# =============================================================================

def build_synthetic_day(shift_date: date, shift_count: int = 40, seed: int = 7) -> List[Shift]:
    """
    Build a busy day of shifts with plenty of overlap.

    Args:
        shift_date: Day the shifts belong to
        shift_count: Number of shifts
        seed: Random seed so runs are comparable

    Returns:
        List of Shift
    """
    rng = random.Random(seed)
    shifts = []
    for i in range(shift_count):
        start = rng.randrange(0, 20 * 60, 30)
        duration = rng.choice([60, 120, 240, 480, 600])
        end = min(start + duration, 24 * 60)
        shifts.append(Shift(
            id=f"bench_{shift_date.isoformat()}_{i:03d}",
            date=shift_date,
            start_time=minutes_to_time(start),
            end_time=minutes_to_time(end),
            title=f"Post {i % 6 + 1}",
            staff_id=f"guard_{i % 15}",
        ))
    return shifts


# =============================================================================
# SYSTEM BENCHMARK (MAIN)
# =============================================================================

def run_system_benchmark() -> List[dict]:
    """Time the render path and a drag session on busy synthetic data."""
    console.rule("[bold]GUARD SHIFT GRID - FRAME TIMING[/bold]")

    shift_date = date(2024, 12, 16)
    busy_day = build_synthetic_day(shift_date, shift_count=200)
    week = [
        shift
        for offset in range(7)
        for shift in build_synthetic_day(date.fromordinal(shift_date.toordinal() + offset),
                                         shift_count=40, seed=offset)
    ]
    drag_moves = list(range(0, 1440, 7))

    def render_layout():
        return calculate_shift_layout(busy_day)

    def render_conflicts():
        return find_conflicts(busy_day)

    def validate_in_place():
        return [validate_shift_move(s, s.start_time, s.end_time, busy_day) for s in busy_day]

    def drag_session():
        view = DayScheduleView(shift_date, busy_day[:40], allow_overlap=True, verbose=False)
        target = view.shifts[0]
        top, _ = view.geometry.shift_position(target)
        view.pointer_down(top + 5, target.id)
        for y in drag_moves:
            view.pointer_move(y)
            view.layout()
        view.pointer_up()
        view.close()

    def render_week():
        window = MultiDayView(week, shift_date, allow_overlap=True, verbose=False)
        for day in window.dates:
            window.day(day).layout()
        window.close()

    bench = Benchmark()
    bench.add("Layout (200 shifts)", render_layout, iterations=5)
    bench.add("Conflicts (200 shifts)", render_conflicts, iterations=5)
    bench.add("Validation (200 shifts)", validate_in_place, iterations=3)
    bench.add("Drag + render (40 shifts)", drag_session, iterations=3, frames=len(drag_moves))
    bench.add("Week render (7 x 40 shifts)", render_week, iterations=3, frames=7)

    bench.run()
    bench.print_report()
    return bench.get_results_dict()


if __name__ == "__main__":
    run_system_benchmark()
