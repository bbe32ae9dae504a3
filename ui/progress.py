"""Progress reporting for pipeline runs"""

import sys
import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, TextIO, Tuple


class ProgressTracker(ABC):
    """Receives stage events from the orchestrator"""

    @abstractmethod
    def start_stage(self, stage_num: int, stage_name: str):
        pass

    @abstractmethod
    def complete_stage(self, stage_num: int):
        pass

    @abstractmethod
    def fail(self, stage_num: int, message: str):
        pass

    @abstractmethod
    def complete(self):
        pass


class ConsoleProgress(ProgressTracker):
    """One line per stage event on stderr, with stage timings"""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stderr
        self.names: Dict[int, str] = {}
        self.durations: Dict[int, float] = {}
        self._started_at: Dict[int, float] = {}

    def _emit(self, marker: str, text: str):
        print(f"[{marker}] {text}", file=self.stream)

    def start_stage(self, stage_num: int, stage_name: str):
        self.names[stage_num] = stage_name
        self._started_at[stage_num] = time.perf_counter()
        self._emit("◉", f"Stage {stage_num}: {stage_name}...")

    def complete_stage(self, stage_num: int):
        elapsed = time.perf_counter() - self._started_at.pop(stage_num, time.perf_counter())
        self.durations[stage_num] = elapsed
        name = self.names.get(stage_num, "Unknown")
        self._emit("✓", f"Stage {stage_num}: {name} complete ({elapsed * 1000:.1f} ms)")

    def fail(self, stage_num: int, message: str):
        name = self.names.get(stage_num, "Unknown")
        self._emit("✗", f"Stage {stage_num}: {name} failed - {message}")

    def complete(self):
        total = sum(self.durations.values())
        self._emit("✓", f"Pipeline complete in {total * 1000:.1f} ms")


class SilentProgress(ProgressTracker):
    """Records stage events without printing"""

    def __init__(self):
        self.started: List[int] = []
        self.completed = set()
        self.failures: List[Tuple[int, str]] = []
        self.finished = False

    def start_stage(self, stage_num: int, stage_name: str):
        self.started.append(stage_num)

    def complete_stage(self, stage_num: int):
        self.completed.add(stage_num)

    def fail(self, stage_num: int, message: str):
        self.failures.append((stage_num, message))

    def complete(self):
        self.finished = True
