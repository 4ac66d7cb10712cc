"""
Method profiler: records how long methods marked with @profiled take.

    profiler = Profiler(SystemClock())
    crawler = profiler.wrap(ParallelWebCrawler(config, source))
    crawler.crawl(urls)
    profiler.write_data('profile.txt')
"""

import functools
import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Union

from .utils.clock import Clock, SystemClock

PROFILED_ATTR = '__profiled__'


def profiled(func):
    """Mark a method for timing by Profiler.wrap()."""
    setattr(func, PROFILED_ATTR, True)
    return func


def is_profiled(obj: Any) -> bool:
    return any(
        getattr(value, PROFILED_ATTR, False)
        for cls in type(obj).__mro__
        for value in vars(cls).values()
    )


class ProfilingState:
    """Aggregates method timings across calls and threads."""

    def __init__(self):
        self._lock = threading.Lock()
        self._durations: Dict[str, timedelta] = {}
        self._calls: Dict[str, int] = {}
        self._threads: Dict[str, List[str]] = {}

    def record(self, calling_class: type, method_name: str, elapsed: timedelta,
               thread_name: str):
        if elapsed < timedelta(0):
            raise ValueError("negative elapsed time")

        key = f"{calling_class.__module__}.{calling_class.__qualname__}#{method_name}"
        with self._lock:
            self._durations[key] = self._durations.get(key, timedelta(0)) + elapsed
            self._calls[key] = self._calls.get(key, 0) + 1
            threads = self._threads.setdefault(key, [])
            if thread_name not in threads:
                threads.append(thread_name)

    def write(self, stream: TextIO):
        """
        Write the aggregated data, one line per method and section.

        Durations are summed across calls: three one-second calls of the
        same method are reported as 3 seconds.
        """
        with self._lock:
            durations = sorted(self._durations.items())
            threads = sorted(self._threads.items())
            calls = sorted(self._calls.items())

        for key, duration in durations:
            stream.write(f"{key} took {format_duration(duration)}\n")
        for key, names in threads:
            stream.write(f"{key} executed on threads {' '.join(names)}\n")
        for key, count in calls:
            stream.write(f"{key} was executed {count} times\n")


def format_duration(duration: timedelta) -> str:
    total_ms = int(duration.total_seconds() * 1000)
    minutes, rest = divmod(total_ms, 60_000)
    seconds, millis = divmod(rest, 1000)
    return f"{minutes}m {seconds}s {millis}ms"


class _ProfilingProxy:
    """Delegates to the wrapped object, timing @profiled methods."""

    def __init__(self, target: Any, clock: Clock, state: ProfilingState):
        object.__setattr__(self, '_target', target)
        object.__setattr__(self, '_clock', clock)
        object.__setattr__(self, '_state', state)

    def __getattr__(self, name: str):
        attr = getattr(self._target, name)
        func = getattr(attr, '__func__', attr)
        if not callable(attr) or not getattr(func, PROFILED_ATTR, False):
            return attr

        @functools.wraps(attr)
        def timed(*args, **kwargs):
            start = self._clock.now()
            try:
                return attr(*args, **kwargs)
            finally:
                self._state.record(
                    type(self._target), name, self._clock.now() - start,
                    threading.current_thread().name
                )

        return timed

    def __setattr__(self, name: str, value: Any):
        setattr(self._target, name, value)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, _ProfilingProxy):
            other = other._target
        return self._target == other

    def __hash__(self) -> int:
        return hash(self._target)

    def __repr__(self) -> str:
        return f"<profiled {self._target!r}>"


class Profiler:
    """Wraps objects so that their @profiled methods are timed."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()
        self.state = ProfilingState()
        self.start_time: datetime = self.clock.now()

    def wrap(self, target: Any) -> Any:
        if not is_profiled(target):
            raise ValueError(f"{type(target).__name__} has no @profiled methods")
        return _ProfilingProxy(target, self.clock, self.state)

    def write_data(self, destination: Union[str, Path, TextIO]):
        """Append profiling data to a file, or write it to a stream."""
        if isinstance(destination, (str, Path)):
            path = Path(destination)
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'a', encoding='utf-8') as file:
                self._write(file)
        else:
            self._write(destination)

    def _write(self, stream: TextIO):
        stream.write(f"Run at {self.start_time.isoformat()}\n")
        self.state.write(stream)
        stream.write('\n')
