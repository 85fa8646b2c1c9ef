"""Process memory and CPU usage figures."""

from __future__ import annotations

import sys
import time

import psutil


def memory_usage_bytes() -> int:
    """Resident set (working set) size of this process."""
    return int(psutil.Process().memory_info().rss)


def peak_memory_usage_bytes() -> int:
    """Peak resident set size of this process."""
    info = psutil.Process().memory_info()
    peak = getattr(info, "peak_wset", None)
    if peak is not None:
        return int(peak)
    import resource

    max_rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    scale = 1 if sys.platform == "darwin" else 1024
    return max(int(max_rss) * scale, int(info.rss))


def page_usage_bytes() -> int:
    """Paged pool usage where the platform reports it, else virtual memory size."""
    info = psutil.Process().memory_info()
    paged = getattr(info, "paged_pool", None)
    if paged is not None:
        return int(paged)
    return int(info.vms)


class CpuMonitor:
    """Reports this process's CPU usage as a percentage of all processors."""

    def __init__(self) -> None:
        self._process = psutil.Process()
        self._processors = psutil.cpu_count() or 1
        self._last_time = time.perf_counter()
        times = self._process.cpu_times()
        self._last_user = times.user
        self._last_system = times.system

    def usage(self) -> float:
        """Percentage of CPU used since the previous call (or construction)."""
        now = time.perf_counter()
        times = self._process.cpu_times()
        elapsed = now - self._last_time
        busy = (times.system - self._last_system) + (times.user - self._last_user)
        self._last_time = now
        self._last_user = times.user
        self._last_system = times.system
        if elapsed <= 0:
            return 0.0
        return busy / elapsed / self._processors * 100.0