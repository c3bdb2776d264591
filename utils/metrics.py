import logging
import threading
from collections import defaultdict

logger = logging.getLogger("api.metrics")

_LOCK = threading.Lock()
_COUNTERS: dict = defaultdict(int)
_LATENCY: dict = defaultdict(lambda: {"count": 0, "sum_ms": 0.0, "max_ms": 0.0})


def _key(name: str, labels: dict) -> tuple:
    return (name, tuple(sorted((k, str(v)) for k, v in labels.items())))


def incr(name: str, value: int = 1, **labels) -> None:
    with _LOCK:
        _COUNTERS[_key(name, labels)] += value


def observe_ms(name: str, duration_ms: float, **labels) -> None:
    with _LOCK:
        bucket = _LATENCY[_key(name, labels)]
        bucket["count"] += 1
        bucket["sum_ms"] += float(duration_ms)
        bucket["max_ms"] = max(bucket["max_ms"], float(duration_ms))


def snapshot() -> dict:
    with _LOCK:
        counters = [
            {"name": name, "labels": dict(labels), "value": value}
            for (name, labels), value in _COUNTERS.items()
        ]
        latency = [
            {"name": name, "labels": dict(labels), **stats}
            for (name, labels), stats in _LATENCY.items()
        ]
    return {"counters": counters, "latency": latency}


def reset() -> None:
    with _LOCK:
        _COUNTERS.clear()
        _LATENCY.clear()
