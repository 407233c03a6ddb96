"""In-process counters rendered in the Prometheus text format.

Served at /api/metrics. Request series are keyed by method and route;
lookup paths under /api/entities/ share one route label.
"""

import threading
from bisect import bisect_left
from collections import Counter

_ENTITY_PREFIX = "/api/entities/"


def _labels(**pairs) -> str:
    return "{" + ",".join(f'{key}="{value}"' for key, value in pairs.items()) + "}"


class Metrics:
    """Request, latency and encoder counters guarded by a single lock."""

    DURATION_BUCKETS = (0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)

    def __init__(self):
        self._lock = threading.Lock()
        self.reset()

    def reset(self):
        """Drop every recorded value. Used by tests."""
        with self._lock:
            self._requests: Counter = Counter()
            # (method, route) -> [per-bucket hits, total seconds, observations]
            self._latency: dict[tuple[str, str], list] = {}
            self._encoded = Counter()
            self._gauges: dict[str, tuple[float, str]] = {}

    @staticmethod
    def _normalize_path(path: str) -> str:
        if path.startswith(_ENTITY_PREFIX) and len(path) > len(_ENTITY_PREFIX):
            return _ENTITY_PREFIX + "{key}"
        return path

    def record_request(self, method: str, path: str, status: int, duration: float):
        route = self._normalize_path(path)
        # Observations past the last bound land only in +Inf
        slot = bisect_left(self.DURATION_BUCKETS, duration)
        with self._lock:
            self._requests[(method, route, status)] += 1
            series = self._latency.setdefault(
                (method, route), [[0] * len(self.DURATION_BUCKETS), 0.0, 0],
            )
            if slot < len(self.DURATION_BUCKETS):
                series[0][slot] += 1
            series[1] += duration
            series[2] += 1

    def record_encode(self, chars_in: int, chars_out: int):
        """Count one encoded text and the characters it read and produced."""
        with self._lock:
            self._encoded["texts"] += 1
            self._encoded["in"] += chars_in
            self._encoded["out"] += chars_out

    def set_gauge(self, name: str, value: float, help_text: str = ""):
        with self._lock:
            previous_help = self._gauges.get(name, (0.0, ""))[1]
            self._gauges[name] = (value, help_text or previous_help)

    def _request_lines(self) -> list[str]:
        if not self._requests:
            return []
        lines = [
            "# HELP ee_http_requests_total Total HTTP requests",
            "# TYPE ee_http_requests_total counter",
        ]
        for (method, route, status), count in sorted(self._requests.items()):
            lines.append(
                f"ee_http_requests_total{_labels(method=method, path=route, status=status)} {count}"
            )
        return lines

    def _latency_lines(self) -> list[str]:
        if not self._latency:
            return []
        name = "ee_http_request_duration_seconds"
        lines = [
            "",
            f"# HELP {name} Request duration in seconds",
            f"# TYPE {name} histogram",
        ]
        for (method, route), (hits, total, observed) in sorted(self._latency.items()):
            running = 0
            for bound, count in zip(self.DURATION_BUCKETS, hits):
                running += count
                lines.append(f"{name}_bucket{_labels(method=method, path=route, le=bound)} {running}")
            lines.append(f"{name}_bucket{_labels(method=method, path=route, le='+Inf')} {observed}")
            lines.append(f"{name}_sum{_labels(method=method, path=route)} {total:.6f}")
            lines.append(f"{name}_count{_labels(method=method, path=route)} {observed}")
        return lines

    def _encoder_lines(self) -> list[str]:
        return [
            "",
            "# HELP ee_encoded_texts_total Texts passed through the encoder",
            "# TYPE ee_encoded_texts_total counter",
            f"ee_encoded_texts_total {self._encoded['texts']}",
            "# HELP ee_encoded_chars_total Characters read and written by the encoder",
            "# TYPE ee_encoded_chars_total counter",
            f"ee_encoded_chars_total{_labels(direction='in')} {self._encoded['in']}",
            f"ee_encoded_chars_total{_labels(direction='out')} {self._encoded['out']}",
        ]

    def _gauge_lines(self) -> list[str]:
        lines = []
        for name, (value, help_text) in sorted(self._gauges.items()):
            if help_text:
                lines += ["", f"# HELP {name} {help_text}", f"# TYPE {name} gauge"]
            lines.append(f"{name} {value}")
        return lines

    def export(self) -> str:
        with self._lock:
            lines = (
                self._request_lines()
                + self._latency_lines()
                + self._encoder_lines()
                + self._gauge_lines()
            )
        return "\n".join(lines) + "\n"


metrics = Metrics()
