"""
Request bookkeeping used by the HTTP middleware chain: a bounded request log
with aggregate statistics, and a sliding-window rate limiter per client.
"""
import time
from collections import Counter, deque
from typing import Any, Deque, Dict, List, Optional

from pydantic import BaseModel


class RequestLog(BaseModel):
    method: str
    url: str
    statusCode: int
    responseTime: float
    ip: str
    userAgent: str
    timestamp: str
    query: Dict[str, str] = {}


class RequestLogger:
    """Keeps the last max_logs requests in memory."""

    def __init__(self, max_logs: int = 1000):
        self._logs: Deque[RequestLog] = deque(maxlen=max_logs)

    def log(self, entry: RequestLog) -> None:
        self._logs.append(entry)

    def get_logs(self, limit: int = 100) -> List[Dict[str, Any]]:
        if limit <= 0:
            return []
        return [entry.model_dump() for entry in list(self._logs)[-limit:]]

    def get_stats(self) -> Dict[str, Any]:
        status_codes = Counter(entry.statusCode for entry in self._logs)
        endpoints = Counter(entry.url for entry in self._logs)
        total_time = sum(entry.responseTime for entry in self._logs)
        return {
            "totalRequests": len(self._logs),
            "averageResponseTime": total_time / len(self._logs) if self._logs else 0,
            "statusCodes": {str(code): count for code, count in sorted(status_codes.items())},
            "topEndpoints": [{"url": url, "count": count} for url, count in endpoints.most_common(10)],
        }

    def clear(self) -> None:
        self._logs.clear()


class RateLimiter:
    """Allows max_requests per client inside a sliding window of window seconds."""

    def __init__(self, max_requests: int, window: float, clock=time.monotonic):
        self.max_requests = max_requests
        self.window = window
        self._clock = clock
        self._calls: Dict[str, Deque[float]] = {}
        self._last_eviction = clock()

    def __len__(self) -> int:
        return len(self._calls)

    def _prune(self, client: str, now: float) -> Deque[float]:
        calls = self._calls.get(client)
        if calls is None:
            return deque()
        window_start = now - self.window
        while calls and calls[0] <= window_start:
            calls.popleft()
        if not calls:
            del self._calls[client]
        return calls

    def _evict_idle(self, now: float) -> None:
        # At most once per window; clients with no call inside it are dropped.
        if now - self._last_eviction < self.window:
            return
        self._last_eviction = now
        window_start = now - self.window
        idle = [client for client, calls in self._calls.items() if not calls or calls[-1] <= window_start]
        for client in idle:
            del self._calls[client]

    def hit(self, client: str) -> bool:
        """Record a call; returns False when the client is over its limit."""
        now = self._clock()
        self._evict_idle(now)
        calls = self._prune(client, now)
        if len(calls) >= self.max_requests:
            return False
        calls.append(now)
        self._calls[client] = calls
        return True

    def retry_after(self, client: str) -> Optional[int]:
        calls = self._calls.get(client)
        if not calls:
            return None
        return max(1, int(calls[0] + self.window - self._clock()) + 1)

    def remaining(self, client: str) -> int:
        calls = self._prune(client, self._clock())
        return max(0, self.max_requests - len(calls))
