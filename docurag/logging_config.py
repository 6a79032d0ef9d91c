"""Logging and observability utilities: structured logging, latency tracking, operation counters."""

import inspect
import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Dict, Optional, Union


def setup_logging(level: Union[int, str] = logging.INFO):
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def log_latency(operation_name: str):
    """Log call latency; methods also report into `self.metrics` when it is an OperationMetrics."""

    def decorator(func: Callable):
        logger = logging.getLogger(func.__module__)

        def _record(args, success: bool, start: float, error: Optional[Exception] = None):
            latency_ms = (time.perf_counter() - start) * 1000
            if success:
                logger.info(f"{operation_name} | latency_ms={latency_ms:.2f} | status=success")
            else:
                logger.error(f"{operation_name} | latency_ms={latency_ms:.2f} | status=error | error={error}")
            metrics = getattr(args[0], "metrics", None) if args else None
            if isinstance(metrics, OperationMetrics):
                metrics.record(operation_name, success=success, latency_ms=latency_ms)

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _record(args, False, start, e)
                raise
            _record(args, True, start)
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _record(args, False, start, e)
                raise
            _record(args, True, start)
            return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


@dataclass
class _OperationStats:
    calls: int = 0
    successes: int = 0
    failures: int = 0
    total_latency_ms: float = 0.0


class OperationMetrics:
    """In-process counters for ingest/search/answer calls.

    Search usage is accumulated here for display only.
    """

    def __init__(self):
        self._operations: Dict[str, _OperationStats] = {}
        self.embedding_requests = 0
        self.query_characters = 0

    def record(self, operation: str, *, success: bool, latency_ms: float):
        stats = self._operations.setdefault(operation, _OperationStats())
        stats.calls += 1
        stats.total_latency_ms += latency_ms
        if success:
            stats.successes += 1
        else:
            stats.failures += 1

    def record_usage(self, *, embedding_requests: int, query_characters: int):
        self.embedding_requests += embedding_requests
        self.query_characters += query_characters

    def get_stats(self) -> dict:
        operations = {}
        for name, stats in sorted(self._operations.items()):
            avg_latency = stats.total_latency_ms / stats.calls if stats.calls > 0 else 0
            operations[name] = {
                "calls": stats.calls,
                "successes": stats.successes,
                "failures": stats.failures,
                "avg_latency_ms": round(avg_latency, 2),
            }
        return {
            "operations": operations,
            "usage": {
                "embedding_requests": self.embedding_requests,
                "query_characters": self.query_characters,
            },
        }
