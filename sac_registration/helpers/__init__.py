from .logging_setup import setup_logging
from .perf_monitoring import checkpoint, timeit

__all__ = ["setup_logging", "checkpoint", "timeit"]
