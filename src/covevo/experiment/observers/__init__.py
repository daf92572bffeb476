from .console import LoggingObserver
from .storage import JsonlStorageObserver, read_trace

__all__ = ["LoggingObserver", "JsonlStorageObserver", "read_trace"]
