"""Motor de checksums: Scanner → HashPool → ResultSink."""

from .errors import (
    CancellationError,
    ConfigurationError,
    DigestTimeout,
    FileSigError,
    ReadError,
    TraversalError,
)
from .hasher import Digester, available_algorithms, file_hash, register_algorithm, resolve
from .models import Outcome, RunStatus, RunSummary, Task
from .pool import HashPool, default_workers
from .runner import checksum_tree, cli_run
from .scanner import Scanner, scan
from .sink import ResultSink, format_outcome

__all__ = [
    "CancellationError",
    "ConfigurationError",
    "Digester",
    "DigestTimeout",
    "FileSigError",
    "HashPool",
    "Outcome",
    "ReadError",
    "ResultSink",
    "RunStatus",
    "RunSummary",
    "Scanner",
    "Task",
    "TraversalError",
    "available_algorithms",
    "checksum_tree",
    "cli_run",
    "default_workers",
    "file_hash",
    "format_outcome",
    "register_algorithm",
    "resolve",
    "scan",
]
