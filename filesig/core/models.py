from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from .errors import DigestTimeout, FileSigError, TraversalError


class RunStatus(Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Task:
    """Um ficheiro a calcular. `rel` é relativo à pasta raiz."""

    path: Path
    rel: Path


@dataclass(frozen=True)
class Outcome:
    """Resultado de um Task: `digest` em caso de sucesso, `error` caso contrário."""

    path: Path
    rel: Path
    digest: Optional[str] = None
    error: Optional[FileSigError] = None

    @classmethod
    def success(cls, task: Task, digest: str) -> "Outcome":
        return cls(task.path, task.rel, digest=digest)

    @classmethod
    def failure(cls, task: Task, error: FileSigError) -> "Outcome":
        return cls(task.path, task.rel, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> str:
        if self.error is None:
            return "ok"
        if isinstance(self.error, TraversalError):
            return "traversal"
        if isinstance(self.error, DigestTimeout):
            return "timeout"
        return "read"


@dataclass
class RunSummary:
    root: Path
    algorithm: str
    status: RunStatus = RunStatus.PENDING
    succeeded: int = 0
    failed: int = 0
    errors: List[Outcome] = field(default_factory=list)
    digests: Dict[str, str] = field(default_factory=dict)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    duration_sec: float = 0.0
    peak_workers: int = 0

    @property
    def total(self) -> int:
        return self.succeeded + self.failed

    @property
    def cancelled(self) -> bool:
        return self.status is RunStatus.CANCELLED

    @property
    def ok(self) -> bool:
        return self.status is RunStatus.COMPLETED and self.failed == 0

    def exit_code(self, fail_on_errors: bool = True) -> int:
        if self.cancelled:
            return 130
        if self.failed and fail_on_errors:
            return 1
        return 0
