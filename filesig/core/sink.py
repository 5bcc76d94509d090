"""
ResultSink
==========

Ponto único por onde passam todos os Outcomes: formata as linhas,
conta sucessos/falhas e alimenta o HashLog.  Os workers nunca escrevem
directamente, por isso o output não se mistura.

    <caminho> :: <digest>       sucesso
    <caminho>: <mensagem>       erro
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from .logger import HashLog
from .models import Outcome, RunStatus, RunSummary

LineCb = Callable[[str], None]


def format_outcome(outcome: Outcome) -> str:
    if outcome.ok:
        return f"{outcome.path} :: {outcome.digest}"
    return f"{outcome.path}: {outcome.error}"


class ResultSink:
    def __init__(
        self,
        root: Path,
        algorithm: str,
        log_cb: Optional[LineCb] = None,
        error_cb: Optional[LineCb] = None,
        ordered: bool = False,
        collect: bool = False,
        run_log: Optional[HashLog] = None,
    ) -> None:
        self.log_cb   = log_cb
        self.error_cb = error_cb or log_cb
        self.ordered  = ordered
        self.collect  = collect
        self.run_log  = run_log

        self.summary = RunSummary(root=Path(root), algorithm=algorithm)
        self.summary.started_at = datetime.now()
        self._pending: List[Outcome] = []
        self._closed = False

    # -------------------------------------------------------------- helpers
    def _write(self, outcome: Outcome) -> None:
        line = format_outcome(outcome)
        cb = self.log_cb if outcome.ok else self.error_cb
        if cb:
            cb(line)
        else:
            print(line)

    # -------------------------------------------------------------- API
    def consume(self, outcome: Outcome) -> None:
        if self._closed:
            raise RuntimeError("ResultSink já foi fechado")

        s = self.summary
        if outcome.ok:
            s.succeeded += 1
            if self.collect:
                s.digests[outcome.rel.as_posix()] = outcome.digest or ""
        else:
            s.failed += 1
            s.errors.append(outcome)

        if self.run_log:
            self.run_log.add(outcome)

        if self.ordered:
            self._pending.append(outcome)
        else:
            self._write(outcome)

    def close(self, status: RunStatus, peak_workers: int = 0) -> RunSummary:
        """Emite o que ficou em buffer (ordenado por caminho) e fecha o resumo."""
        if self.ordered:
            for outcome in sorted(self._pending, key=lambda o: str(o.path)):
                self._write(outcome)
            self._pending.clear()

        s = self.summary
        s.status = status
        s.peak_workers = peak_workers
        s.finished_at = datetime.now()
        s.duration_sec = (s.finished_at - s.started_at).total_seconds()
        self._closed = True
        return s
