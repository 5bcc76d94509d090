"""
HashLog
=======

• Cria um ficheiro JSON (nome inclui timestamp UTC) dentro da pasta de
  destino indicada.
• Guarda estatísticas globais + listas de digests calculados e de erros.
• `close()` actualiza campos finais, grava no disco e devolve o caminho.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

from .models import Outcome, RunSummary


class HashLog:
    # -------------------------------------------------------------- construtor
    def __init__(self, root: Path, dest: Path, algorithm: str) -> None:
        dest = Path(dest)
        dest.mkdir(parents=True, exist_ok=True)

        now = datetime.now(timezone.utc)
        self.path = dest / f"checksums_{now.strftime('%Y-%m-%dT%H-%M-%S')}.json"

        self.data: dict = {
            "timestamp": now.isoformat(timespec="seconds"),
            "root": str(root),
            "algorithm": algorithm,
            "status": "running",
            "succeeded": 0,
            "failed": 0,
            "duration_sec": 0.0,
            "duration": "0:00:00",
            "files": [],           # [{"path": "...", "digest": "..."}]
            "errors": [],          # [{"path": "...", "error": "...", "kind": "read"}]
        }

    # -------------------------------------------------------------- API p/ ResultSink
    def add_digest(self, path: str, digest: str) -> None:
        self.data["files"].append({"path": path, "digest": digest})
        self.data["succeeded"] += 1

    def add_error(self, path: str, error_msg: str, kind: str) -> None:
        self.data["errors"].append({"path": path, "error": error_msg, "kind": kind})
        self.data["failed"] += 1

    def add(self, outcome: Outcome) -> None:
        if outcome.ok:
            self.add_digest(str(outcome.path), outcome.digest or "")
        else:
            self.add_error(str(outcome.path), str(outcome.error), outcome.kind)

    # -------------------------------------------------------------- fechar / gravar
    def close(self, summary: RunSummary) -> Path:
        self.data.update(
            status=summary.status.value,
            succeeded=summary.succeeded,
            failed=summary.failed,
            peak_workers=summary.peak_workers,
            duration_sec=round(summary.duration_sec, 2),
            duration=str(timedelta(seconds=int(summary.duration_sec))),
        )

        with self.path.open("w", encoding="utf-8") as fh:
            json.dump(self.data, fh, indent=2, ensure_ascii=False)

        return self.path
