# filesig/worker.py
from __future__ import annotations

from typing import Dict, Optional

from PySide6.QtCore import QObject, Signal

from .core.errors import CancellationError, ConfigurationError
from .core.models import RunSummary


class HashWorker(QObject):
    progress = Signal(int)        # nº de ficheiros já tratados
    line     = Signal(str)        # linha de resultado / mensagem
    finished = Signal(object)     # RunSummary (ou None em erro fatal)

    def __init__(self, cfg: Dict, parent=None):
        super().__init__(parent)
        self.cfg = cfg
        self._stop = False
        self.summary: Optional[RunSummary] = None

    def cancel(self):
        self._stop = True

    def run(self):
        """Executa num QThread."""
        from .core.runner import checksum_tree  # import tardio para arrancar mais depressa

        summary: Optional[RunSummary] = None
        try:
            self.line.emit(f"A calcular {self.cfg.get('algorithm', 'md5')} em {self.cfg['root']}…")
            summary = checksum_tree(
                **self.cfg,
                stop_flag=lambda: self._stop,
                callbacks={"log": self.line.emit, "progress": self.progress.emit},
            )
            self.line.emit(f"✔ Concluído: {summary.succeeded} ok, {summary.failed} erro(s).")
        except CancellationError as e:
            summary = e.summary
            if e.reason == "deadline":
                self.line.emit("⏱️  Tempo limite da execução atingido.")
            else:
                self.line.emit("⏹️  Cancelado pelo utilizador.")
        except ConfigurationError as e:
            self.line.emit(f"❌ Erro: {e}")
        finally:
            self.summary = summary
            self.finished.emit(summary)
