# filesig/gui_app.py
from __future__ import annotations

import sys
from pathlib import Path

from PySide6.QtCore import QThread
from PySide6.QtWidgets import (
    QApplication, QCheckBox, QComboBox, QFileDialog, QGridLayout, QHBoxLayout,
    QLabel, QLineEdit, QMainWindow, QMessageBox, QPushButton, QSpinBox,
    QTextEdit, QWidget
)

from . import settings
from .core.hasher import available_algorithms
from .core.models import RunSummary
from .core.pool import default_workers
from .worker import HashWorker


# --- UI principal -------------------------------------------------------------
class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Checksums de ficheiros")
        self.resize(900, 620)

        self._thread: QThread | None = None
        self._worker: HashWorker | None = None
        self._summary: RunSummary | None = None

        self._build_ui()
        self._restore_session()

    # ---------- construção UI ----------
    def _build_ui(self):
        central = QWidget(self)
        grid = QGridLayout(central)
        grid.setSpacing(8)
        self.setCentralWidget(central)

        row = 0
        # Origem
        grid.addWidget(QLabel("Pasta:"), row, 0)
        self.root_edit = QLineEdit(self)
        grid.addWidget(self.root_edit, row, 1)
        btn_root = QPushButton("…", self)
        btn_root.clicked.connect(self._pick_root)
        grid.addWidget(btn_root, row, 2)
        row += 1

        # Algoritmo + workers
        grid.addWidget(QLabel("Algoritmo:"), row, 0)
        self.algo_combo = QComboBox(self)
        self.algo_combo.addItems(available_algorithms())
        grid.addWidget(self.algo_combo, row, 1); row += 1

        grid.addWidget(QLabel("Workers:"), row, 0)
        self.workers_spin = QSpinBox(self)
        self.workers_spin.setRange(1, 64)
        self.workers_spin.setValue(default_workers())
        grid.addWidget(self.workers_spin, row, 1); row += 1

        # opções
        self.chk_ordered  = QCheckBox("Ordenar resultados por caminho")
        self.chk_symlinks = QCheckBox("Seguir ligações simbólicas")
        grid.addWidget(self.chk_ordered,  row, 0, 1, 3); row += 1
        grid.addWidget(self.chk_symlinks, row, 0, 1, 3); row += 1

        # contador + log
        self.count_label = QLabel("0 ficheiro(s)", self)
        grid.addWidget(self.count_label, row, 0, 1, 3); row += 1

        self.log = QTextEdit(self); self.log.setReadOnly(True)
        self.log.setPlaceholderText("Pronto.")
        grid.addWidget(self.log, row, 0, 1, 3); row += 1

        # botões
        btns = QHBoxLayout()
        self.btn_start = QPushButton("Iniciar")
        self.btn_cancel = QPushButton("Cancelar"); self.btn_cancel.setEnabled(False)
        self.btn_pdf = QPushButton("Gerar PDF"); self.btn_pdf.setEnabled(False)

        self.btn_start.clicked.connect(self._on_start)
        self.btn_cancel.clicked.connect(self._on_cancel)
        self.btn_pdf.clicked.connect(self._on_pdf)

        btns.addStretch(1)
        btns.addWidget(self.btn_start)
        btns.addWidget(self.btn_cancel)
        btns.addWidget(self.btn_pdf)
        grid.addLayout(btns, row, 0, 1, 3)

    # ---------- interações ----------
    def _pick_root(self):
        p = QFileDialog.getExistingDirectory(self, "Escolher pasta", self.root_edit.text() or str(Path.home()))
        if p:
            self.root_edit.setText(p)

    def _on_start(self):
        root = self.root_edit.text().strip()
        if not root:
            QMessageBox.warning(self, "Erro", "Indica a pasta a analisar.")
            return

        cfg = dict(
            root=root,
            algorithm=self.algo_combo.currentText(),
            workers=self.workers_spin.value(),
            ordered=self.chk_ordered.isChecked(),
            follow_symlinks=self.chk_symlinks.isChecked(),
        )
        self._save_session(cfg)

        self.count_label.setText("0 ficheiro(s)")
        self.log.clear()
        self.btn_start.setEnabled(False)
        self.btn_cancel.setEnabled(True)
        self.btn_pdf.setEnabled(False)

        # arranque da thread
        self._thread = QThread(self)
        self._worker = HashWorker(cfg)
        self._worker.moveToThread(self._thread)
        self._thread.started.connect(self._worker.run)
        self._worker.progress.connect(self._on_progress)
        self._worker.line.connect(self.log.append)
        self._worker.finished.connect(self._on_finished)
        self._worker.finished.connect(self._thread.quit)
        self._worker.finished.connect(self._worker.deleteLater)
        self._thread.finished.connect(self._thread.deleteLater)
        self._thread.start()

    def _on_cancel(self):
        if self._worker:
            self.log.append("🚫 A cancelar… aguarda que os ficheiros em curso terminem.")
            self._worker.cancel()
            self.btn_cancel.setEnabled(False)  # evita cliques múltiplos

    def _on_progress(self, done: int):
        self.count_label.setText(f"{done} ficheiro(s)")

    def _on_finished(self, summary: RunSummary | None):
        self._summary = summary
        self.btn_start.setEnabled(True)
        self.btn_cancel.setEnabled(False)
        self.btn_pdf.setEnabled(summary is not None)
        self._worker = None
        self._thread = None
        if summary is None:
            return
        QMessageBox.information(
            self, "Resumo",
            f"Estado    : {summary.status.value}\n"
            f"Calculados: {summary.succeeded}\n"
            f"Erros     : {summary.failed}\n",
        )

    def _on_pdf(self):
        if not self._summary:
            return
        dest = QFileDialog.getExistingDirectory(self, "Guardar relatório em", str(Path.home()))
        if not dest:
            return
        from .pdf_report import gerar_relatorio_pdf
        pdf = gerar_relatorio_pdf(self._summary, dest)
        self.log.append(f"Relatório PDF: {pdf}")

    # ---------- sessão ----------
    def _save_session(self, cfg: dict):
        settings.set("last_root", cfg["root"])
        settings.set("algorithm", cfg["algorithm"])
        settings.set("workers", cfg["workers"])
        settings.set("ordered", cfg["ordered"])
        settings.set("follow_symlinks", cfg["follow_symlinks"])
        settings.save()

    def _restore_session(self):
        self.root_edit.setText(settings.get("last_root", ""))
        idx = self.algo_combo.findText(settings.get("algorithm"))
        if idx >= 0:
            self.algo_combo.setCurrentIndex(idx)
        if settings.get("workers"):
            self.workers_spin.setValue(int(settings.get("workers")))
        self.chk_ordered.setChecked(bool(settings.get("ordered")))
        self.chk_symlinks.setChecked(bool(settings.get("follow_symlinks")))


# ---------- bootstrap ----------
def iniciar_app():
    app = QApplication(sys.argv)
    win = MainWindow()
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    iniciar_app()
