# filesig/pdf_report.py
from __future__ import annotations

from pathlib import Path
import datetime

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from .core.models import RunSummary


def gerar_relatorio_pdf(summary: RunSummary, destino: str | Path) -> Path:
    """Gera um relatório PDF com o resumo de uma execução.

    O ficheiro é guardado com o nome ``checksum_relatorio_<data>_<hora>.pdf``.

    Parameters
    ----------
    summary: RunSummary
        Resumo devolvido por ``checksum_tree`` (ou pela CancellationError).
    destino: str | Path
        Pasta onde o relatório será guardado.

    Returns
    -------
    Path
        Caminho para o ficheiro PDF criado.
    """
    destino = Path(destino)
    destino.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    pdf_path = destino / f"checksum_relatorio_{timestamp}.pdf"

    c = canvas.Canvas(str(pdf_path), pagesize=A4)
    width, height = A4
    y = height - 50

    def _nova_linha(texto: str, x: int = 50) -> None:
        nonlocal y
        c.drawString(x, y, texto)
        y -= 20
        if y < 50:
            c.showPage()
            y = height - 50
            c.setFont("Helvetica", 12)

    def _format_ts(ts) -> str:
        return ts.strftime("%Y-%m-%d %H:%M:%S") if ts else "-"

    c.setFont("Helvetica-Bold", 16)
    c.drawString(50, y, "Relatório de Checksums")
    y -= 40

    c.setFont("Helvetica", 12)
    linhas = [
        f"Pasta               : {summary.root}",
        f"Algoritmo           : {summary.algorithm}",
        f"Início              : {_format_ts(summary.started_at)}",
        f"Fim                 : {_format_ts(summary.finished_at)}",
        f"Duração             : {datetime.timedelta(seconds=int(summary.duration_sec))}",
        f"Estado              : {summary.status.value}",
        f"Ficheiros calculados: {summary.succeeded}",
        f"Erros               : {summary.failed}",
        f"Workers em paralelo : {summary.peak_workers}",
    ]
    for linha in linhas:
        _nova_linha(linha)

    # Erros
    if summary.errors:
        y -= 10
        c.setFont("Helvetica-Bold", 12)
        c.drawString(50, y, "Erros:")
        y -= 20
        c.setFont("Helvetica", 10)
        for outcome in sorted(summary.errors, key=lambda o: str(o.path)):
            _nova_linha(f"[{outcome.kind}] {outcome.path}: {outcome.error}", x=60)

    c.save()
    return pdf_path
