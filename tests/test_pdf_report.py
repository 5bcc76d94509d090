from pathlib import Path

from filesig.core.errors import ReadError
from filesig.core.models import Outcome, RunStatus, RunSummary, Task
from filesig.pdf_report import gerar_relatorio_pdf


def test_pdf_with_many_errors(tmp_path):
    summary = RunSummary(root=Path('/dados'), algorithm='sha256', status=RunStatus.COMPLETED)
    summary.succeeded = 10
    for i in range(80):  # força várias páginas
        p = Path(f'/dados/f{i}.txt')
        summary.errors.append(Outcome.failure(Task(p, Path(p.name)), ReadError(p, 'Permission denied')))
    summary.failed = len(summary.errors)

    pdf = gerar_relatorio_pdf(summary, tmp_path / 'rel')

    assert pdf.parent == tmp_path / 'rel'
    assert pdf.name.startswith('checksum_relatorio_')
    assert pdf.read_bytes()[:4] == b'%PDF'
