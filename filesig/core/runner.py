"""
runner.py  –  Funções de alto-nível checksum_tree() e cli_run()
==============================================================

• Coordena hasher → Scanner → HashPool → ResultSink → HashLog
• Pode ser usado pela CLI ou pela GUI (através de callbacks).
• checksum_tree devolve o RunSummary; cli_run devolve o código de saída.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .hasher import resolve
from .errors import CancellationError, ConfigurationError
from .logger import HashLog
from .models import RunStatus, RunSummary
from .pool import HashPool
from .scanner import Scanner
from .sink import ResultSink


# --------------------------------------------------------------------------- #
#                               TIPO DE CALLBACKS                             #
# --------------------------------------------------------------------------- #
ProgressCb = Callable[[int], Any]        # nº de outcomes já recebidos
LogCb      = Callable[[str], Any]        # linha texto


# --------------------------------------------------------------------------- #
#                                 FUNÇÕES PÚBLICAS                            #
# --------------------------------------------------------------------------- #
def checksum_tree(
    root: str | Path,
    algorithm: str = "md5",
    workers: Optional[int] = None,
    *,
    follow_symlinks: bool = False,
    include_special: bool = False,
    file_timeout: Optional[float] = None,
    run_timeout: Optional[float] = None,
    ordered: bool = False,
    collect: bool = False,
    stop_flag: Optional[Callable[[], bool]] = None,
    callbacks: Optional[Dict[str, Callable]] = None,
    log_dir: Optional[str | Path] = None,
) -> RunSummary:
    """
    Parameters
    ----------
    root            : pasta a percorrer
    algorithm       : identificador do algoritmo (crc32, md5, sha256, …)
    workers         : nº máximo de digests em simultâneo (None = nº de CPUs)
    follow_symlinks : segue ligações simbólicas?
    include_special : inclui fifos/sockets/dispositivos?
    file_timeout    : segundos máximos por ficheiro
    run_timeout     : segundos máximos para a execução inteira
    ordered         : emite as linhas ordenadas por caminho no fim
    collect         : guarda {caminho relativo: digest} no resumo
    stop_flag       : função consultada antes de cada admissão
    callbacks       : {"log": LogCb, "error": LogCb, "progress": ProgressCb}
    log_dir         : se indicado, grava lá o HashLog em JSON

    Raises
    ------
    ConfigurationError  algoritmo/raiz/parâmetros inválidos (nada foi feito)
    CancellationError   execução interrompida; `.summary` tem o que foi feito
    """
    cb_log: Optional[LogCb] = None
    cb_error: Optional[LogCb] = None
    cb_progress: Optional[ProgressCb] = None
    if callbacks:
        cb_log      = callbacks.get("log")
        cb_error    = callbacks.get("error")
        cb_progress = callbacks.get("progress")

    # ---------------------------------------------------- validação (fatal)
    digest  = resolve(algorithm)
    scanner = Scanner(root, follow_symlinks=follow_symlinks, include_special=include_special)
    pool    = HashPool(
        digest,
        max_workers=workers,
        file_timeout=file_timeout,
        run_timeout=run_timeout,
        stop_flag=stop_flag,
        log_cb=cb_log,
    )

    # ---------------------------------------------------- preparar log/sink
    run_log = None
    if log_dir:
        try:
            run_log = HashLog(scanner.root, Path(log_dir), digest.algo)
        except OSError as exc:
            raise ConfigurationError(
                f"Pasta de log inválida {log_dir}: {exc.strerror or exc}"
            ) from exc
    sink = ResultSink(
        scanner.root,
        digest.algo,
        log_cb=cb_log,
        error_cb=cb_error,
        ordered=ordered,
        collect=collect,
        run_log=run_log,
    )

    # ---------------------------------------------------- fan-out / fan-in
    for idx, outcome in enumerate(pool.run(scanner.scan()), 1):
        sink.consume(outcome)
        if cb_progress:
            cb_progress(idx)

    # ---------------------------------------------------- finalizar
    summary = sink.close(pool.status, peak_workers=pool.peak_active)
    if run_log:
        run_log.close(summary)

    if summary.status is RunStatus.CANCELLED:
        raise CancellationError(summary, pool.cancel_reason or "user")
    return summary


def cli_run(
    root: str | Path,
    algorithm: str = "md5",
    workers: Optional[int] = None,
    *,
    fail_on_errors: bool = True,
    report_dir: Optional[str | Path] = None,
    callbacks: Optional[Dict[str, Callable]] = None,
    **options: Any,
) -> int:
    """
    Executa checksum_tree e traduz o resultado num código de saída:
    0 sucesso, 1 falhas por ficheiro (se `fail_on_errors`), 2 erro de
    configuração, 130 cancelado.  Com `report_dir`, gera também o PDF.
    """
    cb_log: Optional[LogCb] = (callbacks or {}).get("log")
    cb_error: Optional[LogCb] = (callbacks or {}).get("error") or cb_log

    def _say(msg: str, error: bool = False) -> None:
        cb = cb_error if error else cb_log
        if cb:
            cb(msg)
        else:
            print(msg)

    try:
        summary = checksum_tree(root, algorithm, workers, callbacks=callbacks, **options)
    except ConfigurationError as exc:
        _say(f"ERRO FATAL: {exc}", error=True)
        return 2
    except CancellationError as exc:
        summary = exc.summary
        _say(f"Cancelado ({exc.reason}): {summary.succeeded} ok, {summary.failed} erro(s)",
             error=True)
    else:
        _say(f"Concluído: {summary.succeeded} ok, {summary.failed} erro(s)")

    if report_dir:
        from ..pdf_report import gerar_relatorio_pdf  # import tardio: reportlab é pesado
        pdf = gerar_relatorio_pdf(summary, report_dir)
        _say(f"Relatório PDF: {pdf}")

    return summary.exit_code(fail_on_errors)
