# -*- coding: utf-8 -*-
"""Ponto de entrada: ``python -m filesig PASTA --sign sha256``.

Opções omitidas são lidas das preferências (``filesig.settings``).
Com ``--gui`` abre a janela PySide6 em vez de correr na consola.
"""
from __future__ import annotations

import argparse
import signal
import sys
from typing import List, Optional

from . import settings


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="filesig", description="Calcula o checksum de todos os ficheiros de uma pasta.")
    p.add_argument("root", nargs="?", help="pasta a percorrer")
    p.add_argument("--dest", dest="dest", help="pasta a percorrer (alternativa ao posicional)")
    p.add_argument("--sign", "--algorithm", dest="algorithm", help="algoritmo (crc32, md5, sha256, …)")
    p.add_argument("--workers", type=int, help="nº máximo de ficheiros em paralelo")
    p.add_argument("--timeout", type=float, dest="file_timeout", help="segundos máximos por ficheiro")
    p.add_argument("--run-timeout", type=float, help="segundos máximos para a execução")
    p.add_argument("--ordered", action="store_true", default=None, help="ordena a saída por caminho")
    p.add_argument("--follow-symlinks", action="store_true", default=None)
    p.add_argument("--include-special", action="store_true", default=None)
    p.add_argument("--allow-failures", action="store_true", help="sai com 0 mesmo com erros por ficheiro")
    p.add_argument("--log-dir", help="grava o registo JSON nesta pasta")
    p.add_argument("--pdf", dest="report_dir", help="gera relatório PDF nesta pasta")
    p.add_argument("--gui", action="store_true", help="abre a interface gráfica")
    return p


def _pick(value, key: str):
    return settings.get(key) if value is None else value


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.gui:
        # Import tardio para não carregar o Qt na consola
        from .gui_app import iniciar_app
        iniciar_app()
        return 0

    root = args.root or args.dest or settings.get("last_root")
    if not root:
        print("Indica a pasta a analisar.", file=sys.stderr)
        return 2

    from .core.runner import cli_run

    stop = {"flag": False}

    def _on_sigint(signum, frame):
        stop["flag"] = True

    previous = signal.signal(signal.SIGINT, _on_sigint)
    try:
        return cli_run(
            root,
            _pick(args.algorithm, "algorithm"),
            _pick(args.workers, "workers"),
            fail_on_errors=False if args.allow_failures else bool(settings.get("fail_on_errors")),
            report_dir=args.report_dir,
            callbacks={"log": print, "error": lambda msg: print(msg, file=sys.stderr)},
            file_timeout=_pick(args.file_timeout, "file_timeout"),
            run_timeout=args.run_timeout,
            ordered=bool(_pick(args.ordered, "ordered")),
            follow_symlinks=bool(_pick(args.follow_symlinks, "follow_symlinks")),
            include_special=bool(_pick(args.include_special, "include_special")),
            stop_flag=lambda: stop["flag"],
            log_dir=args.log_dir,
        )
    finally:
        signal.signal(signal.SIGINT, previous)


if __name__ == "__main__":
    raise SystemExit(main())
