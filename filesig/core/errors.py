"""
Erros
=====

Taxonomia de erros do motor de checksums.

• ConfigurationError – fatal, levantado antes de qualquer trabalho
  (algoritmo desconhecido, pasta raiz inválida, nº de workers inválido).
• TraversalError / ReadError / DigestTimeout – por pasta ou ficheiro;
  nunca são levantados para quem chama, viajam dentro de um Outcome.
• CancellationError – levantado uma única vez no fim de uma execução
  interrompida; transporta o resumo com os resultados já produzidos.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import RunSummary


class FileSigError(Exception):
    """Base de todos os erros do filesig."""


class ConfigurationError(FileSigError):
    pass


class _PathError(FileSigError):
    def __init__(self, path: str | Path, message: str) -> None:
        super().__init__(message)
        self.path = Path(path)
        self.message = message

    def __str__(self) -> str:
        return self.message


class TraversalError(_PathError):
    """Não foi possível entrar/listar uma pasta."""


class ReadError(_PathError):
    """Não foi possível abrir/ler um ficheiro."""


class DigestTimeout(ReadError):
    """O cálculo do digest excedeu o tempo máximo por ficheiro."""


class CancellationError(FileSigError):
    def __init__(self, summary: "RunSummary", reason: str = "user") -> None:
        super().__init__(f"Execução cancelada ({reason})")
        self.summary = summary
        self.reason = reason


__all__ = [
    "FileSigError",
    "ConfigurationError",
    "TraversalError",
    "ReadError",
    "DigestTimeout",
    "CancellationError",
]
