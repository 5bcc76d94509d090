"""
Scanner
-------

Percorre recursivamente a árvore de *root* e gera um Task por cada
ficheiro regular encontrado.  As pastas são percorridas mas nunca
emitidas.

Parameters
----------
root : pathlib.Path | str
    Pasta de origem.  Tem de existir e ser listável, caso contrário
    o construtor levanta ConfigurationError (antes de qualquer Task).
follow_symlinks : bool, default False
    Se False, ignora ligações simbólicas (ficheiros e pastas).
include_special : bool, default False
    Se True, emite também fifos, sockets e dispositivos.

Yields
------
Task
    Um por ficheiro, com caminho absoluto e relativo à raiz.
Outcome
    Falha (TraversalError) por cada pasta que não foi possível listar e
    por cada entrada cujo stat() falhou; a travessia continua nas
    restantes sub-pastas.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Iterator, Set, Tuple, Union

from .errors import ConfigurationError, TraversalError
from .models import Outcome, Task

ScanItem = Union[Task, Outcome]


class Scanner:
    def __init__(
        self,
        root: str | Path,
        follow_symlinks: bool = False,
        include_special: bool = False,
    ) -> None:
        self.root            = Path(root).expanduser().absolute()
        self.follow_symlinks = follow_symlinks
        self.include_special = include_special
        self._validate_root()

    # --------------------------------------------------------------------- helpers
    def _validate_root(self) -> None:
        if not self.root.exists():
            raise ConfigurationError(f"Pasta não encontrada: {self.root}")
        if not self.root.is_dir():
            raise ConfigurationError(f"Não é uma pasta: {self.root}")
        try:
            with os.scandir(self.root):
                pass
        except OSError as exc:
            raise ConfigurationError(
                f"Sem acesso à pasta {self.root}: {exc.strerror or exc}"
            ) from exc

    @staticmethod
    def _dir_key(st: os.stat_result) -> Tuple[int, int]:
        return st.st_dev, st.st_ino

    def _traversal_failure(self, curr: Path, exc: OSError) -> Outcome:
        err = TraversalError(curr, exc.strerror or str(exc))
        return Outcome(curr, curr.relative_to(self.root), error=err)

    # --------------------------------------------------------------------- API
    def scan(self) -> Iterator[ScanItem]:
        """
        Gera Tasks a pedido: só uma listagem de pasta é materializada de
        cada vez, o resto da árvore fica por visitar até ser consumido.
        """
        visited: Set[Tuple[int, int]] = set()
        try:
            visited.add(self._dir_key(self.root.stat()))
        except OSError:
            pass

        stack = [self.root]
        while stack:
            curr = stack.pop()
            try:
                entries = sorted(curr.iterdir())
            except OSError as exc:
                yield self._traversal_failure(curr, exc)
                continue

            subdirs = []
            for entry in entries:
                try:
                    if entry.is_symlink() and not self.follow_symlinks:
                        continue
                    st = entry.stat()
                except FileNotFoundError:
                    # ligação quebrada ou entrada que desapareceu entretanto
                    continue
                except OSError as exc:
                    # ex.: pasta com leitura mas sem execução (r sem x)
                    yield self._traversal_failure(entry, exc)
                    continue

                if stat.S_ISDIR(st.st_mode):
                    key = self._dir_key(st)
                    if key in visited:
                        continue
                    visited.add(key)
                    subdirs.append(entry)
                elif stat.S_ISREG(st.st_mode) or self.include_special:
                    yield Task(entry, entry.relative_to(self.root))

            # ordem alfabética: a primeira sub-pasta fica no topo da pilha
            stack.extend(reversed(subdirs))


def scan(
    root: str | Path,
    follow_symlinks: bool = False,
    include_special: bool = False,
) -> Iterator[ScanItem]:
    """Atalho funcional: valida a raiz já e devolve o gerador de Tasks."""
    return Scanner(root, follow_symlinks, include_special).scan()
