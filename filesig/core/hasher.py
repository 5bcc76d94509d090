"""
Hasher
======

Resolve um identificador de algoritmo numa função de digest que lê o
ficheiro em blocos (memória constante, independente do tamanho).

    digest = resolve("sha256")        # ConfigurationError se desconhecido
    digest(Path("a.txt"))             # -> "2cf24dba…"

O registo de algoritmos é extensível via `register_algorithm`.
"""

from __future__ import annotations

import hashlib
import os
import stat
import time
import zlib
from pathlib import Path
from typing import Any, BinaryIO, Callable, Dict, Optional

from .errors import ConfigurationError, DigestTimeout, ReadError

# ---- Configuração --------------------------------------------
_BUF_SIZE = 1024 * 1024       # 1 MiB por leitura
_DEFAULT_ALGO = "md5"          # o mesmo do motor e das definições
# --------------------------------------------------------------


class _Crc32:
    """Adaptador com a interface de hashlib (update/hexdigest) para CRC-32."""

    name = "crc32"

    def __init__(self) -> None:
        self._crc = 0

    def update(self, data: bytes) -> None:
        self._crc = zlib.crc32(data, self._crc)

    def hexdigest(self) -> str:
        return f"{self._crc & 0xFFFFFFFF:08x}"


def _hashlib_factory(name: str) -> Callable[[], Any]:
    return lambda: hashlib.new(name)


_REGISTRY: Dict[str, Callable[[], Any]] = {"crc32": _Crc32}
for _name in (
    "md5", "sha1", "sha224", "sha256", "sha384", "sha512",
    "blake2b", "blake2s", "sha3_256", "sha3_512",
):
    _REGISTRY[_name] = _hashlib_factory(_name)

# nomes aceites pela ferramenta original
_ALIASES = {"crc": "crc32", "sha-256": "sha256", "sha-1": "sha1"}


def register_algorithm(name: str, factory: Callable[[], Any]) -> None:
    """
    Acrescenta um algoritmo ao registo. `factory()` deve devolver um
    objecto com `update(bytes)` e `hexdigest()`.
    """
    _REGISTRY[name.lower()] = factory


def available_algorithms() -> list[str]:
    return sorted(_REGISTRY)


def _canonical(algo: str) -> str:
    key = (algo or "").strip().lower()
    return _ALIASES.get(key, key)


class Digester:
    """Função de digest já resolvida para um algoritmo."""

    def __init__(self, algo: str, factory: Callable[[], Any], buf_size: int = _BUF_SIZE) -> None:
        self.algo = algo
        self._factory = factory
        self._buf_size = buf_size

    def __repr__(self) -> str:
        return f"Digester({self.algo!r})"

    @staticmethod
    def _open(p: Path) -> BinaryIO:
        """
        Abre `p` para leitura binária.  Fifos e sockets falham logo (abrir
        um fifo sem escritor bloqueia no kernel); dispositivos são abertos
        em modo não bloqueante.
        """
        mode = p.stat().st_mode
        if stat.S_ISREG(mode):
            return p.open("rb")
        if stat.S_ISFIFO(mode) or stat.S_ISSOCK(mode):
            raise ReadError(p, "não é um ficheiro regular (fifo/socket)")
        fd = os.open(p, os.O_RDONLY | getattr(os, "O_NONBLOCK", 0))
        return os.fdopen(fd, "rb")

    def __call__(self, path: str | Path, deadline: Optional[float] = None) -> str:
        """
        Devolve o digest hexadecimal (minúsculas) de `path`.

        `deadline` é um instante de `time.monotonic()`; verificado após
        cada bloco lido, levanta DigestTimeout quando ultrapassado.
        Qualquer OSError na abertura/leitura é convertido em ReadError.
        """
        p = Path(path)
        h = self._factory()
        try:
            with self._open(p) as f:
                while True:
                    chunk = f.read(self._buf_size)
                    if not chunk:
                        break
                    h.update(chunk)
                    if deadline is not None and time.monotonic() >= deadline:
                        raise DigestTimeout(p, "tempo limite excedido")
        except OSError as exc:
            raise ReadError(p, exc.strerror or str(exc)) from exc
        return h.hexdigest().lower()


def resolve(algo: str) -> Digester:
    """Valida `algo` uma única vez e devolve a função de digest correspondente."""
    name = _canonical(algo)
    factory = _REGISTRY.get(name)
    if factory is None:
        raise ConfigurationError(
            f"Algoritmo não suportado: {algo!r} "
            f"(disponíveis: {', '.join(available_algorithms())})"
        )
    return Digester(name, factory)


def file_hash(path: str | Path, algo: str = _DEFAULT_ALGO) -> str:
    """
    Hash genérico: calcula o *digest* hexadecimal de `path`
    com o algoritmo indicado (md5 por omissão, como checksum_tree).
    """
    return resolve(algo)(path)


__all__ = [
    "Digester",
    "available_algorithms",
    "file_hash",
    "register_algorithm",
    "resolve",
]
