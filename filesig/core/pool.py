"""
HashPool
========

Executa a função de digest em paralelo sobre os Tasks do Scanner, com no
máximo N cálculos em simultâneo.

• A admissão é feita pela thread que consome os resultados: só se tira o
  próximo item do Scanner quando há menos de N Tasks em curso, por isso o
  que ainda não foi admitido continua "por gerar" dentro do Scanner.
• Cada Task produz exactamente um Outcome; excepções da função de digest
  ficam dentro do Outcome e nunca param o pool.
• cancel(), `stop_flag()` ou o prazo global (`run_timeout`) param a
  admissão; os Tasks em curso terminam e os seus Outcomes são entregues.
"""

from __future__ import annotations

import os
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Callable, Dict, Iterable, Iterator, Optional, Union

from .errors import ConfigurationError, FileSigError, ReadError
from .models import Outcome, RunStatus, Task

DigestFn = Callable[..., str]
LogCb    = Callable[[str], None]

_POLL_SEC = 0.1   # intervalo máximo entre verificações de cancelamento/prazo


def default_workers() -> int:
    return min(os.cpu_count() or 4, 32)


class HashPool:
    def __init__(
        self,
        digest: DigestFn,
        max_workers: Optional[int] = None,
        file_timeout: Optional[float] = None,
        run_timeout: Optional[float] = None,
        stop_flag: Optional[Callable[[], bool]] = None,
        log_cb: Optional[LogCb] = None,
    ) -> None:
        if max_workers is None:
            max_workers = default_workers()
        if max_workers < 1:
            raise ConfigurationError(f"Número de workers inválido: {max_workers}")
        for label, value in (("file_timeout", file_timeout), ("run_timeout", run_timeout)):
            if value is not None and value <= 0:
                raise ConfigurationError(f"{label} tem de ser positivo: {value}")

        self.digest       = digest
        self.max_workers  = max_workers
        self.file_timeout = file_timeout
        self.run_timeout  = run_timeout
        self.stop_flag    = stop_flag or (lambda: False)
        self.log_cb       = log_cb

        self.status: RunStatus = RunStatus.PENDING
        self.cancel_reason: Optional[str] = None
        self.peak_active = 0

        self._cancel = threading.Event()
        self._lock = threading.Lock()
        self._active = 0
        self._deadline: Optional[float] = None

    # ------------------------------------------------------------------ helpers
    def _emit(self, msg: str) -> None:
        if self.log_cb:
            self.log_cb(msg)

    def cancel(self, reason: str = "user") -> None:
        """Pára a admissão de novos Tasks (os que estão em curso terminam)."""
        if not self._cancel.is_set():
            self.cancel_reason = reason
            self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def _should_stop(self) -> bool:
        if self._cancel.is_set():
            return True
        if self.stop_flag():
            self.cancel("user")
            self._emit("Operação cancelada.")
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self.cancel("deadline")
            self._emit("Tempo limite da execução atingido; a terminar os ficheiros em curso.")
            return True
        return False

    def _execute(self, task: Task) -> Outcome:
        """Corre numa thread do executor; nunca levanta excepções."""
        with self._lock:
            self._active += 1
            self.peak_active = max(self.peak_active, self._active)
        try:
            deadline = None
            if self.file_timeout is not None:
                deadline = time.monotonic() + self.file_timeout
            digest = self.digest(task.path, deadline=deadline)
        except FileSigError as exc:
            return Outcome.failure(task, exc)
        except Exception as exc:  # noqa: BLE001
            err = ReadError(task.path, str(exc) or type(exc).__name__)
            err.__cause__ = exc
            return Outcome.failure(task, err)
        finally:
            with self._lock:
                self._active -= 1
        return Outcome.success(task, digest)

    # ------------------------------------------------------------------ API
    def run(self, items: Iterable[Union[Task, Outcome]]) -> Iterator[Outcome]:
        """
        Gera um Outcome por Task, pela ordem em que terminam.  Outcomes já
        prontos vindos do Scanner (falhas de travessia) passam directamente.

        Só termina quando a fonte se esgotou (ou a execução foi parada) e
        todos os Tasks admitidos entregaram o seu Outcome.
        """
        source = iter(items)
        in_flight: Dict[Future, Task] = {}
        exhausted = False

        self.status = RunStatus.RUNNING
        if self.run_timeout is not None:
            self._deadline = time.monotonic() + self.run_timeout
        self._emit(f"A calcular com {self.max_workers} worker(s)…")

        with ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="filesig",
        ) as executor:
            try:
                while True:
                    # ---------------------------------------------- admissão
                    while (
                        not exhausted
                        and len(in_flight) < self.max_workers
                        and not self._should_stop()
                    ):
                        try:
                            item = next(source)
                        except StopIteration:
                            exhausted = True
                            break
                        if isinstance(item, Outcome):
                            yield item
                            continue
                        in_flight[executor.submit(self._execute, item)] = item

                    if not in_flight:
                        # fonte esgotada ou execução parada
                        break

                    # ---------------------------------------------- recolha
                    done, _ = wait(in_flight, timeout=_POLL_SEC, return_when=FIRST_COMPLETED)
                    for fut in done:
                        del in_flight[fut]
                        yield fut.result()
            except GeneratorExit:
                # o consumidor desistiu: não admitir mais nada e drenar
                self.cancel("user")
                self.status = RunStatus.CANCELLED
                raise
            finally:
                if in_flight:
                    wait(in_flight)

        self.status = RunStatus.CANCELLED if self.cancelled else RunStatus.COMPLETED
