"""
core/services/process_runner.py
Execução de processos externos com prazo rígido.

Design Decisions
────────────────
1. Leitura concorrente:
   ``communicate()`` drena stdout enquanto o filho executa, então um
   pipe cheio nunca bloqueia o processo.

2. Grupo de processos próprio:
   O filho é iniciado em uma nova sessão (``start_new_session=True``).
   No estouro do prazo o grupo inteiro recebe SIGKILL, o que também
   encerra netos (ex: o binário compilado por ``go run``).

3. Liberação garantida:
   O ``with Popen(...)`` fecha os pipes e o ``wait()`` final coleta o
   filho em qualquer caminho de saída (sucesso, timeout ou exceção).
"""

from __future__ import annotations

import os
import signal
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from internalloggin.logger import setup_logger

logger = setup_logger(__name__)


@dataclass(slots=True)
class ProcessOutput:
    """Resultado de um processo finalizado dentro do prazo."""

    returncode: int
    output: str

    def lines(self) -> list[str]:
        """
        Linhas separadas apenas por ``\n``.

        ``text=True`` já normaliza ``\r\n`` e ``\r``; outros separadores
        Unicode (``\x0c``, ``\x1c``, ``\u2028`` ...) fazem parte da linha.
        """
        parts = self.output.split("\n")
        if parts and parts[-1] == "":
            parts.pop()
        return parts


def _kill_process_group(proc: subprocess.Popen) -> None:
    """Mata o grupo do filho e aguarda sua coleta."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    except OSError:
        proc.kill()
    proc.wait()


def run_bounded(
    command: Sequence[str],
    timeout: float,
    cwd: str | Path | None = None,
) -> ProcessOutput:
    """
    Executa ``command`` com stderr redirecionado para stdout.

    Args:
        command: Executável e argumentos.
        timeout: Prazo em segundos para o processo terminar.
        cwd:     Diretório de trabalho do filho.

    Returns:
        ProcessOutput com código de saída e saída combinada.

    Raises:
        subprocess.TimeoutExpired: Prazo estourado (filho já morto e coletado).
        FileNotFoundError: Executável inexistente.
    """
    with subprocess.Popen(
        list(command),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        encoding="utf-8",
        errors="replace",
        cwd=cwd,
        start_new_session=True,
    ) as proc:
        try:
            output, _ = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning(
                "Processo '%s' (pid=%d) excedeu %.1fs; encerrando grupo.",
                command[0], proc.pid, timeout,
            )
            _kill_process_group(proc)
            raise
        except BaseException:
            _kill_process_group(proc)
            raise

    return ProcessOutput(returncode=proc.returncode, output=output or "")
