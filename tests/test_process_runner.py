"""
Testes da execução de processos com prazo rígido.

Usam subprocessos reais e curtos (``sys.executable -c``).
"""
import os
import subprocess
import sys
import time
from pathlib import Path

import pytest

from core.services.process_runner import ProcessOutput, run_bounded


def _python(code: str) -> list[str]:
    return [sys.executable, "-c", code]


def _is_gone(pid: int) -> bool:
    """True se o processo não existe mais (ou é zumbi aguardando coleta)."""
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return True
    stat = Path(f"/proc/{pid}/stat")
    try:
        return stat.read_text().split(")")[-1].split()[0] == "Z"
    except OSError:
        return True


class TestRunBounded:

    def test_captures_stdout_lines(self):
        result = run_bounded(_python("print('a'); print('b')"), timeout=10)
        assert result.returncode == 0
        assert result.lines() == ["a", "b"]

    def test_stderr_is_merged_into_output(self):
        result = run_bounded(
            _python("import sys; sys.stderr.write('boom\\n')"), timeout=10
        )
        assert "boom" in result.output

    def test_non_zero_exit_is_reported(self):
        result = run_bounded(_python("import sys; sys.exit(3)"), timeout=10)
        assert result.returncode == 3

    def test_large_output_does_not_block(self):
        result = run_bounded(
            _python("for _ in range(500): print('y' * 1000)"),
            timeout=20,
        )
        assert result.returncode == 0
        assert len(result.lines()) == 500

    def test_runs_in_given_cwd(self, tmp_path):
        result = run_bounded(
            _python("import os; print(os.getcwd())"), timeout=10, cwd=tmp_path
        )
        assert Path(result.lines()[0]).resolve() == tmp_path.resolve()

    def test_timeout_kills_the_child(self):
        started = time.monotonic()
        with pytest.raises(subprocess.TimeoutExpired):
            run_bounded(_python("import time; time.sleep(30)"), timeout=0.5)
        assert time.monotonic() - started < 10

    @pytest.mark.skipif(not sys.platform.startswith("linux"), reason="usa /proc")
    def test_timeout_kills_grandchildren(self, tmp_path):
        pid_file = tmp_path / "grandchild.pid"
        code = (
            "import subprocess, sys, time\n"
            "p = subprocess.Popen([sys.executable, '-c', 'import time; time.sleep(30)'])\n"
            f"open({str(pid_file)!r}, 'w').write(str(p.pid))\n"
            "time.sleep(30)\n"
        )
        with pytest.raises(subprocess.TimeoutExpired):
            run_bounded(_python(code), timeout=2)

        grandchild = int(pid_file.read_text())
        deadline = time.monotonic() + 5
        while not _is_gone(grandchild) and time.monotonic() < deadline:
            time.sleep(0.1)
        assert _is_gone(grandchild)

    def test_missing_executable(self):
        with pytest.raises(FileNotFoundError):
            run_bounded(["/nonexistent/worker-binary"], timeout=5)


class TestProcessOutputLines:

    def test_only_newline_separates_lines(self):
        output = ProcessOutput(returncode=0, output="a\x0cb\x1cc d\n\ne\n")
        assert output.lines() == ["a\x0cb\x1cc d", "", "e"]

    def test_output_without_trailing_newline(self):
        assert ProcessOutput(returncode=0, output="a\nb").lines() == ["a", "b"]

    def test_empty_output(self):
        assert ProcessOutput(returncode=0, output="").lines() == []
