"""
Testes da varredura ICMP (fping falso em shell) e do handshake TCP
(sockets reais em loopback).
"""
import socket
import stat

import pytest

from core.services.errors import LivenessTimeoutError, ToolNotFoundError
from core.services.reachability_service import is_port_open, sweep_alive_hosts


def _fake_fping(tmp_path, body: str):
    script = tmp_path / "fping"
    script.write_text("#!/bin/sh\n" + body + "\n")
    script.chmod(script.stat().st_mode | stat.S_IEXEC)
    return str(script)


class TestSweepAliveHosts:

    def test_returns_reported_hosts_and_ignores_exit_code(self, tmp_path):
        fping = _fake_fping(tmp_path, "echo 10.0.0.2\necho 10.0.0.3\nexit 1")
        alive = sweep_alive_hosts(
            ["10.0.0.1", "10.0.0.2", "10.0.0.3"], fping_bin=fping
        )
        assert alive == ["10.0.0.2", "10.0.0.3"]

    def test_passes_quiet_alive_single_retry_flags_then_targets(self, tmp_path):
        args_file = tmp_path / "args.txt"
        fping = _fake_fping(tmp_path, f'echo "$@" > "{args_file}"')
        sweep_alive_hosts(["10.0.0.1", "10.0.0.2"], fping_bin=fping)
        assert args_file.read_text().split() == [
            "-q", "-a", "-r", "1", "10.0.0.1", "10.0.0.2",
        ]

    def test_blank_lines_are_skipped(self, tmp_path):
        fping = _fake_fping(tmp_path, "echo\necho '  10.0.0.9  '\necho")
        assert sweep_alive_hosts(["10.0.0.9"], fping_bin=fping) == ["10.0.0.9"]

    def test_no_output_means_no_live_hosts(self, tmp_path):
        fping = _fake_fping(tmp_path, "exit 1")
        assert sweep_alive_hosts(["10.0.0.1"], fping_bin=fping) == []

    def test_timeout(self, tmp_path):
        fping = _fake_fping(tmp_path, "sleep 30")
        with pytest.raises(LivenessTimeoutError, match="fping timed out"):
            sweep_alive_hosts(["10.0.0.1"], timeout=0.5, fping_bin=fping)

    def test_missing_binary(self, tmp_path):
        with pytest.raises(ToolNotFoundError):
            sweep_alive_hosts(["10.0.0.1"], fping_bin=str(tmp_path / "no-fping"))

    def test_empty_target_list_skips_fping(self, tmp_path):
        assert sweep_alive_hosts([], fping_bin=str(tmp_path / "no-fping")) == []


class TestIsPortOpen:

    def test_listening_port_is_open(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server:
            server.bind(("127.0.0.1", 0))
            server.listen(1)
            port = server.getsockname()[1]
            assert is_port_open("127.0.0.1", port, timeout_ms=1000)

    def test_closed_port(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
            probe.bind(("127.0.0.1", 0))
            port = probe.getsockname()[1]
        assert not is_port_open("127.0.0.1", port, timeout_ms=1000)

    @pytest.mark.parametrize("port", [0, 65536, -1])
    def test_out_of_range_ports_are_closed(self, port):
        assert not is_port_open("127.0.0.1", port, timeout_ms=500)

    def test_unresolvable_host(self):
        assert not is_port_open("host.invalid", 22, timeout_ms=500)
