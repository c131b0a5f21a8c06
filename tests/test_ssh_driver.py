"""
Testes do driver SSH com Netmiko substituído por mocks.
"""
from unittest.mock import patch

import pytest
from netmiko.exceptions import (
    NetmikoAuthenticationException,
    NetmikoTimeoutException,
    ReadTimeout,
)

from drivers.ssh_driver import SSHProbeDriver, _sanitize_error

MODULE = "drivers.ssh_driver"


def _driver(**kwargs):
    params = {"host": "10.0.0.2", "username": "admin", "password": "pw-123"}
    params.update(kwargs)
    return SSHProbeDriver(**params)


class TestSSHProbeDriver:

    def test_explicit_device_type_skips_autodetect(self):
        with patch(f"{MODULE}.ConnectHandler") as handler, \
             patch(f"{MODULE}.SSHDetect") as detect:
            handler.return_value.find_prompt.return_value = "router#  "
            with _driver(device_type="cisco_ios") as driver:
                identity = driver.identify()

        detect.assert_not_called()
        assert handler.call_args.kwargs["device_type"] == "cisco_ios"
        assert identity == {
            "ip": "10.0.0.2",
            "port": 22,
            "device_type": "cisco_ios",
            "prompt": "router#",
        }
        handler.return_value.disconnect.assert_called_once()

    def test_autodetect_device_type(self):
        with patch(f"{MODULE}.ConnectHandler") as handler, \
             patch(f"{MODULE}.SSHDetect") as detect:
            detect.return_value.autodetect.return_value = "linux"
            with _driver() as driver:
                assert driver.device_type == "linux"

        assert detect.call_args.kwargs["device_type"] == "autodetect"
        detect.return_value.connection.disconnect.assert_called_once()
        assert handler.call_args.kwargs["device_type"] == "linux"

    def test_autodetect_without_guess_falls_back_to_generic(self):
        with patch(f"{MODULE}.ConnectHandler"), patch(f"{MODULE}.SSHDetect") as detect:
            detect.return_value.autodetect.return_value = None
            driver = _driver()
            driver.connect()
        assert driver.device_type == "generic"

    def test_authentication_failure(self):
        with patch(
            f"{MODULE}.ConnectHandler",
            side_effect=NetmikoAuthenticationException("auth failed with pw-123"),
        ):
            with pytest.raises(ConnectionError) as exc_info:
                _driver(device_type="linux").connect()
        assert "pw-123" not in str(exc_info.value)

    def test_timeout(self):
        with patch(
            f"{MODULE}.ConnectHandler",
            side_effect=NetmikoTimeoutException("timed out"),
        ):
            with pytest.raises(ConnectionError, match="Timeout"):
                _driver(device_type="linux").connect()

    def test_unexpected_error_is_sanitized(self):
        with patch(f"{MODULE}.ConnectHandler", side_effect=OSError("bad pw-123 here")):
            with pytest.raises(ConnectionError) as exc_info:
                _driver(device_type="linux").connect()
        assert "pw-123" not in str(exc_info.value)
        assert "***" in str(exc_info.value)

    def test_identify_requires_connection(self):
        with pytest.raises(RuntimeError):
            _driver().identify()

    def test_prompt_read_failure_becomes_connection_error(self):
        with patch(f"{MODULE}.ConnectHandler") as handler:
            handler.return_value.find_prompt.side_effect = ReadTimeout(
                "Pattern not detected: pw-123"
            )
            driver = _driver(device_type="linux")
            driver.connect()
            with pytest.raises(ConnectionError, match="Error reading prompt") as exc_info:
                driver.identify()
        assert "pw-123" not in str(exc_info.value)

    def test_disconnect_is_idempotent(self):
        with patch(f"{MODULE}.ConnectHandler") as handler:
            driver = _driver(device_type="linux")
            driver.connect()
            driver.disconnect()
            driver.disconnect()
        handler.return_value.disconnect.assert_called_once()
        assert not driver.connected


def test_sanitize_error():
    assert _sanitize_error("login pw failed", "pw") == "login *** failed"
    assert _sanitize_error("nothing here", "") == "nothing here"
