"""
Testes da expansão de IP único / faixa no último octeto.
"""
import pytest

from core.services.target_expander import expand_targets, is_valid_ip


class TestExpandTargets:

    def test_single_ip(self):
        assert expand_targets("192.168.1.10") == ["192.168.1.10"]

    def test_range_is_inclusive_and_ordered(self):
        assert expand_targets("10.0.0.1-3") == ["10.0.0.1", "10.0.0.2", "10.0.0.3"]

    def test_range_with_equal_bounds(self):
        assert expand_targets("10.0.0.5-5") == ["10.0.0.5"]

    def test_full_octet_range(self):
        targets = expand_targets("10.0.0.0-255")
        assert len(targets) == 256
        assert targets[0] == "10.0.0.0"
        assert targets[-1] == "10.0.0.255"

    def test_range_prefix_is_not_revalidated(self):
        assert expand_targets("999.999.999.1-2") == [
            "999.999.999.1",
            "999.999.999.2",
        ]

    @pytest.mark.parametrize(
        "value",
        [
            "10.0.0.5-3",       # início > fim
            "10.0.0.0-256",     # fim fora do octeto
            "256.1.1.1",        # octeto inválido
            "10.0.0",           # octetos faltando
            "1.2.3.4.5",
            "10.0.0.1-",
            " 10.0.0.1",
            "10.0.0.1/24",
            "host.local",
            "",
        ],
    )
    def test_invalid_inputs_yield_empty_list(self, value):
        assert expand_targets(value) == []

    def test_huge_range_numbers_do_not_overflow(self):
        assert expand_targets("10.0.0.1-99999999999999999999") == []


class TestIsValidIp:

    @pytest.mark.parametrize("value", ["0.0.0.0", "255.255.255.255", "172.16.0.1"])
    def test_valid(self, value):
        assert is_valid_ip(value)

    @pytest.mark.parametrize("value", ["256.0.0.1", "1.2.3", "a.b.c.d", "1.2.3.4 "])
    def test_invalid(self, value):
        assert not is_valid_ip(value)
