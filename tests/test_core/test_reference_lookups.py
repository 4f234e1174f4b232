"""Tests for the static broker and currency lookups."""

import pytest

from src.core.brokers import BROKER_INFO, format_broker_display, get_broker_info
from src.core.currency import (
    SUPPORTED_CURRENCIES,
    format_currency_value,
    get_currency_pair,
    get_currency_symbol,
    get_default_fx_rate,
)


class TestBrokerLookup:
    def test_known_broker_metadata(self):
        info = get_broker_info("Rakuten")
        assert info is not None
        assert info.name == "Rakuten Securities"
        assert info.country_code == "JP"

    def test_unknown_and_empty_broker(self):
        assert get_broker_info("Fidelity") is None
        assert get_broker_info("") is None
        assert get_broker_info(None) is None

    def test_display_for_known_broker_has_flag(self):
        assert format_broker_display("CreditAgricole") == "🇫🇷 Crédit Agricole"

    def test_display_falls_back_to_raw_name(self):
        assert format_broker_display("Fidelity") == "Fidelity"

    def test_display_for_missing_broker(self):
        assert format_broker_display(None) == "Unknown"
        assert format_broker_display("") == "Unknown"

    def test_broker_info_is_immutable(self):
        with pytest.raises(Exception):
            BROKER_INFO["Rakuten"].name = "Other"  # type: ignore[misc]


class TestCurrency:
    def test_supported_codes_are_unique(self):
        codes = [c.code for c in SUPPORTED_CURRENCIES]
        assert len(codes) == len(set(codes))
        assert "JPY" in codes and "USD" in codes

    def test_symbol_lookup(self):
        assert get_currency_symbol("USD") == "$"
        assert get_currency_symbol("EUR") == "€"

    def test_symbol_falls_back_to_code(self):
        assert get_currency_symbol("XYZ") == "XYZ"

    def test_default_fx_rate(self):
        assert get_default_fx_rate("JPY") == 1.0
        assert get_default_fx_rate("USD") == 150.0
        assert get_default_fx_rate("XYZ") == 1.0

    @pytest.mark.parametrize(
        "amount,code,expected",
        [
            (1234567.891, "JPY", "¥1,234,568"),
            (1500, "KRW", "₩1,500"),
            (1234.5, "USD", "$1,234.50"),
            (0.1, "EUR", "€0.10"),
            (10, "XYZ", "XYZ10.00"),
        ],
    )
    def test_format_currency_value(self, amount, code, expected):
        assert format_currency_value(amount, code) == expected

    def test_currency_pair(self):
        assert get_currency_pair("USD") == "USDJPY"
        assert get_currency_pair("EUR", "USD") == "EURUSD"
        assert get_currency_pair("JPY") == ""
