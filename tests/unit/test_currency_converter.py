import math

import pytest

from boutique.currency.converter import (
    PREFERENCE_KEY,
    SUPPORTED_CURRENCIES,
    CurrencyConverter,
    get_exchange_rate,
)
from boutique.utils.local_storage import FileLocalStorage, LocalStorage


def test_defaults_to_canonical_until_hydrated():
    storage = LocalStorage({PREFERENCE_KEY: "EUR"})
    conv = CurrencyConverter(storage)
    assert conv.selected.code == "USD"
    conv.hydrate()
    assert conv.selected.code == "EUR"


def test_hydrate_ignores_unknown_preference():
    conv = CurrencyConverter(LocalStorage({PREFERENCE_KEY: "XYZ"}))
    assert conv.hydrate().code == "USD"


def test_set_currency_persists_and_rejects_unknown():
    storage = LocalStorage()
    conv = CurrencyConverter(storage)
    conv.set_currency("usd")
    assert storage.get_item(PREFERENCE_KEY) == "USD"
    with pytest.raises(ValueError):
        conv.set_currency("BTC")


@pytest.mark.parametrize("code", [c.code for c in SUPPORTED_CURRENCIES])
def test_convert_is_linear_and_invertible(code):
    conv = CurrencyConverter()
    conv.set_currency(code)
    a, b = 125000.0, 3999.99
    assert conv.convert(a + b) == pytest.approx(conv.convert(a) + conv.convert(b))
    assert conv.convert_back(conv.convert(a)) == pytest.approx(a)


def test_canonical_usd_passes_through_unchanged():
    conv = CurrencyConverter()
    assert conv.convert(15000) == 15000
    conv.set_currency("USD")
    assert conv.convert(15000) == 15000


def test_convert_to_naira_uses_usd_relative_rate():
    conv = CurrencyConverter()
    conv.set_currency("NGN")
    assert conv.convert(15000) == pytest.approx(15000 / 0.0012)
    conv.set_currency("EUR")
    assert conv.convert(100) == pytest.approx(100 * 0.0011 / 0.0012)


def test_exchange_rate_is_cross_rate():
    assert get_exchange_rate("USD", "EUR") == pytest.approx(0.0011 / 0.0012)
    assert get_exchange_rate("NGN", "USD") == pytest.approx(0.0012)
    assert get_exchange_rate("GBP", "GBP") == 1.0


@pytest.mark.parametrize("code", [c.code for c in SUPPORTED_CURRENCIES] + ["???", None, ""])
@pytest.mark.parametrize("amount", [0, -12.5, 1234567.891, math.nan, math.inf, -math.inf])
def test_format_never_raises(code, amount):
    assert isinstance(CurrencyConverter().format(amount, code), str)


def test_format_decimals_per_currency():
    conv = CurrencyConverter()
    assert conv.format(1234567.4, "NGN") == "₦1,234,567"
    assert conv.format(1234.5, "EUR") == "€1,234.50"
    assert conv.format(-5, "GBP") == "-£5.00"


def test_file_storage_roundtrip_and_corrupt_file(tmp_path):
    path = tmp_path / "storage.json"
    CurrencyConverter(FileLocalStorage(path)).set_currency("CAD")
    assert CurrencyConverter(FileLocalStorage(path)).hydrate().code == "CAD"

    path.write_text("{not json", encoding="utf-8")
    assert CurrencyConverter(FileLocalStorage(path)).hydrate().code == "USD"
