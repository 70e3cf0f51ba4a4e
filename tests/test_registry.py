import pytest

from statement_ingestion.parsers.banks import DKB, ING, SPARKASSE, VOLKSBANK
from statement_ingestion.parsers.generic import GENERIC_FORMAT
from statement_ingestion.parsers.registry import BankParserRegistry


@pytest.fixture
def registry():
    return BankParserRegistry()


@pytest.mark.parametrize("bank_name", ["ING", "ing", "ing bank", "meine ING Bank", "ING-DiBa"])
def test_resolves_ing_variants(registry, bank_name):
    assert registry.resolve(bank_name) is ING


@pytest.mark.parametrize(
    "bank_name,expected",
    [
        ("Sparkasse Göttingen", SPARKASSE),
        ("Kreissparkasse Köln", SPARKASSE),
        ("Deutsche Kreditbank AG", DKB),
        ("dkb", DKB),
        ("VR-Bank Rhein-Neckar", VOLKSBANK),
    ],
)
def test_resolves_by_substring(registry, bank_name, expected):
    assert registry.resolve(bank_name) is expected


@pytest.mark.parametrize("bank_name", ["Unbekannte Bank XYZ", "", "   ", None])
def test_unknown_names_do_not_resolve(registry, bank_name):
    assert registry.resolve(bank_name) is None


def test_resolve_or_fallback(registry):
    assert registry.resolve_or_fallback("Unbekannte Bank XYZ") == (GENERIC_FORMAT, True)
    assert registry.resolve_or_fallback("Sparkasse") == (SPARKASSE, False)


def test_list_supported_banks(registry):
    assert registry.list_supported_banks() == [
        "Deutsche Bank",
        "Commerzbank",
        "Sparkasse",
        "Postbank",
        "Volksbank",
        "Raiffeisenbank",
        "DKB",
        "ING",
    ]
