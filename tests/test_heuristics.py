from statement_ingestion.parsers import heuristics
from statement_ingestion.parsers.metadata import extract_statement_info


def test_payment_method_priority():
    assert heuristics.detect_payment_method("KARTENZAHLUNG Gutschrift Rückgabe") == "Kartenzahlung"
    assert heuristics.detect_payment_method("Dauerauftrag Miete") == "Dauerauftrag"
    assert heuristics.detect_payment_method("Bargeld") is None


def test_reference_priority():
    text = "LASTSCHRIFT Telekom END-TO-END-REF: E2E999 MANDATSREF: MD42 REF: X1"
    assert heuristics.extract_reference(text) == "MD42"
    assert heuristics.extract_reference("Rechnung REF 12345") == "12345"
    assert heuristics.extract_reference("Keine Angabe") is None


def test_merchant_patterns():
    assert heuristics.extract_merchant("LASTSCHRIFT Telekom Deutschland END-TO-END-REF: E2E") == "Telekom Deutschland"
    assert heuristics.extract_merchant("GELDAUTOMAT Sparkasse Hauptbahnhof 03.03") == "Sparkasse Hauptbahnhof"
    assert heuristics.extract_merchant("Miete März") is None


def test_clean_description_removes_whole_tokens_only():
    assert heuristics.clean_description("ELV  ELVIS Records   Hamburg") == "ELVIS Records Hamburg"
    assert heuristics.clean_description("   ") == ""


def test_metadata_of_empty_text():
    info = extract_statement_info("   ", "Postbank")
    assert info.bank_name == "Postbank"
    assert info.opening_balance is None
    assert info.period_start is None
