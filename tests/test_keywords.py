from statement_ingestion.domain.keywords import (
    contains_term,
    extract_learnable_terms,
    merge_keywords,
    normalize_keywords,
    parse_keyword_list,
)


def test_normalize_keywords_dedupes_and_lowercases():
    assert normalize_keywords([" REWE ", "rewe", "", "Edeka  Markt"]) == ["rewe", "edeka markt"]
    assert normalize_keywords("Miete, miete ,Strom") == ["miete", "strom"]
    assert normalize_keywords(None) == []


def test_parse_keyword_list():
    assert parse_keyword_list("gmbh, kg,") == ["gmbh", "kg"]
    assert parse_keyword_list("") == []


def test_merge_keywords_keeps_order_and_limit():
    merged = merge_keywords(["rewe", "edeka"], ["Edeka", "lidl", "aldi"], limit=3)
    assert merged == ["rewe", "edeka", "lidl"]


def test_extract_learnable_terms_filters_noise():
    terms = extract_learnable_terms(
        "Einkauf bei REWE und der Bäckerei 12345 am 03.03",
        min_length=4,
    )
    assert terms == ["einkauf", "rewe", "bäckerei"]


def test_extract_learnable_terms_extra_stop_words():
    terms = extract_learnable_terms("Netflix Abo monatlich", stop_words={"monatlich"}, min_length=4)
    assert terms == ["netflix"]


def test_contains_term_whole_words():
    assert contains_term("kartenzahlung rewe sagt danke", "rewe")
    assert contains_term("lastschrift deutsche bahn", "Deutsche Bahn")
    assert contains_term("zahlung an h&m hamburg", "h&m")
    assert not contains_term("dbx gmbh", "db")
    assert not contains_term("", "rewe")
