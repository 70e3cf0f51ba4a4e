from decimal import Decimal

import pytest

from statement_ingestion.classifiers.keywords import KeywordCategorizer
from statement_ingestion.models import Category, TransactionType
from statement_ingestion.storage.categories import InMemoryCategoryRepository, JsonCategoryRepository


@pytest.fixture
def repository():
    return InMemoryCategoryRepository([
        Category(id="food", name="Lebensmittel", category_type=TransactionType.EXPENSE, keywords=["supermarkt"]),
        Category(id="transport", name="Transport & Verkehr", category_type=TransactionType.EXPENSE),
        Category(id="housing", name="Miete & Wohnen", category_type=TransactionType.EXPENSE),
        Category(id="salary", name="Gehalt", category_type=TransactionType.INCOME),
    ])


@pytest.fixture
def categorizer(repository):
    return KeywordCategorizer(repository)


def test_suggest_known_merchant(categorizer):
    suggestions = categorizer.suggest(
        "KARTENZAHLUNG REWE SAGT DANKE", "REWE SAGT DANKE", Decimal("45.67"), TransactionType.EXPENSE
    )

    assert len(suggestions) == 1
    assert suggestions[0].category_id == "food"
    assert suggestions[0].confidence == 1.0
    assert suggestions[0].match_reason == "German keyword: rewe"


def test_suggest_respects_transaction_type(categorizer):
    suggestions = categorizer.suggest("Gehalt März Firma GmbH", None, Decimal("3100.00"), TransactionType.INCOME)
    assert [s.category_id for s in suggestions] == ["salary"]

    expense_suggestions = categorizer.suggest("Gehalt März Firma GmbH", None, None, TransactionType.EXPENSE)
    assert expense_suggestions == []


def test_learned_keyword_reason(categorizer):
    suggestions = categorizer.suggest("Einkauf Supermarkt am Markt", None, None, TransactionType.EXPENSE)
    assert suggestions[0].category_id == "food"
    assert suggestions[0].match_reason == "Keyword match: supermarkt"


def test_no_match_below_threshold(categorizer):
    assert categorizer.suggest("Bargeld", None, Decimal("20.00"), TransactionType.EXPENSE) == []
    assert categorizer.suggest("", None, None, TransactionType.EXPENSE) == []


def test_suggestions_are_ranked_and_capped():
    repository = InMemoryCategoryRepository([
        Category(
            id=f"cat-{i}",
            name=f"Abos {i}",
            category_type=TransactionType.EXPENSE,
            keywords=["streamingdienst"] + (["premium"] if i == 6 else []),
            sort_order=10 - i,
        )
        for i in range(7)
    ])
    categorizer = KeywordCategorizer(repository)

    suggestions = categorizer.suggest("Streamingdienst Premium", None, None, TransactionType.EXPENSE)

    assert len(suggestions) == 5
    assert suggestions[0].category_id == "cat-6"
    assert suggestions[0].confidence == 1.0
    # Equal scores are ordered by sort order.
    assert [s.category_id for s in suggestions[1:]] == ["cat-5", "cat-4", "cat-3", "cat-2"]
    assert all(0.0 <= s.confidence <= 1.0 for s in suggestions)


def test_inactive_categories_are_ignored():
    repository = InMemoryCategoryRepository([
        Category(id="old", name="Alt", category_type=TransactionType.EXPENSE, keywords=["rewe"], is_active=False),
    ])
    assert KeywordCategorizer(repository).suggest("REWE", None, None, TransactionType.EXPENSE) == []


def test_calculate_category_confidence(categorizer):
    assert categorizer.calculate_category_confidence("DB Fernverkehr Ticket", None, "transport") == pytest.approx(1.0)
    assert categorizer.calculate_category_confidence("Miete März", None, "housing", Decimal("900.00")) == pytest.approx(0.7)
    assert categorizer.calculate_category_confidence("anything", None, "missing") == 0.0


def test_learning_adds_tokens_and_is_idempotent(categorizer, repository):
    keywords = categorizer.learn_from_user_choice("KARTENZAHLUNG REWE SAGT DANKE 03.03 12:30", "REWE", "food")

    assert keywords == ["supermarkt", "kartenzahlung", "rewe", "sagt", "danke"]
    assert repository.get_by_id("food").keywords == keywords

    again = categorizer.learn_from_user_choice("KARTENZAHLUNG REWE SAGT DANKE 03.03 12:30", "REWE", "food")
    assert again == keywords
    assert repository.get_by_id("food").keywords == keywords


def test_learning_skips_stop_words_and_numbers(categorizer, repository):
    categorizer.learn_from_user_choice("Zahlung über PayPal 2024 für die Firma", None, "housing")
    assert repository.get_by_id("housing").keywords == ["zahlung", "paypal", "firma"]


def test_learning_caps_keywords(repository):
    categorizer = KeywordCategorizer(repository, max_keywords=3)
    keywords = categorizer.learn_from_user_choice("Wocheneinkauf Bäckerei Metzgerei", None, "food")
    assert keywords == ["supermarkt", "wocheneinkauf", "bäckerei"]


def test_learning_unknown_category_is_noop(categorizer, repository):
    before = {category.id: list(category.keywords) for category in repository.get_all()}
    assert categorizer.learn_from_user_choice("REWE", None, "missing") is None
    assert {category.id: list(category.keywords) for category in repository.get_all()} == before


def test_keyword_weights_and_updates(categorizer):
    assert categorizer.get_keyword_weights("food") == {"supermarkt": 0.8}
    assert categorizer.get_keyword_weights("missing") == {}

    updated = categorizer.update_category_keywords("food", ["Edeka", "edeka", "Netto"])
    assert updated == ["edeka", "netto"]
    assert categorizer.get_keyword_weights("food") == {"edeka": 0.8, "netto": 0.8}
    assert categorizer.update_category_keywords("missing", ["x"]) is None


def test_is_german_merchant(categorizer):
    assert categorizer.is_german_merchant("REWE Markt GmbH")
    assert categorizer.is_german_merchant("Deutsche Bahn Fernverkehr")
    assert not categorizer.is_german_merchant("Corner Shop Ltd")
    assert not categorizer.is_german_merchant(None)


def test_learned_keywords_persist(tmp_path):
    data_path = str(tmp_path / "categories.json")
    repository = JsonCategoryRepository(data_path)
    repository.add(Category(id="food", name="Lebensmittel", category_type=TransactionType.EXPENSE))

    KeywordCategorizer(repository).learn_from_user_choice("Wochenmarkt Gemüse", None, "food")

    reloaded = JsonCategoryRepository(data_path)
    assert reloaded.get_by_id("food").keywords == ["wochenmarkt", "gemüse"]


def test_grocery_keywords_rank_first():
    repository = InMemoryCategoryRepository([
        Category(id="food", name="Lebensmittel", category_type=TransactionType.EXPENSE, keywords=["rewe", "supermarkt"]),
        Category(id="transport", name="Transport", category_type=TransactionType.EXPENSE, keywords=["shell", "tanken"]),
    ])

    suggestions = KeywordCategorizer(repository).suggest("REWE Supermarkt Einkauf", None, None, TransactionType.EXPENSE)

    assert suggestions[0].category_name == "Lebensmittel"
    assert suggestions[0].confidence > 0.3
    assert len(suggestions) <= 5


def test_learning_never_stores_stop_words(categorizer, repository):
    for _ in range(2):
        categorizer.learn_from_user_choice("Miete und Nebenkosten für die Wohnung der Familie", None, "housing")

    keywords = repository.get_by_id("housing").keywords
    assert keywords == ["miete", "nebenkosten", "wohnung", "familie"]
    assert not {"und", "der", "die", "für"} & set(keywords)


def test_unknown_categories_do_not_allocate_locks(categorizer):
    for index in range(10):
        assert categorizer.update_category_keywords(f"missing-{index}", ["x"]) is None
        assert categorizer.learn_from_user_choice("Wochenmarkt", None, f"missing-{index}") is None

    assert categorizer._locks == {}
