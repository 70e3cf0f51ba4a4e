"""Built-in German vocabulary used to score categories without learned keywords."""
from decimal import Decimal

# Concept -> words that commonly appear in descriptions of that concept.
GERMAN_CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    # income
    "salary": ("gehalt", "lohn", "salär", "vergütung", "entgelt", "bezahlung", "arbeitgeber"),
    "freelance": ("freelance", "freiberufler", "honorar", "rechnung", "dienstleistung", "projekt"),
    "investment": ("dividende", "zinsen", "aktien", "fonds", "anlage", "kapitalertrag", "depot"),
    "rental": ("miete", "mieteinnahme", "vermieter", "immobilie", "wohnung", "haus"),
    # expenses
    "housing": ("miete", "nebenkosten", "strom", "gas", "wasser", "heizung", "wohnung", "immobilie", "hausrat"),
    "transportation": (
        "tankstelle", "bahn", "bus", "uber", "taxi", "auto", "benzin", "diesel", "öpnv", "mvg", "db", "lufthansa",
    ),
    "food": (
        "supermarkt", "restaurant", "café", "bäckerei", "metzgerei", "rewe", "edeka", "aldi", "lidl", "netto",
        "kaufland", "lieferando", "mcdonald",
    ),
    "healthcare": ("apotheke", "arzt", "krankenhaus", "versicherung", "medikament", "therapie", "zahnarzt", "optiker"),
    "entertainment": ("kino", "theater", "konzert", "streaming", "netflix", "spotify", "amazon", "spiel", "sport", "fitness"),
    "shopping": ("amazon", "zalando", "otto", "media markt", "saturn", "ikea", "h&m", "zara", "douglas", "dm", "rossmann"),
    "education": ("schule", "universität", "kurs", "seminar", "buch", "software", "udemy", "coursera"),
    "business": ("büro", "software", "service", "beratung", "rechnung", "steuer", "buchhaltung"),
}

GERMAN_MERCHANTS: dict[str, tuple[str, ...]] = {
    "food": ("rewe", "edeka", "aldi", "lidl", "netto", "kaufland", "penny", "norma"),
    "transportation": ("deutsche bahn", "db", "mvg", "bvg", "shell", "aral", "esso", "bp", "total"),
    "shopping": ("amazon", "zalando", "otto", "h&m", "zara", "c&a", "ikea", "media markt", "saturn"),
    "entertainment": ("netflix", "spotify", "amazon prime", "disney+", "sky", "dazn"),
    "healthcare": ("doc morris", "shop apotheke", "zur rose", "apotheke"),
    "utilities": ("telekom", "vodafone", "1&1", "o2", "eon", "rwe", "vattenfall"),
    "insurance": ("allianz", "axa", "generali", "huk", "devk", "signal iduna"),
}

# (name fragments, concept), checked in order against the category's display name.
CATEGORY_NAME_HINTS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("gehalt", "lohn", "salary"), "salary"),
    (("freelance", "honorar"), "freelance"),
    (("dividend", "kapital", "invest"), "investment"),
    (("mieteinnahme", "vermietung"), "rental"),
    (("miete", "wohnen", "housing"), "housing"),
    (("transport", "verkehr", "mobilität"), "transportation"),
    (("essen", "lebensmittel", "food", "groceries"), "food"),
    (("gesundheit", "medizin", "health"), "healthcare"),
    (("unterhaltung", "freizeit", "entertainment"), "entertainment"),
    (("einkauf", "shopping"), "shopping"),
    (("bildung", "ausbildung", "education"), "education"),
    (("geschäft", "büro", "business"), "business"),
    (("telefon", "internet", "energie", "utilities"), "utilities"),
    (("versicherung", "insurance"), "insurance"),
)


def concept_for_category(category_name: str | None) -> str | None:
    if not category_name:
        return None
    name = category_name.lower()
    for fragments, concept in CATEGORY_NAME_HINTS:
        if any(fragment in name for fragment in fragments):
            return concept
    return None


def amount_hint(category_name: str | None, amount: Decimal | None) -> float:
    """Small bonus when the amount is typical for the category."""
    if not category_name or amount is None:
        return 0.0
    name = category_name.lower()
    magnitude = abs(amount)
    if "miete" in name and magnitude > 500:
        return 0.1
    if "gehalt" in name and magnitude > 1000:
        return 0.1
    if "lebensmittel" in name and magnitude < 200:
        return 0.1
    if "transport" in name and magnitude < 100:
        return 0.1
    return 0.0


def all_merchants() -> frozenset[str]:
    return frozenset(merchant for merchants in GERMAN_MERCHANTS.values() for merchant in merchants)
