import os
from dataclasses import dataclass
from typing import Literal

from statement_ingestion.core import settings
from statement_ingestion.domain.keywords import STOP_WORDS, parse_keyword_list
from statement_ingestion.logger import get_logger

ValueType = Literal["string", "int", "float"]

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConfigField:
    key: str
    description: str
    default: str
    value_type: ValueType = "string"
    options: tuple[str, ...] | None = None
    min_value: float | int | None = None
    max_value: float | int | None = None


CONFIG_FIELDS: tuple[ConfigField, ...] = (
    ConfigField(
        key="SUGGESTION_MIN_CONFIDENCE",
        description="Suggestions must score above this value (0-1).",
        default="0.3",
        value_type="float",
        min_value=0.0,
        max_value=1.0,
    ),
    ConfigField(
        key="SUGGESTION_MAX_RESULTS",
        description="Maximum number of category suggestions per transaction.",
        default="5",
        value_type="int",
        min_value=1,
    ),
    ConfigField(
        key="LEARNING_MAX_KEYWORDS",
        description="Maximum number of keywords kept per category.",
        default="20",
        value_type="int",
        min_value=1,
    ),
    ConfigField(
        key="LEARNING_MIN_TOKEN_LENGTH",
        description="Shortest token learned as a keyword.",
        default="4",
        value_type="int",
        min_value=1,
    ),
    ConfigField(
        key="LEARNING_STOP_WORDS",
        description="Comma-separated words never learned, in addition to the built-in list.",
        default="",
    ),
    ConfigField(
        key="DUPLICATE_THRESHOLD",
        description="Similarity (0-1) from which a stored transaction counts as duplicate.",
        default="0.8",
        value_type="float",
        min_value=0.0,
        max_value=1.0,
    ),
    ConfigField(
        key="DUPLICATE_DATE_WINDOW_DAYS",
        description="Days before and after a transaction searched for duplicates.",
        default="3",
        value_type="int",
        min_value=0,
    ),
    ConfigField(
        key="LOG_LEVEL",
        description="Logging verbosity.",
        default="INFO",
        options=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
    ),
)


@dataclass(frozen=True)
class IngestionConfig:
    data_dir: str = "."
    suggestion_min_confidence: float = 0.3
    suggestion_max_results: int = 5
    learning_max_keywords: int = 20
    learning_min_token_length: int = 4
    learning_stop_words: frozenset[str] = STOP_WORDS
    duplicate_threshold: float = 0.8
    duplicate_date_window_days: int = 3
    log_level: str = "INFO"

    @property
    def categories_path(self) -> str:
        return os.path.join(self.data_dir, settings.CATEGORIES_FILENAME)


def get_config_keys() -> tuple[str, ...]:
    return tuple(field.key for field in CONFIG_FIELDS)


def _validate_value(field: ConfigField, raw_value: str) -> tuple[str, str | None]:
    value = raw_value.strip()
    if not value:
        return "", None

    if "\n" in value or "\r" in value:
        return value, "Value must be a single line."

    if field.options:
        normalized = value.upper()
        if normalized not in field.options:
            return value, f"Must be one of: {', '.join(field.options)}."
        return normalized, None

    if field.value_type == "int":
        try:
            parsed = int(value)
        except ValueError:
            return value, "Must be a whole number."
        if field.min_value is not None and parsed < field.min_value:
            return value, f"Must be at least {field.min_value}."
        if field.max_value is not None and parsed > field.max_value:
            return value, f"Must be at most {field.max_value}."
        return str(parsed), None

    if field.value_type == "float":
        try:
            parsed = float(value)
        except ValueError:
            return value, "Must be a number."
        if field.min_value is not None and parsed < field.min_value:
            return value, f"Must be at least {field.min_value}."
        if field.max_value is not None and parsed > field.max_value:
            return value, f"Must be at most {field.max_value}."
        return str(parsed), None

    return value, None


def validate_values(values: dict[str, str]) -> tuple[dict[str, str], dict[str, str]]:
    """Return ``(cleaned, errors)`` for the known keys present in ``values``."""
    cleaned: dict[str, str] = {}
    errors: dict[str, str] = {}
    for field in CONFIG_FIELDS:
        raw_value = values.get(field.key)
        if raw_value is None:
            continue
        value, error = _validate_value(field, raw_value)
        if error:
            errors[field.key] = error
            continue
        if value:
            cleaned[field.key] = value
    return cleaned, errors


def load_config(environ: dict[str, str] | None = None) -> IngestionConfig:
    """
    Build the ingestion settings from the environment.

    Invalid values are reported and replaced by their defaults; loading never
    fails because of a bad setting.
    """
    source = dict(os.environ if environ is None else environ)
    cleaned, errors = validate_values(source)
    for key, error in errors.items():
        logger.warning("[CONFIG] Invalid %s='%s': %s Using default.", key, source.get(key), error)

    defaults = {field.key: field.default for field in CONFIG_FIELDS}
    values = {**defaults, **cleaned}

    extra_stop_words = parse_keyword_list(values["LEARNING_STOP_WORDS"])
    return IngestionConfig(
        data_dir=source.get("DATA_DIR") or settings.DATA_DIR,
        suggestion_min_confidence=float(values["SUGGESTION_MIN_CONFIDENCE"]),
        suggestion_max_results=int(values["SUGGESTION_MAX_RESULTS"]),
        learning_max_keywords=int(values["LEARNING_MAX_KEYWORDS"]),
        learning_min_token_length=int(values["LEARNING_MIN_TOKEN_LENGTH"]),
        learning_stop_words=STOP_WORDS | frozenset(extra_stop_words),
        duplicate_threshold=float(values["DUPLICATE_THRESHOLD"]),
        duplicate_date_window_days=int(values["DUPLICATE_DATE_WINDOW_DAYS"]),
        log_level=values["LOG_LEVEL"],
    )
