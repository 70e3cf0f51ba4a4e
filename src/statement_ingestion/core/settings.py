import os

from dotenv import find_dotenv, load_dotenv

from statement_ingestion.logger import get_logger

logger = get_logger(__name__)


CONFIG_FILENAME = "config.yaml"

_CONFIG_FILE_PATH: str | None = None
_CONFIG_FILE_VALUES: dict[str, str] = {}
_EXTERNAL_ENV_KEYS: set[str] = set()

_CONFIG_KEYS = (
    "LOG_LEVEL",
    "PARSER_LOG_LEVEL",
    "LOG_DIR",
    "DATA_DIR",
    "SUGGESTION_MIN_CONFIDENCE",
    "SUGGESTION_MAX_RESULTS",
    "LEARNING_MAX_KEYWORDS",
    "LEARNING_MIN_TOKEN_LENGTH",
    "LEARNING_STOP_WORDS",
    "DUPLICATE_THRESHOLD",
    "DUPLICATE_DATE_WINDOW_DAYS",
)


def _resolve_dotenv_path() -> str | None:
    config_dir = os.getenv("CONFIG_DIR")
    if config_dir:
        candidate = os.path.join(config_dir, ".env")
        if os.path.exists(candidate):
            return candidate
    resolved = find_dotenv(usecwd=True)
    return resolved or None


def _resolve_config_path() -> str:
    return os.path.join(os.getenv("CONFIG_DIR") or os.getcwd(), CONFIG_FILENAME)


def _clean_value(raw_value: str) -> str:
    """Drop a trailing ``# comment``; a quoted value is taken up to its closing quote."""
    value = raw_value.strip()
    if value[:1] in {'"', "'"}:
        end = value.find(value[0], 1)
        if end > 0:
            return value[1:end]
    return value.split("#", 1)[0].strip()


def read_config_file(path: str | None) -> dict[str, str]:
    """Read a flat ``key: value`` file; nested YAML is not supported."""
    if not path or not os.path.exists(path):
        return {}

    values: dict[str, str] = {}
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            key, sep, raw_value = line.strip().partition(":")
            key = key.strip()
            if not sep or not key or key.startswith("#"):
                continue
            value = _clean_value(raw_value)
            if value:
                values[key] = value
    return values


def load_environment() -> None:
    global _CONFIG_FILE_PATH
    global _CONFIG_FILE_VALUES
    global _EXTERNAL_ENV_KEYS

    dotenv_path = _resolve_dotenv_path()
    if dotenv_path:
        load_dotenv(dotenv_path=dotenv_path, override=False)

    _EXTERNAL_ENV_KEYS = set(os.environ.keys())

    _CONFIG_FILE_PATH = _resolve_config_path()
    _CONFIG_FILE_VALUES = read_config_file(_CONFIG_FILE_PATH)

    for key in _CONFIG_KEYS:
        if key not in os.environ and key in _CONFIG_FILE_VALUES:
            os.environ[key] = _CONFIG_FILE_VALUES[key]


def get_config_path() -> str | None:
    return _CONFIG_FILE_PATH


def is_env_override(name: str) -> bool:
    return name in _EXTERNAL_ENV_KEYS


def ensure_dirs(*paths: str | None) -> None:
    for path in paths:
        if path and path not in {".", "./"}:
            os.makedirs(path, exist_ok=True)


def log_environment() -> None:
    logger.info("[ENV] Logging configured environment variables (config file: %s).", get_config_path() or "none")
    for key in _CONFIG_KEYS:
        raw_value = os.getenv(key)
        if raw_value is None:
            value = "<unset>"
        else:
            value = raw_value.replace("\r", "\\r").replace("\n", "\\n")
        source = "env" if is_env_override(key) else "config"
        logger.info("[ENV] %s=%s (%s)", key, value, source if raw_value is not None else "default")


CATEGORIES_FILENAME = "categories.json"


load_environment()

DATA_DIR = os.getenv("DATA_DIR", ".")
LOG_DIR = os.getenv("LOG_DIR")

ensure_dirs(DATA_DIR, LOG_DIR)
