from statement_ingestion.core import settings
from statement_ingestion.core.configuration import load_config
from statement_ingestion.logger import get_logger, setup_logging
from statement_ingestion.manager import IngestionManager

logger = get_logger(__name__)


def create_manager() -> IngestionManager:
    setup_logging()
    logger.info("Initializing ingestion services...")
    settings.log_environment()

    manager = IngestionManager(config=load_config())
    logger.info("Ingestion services initialized (%d banks supported).", len(manager.supported_banks()))
    return manager
