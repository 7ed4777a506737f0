"""
Main entry point for the partnership ledger analyzer.

This module loads configuration and starts the FastAPI server.
"""
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

PROJECT_ROOT = Path(__file__).parent

# Load environment variables from .env file
_env_file = PROJECT_ROOT / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

from core.config import get_settings  # noqa: E402
from core.exceptions import ConfigurationError  # noqa: E402
from core.logger import setup_logger  # noqa: E402

logger = setup_logger(__name__)


def load_settings():
    """Load settings, turning validation failures into ConfigurationError."""
    try:
        return get_settings()
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid configuration",
            details={"errors": [err["msg"] for err in e.errors()]}
        )


def main():
    """Main application entry point."""
    try:
        settings = load_settings()

        import uvicorn
        from app.api import app

        logger.info(f"Starting {settings.app_name}")
        logger.info(f"Log Level: {settings.log_level}")
        logger.info(
            f"Party codes: A={settings.party_a_code}, B={settings.party_b_code}, "
            f"shared={settings.shared_code}"
        )
        logger.info(f"Max upload size: {settings.max_upload_mb}MB")
        logger.info(f"Temp Storage: {settings.temp_storage_path}")

        logger.info(f"Starting server on {settings.host}:{settings.port}")

        uvicorn.run(
            app,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower()
        )

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e.message}")
        if e.details:
            logger.error(f"Details: {e.details}")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Failed to start application: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
