"""Main entry point for the QuizHub API server"""
import logging
import uvicorn

from quizhub.config import API_HOST, API_PORT, LOG_LEVEL, validate_config
from quizhub.api.server import create_api_application

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL)
)

logger = logging.getLogger(__name__)


def main() -> None:
    """Main application entry point"""
    logger.info("Validating configuration...")
    validate_config()

    app = create_api_application()

    logger.info(f"Starting QuizHub API on {API_HOST}:{API_PORT}")
    uvicorn.run(app, host=API_HOST, port=API_PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
