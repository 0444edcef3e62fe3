"""
Entry point for the Users Backend
"""

import sys
import os
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Add src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from config.settings import Settings, configure_logging
from app import create_app

settings = Settings.from_env()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = create_app(settings)

if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Users Backend on {settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)
