#!/usr/bin/env python3
"""
CENTRALIZED ENVIRONMENT CONFIGURATION
Loads .env once and exposes the OCR settings shared by the service and the CLI
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Get the project root directory (where .env file is located)
PROJECT_ROOT = Path(__file__).parent.parent.absolute()
ENV_FILE = PROJECT_ROOT / '.env'

OCR_ENGINES = ('auto', 'google_vision', 'tesseract')

# Global flag to track if environment has been loaded
_ENV_LOADED = False


def ensure_env_loaded() -> bool:
    """Ensure environment variables are loaded exactly once"""
    global _ENV_LOADED

    if not _ENV_LOADED:
        if ENV_FILE.exists():
            load_dotenv(ENV_FILE)
            logger.info(f"Environment loaded from {ENV_FILE}")
        else:
            logger.debug(f"No .env file found at {ENV_FILE}")
        _ENV_LOADED = True

    return _ENV_LOADED


def get_env_var(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get environment variable with automatic loading"""
    ensure_env_loaded()
    return os.getenv(key, default)


def get_ocr_config() -> dict:
    """OCR settings with defaults"""
    ensure_env_loaded()

    engine = os.getenv('OCR_ENGINE', 'auto').lower()
    if engine not in OCR_ENGINES:
        logger.warning(f"Unknown OCR_ENGINE '{engine}', using auto")
        engine = 'auto'

    return {
        'engine': engine,
        'language': os.getenv('OCR_LANGUAGE', 'eng'),
        'tesseract_cmd': os.getenv('TESSERACT_CMD'),
        'tesseract_psm': int(os.getenv('TESSERACT_PSM', '6')),
        'tesseract_oem': int(os.getenv('TESSERACT_OEM', '3')),
        'fetch_timeout': int(os.getenv('IMAGE_FETCH_TIMEOUT', '15')),
    }


def has_google_credentials() -> bool:
    """Check for any form of Google Cloud credentials"""
    ensure_env_loaded()
    return bool(
        os.getenv('GOOGLE_APPLICATION_CREDENTIALS') or
        os.getenv('GOOGLE_APPLICATION_CREDENTIALS_JSON') or
        os.path.exists(os.path.expanduser('~/.config/gcloud/application_default_credentials.json'))
    )
