# app/config/settings.py
# Runtime configuration for the API client, cache, demo store and server

import os
from typing import List
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


class Settings:
    """Application settings read from the environment (.env supported)"""

    # Hosted REST API
    API_BASE_URL: str = os.getenv('API_BASE_URL', 'http://localhost:3001/api')
    API_TIMEOUT: float = float(os.getenv('API_TIMEOUT', 15))

    # Read-through cache freshness window, in seconds
    CACHE_TTL_SECONDS: float = float(os.getenv('CACHE_TTL_SECONDS', 30))

    # Local key-value storage (access token, demo-mode collections)
    STORAGE_DIR: str = os.getenv('STORAGE_DIR', '.storage')
    ACCESS_TOKEN_KEY: str = os.getenv('ACCESS_TOKEN_KEY', 'access_token')
    SEED_DEMO_DATA: bool = _env_bool('SEED_DEMO_DATA', 'true')

    # Logging
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO').upper()

    # Demo-mode server
    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv(
            'CORS_ORIGINS',
            'http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173'
        ).split(',')
        if origin.strip()
    ]


settings = Settings()
