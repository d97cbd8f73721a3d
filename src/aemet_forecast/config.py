"""Configuration settings for the AEMET forecast client."""

import os
from typing import Final
from dotenv import load_dotenv

load_dotenv()

# API Configuration
AEMET_API_BASE_URL: Final[str] = "https://opendata.aemet.es/opendata"
USER_AGENT: Final[str] = "aemet-forecast/0.1.0"

# Environment variable holding the API key (read at client construction)
AEMET_API_KEY_ENV: Final[str] = "AEMET_API_KEY"

# Optional path to a full municipality table in AEMET's maestro/municipios format
AEMET_MUNICIPALITIES_PATH_ENV: Final[str] = "AEMET_MUNICIPALITIES_PATH"

# Endpoints
STATIONS_ENDPOINT: Final[str] = "api/valores/climatologicos/inventarioestaciones/todasestaciones"
FORECAST_ENDPOINT: Final[str] = "api/prediccion/especifica/municipio/diaria/{municipality_id}"

# HTTP settings
HTTP_TIMEOUT_SECONDS: Final[float] = 30.0

# Retry settings
MAX_RETRIES: int = int(os.getenv("AEMET_MAX_RETRIES", "3"))
BASE_BACKOFF_SECONDS: float = float(os.getenv("AEMET_BASE_BACKOFF_SECONDS", "0.1"))  # 100ms

# Logging
LOG_LEVEL: str = os.getenv("AEMET_LOG_LEVEL", "WARNING").upper()
