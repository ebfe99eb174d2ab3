import os
import sys
from dotenv import load_dotenv
from typing import Dict, Any, List, Tuple, Type

from logger.logger import logger

# Load environment variables
load_dotenv()

class ConfigError(Exception):
    """Exception raised for missing configuration values"""
    pass

class Settings:
    # Define required environment variables
    REQUIRED_CONFIGS = [
        "DATABASE_URL",
        "DATABASE_NAME",
        "JWT_SECRET_KEY",
    ]

    # Define config with default values and types (None means required with no default)
    # Format: (default_value, type)
    CONFIG_DEFAULTS: Dict[str, Tuple[Any, Type]] = {
        "DATABASE_URL": (None, str),
        "DATABASE_NAME": (None, str),
        "JWT_SECRET_KEY": (None, str),
        "JWT_ALGORITHM": ("HS256", str),
        "JWT_ACCESS_TOKEN_EXPIRE_MINUTES": (60, int),
        # Database pool settings
        "DB_MAX_POOL_SIZE": (10, int),
        "DB_MAX_RECONNECT_ATTEMPTS": (5, int),
        "DB_RECONNECT_DELAY": (5, int),  # seconds
        "DB_SERVER_SELECTION_TIMEOUT_MS": (5000, int),
        "DB_CONNECT_TIMEOUT_MS": (5000, int),
        "DB_OPERATION_TIMEOUT_SECONDS": (10.0, float),
        # Messaging
        "MESSAGE_MAX_LENGTH": (5000, int),
        "LIVE_SEND_TIMEOUT_SECONDS": (0.5, float),
        # Runtime
        "ENVIRONMENT": ("development", str),
        "API_PREFIX": ("/api", str),
        "CORS_ORIGINS": ("http://localhost:4200,http://localhost:3000", list),
    }

    def __init__(self):
        self.values = {}
        self._load_config()

    def _load_config(self):
        # Check for required environment variables
        missing_vars = []
        for var in self.REQUIRED_CONFIGS:
            if not os.getenv(var):
                missing_vars.append(var)

        if missing_vars:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing_vars)}")

        # Load all config values with type conversion
        for key, (default_value, type_) in self.CONFIG_DEFAULTS.items():
            value = os.getenv(key)

            if value is None:
                if default_value is None:
                    raise ConfigError(f"Missing required config value: {key}")
                if type_ != list:
                    self.values[key] = default_value
                    continue
                value = default_value

            try:
                # Convert string value to expected type
                if type_ == bool:
                    self.values[key] = value.lower() in ('true', '1', 'yes')
                elif type_ == list:
                    self.values[key] = self._split_list(value)
                else:
                    self.values[key] = type_(value)
            except ValueError as e:
                raise ConfigError(f"Invalid value for {key}: {str(e)}")

        self.values["API_PREFIX"] = "/" + self.values["API_PREFIX"].strip("/")

    @staticmethod
    def _split_list(value: str) -> List[str]:
        return [item.strip() for item in value.split(",") if item.strip()]

    def __getattr__(self, name):
        if name in self.values:
            return self.values[name]
        raise AttributeError(f"'{self.__class__.__name__}' object has no attribute '{name}'")

# Initialize settings
try:
    settings = Settings()

    # Make settings available for import
    DATABASE_URL = settings.DATABASE_URL
    DATABASE_NAME = settings.DATABASE_NAME
    JWT_SECRET_KEY = settings.JWT_SECRET_KEY
    JWT_ALGORITHM = settings.JWT_ALGORITHM
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES = settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES

    # Database pool settings
    DB_MAX_POOL_SIZE = settings.DB_MAX_POOL_SIZE
    DB_MAX_RECONNECT_ATTEMPTS = settings.DB_MAX_RECONNECT_ATTEMPTS
    DB_RECONNECT_DELAY = settings.DB_RECONNECT_DELAY
    DB_SERVER_SELECTION_TIMEOUT_MS = settings.DB_SERVER_SELECTION_TIMEOUT_MS
    DB_CONNECT_TIMEOUT_MS = settings.DB_CONNECT_TIMEOUT_MS
    DB_OPERATION_TIMEOUT_SECONDS = settings.DB_OPERATION_TIMEOUT_SECONDS

    # Messaging settings
    MESSAGE_MAX_LENGTH = settings.MESSAGE_MAX_LENGTH
    LIVE_SEND_TIMEOUT_SECONDS = settings.LIVE_SEND_TIMEOUT_SECONDS

    # Runtime settings
    ENVIRONMENT = settings.ENVIRONMENT
    IS_DEVELOPMENT = ENVIRONMENT.lower() == "development"
    API_PREFIX = settings.API_PREFIX
    CORS_ORIGINS = settings.CORS_ORIGINS

except ConfigError as e:
    logger.critical(f"Configuration Error: {e}")
    sys.exit(1)
