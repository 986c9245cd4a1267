import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Defaults applied when a request does not name its own currency / locale
    DEFAULT_CURRENCY = os.environ.get("DEFAULT_CURRENCY", "EUR")
    DEFAULT_LOCALE = os.environ.get("DEFAULT_LOCALE", "en-US")

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

config = Config()
