import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Application settings
    app_name: str = os.getenv("APP_NAME", "Library Management System")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    environment: str = os.getenv("ENVIRONMENT", "development")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")

    # Message catalog: 'en' or 'zh'
    language: str = os.getenv("LMS_LANGUAGE", "en")

    # Shell settings
    output_mode: str = os.getenv("LMS_OUTPUT", "plain")  # plain | json | rich
    prompt: str = os.getenv("LMS_PROMPT", "$ ")
    log_level: str = os.getenv("LMS_LOG_LEVEL", "WARNING")


settings = Settings()
