import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Application Settings
    app_name: str = os.getenv("APP_NAME", "Library Management System")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # API Settings
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "3000"))

    # Seed data (loaded once at startup, never written back)
    books_data_file: str = os.getenv("BOOKS_DATA_FILE", "data/books.json")
    users_data_file: str = os.getenv("USERS_DATA_FILE", "data/users.json")


settings = Settings()
