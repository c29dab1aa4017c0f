import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Data files
    books_file: str = os.getenv("LIBRARY_BOOKS_FILE", "books.txt")
    users_file: str = os.getenv("LIBRARY_USERS_FILE", "users.txt")

    # CLI output: plain | json | rich
    output_mode: str = os.getenv("LIB_CLI_OUTPUT", "plain")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "WARNING")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")

    # Application
    app_name: str = os.getenv("APP_NAME", "Library Catalog")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level.upper()


settings = Settings()
