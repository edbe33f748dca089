import sys

from pydantic_settings import BaseSettings

_ENV_FILE = None if "pytest" in sys.modules else ".env"


class Settings(BaseSettings):
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 3000

    MONGO_URL: str = ""
    MONGO_DEFAULT_DATABASE: str = "test"
    MONGO_EMPLOYEES_COLLECTION: str = "employees"
    MONGO_CONTACTS_COLLECTION: str = "contacts"

    model_config = {
        "env_file": _ENV_FILE,
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }


settings = Settings()
