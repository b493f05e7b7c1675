from pydantic_settings import BaseSettings

from ns1 import __version__


class Settings(BaseSettings):
    api_key: str = ""
    endpoint: str = "https://api.nsone.net/v1/"
    user_agent: str = f"ns1-python/{__version__}"
    debug: bool = False
    rate_limit_strategy: str = "none"
    timeout: float = 30.0
    log_format: str = "text"
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "NS1_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


settings = Settings()
