from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    '''Raised when the process cannot start with the given environment.'''


class Settings(BaseSettings):
    OPERATOR_TOKEN: str = Field(min_length=1)
    MAX_REASON_BYTES: int = Field(4096, ge=0)

    # Bind address; TLS is terminated by the reverse proxy in front of us
    IP: str = "127.0.0.1"
    PORT: int = Field(3000, ge=1, le=65535)

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


def load_settings(**overrides) -> Settings:
    try:
        return Settings(**overrides)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise ConfigurationError(f"invalid configuration: {fields or e}") from e
