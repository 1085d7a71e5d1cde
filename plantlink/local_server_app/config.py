from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import SettingsConfigDict, BaseSettings

from plantlink.resources import load_api_config

_API = load_api_config()


class ServerSettings(BaseSettings):
    server_ip: str = Field("127.0.0.1", validation_alias="SERVER_IP")
    server_port: int = Field(10380, validation_alias="SERVER_PORT")

    api_key: Optional[str] = Field(None, validation_alias="OPENAI_API_KEY")
    advisory_base_url: str = Field(_API["OPENAI"]["API_URL"], validation_alias="OPENAI_BASE_URL")
    advisory_model: str = Field(_API["OPENAI"]["MODEL"], validation_alias="OPENAI_MODEL")
    advisory_timeout: float = Field(30.0, validation_alias="ADVISORY_TIMEOUT")

    prompt_property: str = Field("plantPrompt", validation_alias="PROMPT_PROPERTY")
    serialize_requests: bool = Field(False, validation_alias="SERIALIZE_REQUESTS")
    log_ring_size: int = Field(200, validation_alias="LOG_RING_SIZE")
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", populate_by_name=True, extra="ignore")


@lru_cache
def get_settings() -> ServerSettings:
    return ServerSettings()
