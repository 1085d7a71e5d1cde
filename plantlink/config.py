from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import SettingsConfigDict, BaseSettings

from plantlink.resources import load_api_config

_API = load_api_config()


class BridgeSettings(BaseSettings):
    # Cloud property channel
    device_id: str = Field(..., validation_alias="ARDUINO_CLOUD_DEVICEID")
    secret_key: str = Field(..., validation_alias="ARDUINO_CLOUD_SECRETKEY")
    client_id: Optional[str] = Field(None, validation_alias="ARDUINO_CLOUD_CLIENTID")
    cloud_api_url: str = Field(_API["ARDUINO"]["API_URL"], validation_alias="ARDUINO_CLOUD_API_URL")
    cloud_token_url: str = Field(_API["ARDUINO"]["TOKEN_URL"], validation_alias="ARDUINO_CLOUD_TOKEN_URL")
    poll_interval: float = Field(2.0, validation_alias="POLL_INTERVAL")
    channel_timeout: float = Field(10.0, validation_alias="CHANNEL_TIMEOUT")

    # Advisory backend
    api_key: str = Field(..., validation_alias="OPENAI_API_KEY")
    advisory_base_url: str = Field(_API["OPENAI"]["API_URL"], validation_alias="OPENAI_BASE_URL")
    advisory_model: str = Field(_API["OPENAI"]["MODEL"], validation_alias="OPENAI_MODEL")
    advisory_timeout: float = Field(30.0, validation_alias="ADVISORY_TIMEOUT")

    # Dispatcher
    prompt_property: str = Field("plantPrompt", validation_alias="PROMPT_PROPERTY")
    serialize_requests: bool = Field(False, validation_alias="SERIALIZE_REQUESTS")

    log_ring_size: int = Field(200, validation_alias="LOG_RING_SIZE")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", populate_by_name=True, extra="ignore")


@lru_cache
def get_settings() -> BridgeSettings:
    return BridgeSettings()
