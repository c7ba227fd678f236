from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConnectSettings(BaseSettings):
    """Configuration for the sample connectors.

    Environment variables are prefixed with CONNECT_.
    """

    model_config = SettingsConfigDict(env_prefix="CONNECT_", extra="ignore")

    # HTTP
    bind_host: str = "0.0.0.0"
    bind_port: int = 3443

    # Logging
    log_level: str = Field(default="INFO", description="Python logging level")

    # NYPD complaint dataset (Socrata)
    nypd_base_url: str = "https://data.cityofnewyork.us/resource/7x9x-zpz6.json"
    nypd_app_token: str | None = Field(default=None, description="If set, sent as $$app_token")
    nypd_get_all_limit: int = 100
    nypd_search_limit: int = 50

    # Auth
    api_key: str = Field(default="Example", description="The API key accepted by the api-key authenticator")
    jwt_secret: str = "test 2"
    jwt_ttl_seconds: int = 60

    # Async services
    async_polling_interval_seconds: int = 1
    async_default_duration_seconds: int = 10
    async_job_ttl_seconds: int = Field(default=300, description="Finished async jobs are kept this long")


settings = ConnectSettings()
