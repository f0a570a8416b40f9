"""
Application settings with environment variable support.

Values come from `TODOFLOW_*` environment variables or a `.env` file.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class TodoflowSettings(BaseSettings):
    """Runtime settings shared by the API server and the CLI."""

    profile: str = Field(default="dev", description="Configuration profile name")
    config_dir: str = Field(default="configs", description="Directory holding profile YAML files")
    default_agent_type: str = Field(default="default", description="Agent tag used when none is given")
    host: str = Field(default="0.0.0.0", description="API server bind address")
    port: int = Field(default=8070, description="API server port")
    debug: bool = Field(default=False, description="Enable debug logging")

    model_config = {
        "env_file": ".env",
        "env_prefix": "TODOFLOW_",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> TodoflowSettings:
    return TodoflowSettings()
