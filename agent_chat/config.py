"""Client configuration loaded from the environment."""

import os

from pydantic import BaseModel, Field

from agent_chat.utils.logging import LogConfig

DEFAULT_API_URL = "http://localhost:2024"
DEFAULT_ASSISTANT_ID = "agent"
FULL_SCREEN_UI_NAME = "llm-ui"


class ClientConfig(BaseModel):
    """Settings for talking to a LangGraph deployment."""

    api_url: str = DEFAULT_API_URL
    assistant_id: str = DEFAULT_ASSISTANT_ID
    api_key: str | None = None
    full_screen_ui_name: str = FULL_SCREEN_UI_NAME
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Build a config from environment variables, falling back to defaults."""
        return cls(
            api_url=os.getenv("LANGGRAPH_API_URL", DEFAULT_API_URL),
            assistant_id=os.getenv("LANGGRAPH_ASSISTANT_ID", DEFAULT_ASSISTANT_ID),
            api_key=os.getenv("LANGSMITH_API_KEY") or None,
            full_screen_ui_name=os.getenv("FULL_SCREEN_UI_NAME", FULL_SCREEN_UI_NAME),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            cors_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
        )

    def log_config(self) -> LogConfig:
        """Logging settings derived from this config."""
        return LogConfig(level=self.log_level)
