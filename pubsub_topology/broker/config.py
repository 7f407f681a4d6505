"""
Pub/Sub broker connection settings.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class BrokerConfig(BaseSettings):
    """Configuration for the Pub/Sub client."""

    emulator_host: Optional[str] = Field(
        default=None,
        description="host:port of a local Pub/Sub emulator (PUBSUB_EMULATOR_HOST); unset targets the live service",
    )
    project_id: str = Field(default="gcp-pubsub-456020", description="GCP project owning topics and subscriptions")

    model_config = {
        "env_prefix": "PUBSUB_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def api_endpoint(self) -> Optional[str]:
        """Endpoint URL of the emulator, if one is configured."""
        if self.emulator_host:
            return f"http://{self.emulator_host}"
        return None

    @property
    def uses_emulator(self) -> bool:
        return bool(self.emulator_host)
