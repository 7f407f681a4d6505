"""
Service configuration settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class ServiceConfig(BaseSettings):
    """Configuration for the HTTP service and its startup reconciliation."""

    config_path: str = Field(
        default="config/pubsub-config.json",
        description="Topology document, relative to the working directory",
    )
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, description="Bind port")
    post_publish_delay: float = Field(
        default=1.0, ge=0, description="Seconds to wait after a publish before responding"
    )
    default_topic: str = Field(default="my-topic", description="Topic used when a request names none")
    default_subscription: str = Field(
        default="my-subscription", description="Subscription used when a request names none"
    )
    reconcile_on_startup: bool = Field(default=True, description="Reconcile the topology when the service starts")

    model_config = {
        "env_prefix": "PUBSUB_SERVICE_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
