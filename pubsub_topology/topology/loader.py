"""
Loading of the declarative topology document from disk.
"""

import logging
from pathlib import Path
from typing import Union

import orjson
import pydantic

from pubsub_topology.common.exceptions import ConfigLoadError
from pubsub_topology.topology.models import TopologyConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/pubsub-config.json")


def load_topology(path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> TopologyConfig:
    """
    Read and validate a topology document.

    Relative paths are resolved against the current working directory.

    Args:
        path: Location of the JSON document

    Returns:
        Parsed TopologyConfig

    Raises:
        ConfigLoadError: If the file is missing, is not JSON or does not match the schema
    """
    config_path = Path(path).resolve()
    try:
        raw = config_path.read_bytes()
    except OSError as e:
        raise ConfigLoadError(f"Cannot read topology file {config_path}: {e}") from e

    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise ConfigLoadError(f"Topology file {config_path} is not valid JSON: {e}") from e

    try:
        topology = TopologyConfig.model_validate(data)
    except pydantic.ValidationError as e:
        raise ConfigLoadError(f"Topology file {config_path} is invalid: {e}") from e

    for name in topology.duplicate_topic_names():
        logger.warning(f"Topic {name} is declared more than once; it will be ensured again")
    for topic in topology.topics:
        for name in topic.duplicate_subscription_names():
            logger.warning(f"Subscription {name} is declared more than once under topic {topic.name}")

    logger.info(f"Loaded Pub/Sub configuration from {config_path}: {len(topology.topics)} topics")
    return topology


def load_topology_or_empty(path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> TopologyConfig:
    """Load the topology, degrading to an empty one so startup never aborts."""
    try:
        return load_topology(path)
    except ConfigLoadError as e:
        logger.error(f"Error loading Pub/Sub configuration: {e}")
        return TopologyConfig.empty()
