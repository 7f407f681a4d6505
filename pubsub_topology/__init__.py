"""Provisioning and relay service for a Pub/Sub publish/subscribe topology."""

__version__ = "1.0.0"
