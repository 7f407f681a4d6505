"""
Topology module: declarative topology model, loading and reconciliation.
"""

from .loader import load_topology, load_topology_or_empty
from .models import DeliveryMode, PushConfigSpec, SubscriptionSpec, TopicSpec, TopologyConfig
from .notifications import CreationNotice, CreationNotifier
from .reconciler import ReconcileReport, Reconciler

__all__ = [
    "CreationNotice",
    "CreationNotifier",
    "DeliveryMode",
    "PushConfigSpec",
    "ReconcileReport",
    "Reconciler",
    "SubscriptionSpec",
    "TopicSpec",
    "TopologyConfig",
    "load_topology",
    "load_topology_or_empty",
]
