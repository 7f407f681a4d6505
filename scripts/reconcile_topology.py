#!/usr/bin/env python3
"""
Script to reconcile a Pub/Sub topology document against the broker without starting the HTTP service.
"""

import argparse
import logging
import sys

from pubsub_topology.broker.client import PubSubBrokerClient
from pubsub_topology.broker.config import BrokerConfig
from pubsub_topology.common.exceptions import ConfigLoadError, ReconcileError
from pubsub_topology.topology.loader import DEFAULT_CONFIG_PATH, load_topology
from pubsub_topology.topology.notifications import CreationNotifier
from pubsub_topology.topology.reconciler import Reconciler


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create missing Pub/Sub topics and subscriptions")
    parser.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="Topology document to apply")
    parser.add_argument(
        "--strict", action="store_true", help="Exit with status 1 if any topic or subscription failed"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main function to run the reconciliation script."""
    args = parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    logger = logging.getLogger(__name__)

    try:
        topology = load_topology(args.config)
    except ConfigLoadError as e:
        logger.error(str(e))
        return 2

    config = BrokerConfig()
    print("Pub/Sub Reconcile Script")
    print(f"Project: {config.project_id}")
    print(f"Emulator: {config.emulator_host or 'not used'}")
    print(f"Config: {args.config}")
    print("-" * 50)

    with PubSubBrokerClient(config) as broker:
        notifier = CreationNotifier(broker)
        report = Reconciler(broker, notifier=notifier).reconcile(topology)
        notifier.close(wait=True)

    print(report.summary())

    if args.strict:
        try:
            report.raise_for_failures()
        except ReconcileError as e:
            for failure in e.failures:
                logger.error(f"  - {failure}")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
