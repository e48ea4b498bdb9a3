#!/usr/bin/env python3
"""
Tortoise VPA Manager - Entry Point

Creates, inspects, disables and deletes the VPAs a Tortoise manages, and
marks its vertically scaled container resources as Working.

Usage:
    python run.py COMMAND TORTOISE [--namespace NAMESPACE] [--dry-run] [--in-cluster]
"""

import argparse
import logging
import sys
from datetime import datetime, timezone

from kubernetes import client, config

from tortoise_vpa.config import REQUEST_TIMEOUT_SECONDS
from tortoise_vpa.errors import VPAError, VPACreateError, TortoiseError
from tortoise_vpa.events import EventRecorder
from tortoise_vpa.phase import set_all_vertical_container_resource_phase_working
from tortoise_vpa.service import VPAService
from tortoise_vpa.tortoise_client import TortoiseClient
from tortoise_vpa.utils import format_recommendation, get_container_recommendations
from tortoise_vpa.vpa_client import VPAClient

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

COMMANDS = (
    "create-monitor",
    "get-monitor",
    "get-updater",
    "disable-updater",
    "set-container-policy",
    "delete-monitor",
    "delete-updater",
    "mark-working",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Tortoise VPA Manager - Manage the VPAs of a Tortoise"
    )
    parser.add_argument(
        "command",
        choices=COMMANDS,
        help="Operation to run"
    )
    parser.add_argument(
        "tortoise",
        help="Name of the Tortoise"
    )
    parser.add_argument(
        "--namespace", "-n",
        default="default",
        help="Namespace of the Tortoise (default: default)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run in dry-run mode (no changes made)"
    )
    parser.add_argument(
        "--in-cluster",
        action="store_true",
        help="Use in-cluster config (for running inside Kubernetes)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=REQUEST_TIMEOUT_SECONDS,
        help=f"Timeout of every API request in seconds (default: {REQUEST_TIMEOUT_SECONDS})"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose/debug logging"
    )
    return parser


def run_command(command: str, tortoise, service: VPAService, tortoise_client: TortoiseClient) -> None:
    """Run one command against a Tortoise."""
    if command == "create-monitor":
        try:
            vpa, tortoise = service.create_tortoise_monitor_vpa(tortoise)
        except VPACreateError as e:
            # Keep what was recorded in the status even if the VPA wasn't created.
            tortoise_client.update_status(e.tortoise)
            raise
        tortoise_client.update_status(tortoise)
        print(f"created {vpa['metadata']['namespace']}/{vpa['metadata']['name']}")

    elif command == "get-monitor":
        vpa, ready = service.get_tortoise_monitor_vpa(tortoise)
        print(f"{vpa['metadata']['namespace']}/{vpa['metadata']['name']} ready={ready}")

    elif command == "get-updater":
        vpa = service.get_tortoise_updater_vpa(tortoise)
        print(f"{vpa['metadata']['namespace']}/{vpa['metadata']['name']}")
        for r in get_container_recommendations(vpa):
            print(f"  {format_recommendation(r)}")

    elif command == "disable-updater":
        service.disable_tortoise_updater_vpa(tortoise)

    elif command == "set-container-policy":
        vpa = service.get_tortoise_updater_vpa(tortoise)
        service.update_vpa_container_resource_policy(tortoise, vpa)

    elif command == "delete-monitor":
        service.delete_tortoise_monitor_vpa(tortoise)

    elif command == "delete-updater":
        service.delete_tortoise_updater_vpa(tortoise)

    elif command == "mark-working":
        tortoise = set_all_vertical_container_resource_phase_working(tortoise, datetime.now(timezone.utc))
        tortoise_client.update_status(tortoise)


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Set log level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # Load Kubernetes configuration
    try:
        if args.in_cluster:
            config.load_incluster_config()
            logger.info("Loaded in-cluster configuration")
        else:
            config.load_kube_config()
            logger.info("Loaded kubeconfig from default location")
    except Exception as e:
        logger.error(f"Failed to load Kubernetes config: {e}")
        return 1

    custom_api = client.CustomObjectsApi()
    tortoise_client = TortoiseClient(custom_api, request_timeout=args.timeout, dry_run=args.dry_run)
    service = VPAService(
        VPAClient(custom_api, request_timeout=args.timeout, dry_run=args.dry_run),
        EventRecorder(client.CoreV1Api(), dry_run=args.dry_run),
    )

    try:
        tortoise = tortoise_client.get_tortoise(args.tortoise, args.namespace)
        run_command(args.command, tortoise, service, tortoise_client)
    except (VPAError, TortoiseError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
