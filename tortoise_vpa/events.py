"""Recording Kubernetes events for Tortoises."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from kubernetes import client
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from .config import EVENT_COMPONENT, TORTOISE_GROUP, TORTOISE_VERSION, TORTOISE_KIND
from .models import Tortoise

logger = logging.getLogger(__name__)

EVENT_TYPE_NORMAL = "Normal"
EVENT_TYPE_WARNING = "Warning"


class EventRecorder:
    """Writes events about Tortoises to the API server."""

    def __init__(
        self,
        core_api: Optional[client.CoreV1Api] = None,
        component: str = EVENT_COMPONENT,
        dry_run: bool = False
    ):
        self.core_api = core_api or client.CoreV1Api()
        self.component = component
        self.dry_run = dry_run

    def event(self, tortoise: Tortoise, event_type: str, reason: str, message: str) -> None:
        """
        Record an event on a Tortoise.

        Failing to record an event doesn't fail the caller; it's only logged.

        Args:
            tortoise: The involved Tortoise
            event_type: Normal or Warning
            reason: Short CamelCase reason, e.g. VPACreated
            message: Human readable message
        """
        if self.dry_run:
            logger.info(f"[DRY-RUN] Would record event {reason} on tortoise {tortoise.namespace}/{tortoise.name}: {message}")
            return

        now = datetime.now(timezone.utc)
        body = client.CoreV1Event(
            metadata=client.V1ObjectMeta(
                name=f"{tortoise.name}.{uuid.uuid4().hex[:16]}",
                namespace=tortoise.namespace,
            ),
            involved_object=client.V1ObjectReference(
                api_version=f"{TORTOISE_GROUP}/{TORTOISE_VERSION}",
                kind=TORTOISE_KIND,
                name=tortoise.name,
                namespace=tortoise.namespace,
                uid=tortoise.uid or None,
                resource_version=tortoise.resource_version or None,
            ),
            type=event_type,
            reason=reason,
            message=message,
            source=client.V1EventSource(component=self.component),
            first_timestamp=now,
            last_timestamp=now,
            count=1,
        )

        try:
            self.core_api.create_namespaced_event(namespace=tortoise.namespace, body=body)
        except (ApiException, HTTPError) as e:
            logger.error(f"Error recording event {reason} on tortoise {tortoise.namespace}/{tortoise.name}: {e}")
            return

        logger.debug(f"Recorded event {reason} on tortoise {tortoise.namespace}/{tortoise.name}: {message}")
