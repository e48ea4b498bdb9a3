"""Lifecycle of the VPAs managed by tortoises."""

import copy
import logging
from typing import Any, Dict, List, Tuple

from .config import (
    VPA_GROUP,
    VPA_VERSION,
    VPA_KIND,
    MANAGED_BY_TORTOISE_ANNOTATION,
    TORTOISE_NAME_ANNOTATION,
    DEFAULT_TARGET_KIND,
    DEFAULT_TARGET_API_VERSION,
    VPA_CREATED_REASON,
)
from .errors import VPAError, VPACreateError, is_not_found
from .events import EventRecorder, EVENT_TYPE_NORMAL
from .models import (
    DELETION_POLICY_NO_DELETE,
    VPA_ROLE_MONITOR,
    TargetStatusVerticalPodAutoscaler,
    Tortoise,
)
from .naming import tortoise_monitor_vpa_name, tortoise_updater_vpa_name
from .readiness import is_monitor_vpa_ready
from .retry import Backoff, DEFAULT_BACKOFF, retry_on_conflict
from .utils import get_annotations, object_key
from .vpa_client import VPAClient

logger = logging.getLogger(__name__)

UPDATE_MODE_OFF = "Off"


class VPAService:
    """Creates, reads, disables and deletes the VPAs of tortoises."""

    def __init__(self, vpa_client: VPAClient, recorder: EventRecorder, retry_backoff: Backoff = DEFAULT_BACKOFF):
        """
        Initialize the service.

        Args:
            vpa_client: VPAClient used for all reads and writes of VPAs
            recorder: Where events about tortoises are recorded
            retry_backoff: Backoff between attempts when a write conflicts
        """
        self.vpa_client = vpa_client
        self.recorder = recorder
        self.retry_backoff = retry_backoff

    def delete_tortoise_monitor_vpa(self, tortoise: Tortoise) -> None:
        self._delete_tortoise_vpa(tortoise, tortoise_monitor_vpa_name(tortoise.name))

    def delete_tortoise_updater_vpa(self, tortoise: Tortoise) -> None:
        self._delete_tortoise_vpa(tortoise, tortoise_updater_vpa_name(tortoise.name))

    def _delete_tortoise_vpa(self, tortoise: Tortoise, name: str) -> None:
        if tortoise.spec.deletion_policy == DELETION_POLICY_NO_DELETE:
            logger.debug(f"Tortoise {tortoise.namespace}/{tortoise.name} has {DELETION_POLICY_NO_DELETE}, keeping vpa {name}")
            return

        try:
            vpa = self.vpa_client.get(tortoise.namespace, name)
        except VPAError as e:
            if is_not_found(e):
                # already deleted
                return
            raise

        # make sure it's created by tortoise
        if get_annotations(vpa).get(MANAGED_BY_TORTOISE_ANNOTATION) != "true":
            # shouldn't reach here unless user manually remove the annotation.
            logger.debug(f"vpa {tortoise.namespace}/{name} isn't managed by tortoise, not deleting it")
            return

        self.vpa_client.delete(tortoise.namespace, name)

    def get_tortoise_updater_vpa(self, tortoise: Tortoise) -> Dict[str, Any]:
        """
        Get the updater VPA of the tortoise.

        Raises:
            VPANotFoundError: The updater VPA doesn't exist
        """
        return self.vpa_client.get(tortoise.namespace, tortoise_updater_vpa_name(tortoise.name))

    def get_tortoise_monitor_vpa(self, tortoise: Tortoise) -> Tuple[Dict[str, Any], bool]:
        """
        Get the monitor VPA of the tortoise.

        Returns:
            Tuple of (vpa, whether its recommendation is ready to use)

        Raises:
            VPANotFoundError: The monitor VPA doesn't exist
        """
        vpa = self.vpa_client.get(tortoise.namespace, tortoise_monitor_vpa_name(tortoise.name))
        return vpa, is_monitor_vpa_ready(vpa, tortoise)

    def disable_tortoise_updater_vpa(self, tortoise: Tortoise) -> None:
        """
        Disable the updater VPA by removing the recommendation from it.

        The VPA itself is kept. Nothing happens if it doesn't exist.
        """
        def update_fn() -> None:
            try:
                old_vpa = self.get_tortoise_updater_vpa(tortoise)
            except VPAError as e:
                if is_not_found(e):
                    return
                raise

            # Remove the recommendation from the VPA.
            status = old_vpa.setdefault("status", {})
            recommendation = status.get("recommendation") or {}
            recommendation["containerRecommendations"] = []
            status["recommendation"] = recommendation

            # If VPA CRD in the cluster hasn't got the status subresource yet, this will update the status as well.
            new_vpa = self.vpa_client.update(old_vpa)
            new_vpa["status"] = copy.deepcopy(status)

            # Then, we update VPA status (Recommendation).
            try:
                self.vpa_client.update_status(new_vpa)
            except VPAError as e:
                if is_not_found(e):
                    # Probably it's because VPA CRD hasn't got the status subresource yet.
                    return
                raise

            logger.info(f"Disabled updater vpa {object_key(new_vpa)}")

        try:
            retry_on_conflict(update_fn, self.retry_backoff)
        except VPAError as e:
            raise VPAError(f"update VPA status: {e}", status=e.status) from e

    def update_vpa_container_resource_policy(self, tortoise: Tortoise, vpa: Dict[str, Any]) -> Dict[str, Any]:
        """
        Set the container policies of the VPA from the tortoise's resource policy.

        Every container in the resource policy gets a container policy, even
        the ones without minAllocatedResources.

        Returns:
            The updated VPA
        """
        namespace = vpa["metadata"]["namespace"]
        name = vpa["metadata"]["name"]
        attempts = 0

        def update_fn() -> Dict[str, Any]:
            nonlocal attempts
            current = vpa if attempts == 0 else self.vpa_client.get(namespace, name)
            attempts += 1

            current.setdefault("spec", {})["resourcePolicy"] = {
                "containerPolicies": _container_policies(tortoise, skip_without_minimum=False)
            }
            return self.vpa_client.update(current)

        try:
            return retry_on_conflict(update_fn, self.retry_backoff)
        except VPAError as e:
            raise VPAError(f"update VPA ContainerResourcePolicy: {e}", status=e.status) from e

    def create_tortoise_monitor_vpa(self, tortoise: Tortoise) -> Tuple[Dict[str, Any], Tortoise]:
        """
        Create the monitor VPA of the tortoise.

        The VPA only gathers recommendations (update mode Off). It's added to
        the tortoise's status targets before it's created.

        Returns:
            Tuple of (created vpa, updated tortoise)

        Raises:
            VPACreateError: The VPA couldn't be created; carries the updated tortoise
        """
        target = tortoise.spec.scale_target_ref
        vpa = {
            "apiVersion": f"{VPA_GROUP}/{VPA_VERSION}",
            "kind": VPA_KIND,
            "metadata": {
                "namespace": tortoise.namespace,
                "name": tortoise_monitor_vpa_name(tortoise.name),
                "annotations": {
                    MANAGED_BY_TORTOISE_ANNOTATION: "true",
                    TORTOISE_NAME_ANNOTATION: tortoise.name,
                },
            },
            "spec": {
                "targetRef": {
                    "kind": target.kind or DEFAULT_TARGET_KIND,
                    "name": target.name,
                    "apiVersion": target.api_version or DEFAULT_TARGET_API_VERSION,
                },
                "updatePolicy": {
                    "updateMode": UPDATE_MODE_OFF,
                },
                "resourcePolicy": {
                    "containerPolicies": _container_policies(tortoise, skip_without_minimum=True),
                },
            },
        }

        tortoise.status.vertical_pod_autoscalers.append(
            TargetStatusVerticalPodAutoscaler(name=vpa["metadata"]["name"], role=VPA_ROLE_MONITOR)
        )

        try:
            vpa = self.vpa_client.create(vpa)
        except VPAError as e:
            raise VPACreateError(str(e), tortoise, status=e.status) from e

        namespace = vpa["metadata"]["namespace"]
        name = vpa["metadata"]["name"]
        self.recorder.event(
            tortoise,
            EVENT_TYPE_NORMAL,
            VPA_CREATED_REASON,
            f"Initialized a monitor VPA {namespace}/{name}",
        )

        return vpa, tortoise


def _container_policies(tortoise: Tortoise, skip_without_minimum: bool) -> List[Dict[str, Any]]:
    """Build VPA container policies from the tortoise's resource policy."""
    crp = []
    for c in tortoise.spec.resource_policy:
        if c.min_allocated_resources is None and skip_without_minimum:
            continue
        policy: Dict[str, Any] = {"containerName": c.container_name}
        if c.min_allocated_resources is not None:
            policy["minAllowed"] = dict(c.min_allocated_resources)
        crp.append(policy)
    return crp
