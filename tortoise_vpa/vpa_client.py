"""Client for interacting with VerticalPodAutoscaler objects."""

import logging
from typing import Optional, Dict, Any

from kubernetes import client
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from .config import VPA_GROUP, VPA_VERSION, VPA_PLURAL, REQUEST_TIMEOUT_SECONDS
from .errors import VPAError, VPANotFoundError, VPAConflictError

logger = logging.getLogger(__name__)


def _translate(e: Exception, message: str) -> VPAError:
    """Turn an ApiException or a transport error into the matching VPAError."""
    if not isinstance(e, ApiException):
        return VPAError(f"{message}: {e}")
    if e.status == 404:
        return VPANotFoundError(f"{message}: {e.reason}")
    if e.status == 409:
        return VPAConflictError(f"{message}: {e.reason}")
    return VPAError(f"{message}: {e}", status=e.status)


class VPAClient:
    """Client for VerticalPodAutoscaler custom resources."""

    def __init__(
        self,
        custom_api: Optional[client.CustomObjectsApi] = None,
        request_timeout: Optional[float] = REQUEST_TIMEOUT_SECONDS,
        dry_run: bool = False
    ):
        """
        Initialize the VPA client.

        Args:
            custom_api: API handle to use (built from the loaded kube config if omitted)
            request_timeout: Timeout of every API request in seconds (None = no timeout)
            dry_run: If True, don't make any changes
        """
        self.custom_api = custom_api or client.CustomObjectsApi()
        self.request_timeout = request_timeout
        self.dry_run = dry_run

    def _kwargs(self, namespace: str) -> Dict[str, Any]:
        kwargs = {
            "group": VPA_GROUP,
            "version": VPA_VERSION,
            "namespace": namespace,
            "plural": VPA_PLURAL,
        }
        if self.request_timeout is not None:
            kwargs["_request_timeout"] = self.request_timeout
        return kwargs

    def get(self, namespace: str, name: str) -> Dict[str, Any]:
        """
        Get a VPA.

        Raises:
            VPANotFoundError: The VPA doesn't exist
            VPAError: Any other API error
        """
        try:
            return self.custom_api.get_namespaced_custom_object(
                name=name,
                **self._kwargs(namespace)
            )
        except (ApiException, HTTPError) as e:
            raise _translate(e, f"failed to get vpa {namespace}/{name}") from e

    def create(self, vpa: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a VPA.

        Returns:
            The VPA as stored by the API server
        """
        namespace = vpa["metadata"]["namespace"]
        name = vpa["metadata"]["name"]

        if self.dry_run:
            logger.info(f"[DRY-RUN] Would create vpa {namespace}/{name}")
            return vpa

        try:
            created = self.custom_api.create_namespaced_custom_object(
                body=vpa,
                **self._kwargs(namespace)
            )
        except (ApiException, HTTPError) as e:
            raise _translate(e, f"failed to create vpa {namespace}/{name}") from e

        logger.info(f"Created vpa {namespace}/{name}")
        return created

    def update(self, vpa: Dict[str, Any]) -> Dict[str, Any]:
        """
        Replace a VPA.

        The resourceVersion in the VPA's metadata is checked by the API
        server; a stale one raises VPAConflictError.
        """
        namespace = vpa["metadata"]["namespace"]
        name = vpa["metadata"]["name"]

        if self.dry_run:
            logger.info(f"[DRY-RUN] Would update vpa {namespace}/{name}")
            return vpa

        try:
            updated = self.custom_api.replace_namespaced_custom_object(
                name=name,
                body=vpa,
                **self._kwargs(namespace)
            )
        except (ApiException, HTTPError) as e:
            raise _translate(e, f"failed to update vpa {namespace}/{name}") from e

        logger.debug(f"Updated vpa {namespace}/{name}")
        return updated

    def update_status(self, vpa: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the status subresource of a VPA."""
        namespace = vpa["metadata"]["namespace"]
        name = vpa["metadata"]["name"]

        if self.dry_run:
            logger.info(f"[DRY-RUN] Would update status of vpa {namespace}/{name}")
            return vpa

        try:
            updated = self.custom_api.replace_namespaced_custom_object_status(
                name=name,
                body=vpa,
                **self._kwargs(namespace)
            )
        except (ApiException, HTTPError) as e:
            raise _translate(e, f"failed to update status of vpa {namespace}/{name}") from e

        logger.debug(f"Updated status of vpa {namespace}/{name}")
        return updated

    def delete(self, namespace: str, name: str) -> None:
        """Delete a VPA. Deleting a VPA that's already gone is not an error."""
        if self.dry_run:
            logger.info(f"[DRY-RUN] Would delete vpa {namespace}/{name}")
            return

        try:
            self.custom_api.delete_namespaced_custom_object(
                name=name,
                **self._kwargs(namespace)
            )
        except (ApiException, HTTPError) as e:
            if isinstance(e, ApiException) and e.status == 404:
                logger.debug(f"vpa {namespace}/{name} is already deleted")
                return
            raise _translate(e, f"failed to delete vpa {namespace}/{name}") from e

        logger.info(f"Deleted vpa {namespace}/{name}")
