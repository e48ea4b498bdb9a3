"""Client for interacting with Tortoise CRD."""

import logging
from typing import Optional

from kubernetes import client
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from .config import TORTOISE_GROUP, TORTOISE_VERSION, TORTOISE_PLURAL, REQUEST_TIMEOUT_SECONDS
from .errors import TortoiseError
from .models import Tortoise

logger = logging.getLogger(__name__)


class TortoiseClient:
    """Client for Tortoise custom resources."""

    def __init__(
        self,
        custom_api: Optional[client.CustomObjectsApi] = None,
        request_timeout: Optional[float] = REQUEST_TIMEOUT_SECONDS,
        dry_run: bool = False
    ):
        self.custom_api = custom_api or client.CustomObjectsApi()
        self.request_timeout = request_timeout
        self.dry_run = dry_run

    def _kwargs(self, namespace: str) -> dict:
        kwargs = {
            "group": TORTOISE_GROUP,
            "version": TORTOISE_VERSION,
            "namespace": namespace,
            "plural": TORTOISE_PLURAL,
        }
        if self.request_timeout is not None:
            kwargs["_request_timeout"] = self.request_timeout
        return kwargs

    def get_tortoise(self, name: str, namespace: str) -> Tortoise:
        """
        Get a Tortoise.

        Args:
            name: Tortoise name
            namespace: Tortoise namespace

        Returns:
            The parsed Tortoise

        Raises:
            TortoiseError: The Tortoise couldn't be read
        """
        try:
            obj = self.custom_api.get_namespaced_custom_object(
                name=name,
                **self._kwargs(namespace)
            )
        except (ApiException, HTTPError) as e:
            if isinstance(e, ApiException) and e.status == 404:
                raise TortoiseError(f"tortoise {namespace}/{name} not found") from e
            raise TortoiseError(f"failed to get tortoise {namespace}/{name}: {e}") from e

        return Tortoise.from_crd(obj)

    def update_status(self, tortoise: Tortoise) -> Tortoise:
        """
        Update the status subresource of a Tortoise.

        The tortoise's resourceVersion is sent along, so this fails if the
        Tortoise was changed since it was read.

        Returns:
            The Tortoise as stored by the API server
        """
        key = f"{tortoise.namespace}/{tortoise.name}"

        if self.dry_run:
            logger.info(f"[DRY-RUN] Would update status of tortoise {key}")
            return tortoise

        try:
            obj = self.custom_api.replace_namespaced_custom_object_status(
                name=tortoise.name,
                body=tortoise.to_dict(),
                **self._kwargs(tortoise.namespace)
            )
        except (ApiException, HTTPError) as e:
            raise TortoiseError(f"failed to update status of tortoise {key}: {e}") from e

        logger.debug(f"Updated status of tortoise {key}")
        return Tortoise.from_crd(obj)
