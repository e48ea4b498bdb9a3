"""Shared fixtures for the Tortoise VPA manager tests."""

from unittest.mock import MagicMock

import pytest
from kubernetes.client.rest import ApiException

from tortoise_vpa.config import MANAGED_BY_TORTOISE_ANNOTATION, TORTOISE_NAME_ANNOTATION
from tortoise_vpa.events import EventRecorder
from tortoise_vpa.models import Tortoise
from tortoise_vpa.retry import Backoff
from tortoise_vpa.service import VPAService
from tortoise_vpa.vpa_client import VPAClient


def api_exception(status: int, reason: str = "") -> ApiException:
    return ApiException(status=status, reason=reason or str(status))


@pytest.fixture
def make_api_exception():
    return api_exception


@pytest.fixture
def make_tortoise():
    """Build a Tortoise the way it comes from the API server."""

    def _make(
        name="mercari",
        namespace="default",
        resource_policy=None,
        autoscaling_policy=None,
        container_resource_phases=None,
        deletion_policy="DeleteAll",
        targets=None,
    ) -> Tortoise:
        return Tortoise.from_crd({
            "apiVersion": "autoscaling.mercari.com/v1beta3",
            "kind": "Tortoise",
            "metadata": {
                "name": name,
                "namespace": namespace,
                "uid": "uid-1",
                "resourceVersion": "100",
            },
            "spec": {
                "targetRefs": {
                    "scaleTargetRef": {"kind": "Deployment", "name": "app", "apiVersion": "apps/v1"},
                },
                "resourcePolicy": resource_policy or [],
                "deletionPolicy": deletion_policy,
            },
            "status": {
                "targets": {"verticalPodAutoscalers": targets or []},
                "autoscalingPolicy": autoscaling_policy or [],
                "containerResourcePhases": container_resource_phases or [],
            },
        })

    return _make


@pytest.fixture
def make_vpa():
    """Build a VPA the way it comes from the API server."""

    def _make(
        name="tortoise-updater-mercari",
        namespace="default",
        managed="true",
        recommendations=None,
        conditions=None,
        resource_version="1",
    ) -> dict:
        annotations = {TORTOISE_NAME_ANNOTATION: "mercari"}
        if managed is not None:
            annotations[MANAGED_BY_TORTOISE_ANNOTATION] = managed
        return {
            "apiVersion": "autoscaling.k8s.io/v1",
            "kind": "VerticalPodAutoscaler",
            "metadata": {
                "name": name,
                "namespace": namespace,
                "resourceVersion": resource_version,
                "annotations": annotations,
            },
            "spec": {
                "targetRef": {"kind": "Deployment", "name": "app", "apiVersion": "apps/v1"},
                "updatePolicy": {"updateMode": "Off"},
            },
            "status": {
                "conditions": conditions if conditions is not None else [],
                "recommendation": {
                    "containerRecommendations": recommendations if recommendations is not None else [],
                },
            },
        }

    return _make


@pytest.fixture
def mock_custom_api() -> MagicMock:
    """Create a mock CustomObjectsApi."""
    return MagicMock()


@pytest.fixture
def vpa_client(mock_custom_api: MagicMock) -> VPAClient:
    return VPAClient(mock_custom_api, request_timeout=10)


@pytest.fixture
def recorder() -> MagicMock:
    return MagicMock(spec=EventRecorder)


@pytest.fixture
def service(vpa_client: VPAClient, recorder: MagicMock) -> VPAService:
    """Create a VPAService that retries conflicts without sleeping."""
    return VPAService(vpa_client, recorder, retry_backoff=Backoff(steps=3, duration=0, jitter=0))
