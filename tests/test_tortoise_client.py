"""Unit tests for TortoiseClient."""

from unittest.mock import MagicMock

import pytest
from urllib3.exceptions import ReadTimeoutError

from tortoise_vpa.errors import TortoiseError
from tortoise_vpa.tortoise_client import TortoiseClient


@pytest.fixture
def tortoise_client(mock_custom_api: MagicMock) -> TortoiseClient:
    return TortoiseClient(mock_custom_api, request_timeout=None)


def test_get_tortoise(tortoise_client, mock_custom_api, make_tortoise):
    mock_custom_api.get_namespaced_custom_object.return_value = make_tortoise().raw

    tortoise = tortoise_client.get_tortoise("mercari", "default")

    assert tortoise.name == "mercari"
    mock_custom_api.get_namespaced_custom_object.assert_called_once_with(
        name="mercari",
        group="autoscaling.mercari.com",
        version="v1beta3",
        namespace="default",
        plural="tortoises",
    )


@pytest.mark.parametrize("status", [404, 500])
def test_get_tortoise_error(tortoise_client, mock_custom_api, make_api_exception, status):
    mock_custom_api.get_namespaced_custom_object.side_effect = make_api_exception(status)

    with pytest.raises(TortoiseError):
        tortoise_client.get_tortoise("mercari", "default")


def test_update_status(tortoise_client, mock_custom_api, make_tortoise):
    tortoise = make_tortoise()
    mock_custom_api.replace_namespaced_custom_object_status.side_effect = lambda name, body, **kwargs: body

    updated = tortoise_client.update_status(tortoise)

    body = mock_custom_api.replace_namespaced_custom_object_status.call_args.kwargs["body"]
    assert body["metadata"]["resourceVersion"] == "100"
    assert updated.name == "mercari"


def test_update_status_error(tortoise_client, mock_custom_api, make_tortoise, make_api_exception):
    mock_custom_api.replace_namespaced_custom_object_status.side_effect = make_api_exception(409, "Conflict")

    with pytest.raises(TortoiseError):
        tortoise_client.update_status(make_tortoise())


def test_update_status_dry_run(mock_custom_api, make_tortoise):
    tortoise = make_tortoise()

    assert TortoiseClient(mock_custom_api, dry_run=True).update_status(tortoise) is tortoise
    mock_custom_api.replace_namespaced_custom_object_status.assert_not_called()


def test_get_tortoise_transport_error(tortoise_client, mock_custom_api):
    mock_custom_api.get_namespaced_custom_object.side_effect = ReadTimeoutError(None, "/apis", "Read timed out.")

    with pytest.raises(TortoiseError):
        tortoise_client.get_tortoise("mercari", "default")


def test_update_status_transport_error(tortoise_client, mock_custom_api, make_tortoise):
    mock_custom_api.replace_namespaced_custom_object_status.side_effect = ReadTimeoutError(None, "/apis", "Read timed out.")

    with pytest.raises(TortoiseError):
        tortoise_client.update_status(make_tortoise())
