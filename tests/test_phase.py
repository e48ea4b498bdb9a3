"""Unit tests for the container resource phase tracking."""

from datetime import datetime, timezone

from tortoise_vpa.models import ContainerResourcePhases, ResourcePhase
from tortoise_vpa.phase import set_all_vertical_container_resource_phase_working

NOW = datetime(2023, 1, 1, 12, 0, tzinfo=timezone.utc)
BEFORE = "2023-01-01T00:00:00Z"


def _phases(tortoise):
    return {
        p.container_name: {rn: rp.phase for rn, rp in p.resource_phases.items()}
        for p in tortoise.status.container_resource_phases
    }


def test_vertical_resources_become_working(make_tortoise):
    tortoise = make_tortoise(
        autoscaling_policy=[
            {"containerName": "app", "policy": {"cpu": "Horizontal", "memory": "Vertical"}},
            {"containerName": "sidecar", "policy": {"cpu": "Vertical", "memory": "Vertical"}},
        ],
        container_resource_phases=[
            {"containerName": "app", "resourcePhases": {
                "cpu": {"phase": "GatheringData", "lastTransitionTime": BEFORE},
                "memory": {"phase": "GatheringData", "lastTransitionTime": BEFORE},
            }},
            {"containerName": "sidecar", "resourcePhases": {
                "cpu": {"phase": "GatheringData", "lastTransitionTime": BEFORE},
                "memory": {"phase": "GatheringData", "lastTransitionTime": BEFORE},
            }},
        ],
    )

    result = set_all_vertical_container_resource_phase_working(tortoise, NOW)

    assert result is tortoise
    assert _phases(result) == {
        "app": {"cpu": "GatheringData", "memory": "Working"},
        "sidecar": {"cpu": "Working", "memory": "Working"},
    }
    assert result.status.container_resource_phases[0].resource_phases["memory"].last_transition_time == NOW
    app_cpu = result.status.container_resource_phases[0].resource_phases["cpu"]
    assert app_cpu.last_transition_time == datetime(2023, 1, 1, tzinfo=timezone.utc)


def test_missing_containers_are_appended(make_tortoise):
    tortoise = make_tortoise(
        autoscaling_policy=[
            {"containerName": "app", "policy": {"cpu": "Vertical", "memory": "Vertical"}},
            {"containerName": "sidecar", "policy": {"cpu": "Vertical", "memory": "Horizontal"}},
        ],
        container_resource_phases=[
            {"containerName": "app", "resourcePhases": {
                "cpu": {"phase": "GatheringData", "lastTransitionTime": BEFORE},
            }},
        ],
    )

    set_all_vertical_container_resource_phase_working(tortoise, NOW)

    # sidecar has no entry yet; it still gets one even though app was found before.
    assert _phases(tortoise) == {
        "app": {"cpu": "Working", "memory": "Working"},
        "sidecar": {"cpu": "Working"},
    }
    assert [p.container_name for p in tortoise.status.container_resource_phases] == ["app", "sidecar"]


def test_one_entry_per_new_container(make_tortoise):
    tortoise = make_tortoise(autoscaling_policy=[
        {"containerName": "app", "policy": {"cpu": "Vertical", "memory": "Vertical"}},
    ])

    set_all_vertical_container_resource_phase_working(tortoise, NOW)

    assert len(tortoise.status.container_resource_phases) == 1
    assert _phases(tortoise) == {"app": {"cpu": "Working", "memory": "Working"}}


def test_non_vertical_resources_are_untouched(make_tortoise):
    tortoise = make_tortoise(
        autoscaling_policy=[
            {"containerName": "app", "policy": {"cpu": "Horizontal", "memory": "Off"}},
        ],
        container_resource_phases=[
            {"containerName": "app", "resourcePhases": {
                "cpu": {"phase": "Working", "lastTransitionTime": BEFORE},
                "memory": {"phase": "Off", "lastTransitionTime": BEFORE},
            }},
        ],
    )

    set_all_vertical_container_resource_phase_working(tortoise, NOW)

    assert _phases(tortoise) == {"app": {"cpu": "Working", "memory": "Off"}}
    assert tortoise.status.container_resource_phases[0].resource_phases["cpu"].last_transition_time != NOW


def test_working_is_never_downgraded(make_tortoise):
    tortoise = make_tortoise(autoscaling_policy=[
        {"containerName": "app", "policy": {"cpu": "Vertical", "memory": "Horizontal"}},
    ])
    tortoise.status.container_resource_phases.append(
        ContainerResourcePhases("app", {"cpu": ResourcePhase("Working"), "memory": ResourcePhase("Working")})
    )

    set_all_vertical_container_resource_phase_working(tortoise, NOW)

    assert _phases(tortoise) == {"app": {"cpu": "Working", "memory": "Working"}}
