"""Tracking the phase of each container resource of a tortoise."""

from datetime import datetime

from .models import (
    AUTOSCALING_TYPE_VERTICAL,
    CONTAINER_RESOURCE_PHASE_WORKING,
    ContainerResourcePhases,
    ResourcePhase,
    Tortoise,
)


def set_all_vertical_container_resource_phase_working(tortoise: Tortoise, now: datetime) -> Tortoise:
    """
    Mark every vertically scaled container resource as Working.

    Resources whose autoscaling type isn't Vertical are left as they are.
    The tortoise is modified in place and returned.
    """
    vertical_resource_and_container = set()
    for p in tortoise.status.autoscaling_policy:
        for rn, ap in p.policy.items():
            if ap == AUTOSCALING_TYPE_VERTICAL:
                vertical_resource_and_container.add((rn, p.container_name))

    for rn, container_name in sorted(vertical_resource_and_container):
        phase = ResourcePhase(phase=CONTAINER_RESOURCE_PHASE_WORKING, last_transition_time=now)
        for phases in tortoise.status.container_resource_phases:
            if phases.container_name == container_name:
                phases.resource_phases[rn] = phase
                break
        else:
            tortoise.status.container_resource_phases.append(
                ContainerResourcePhases(container_name=container_name, resource_phases={rn: phase})
            )

    return tortoise
