"""Deciding whether a monitor VPA's recommendation can be used."""

from typing import Any, Dict

from .models import Tortoise
from .utils import get_container_recommendations, is_zero_quantity

RECOMMENDATION_PROVIDED = "RecommendationProvided"
CONDITION_TRUE = "True"


def is_monitor_vpa_ready(vpa: Dict[str, Any], tortoise: Tortoise) -> bool:
    """
    Check if the monitor VPA has a usable recommendation for the tortoise.

    The VPA is ready when it reports RecommendationProvided=True and has a
    non-zero CPU and memory target for exactly the containers registered in
    the tortoise's autoscaling policy.
    """
    conditions = (vpa.get("status") or {}).get("conditions") or []
    provided = any(
        c.get("type") == RECOMMENDATION_PROVIDED and c.get("status") == CONDITION_TRUE
        for c in conditions
    )
    if not provided:
        return False

    container_in_tortoise = {p.container_name for p in tortoise.status.autoscaling_policy}

    container_in_vpa = set()
    for r in get_container_recommendations(vpa):
        target = r.get("target") or {}
        try:
            zero = is_zero_quantity(target.get("cpu")) or is_zero_quantity(target.get("memory"))
        except ValueError:
            # unparsable quantity
            return False
        if zero:
            # something wrong with the recommendation.
            return False
        container_in_vpa.add(r.get("containerName"))

    return container_in_tortoise == container_in_vpa
