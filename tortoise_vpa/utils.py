"""Utility functions for resource quantities and VPA objects."""

from typing import Any, Dict, List

from kubernetes.utils import parse_quantity


def is_zero_quantity(quantity: Any) -> bool:
    """
    Check if a Kubernetes quantity is zero.

    A missing or empty quantity counts as zero.

    Examples:
        "0" -> True
        "0Mi" -> True
        "100m" -> False
        None -> True
    """
    if quantity is None or str(quantity).strip() == "":
        return True
    return parse_quantity(quantity) == 0


def get_annotations(obj: Dict[str, Any]) -> Dict[str, str]:
    """Get the annotations of a Kubernetes object dict."""
    return (obj.get("metadata") or {}).get("annotations") or {}


def get_container_recommendations(vpa: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Get the container recommendations from a VPA's status."""
    status = vpa.get("status") or {}
    recommendation = status.get("recommendation") or {}
    return recommendation.get("containerRecommendations") or []


def object_key(obj: Dict[str, Any]) -> str:
    """Create a namespace/name key for a Kubernetes object dict."""
    metadata = obj.get("metadata") or {}
    return f"{metadata.get('namespace', '')}/{metadata.get('name', '')}"


def format_recommendation(recommendation: Dict[str, Any]) -> str:
    """
    Format a container recommendation for display.

    Example:
        {"containerName": "app", "target": {"cpu": "100m", "memory": "100Mi"}}
        -> "app: cpu=100m memory=100Mi"
    """
    target = recommendation.get("target") or {}
    return (
        f"{recommendation.get('containerName', '')}: "
        f"cpu={target.get('cpu', '')} memory={target.get('memory', '')}"
    )
