"""Tortoise objects as read from and written to the Tortoise CRD."""

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

# Deletion policies
DELETION_POLICY_DELETE_ALL = "DeleteAll"
DELETION_POLICY_NO_DELETE = "NoDelete"

# Autoscaling types
AUTOSCALING_TYPE_OFF = "Off"
AUTOSCALING_TYPE_HORIZONTAL = "Horizontal"
AUTOSCALING_TYPE_VERTICAL = "Vertical"

# Container resource phases
CONTAINER_RESOURCE_PHASE_GATHERING_DATA = "GatheringData"
CONTAINER_RESOURCE_PHASE_WORKING = "Working"
CONTAINER_RESOURCE_PHASE_OFF = "Off"

# VPA roles
VPA_ROLE_MONITOR = "Monitor"
VPA_ROLE_UPDATER = "Updater"


def format_time(t: datetime) -> str:
    """Format a time the way metav1.Time is serialized (RFC 3339, seconds)."""
    if t.tzinfo is None:
        t = t.replace(tzinfo=timezone.utc)
    return t.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_time(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass
class CrossVersionObjectReference:
    kind: str = ""
    name: str = ""
    api_version: str = ""

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]) -> "CrossVersionObjectReference":
        return cls(
            kind=obj.get("kind", ""),
            name=obj.get("name", ""),
            api_version=obj.get("apiVersion", ""),
        )


@dataclass
class ContainerResourcePolicy:
    """Resource policy of one container in the tortoise spec."""
    container_name: str
    min_allocated_resources: Optional[Dict[str, str]] = None

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]) -> "ContainerResourcePolicy":
        return cls(
            container_name=obj.get("containerName", ""),
            min_allocated_resources=obj.get("minAllocatedResources"),
        )


@dataclass
class TargetStatusVerticalPodAutoscaler:
    name: str
    role: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "role": self.role}


@dataclass
class ContainerAutoscalingPolicy:
    """Autoscaling type (Vertical/Horizontal/Off) per resource of one container."""
    container_name: str
    policy: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"containerName": self.container_name, "policy": dict(self.policy)}


@dataclass
class ResourcePhase:
    phase: str
    last_transition_time: Optional[datetime] = None

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]) -> "ResourcePhase":
        return cls(
            phase=obj.get("phase", ""),
            last_transition_time=parse_time(obj.get("lastTransitionTime")),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"phase": self.phase}
        if self.last_transition_time is not None:
            result["lastTransitionTime"] = format_time(self.last_transition_time)
        return result


@dataclass
class ContainerResourcePhases:
    container_name: str
    resource_phases: Dict[str, ResourcePhase] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "containerName": self.container_name,
            "resourcePhases": {rn: p.to_dict() for rn, p in self.resource_phases.items()},
        }


@dataclass
class TortoiseSpec:
    scale_target_ref: CrossVersionObjectReference = field(default_factory=CrossVersionObjectReference)
    resource_policy: List[ContainerResourcePolicy] = field(default_factory=list)
    deletion_policy: str = DELETION_POLICY_DELETE_ALL


@dataclass
class TortoiseStatus:
    vertical_pod_autoscalers: List[TargetStatusVerticalPodAutoscaler] = field(default_factory=list)
    autoscaling_policy: List[ContainerAutoscalingPolicy] = field(default_factory=list)
    container_resource_phases: List[ContainerResourcePhases] = field(default_factory=list)


@dataclass
class Tortoise:
    """Parsed Tortoise object."""
    name: str
    namespace: str
    uid: str = ""
    resource_version: str = ""
    spec: TortoiseSpec = field(default_factory=TortoiseSpec)
    status: TortoiseStatus = field(default_factory=TortoiseStatus)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_crd(cls, crd_object: Dict[str, Any]) -> "Tortoise":
        """Create Tortoise from CRD object."""
        metadata = crd_object.get("metadata") or {}
        spec = crd_object.get("spec") or {}
        status = crd_object.get("status") or {}
        target_refs = spec.get("targetRefs") or {}
        targets = status.get("targets") or {}

        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", "default"),
            uid=metadata.get("uid", ""),
            resource_version=metadata.get("resourceVersion", ""),
            spec=TortoiseSpec(
                scale_target_ref=CrossVersionObjectReference.from_dict(
                    target_refs.get("scaleTargetRef") or {}
                ),
                resource_policy=[
                    ContainerResourcePolicy.from_dict(p) for p in spec.get("resourcePolicy") or []
                ],
                deletion_policy=spec.get("deletionPolicy") or DELETION_POLICY_DELETE_ALL,
            ),
            status=TortoiseStatus(
                vertical_pod_autoscalers=[
                    TargetStatusVerticalPodAutoscaler(name=v.get("name", ""), role=v.get("role", ""))
                    for v in targets.get("verticalPodAutoscalers") or []
                ],
                autoscaling_policy=[
                    ContainerAutoscalingPolicy(
                        container_name=p.get("containerName", ""),
                        policy=dict(p.get("policy") or {}),
                    )
                    for p in status.get("autoscalingPolicy") or []
                ],
                container_resource_phases=[
                    ContainerResourcePhases(
                        container_name=p.get("containerName", ""),
                        resource_phases={
                            rn: ResourcePhase.from_dict(rp)
                            for rn, rp in (p.get("resourcePhases") or {}).items()
                        },
                    )
                    for p in status.get("containerResourcePhases") or []
                ],
            ),
            raw=copy.deepcopy(crd_object),
        )

    def status_dict(self) -> Dict[str, Any]:
        """
        Build the status of the tortoise.

        Fields this package doesn't model are taken over from the object
        the tortoise was parsed from.
        """
        status = copy.deepcopy(self.raw.get("status") or {})
        targets = status.get("targets") or {}
        status["targets"] = targets
        targets["verticalPodAutoscalers"] = [v.to_dict() for v in self.status.vertical_pod_autoscalers]
        status["autoscalingPolicy"] = [p.to_dict() for p in self.status.autoscaling_policy]
        status["containerResourcePhases"] = [p.to_dict() for p in self.status.container_resource_phases]
        return status

    def to_dict(self) -> Dict[str, Any]:
        """Build the CRD object to send back to the API server."""
        obj = copy.deepcopy(self.raw)
        metadata = obj.setdefault("metadata", {})
        metadata["name"] = self.name
        metadata["namespace"] = self.namespace
        if self.resource_version:
            metadata["resourceVersion"] = self.resource_version
        obj["status"] = self.status_dict()
        return obj
