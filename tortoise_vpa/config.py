"""Configuration settings for the Tortoise VPA manager."""

# VPA CRD Settings
VPA_GROUP = "autoscaling.k8s.io"
VPA_VERSION = "v1"
VPA_PLURAL = "verticalpodautoscalers"
VPA_KIND = "VerticalPodAutoscaler"

# Tortoise CRD Settings
TORTOISE_GROUP = "autoscaling.mercari.com"
TORTOISE_VERSION = "v1beta3"
TORTOISE_PLURAL = "tortoises"
TORTOISE_KIND = "Tortoise"

# Annotations put on VPAs created by tortoise
MANAGED_BY_TORTOISE_ANNOTATION = "tortoise.autoscaling.mercari.com/managed-by-tortoise"
TORTOISE_NAME_ANNOTATION = "tortoise.autoscaling.mercari.com/tortoise-name"

# VPA naming
TORTOISE_MONITOR_VPA_NAME_PREFIX = "tortoise-monitor-"
TORTOISE_UPDATER_VPA_NAME_PREFIX = "tortoise-updater-"

# Default scale target if the tortoise leaves kind/apiVersion empty
DEFAULT_TARGET_KIND = "Deployment"
DEFAULT_TARGET_API_VERSION = "apps/v1"

# Events
EVENT_COMPONENT = "tortoise-controller"
VPA_CREATED_REASON = "VPACreated"

# Conflict retry settings (same as client-go's retry.DefaultRetry)
RETRY_STEPS = 5
RETRY_DURATION_SECONDS = 0.01
RETRY_FACTOR = 1.0
RETRY_JITTER = 0.1
RETRY_CAP_SECONDS = 1.0

# API request timeout in seconds (None = no timeout)
REQUEST_TIMEOUT_SECONDS = 30
