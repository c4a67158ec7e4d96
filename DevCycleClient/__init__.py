# flake8: noqa
from DevCycleClient.api.models import (
    DefaultReason,
    EvalReason,
    EvaluationReason,
    Event,
    EventType,
    Feature,
    PlatformData,
    User,
    Variable,
)
from DevCycleClient.core.client import DevCycleCloudClient
from DevCycleClient.exceptions import (
    DevCycleApiError,
    DevCycleError,
    InvalidContextError,
    InvalidDefaultValueError,
    VariableDecodeError,
)
from DevCycleClient.hooks import EvalHook, HookContext
from DevCycleClient.options import DevCycleOptions
from DevCycleClient.proto.helpers import SDKVariable, VariableType, extract_value
from DevCycleClient.variable_utils import (
    compare_types,
    convert_default_value_type,
    variable_type_from_value,
)

__all__ = [
    "DefaultReason",
    "DevCycleApiError",
    "DevCycleCloudClient",
    "DevCycleError",
    "DevCycleOptions",
    "EvalHook",
    "EvalReason",
    "EvaluationReason",
    "Event",
    "EventType",
    "Feature",
    "HookContext",
    "InvalidContextError",
    "InvalidDefaultValueError",
    "PlatformData",
    "SDKVariable",
    "User",
    "Variable",
    "VariableDecodeError",
    "VariableType",
    "compare_types",
    "convert_default_value_type",
    "extract_value",
    "variable_type_from_value",
]
