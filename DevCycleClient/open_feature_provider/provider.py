"""OpenFeature provider backed by the DevCycle cloud client.

Flags are evaluated as DevCycle variables; the evaluation context is mapped onto
a DevCycle ``User`` and tracking calls are sent as custom events.
"""

from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

from openfeature.evaluation_context import EvaluationContext
from openfeature.exception import ErrorCode
from openfeature.flag_evaluation import FlagResolutionDetails, Reason
from openfeature.provider import AbstractProvider, Metadata, ProviderStatus
from openfeature.track import TrackingEventDetails

from DevCycleClient.api.models import Event, User
from DevCycleClient.core.client import DevCycleCloudClient
from DevCycleClient.exceptions import (
    DevCycleError,
    InvalidContextError,
    InvalidDefaultValueError,
)
from DevCycleClient.options import DevCycleOptions
from DevCycleClient.utils import LOGGER

T = TypeVar("T")

TARGETING_KEY = "targetingKey"
USER_ID_KEY = "userId"
USER_ID_UNDERSCORE_KEY = "user_id"
CUSTOM_EVENT_TYPE = "customEvent"

# Context keys stored on dedicated User fields when their value is a string
_USER_STRING_FIELDS = {
    "email": "email",
    "name": "name",
    "language": "language",
    "country": "country",
    "appVersion": "app_version",
    "appBuild": "app_build",
    "deviceModel": "device_model",
}


def _flatten_context(evaluation_context: Optional[EvaluationContext]) -> Dict[str, Any]:
    if evaluation_context is None:
        return {}
    flattened = dict(evaluation_context.attributes or {})
    if evaluation_context.targeting_key:
        flattened[TARGETING_KEY] = evaluation_context.targeting_key
    return flattened


def _set_custom_data_value(custom_data: Dict[str, Any], key: str, value: Any) -> None:
    # Custom data only carries strings, numbers, booleans and nulls
    if value is None or isinstance(value, (str, bool)):
        custom_data[key] = value
    elif isinstance(value, (int, float)):
        custom_data[key] = float(value)
    else:
        LOGGER.warning("Unsupported type for custom data value: %s=%r", key, value)


def create_user_from_context(evaluation_context: Optional[EvaluationContext]) -> User:
    """
    Maps an OpenFeature evaluation context onto a DevCycle user.

    The user id is the first string found in ``targetingKey``, ``user_id`` then
    ``userId``. Known string attributes fill the matching user fields, the
    ``customData`` / ``privateCustomData`` mappings are merged one level deep and
    every other supported value ends up in custom data.

    :raises InvalidContextError: If no usable user id is present.
    """
    context = _flatten_context(evaluation_context)

    user_id = ""
    user_id_source = ""
    first_invalid = ""
    for source in (TARGETING_KEY, USER_ID_UNDERSCORE_KEY, USER_ID_KEY):
        if source not in context:
            continue
        candidate = context[source]
        if isinstance(candidate, str):
            if candidate:
                user_id, user_id_source = candidate, source
                break
        elif not first_invalid:
            first_invalid = f"{source} must be a string"

    if not user_id:
        raise InvalidContextError(
            first_invalid or "targetingKey, user_id, or userId must be provided"
        )

    user = User(user_id=user_id)
    custom_data: Dict[str, Any] = {}
    private_custom_data: Dict[str, Any] = {}

    for key, value in context.items():
        if key in (TARGETING_KEY, user_id_source):
            continue
        if isinstance(value, str) and key in _USER_STRING_FIELDS:
            setattr(user, _USER_STRING_FIELDS[key], value)
        elif isinstance(value, Mapping):
            if key == "customData":
                for nested_key, nested_value in value.items():
                    _set_custom_data_value(custom_data, nested_key, nested_value)
            elif key == "privateCustomData":
                for nested_key, nested_value in value.items():
                    _set_custom_data_value(private_custom_data, nested_key, nested_value)
        else:
            _set_custom_data_value(custom_data, key, value)

    if custom_data:
        user.custom_data = custom_data
    if private_custom_data:
        user.private_custom_data = private_custom_data

    return user


def create_event_from_tracking_details(
    tracking_event_name: str, details: Optional[TrackingEventDetails]
) -> Event:
    event = Event(type=CUSTOM_EVENT_TYPE, custom_type=tracking_event_name)
    if details is not None:
        event.value = details.value
        if details.attributes:
            event.meta_data = dict(details.attributes)
    return event


class DevCycleProvider(AbstractProvider):
    """
    OpenFeature provider evaluating flags through a ``DevCycleCloudClient``.

    :param client: Cloud client used for evaluations and tracking.

    .. code-block:: python

        from openfeature import api

        api.set_provider(DevCycleProvider.from_sdk_key("dvc_server_..."))
        enabled = api.get_client().get_boolean_value("new-checkout", False, context)
    """

    PROVIDER_NAME = "DevCycleProvider Cloud"

    def __init__(self, client: DevCycleCloudClient) -> None:
        self.client = client

    @classmethod
    def from_sdk_key(
        cls, sdk_key: str, options: Optional[DevCycleOptions] = None
    ) -> "DevCycleProvider":
        return cls(DevCycleCloudClient(sdk_key, options))

    def get_status(self) -> ProviderStatus:
        if self.client.is_closed:
            return ProviderStatus.FATAL
        return ProviderStatus.READY

    def get_metadata(self) -> Metadata:
        return Metadata(name=self.PROVIDER_NAME)

    def initialize(self, evaluation_context: EvaluationContext) -> None:
        pass

    def shutdown(self) -> None:
        self.client.close()

    def track(
        self,
        tracking_event_name: str,
        evaluation_context: Optional[EvaluationContext] = None,
        tracking_event_details: Optional[TrackingEventDetails] = None,
    ) -> None:
        try:
            user = create_user_from_context(evaluation_context)
        except InvalidContextError as exc:
            LOGGER.warning("Error creating user from evaluation context: %s", exc)
            return

        event = create_event_from_tracking_details(
            tracking_event_name, tracking_event_details
        )
        try:
            self.client.track(user, event)
        except (DevCycleError, ValueError) as exc:
            LOGGER.warning("Error tracking event: %s", exc)

    def resolve_boolean_details(
        self,
        flag_key: str,
        default_value: bool,
        evaluation_context: Optional[EvaluationContext] = None,
    ) -> FlagResolutionDetails[bool]:
        return self._resolve_typed(
            flag_key,
            default_value,
            evaluation_context,
            type_check=lambda v: isinstance(v, bool),
            type_convert=lambda v: v,
        )

    def resolve_string_details(
        self,
        flag_key: str,
        default_value: str,
        evaluation_context: Optional[EvaluationContext] = None,
    ) -> FlagResolutionDetails[str]:
        return self._resolve_typed(
            flag_key,
            default_value,
            evaluation_context,
            type_check=lambda v: isinstance(v, str),
            type_convert=lambda v: v,
        )

    def resolve_integer_details(
        self,
        flag_key: str,
        default_value: int,
        evaluation_context: Optional[EvaluationContext] = None,
    ) -> FlagResolutionDetails[int]:
        # Numbers come back as floats and are truncated
        return self._resolve_typed(
            flag_key,
            default_value,
            evaluation_context,
            type_check=lambda v: isinstance(v, float),
            type_convert=int,
        )

    def resolve_float_details(
        self,
        flag_key: str,
        default_value: float,
        evaluation_context: Optional[EvaluationContext] = None,
    ) -> FlagResolutionDetails[float]:
        return self._resolve_typed(
            flag_key,
            default_value,
            evaluation_context,
            type_check=lambda v: isinstance(v, float),
            type_convert=lambda v: v,
        )

    def resolve_object_details(
        self,
        flag_key: str,
        default_value: Any,
        evaluation_context: Optional[EvaluationContext] = None,
    ) -> FlagResolutionDetails[Any]:
        return self._resolve_typed(
            flag_key,
            default_value,
            evaluation_context,
            type_check=lambda v: True,
            type_convert=lambda v: v,
        )

    def _resolve_typed(
        self,
        flag_key: str,
        default_value: T,
        evaluation_context: Optional[EvaluationContext],
        type_check: Callable[[Any], bool],
        type_convert: Callable[[Any], T],
    ) -> FlagResolutionDetails[T]:
        try:
            user = create_user_from_context(evaluation_context)
        except InvalidContextError as exc:
            return FlagResolutionDetails(
                value=default_value,
                reason=Reason.ERROR,
                error_code=ErrorCode.INVALID_CONTEXT,
                error_message=str(exc),
            )

        try:
            variable = self.client.variable(user, flag_key, default_value)
        except InvalidDefaultValueError as exc:
            return FlagResolutionDetails(
                value=default_value,
                reason=Reason.ERROR,
                error_code=ErrorCode.TYPE_MISMATCH,
                error_message=str(exc),
            )
        except (DevCycleError, ValueError) as exc:
            return FlagResolutionDetails(
                value=default_value,
                reason=Reason.ERROR,
                error_code=ErrorCode.GENERAL,
                error_message=str(exc),
            )

        if variable.is_defaulted:
            return FlagResolutionDetails(value=default_value, reason=Reason.DEFAULT)

        if variable.value is None:
            return FlagResolutionDetails(
                value=default_value,
                reason=Reason.ERROR,
                error_code=ErrorCode.GENERAL,
                error_message="Variable result is None, but not defaulted",
            )

        if not type_check(variable.value):
            return FlagResolutionDetails(
                value=default_value,
                reason=Reason.ERROR,
                error_code=ErrorCode.TYPE_MISMATCH,
                error_message=f"Unexpected type in variable result: {type(variable.value).__name__}",
            )

        return FlagResolutionDetails(
            value=type_convert(variable.value),
            reason=Reason.TARGETING_MATCH,
        )
