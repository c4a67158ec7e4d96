from dataclasses import replace
from typing import Any, Dict, Optional

from DevCycleClient.api.models import (
    DefaultReason,
    EvalReason,
    EvaluationReason,
    Event,
    Feature,
    User,
    Variable,
)
from DevCycleClient.api.packet_building import build_track_packet, build_user_packet
from DevCycleClient.api.sync_api import (
    build_headers,
    get_all_features,
    get_all_variables,
    get_variable,
    send_track_events,
)
from DevCycleClient.constants import VALID_SDK_KEY_PREFIXES
from DevCycleClient.core.contracts import DevCycleClientContract
from DevCycleClient.exceptions import AfterHookError, BeforeHookError, DevCycleApiError
from DevCycleClient.hooks import EvalHook, EvalHookRunner, HookContext
from DevCycleClient.options import DevCycleOptions
from DevCycleClient.utils import LOGGER
from DevCycleClient.variable_utils import (
    compare_types,
    convert_default_value_type,
    variable_type_from_value,
)


def validate_sdk_key(sdk_key: str) -> None:
    if not sdk_key:
        raise ValueError(
            "Missing SDK key! Create the client with a valid server SDK key."
        )
    if not sdk_key.startswith(VALID_SDK_KEY_PREFIXES):
        raise ValueError("Invalid SDK key. Create the client with a server SDK key.")


def validate_user(user: User) -> None:
    if not isinstance(user, User) or not user.user_id:
        raise ValueError("A user with a non-empty user_id is required")


def build_default_variable(key: str, default_value: Any) -> Variable:
    """
    Validates a variable request and builds the variable returned when no
    evaluated value can be used.

    :raises ValueError: If the key is empty.
    :raises InvalidDefaultValueError: If the default isn't a Boolean, Number, String or JSON value.
    """
    if not key:
        raise ValueError("invalid key provided for call to Variable")

    converted_default = convert_default_value_type(default_value)
    variable_type = variable_type_from_value(key, converted_default, False)

    return Variable.defaulted(
        key, variable_type, converted_default, DefaultReason.MISSING_VARIABLE
    )


def reconcile_variable(
    default_variable: Variable,
    response: Optional[dict],
    verbose_log_level: int,
) -> Variable:
    """
    Picks the evaluated value from an API response if it has the default's type.

    :param default_variable: Result of ``build_default_variable``.
    :param response: Variable returned by the bucketing API, or None.
    :param verbose_log_level: Level for the type mismatch log line.
    :return: The evaluated variable, or the default variable.
    """
    if response is None:
        return default_variable

    fetched = Variable.from_dict(response)
    if fetched.value is None:
        return default_variable

    if not compare_types(fetched.value, default_variable.default_value):
        LOGGER.log(
            verbose_log_level,
            "Type mismatch for variable %s. Expected type %s, got %s",
            default_variable.key,
            type(default_variable.default_value).__name__,
            type(fetched.value).__name__,
        )
        return replace(
            default_variable,
            eval=EvalReason(
                reason=EvaluationReason.DEFAULT,
                details=DefaultReason.INVALID_VARIABLE_TYPE,
            ),
        )

    return replace(
        default_variable,
        value=fetched.value,
        is_defaulted=False,
        eval=fetched.eval,
        id=fetched.id,
    )


class DevCycleCloudClient(DevCycleClientContract):
    """
    A client for the DevCycle bucketing API. Every call is evaluated remotely.

    :param sdk_key: DevCycle server SDK key, required.
    :param options: Client options, optional & defaults to ``DevCycleOptions()``.

    .. code-block:: python

        with DevCycleCloudClient("dvc_server_...") as client:
            enabled = client.variable_value(User(user_id="u1"), "new-checkout", False)
    """

    def __init__(self, sdk_key: str, options: Optional[DevCycleOptions] = None) -> None:
        validate_sdk_key(sdk_key)

        self.sdk_key = sdk_key
        self.options = (options or DevCycleOptions()).check_defaults()
        self.headers = build_headers(sdk_key, self.options.custom_headers)
        self._hook_runner = EvalHookRunner(self.options.eval_hooks)
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    def add_hook(self, hook: EvalHook) -> None:
        self._hook_runner.add_hook(hook)

    def clear_hooks(self) -> None:
        self._hook_runner.clear_hooks()

    def variable(self, user: User, key: str, default_value: Any) -> Variable:
        """
        Evaluates a variable for a user.

        Notes:

        * If the request fails or the evaluated value has a different type than
          the default, the default is returned with ``is_defaulted`` set.

        :param user: User to evaluate the variable for.
        :param key: Variable key.
        :param default_value: Boolean, number, string or dict returned when no evaluation is available.
        :return: Variable with the evaluated or default value.
        """
        validate_user(user)
        default_variable = build_default_variable(key, default_value)
        variable = default_variable
        context = HookContext(user=user, key=key, default_value=default_value)

        try:
            self._hook_runner.run_before_hooks(context)
            variable = self._evaluate(user, default_variable)
            context.variable_details = variable
            self._hook_runner.run_after_hooks(context, variable)
        except (BeforeHookError, AfterHookError) as exc:
            LOGGER.log(
                self.options.verbose_log_level,
                "Evaluation hook failed for variable %s: %s",
                key,
                exc,
            )
            self._hook_runner.run_error_hooks(context, exc)
            variable = default_variable
        finally:
            context.variable_details = variable
            self._hook_runner.run_on_finally_hooks(context, variable)

        return variable

    def variable_value(self, user: User, key: str, default_value: Any) -> Any:
        return self.variable(user, key, default_value).value

    def all_variables(self, user: User) -> Dict[str, Variable]:
        validate_user(user)
        response = get_all_variables(
            self.options.bucketing_api_uri,
            build_user_packet(user, self.options.platform_data),
            self.headers,
            self.options.custom_options,
            self.options.request_timeout,
            self.options.enable_edge_db,
        )
        if not response:
            return {}

        return {
            key: Variable.from_dict(value)
            for key, value in response.items()
            if isinstance(value, dict)
        }

    def all_features(self, user: User) -> Dict[str, Feature]:
        validate_user(user)
        response = get_all_features(
            self.options.bucketing_api_uri,
            build_user_packet(user, self.options.platform_data),
            self.headers,
            self.options.custom_options,
            self.options.request_timeout,
            self.options.enable_edge_db,
        )
        if not response:
            return {}

        return {key: Feature.from_dict(value) for key, value in response.items()}

    def track(self, user: User, event: Event) -> bool:
        """
        Sends a custom event for a user.

        :return: true if the event was accepted (or custom event logging is disabled).
        :raises ValueError: If the event has no type.
        """
        if self.options.disable_custom_event_logging:
            return True
        if not event.type:
            raise ValueError("event type is required")
        validate_user(user)

        return send_track_events(
            self.options.bucketing_api_uri,
            build_track_packet(user, [event], self.options.platform_data),
            self.headers,
            self.options.custom_options,
            self.options.request_timeout,
            self.options.enable_edge_db,
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.clear_hooks()

    def _evaluate(self, user: User, default_variable: Variable) -> Variable:
        try:
            response = get_variable(
                self.options.bucketing_api_uri,
                default_variable.key,
                build_user_packet(user, self.options.platform_data),
                self.headers,
                self.options.custom_options,
                self.options.request_timeout,
                self.options.enable_edge_db,
            )
        except DevCycleApiError as exc:
            LOGGER.log(
                self.options.verbose_log_level,
                "Failed to evaluate variable %s: %s",
                default_variable.key,
                exc,
            )
            return default_variable

        return reconcile_variable(
            default_variable, response, self.options.verbose_log_level
        )

    def __enter__(self) -> "DevCycleCloudClient":
        return self

    def __exit__(self, *args, **kwargs) -> bool:
        self.close()
        return False
