from typing import Any, Dict, Optional

from ..api.async_api import (
    get_all_features_async,
    get_all_variables_async,
    get_variable_async,
    send_track_events_async,
)
from ..api.models import Event, Feature, User, Variable
from ..api.packet_building import build_track_packet, build_user_packet
from ..api.sync_api import build_headers
from ..core.client import (
    build_default_variable,
    reconcile_variable,
    validate_sdk_key,
    validate_user,
)
from ..exceptions import AfterHookError, BeforeHookError, DevCycleApiError
from ..hooks import EvalHook, EvalHookRunner, HookContext
from ..options import DevCycleOptions
from ..utils import LOGGER


class AsyncDevCycleCloudClient:
    """
    An async client for the DevCycle bucketing API.

    :param sdk_key: DevCycle server SDK key, required.
    :param options: Client options, optional & defaults to ``DevCycleOptions()``.

    .. code-block:: python

        async with AsyncDevCycleCloudClient("dvc_server_...") as client:
            variable = await client.variable(User(user_id="u1"), "new-checkout", False)
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

    async def variable(self, user: User, key: str, default_value: Any) -> Variable:
        """
        Evaluates a variable for a user.

        Notes:

        * If the request fails or the evaluated value has a different type than
          the default, the default is returned with ``is_defaulted`` set.
        """
        validate_user(user)
        default_variable = build_default_variable(key, default_value)
        variable = default_variable
        context = HookContext(user=user, key=key, default_value=default_value)

        try:
            self._hook_runner.run_before_hooks(context)
            variable = await self._evaluate(user, default_variable)
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

    async def variable_value(self, user: User, key: str, default_value: Any) -> Any:
        variable = await self.variable(user, key, default_value)
        return variable.value

    async def all_variables(self, user: User) -> Dict[str, Variable]:
        validate_user(user)
        response = await get_all_variables_async(
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

    async def all_features(self, user: User) -> Dict[str, Feature]:
        validate_user(user)
        response = await get_all_features_async(
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

    async def track(self, user: User, event: Event) -> bool:
        if self.options.disable_custom_event_logging:
            return True
        if not event.type:
            raise ValueError("event type is required")
        validate_user(user)

        return await send_track_events_async(
            self.options.bucketing_api_uri,
            build_track_packet(user, [event], self.options.platform_data),
            self.headers,
            self.options.custom_options,
            self.options.request_timeout,
            self.options.enable_edge_db,
        )

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.clear_hooks()

    async def _evaluate(self, user: User, default_variable: Variable) -> Variable:
        try:
            response = await get_variable_async(
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

    async def __aenter__(self) -> "AsyncDevCycleCloudClient":
        return self

    async def __aexit__(self, *args, **kwargs) -> bool:
        await self.close()
        return False


__all__ = ["AsyncDevCycleCloudClient"]
