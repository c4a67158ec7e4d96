import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from DevCycleClient.api.models import PlatformData
from DevCycleClient.constants import (
    BUCKETING_API_URL,
    MIN_REQUEST_TIMEOUT,
    REQUEST_TIMEOUT,
)
from DevCycleClient.hooks import EvalHook
from DevCycleClient.utils import LOGGER, strip_trailing_slash


@dataclass
class DevCycleOptions:
    """
    Options for the DevCycle cloud clients.

    :param enable_edge_db: Ask the bucketing API to use EdgeDB stored user data.
    :param bucketing_api_uri: Base URL of the bucketing API.
    :param request_timeout: Timeout for requests in seconds; values below 5 are raised to 5.
    :param disable_custom_event_logging: Turns ``track`` into a no-op that reports success.
    :param custom_headers: Extra headers sent with every request.
    :param custom_options: Extra keyword arguments passed to ``requests`` (e.g. ``verify``).
    :param platform_data: Overrides the platform data reported with each user.
    :param eval_hooks: Hooks run around every variable evaluation.
    :param verbose_log_level: Log level used when an evaluation falls back to its default.
    """

    enable_edge_db: bool = False
    bucketing_api_uri: str = BUCKETING_API_URL
    request_timeout: int = REQUEST_TIMEOUT
    disable_custom_event_logging: bool = False
    custom_headers: Dict[str, str] = field(default_factory=dict)
    custom_options: Dict[str, Any] = field(default_factory=dict)
    platform_data: Optional[PlatformData] = None
    eval_hooks: List[EvalHook] = field(default_factory=list)
    verbose_log_level: int = logging.WARNING
    def check_defaults(self) -> "DevCycleOptions":
        """Returns a copy of these options with defaults and bounds applied."""
        options = replace(self, eval_hooks=list(self.eval_hooks))

        if not options.bucketing_api_uri:
            options.bucketing_api_uri = BUCKETING_API_URL
        options.bucketing_api_uri = strip_trailing_slash(options.bucketing_api_uri)

        if options.request_timeout < MIN_REQUEST_TIMEOUT:
            LOGGER.debug(
                "request_timeout %s is below the minimum, using %s seconds",
                options.request_timeout,
                MIN_REQUEST_TIMEOUT,
            )
            options.request_timeout = MIN_REQUEST_TIMEOUT

        if options.platform_data is None:
            options.platform_data = PlatformData.default()

        return options
