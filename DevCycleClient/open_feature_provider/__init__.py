from .provider import (
    DevCycleProvider,
    InvalidContextError,
    create_event_from_tracking_details,
    create_user_from_context,
)

__all__ = [
    "DevCycleProvider",
    "InvalidContextError",
    "create_event_from_tracking_details",
    "create_user_from_context",
]
