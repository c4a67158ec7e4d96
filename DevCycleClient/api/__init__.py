# flake8: noqa
from .sync_api import (
    get_all_features,
    get_all_variables,
    get_variable,
    send_track_events,
)

__all__ = ["get_variable", "get_all_variables", "get_all_features", "send_track_events"]
