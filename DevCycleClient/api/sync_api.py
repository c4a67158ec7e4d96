import json
from typing import Any, Dict, Optional

import requests
from requests.exceptions import InvalidHeader, InvalidSchema, InvalidURL, MissingSchema

from DevCycleClient.api.models import ErrorResponse
from DevCycleClient.constants import (
    APPLICATION_HEADERS,
    EDGE_DB_QUERY_PARAM,
    FEATURES_URL,
    TRACK_URL,
    VARIABLE_URL,
    VARIABLES_URL,
)
from DevCycleClient.exceptions import DevCycleApiError
from DevCycleClient.utils import LOGGER, log_resp_info


def build_headers(sdk_key: str, custom_headers: Optional[dict] = None) -> dict:
    return {**(custom_headers or {}), **APPLICATION_HEADERS, "Authorization": sdk_key}


def build_params(enable_edge_db: bool) -> Dict[str, str]:
    return {EDGE_DB_QUERY_PARAM: "true"} if enable_edge_db else {}


def _decode_body(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text or None


def raise_for_api_error(status_code: int, reason: str, body: Any) -> None:
    """
    Raises ``DevCycleApiError`` for a 4xx response.

    5xx responses are the service's problem rather than the caller's; they are
    logged and swallowed so callers fall back to their defaults.
    """
    error = ErrorResponse.from_dict(body, fallback_message=reason)
    if status_code >= 500:
        LOGGER.warning(
            "DevCycle bucketing API reported a server error (%s): %s",
            status_code,
            error.message,
        )
        return
    raise DevCycleApiError(status_code, error.message, body)


# pylint: disable=broad-except
def _post(
    url: str,
    body: dict,
    headers: dict,
    custom_options: dict,
    request_timeout: int,
    enable_edge_db: bool = False,
) -> Optional[requests.Response]:
    try:
        LOGGER.debug("POST %s", url)

        return requests.post(
            url,
            data=json.dumps(body),
            headers=headers,
            params=build_params(enable_edge_db),
            timeout=request_timeout,
            **custom_options,
        )
    except (MissingSchema, InvalidSchema, InvalidHeader, InvalidURL) as exc:
        LOGGER.exception("DevCycle request failed fatally due to exception: %s", exc)
        raise exc
    except requests.RequestException as exc:
        LOGGER.exception("DevCycle request failed due to exception: %s", exc)

    return None


def get_variable(
    url: str,
    key: str,
    user_body: dict,
    headers: dict,
    custom_options: dict,
    request_timeout: int,
    enable_edge_db: bool = False,
) -> Optional[dict]:
    """
    Evaluates a single variable for a user.

    Notes:
    * A 404 means the variable isn't known for this user; ``None`` is returned.
    * Transport errors and 5xx responses are logged and ``None`` is returned.

    :param url: Base URL of the bucketing API.
    :param key: Variable key.
    :param user_body: Populated user, see ``User.populated``.
    :param headers:
    :param custom_options:
    :param request_timeout:
    :param enable_edge_db:
    :return: The variable as returned by the API, or None.
    :raises DevCycleApiError: On a 4xx response other than 404.
    """
    resp = _post(
        url + VARIABLE_URL.format(key=key),
        user_body,
        headers,
        custom_options,
        request_timeout,
        enable_edge_db,
    )
    if resp is None:
        return None

    body = _decode_body(resp)
    if resp.status_code < 300:
        return body if isinstance(body, dict) else None

    log_resp_info(resp)
    if resp.status_code == 404:
        LOGGER.debug("Variable %s not found for user", key)
        return None

    raise_for_api_error(resp.status_code, resp.reason, body)
    return None


def get_all_variables(
    url: str,
    user_body: dict,
    headers: dict,
    custom_options: dict,
    request_timeout: int,
    enable_edge_db: bool = False,
) -> Optional[dict]:
    """
    Retrieves every variable evaluated for a user.

    :return: Mapping of variable key to variable, or None if the request failed.
    :raises DevCycleApiError: On a 4xx response.
    """
    resp = _post(
        url + VARIABLES_URL,
        user_body,
        headers,
        custom_options,
        request_timeout,
        enable_edge_db,
    )
    if resp is None:
        return None

    body = _decode_body(resp)
    if resp.status_code < 300:
        return body if isinstance(body, dict) else {}

    log_resp_info(resp)
    raise_for_api_error(resp.status_code, resp.reason, body)
    return None


def get_all_features(
    url: str,
    user_body: dict,
    headers: dict,
    custom_options: dict,
    request_timeout: int,
    enable_edge_db: bool = False,
) -> Optional[dict]:
    """
    Retrieves every feature the user is bucketed into.

    :return: Mapping of feature key to feature, or None if the request failed.
    :raises DevCycleApiError: On a 4xx response.
    """
    resp = _post(
        url + FEATURES_URL,
        user_body,
        headers,
        custom_options,
        request_timeout,
        enable_edge_db,
    )
    if resp is None:
        return None

    body = _decode_body(resp)
    if resp.status_code < 300:
        return body if isinstance(body, dict) else {}

    log_resp_info(resp)
    raise_for_api_error(resp.status_code, resp.reason, body)
    return None


def send_track_events(
    url: str,
    request_body: dict,
    headers: dict,
    custom_options: dict,
    request_timeout: int,
    enable_edge_db: bool = False,
) -> bool:
    """
    Sends custom events for a user.

    :param request_body: ``{"user": ..., "events": [...]}``, see ``build_track_packet``.
    :return: true if the events were accepted, false if the request failed.
    :raises DevCycleApiError: On a 4xx response.
    """
    resp = _post(
        url + TRACK_URL,
        request_body,
        headers,
        custom_options,
        request_timeout,
        enable_edge_db,
    )
    if resp is None:
        return False

    if resp.status_code < 300:
        LOGGER.debug("DevCycle events successfully sent!")
        return True

    log_resp_info(resp)
    raise_for_api_error(resp.status_code, resp.reason, _decode_body(resp))
    return False
