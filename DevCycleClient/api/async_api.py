import asyncio
import json
from typing import Any, Mapping, Optional, Tuple

import aiohttp

from DevCycleClient.api.sync_api import build_params, raise_for_api_error
from DevCycleClient.constants import FEATURES_URL, TRACK_URL, VARIABLE_URL, VARIABLES_URL
from DevCycleClient.utils import LOGGER


async def _post_async(
    url: str,
    body: dict,
    headers: dict,
    custom_options: dict,
    request_timeout: int,
    enable_edge_db: bool = False,
) -> Optional[Tuple[int, str, Any]]:
    timeout = aiohttp.ClientTimeout(total=request_timeout)
    session_kwargs = _session_opts_from(custom_options)

    try:
        LOGGER.debug("POST %s", url)
        async with aiohttp.ClientSession(timeout=timeout, **session_kwargs) as session:
            async with session.post(
                url,
                data=json.dumps(body),
                headers=headers,
                params=build_params(enable_edge_db),
            ) as resp:
                raw = await resp.read()
                return resp.status, resp.reason or "", _decode_body(raw)
    except (aiohttp.InvalidURL, ValueError) as exc:
        LOGGER.exception(
            "DevCycle request failed fatally due to invalid request parameters: %s",
            exc,
        )
        raise
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        LOGGER.exception("DevCycle request failed due to exception: %s", exc)
        return None


async def get_variable_async(
    url: str,
    key: str,
    user_body: dict,
    headers: dict,
    custom_options: dict,
    request_timeout: int,
    enable_edge_db: bool = False,
) -> Optional[dict]:
    result = await _post_async(
        url + VARIABLE_URL.format(key=key),
        user_body,
        headers,
        custom_options,
        request_timeout,
        enable_edge_db,
    )
    if result is None:
        return None

    status, reason, body = result
    if status < 300:
        return body if isinstance(body, dict) else None
    if status == 404:
        LOGGER.debug("Variable %s not found for user", key)
        return None

    LOGGER.debug("Variable request failed with HTTP status code %s: %r", status, body)
    raise_for_api_error(status, reason, body)
    return None


async def get_all_variables_async(
    url: str,
    user_body: dict,
    headers: dict,
    custom_options: dict,
    request_timeout: int,
    enable_edge_db: bool = False,
) -> Optional[dict]:
    return await _get_collection_async(
        url + VARIABLES_URL,
        user_body,
        headers,
        custom_options,
        request_timeout,
        enable_edge_db,
    )


async def get_all_features_async(
    url: str,
    user_body: dict,
    headers: dict,
    custom_options: dict,
    request_timeout: int,
    enable_edge_db: bool = False,
) -> Optional[dict]:
    return await _get_collection_async(
        url + FEATURES_URL,
        user_body,
        headers,
        custom_options,
        request_timeout,
        enable_edge_db,
    )


async def send_track_events_async(
    url: str,
    request_body: dict,
    headers: dict,
    custom_options: dict,
    request_timeout: int,
    enable_edge_db: bool = False,
) -> bool:
    """
    Sends custom events for a user.

    Notes:
    * If unsuccessful (i.e. not a 2xx status code), the failure is logged.

    :return: true if the events were accepted, false if the request failed.
    :raises DevCycleApiError: On a 4xx response.
    """
    result = await _post_async(
        url + TRACK_URL,
        request_body,
        headers,
        custom_options,
        request_timeout,
        enable_edge_db,
    )
    if result is None:
        return False

    status, reason, body = result
    if status < 300:
        LOGGER.debug("DevCycle events successfully sent!")
        return True

    raise_for_api_error(status, reason, body)
    return False


async def _get_collection_async(
    url: str,
    user_body: dict,
    headers: dict,
    custom_options: dict,
    request_timeout: int,
    enable_edge_db: bool,
) -> Optional[dict]:
    result = await _post_async(
        url, user_body, headers, custom_options, request_timeout, enable_edge_db
    )
    if result is None:
        return None

    status, reason, body = result
    if status < 300:
        return body if isinstance(body, dict) else {}

    raise_for_api_error(status, reason, body)
    return None


def _decode_body(raw: bytes) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        # Covers UnicodeDecodeError for bodies that aren't UTF-8
        LOGGER.debug("Response body is not valid JSON")
        return raw.decode("utf-8", errors="replace")


def _session_opts_from(custom_options: Mapping[str, Any]) -> dict:
    opts: dict = {}
    if "verify" in custom_options and not custom_options["verify"]:
        opts["connector"] = aiohttp.TCPConnector(ssl=False)
    if custom_options.get("trust_env"):
        opts["trust_env"] = True
    return opts
