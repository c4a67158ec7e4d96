import logging

LOGGER = logging.getLogger(__name__)


def log_resp_info(resp) -> None:
    LOGGER.debug("HTTP status code: %s", resp.status_code)
    LOGGER.debug("HTTP headers: %s", resp.headers)
    LOGGER.debug("HTTP content: %s", resp.text)


def strip_trailing_slash(url: str) -> str:
    return url.rstrip("/")
