import logging

from DevCycleClient.api.models import PlatformData
from DevCycleClient.constants import BUCKETING_API_URL, MIN_REQUEST_TIMEOUT
from DevCycleClient.options import DevCycleOptions


def test_defaults():
    options = DevCycleOptions().check_defaults()

    assert options.bucketing_api_uri == BUCKETING_API_URL
    assert options.request_timeout == MIN_REQUEST_TIMEOUT
    assert not options.enable_edge_db
    assert not options.disable_custom_event_logging
    assert options.verbose_log_level == logging.WARNING
    assert options.platform_data.platform == "Python"


def test_trailing_slash_is_stripped():
    options = DevCycleOptions(bucketing_api_uri="http://localhost:8080/").check_defaults()

    assert options.bucketing_api_uri == "http://localhost:8080"


def test_empty_uri_falls_back_to_default():
    options = DevCycleOptions(bucketing_api_uri="").check_defaults()

    assert options.bucketing_api_uri == BUCKETING_API_URL


def test_request_timeout_minimum():
    assert DevCycleOptions(request_timeout=1).check_defaults().request_timeout == 5
    assert DevCycleOptions(request_timeout=30).check_defaults().request_timeout == 30


def test_platform_data_override_is_kept():
    platform_data = PlatformData(platform_version="3.12.0", hostname="box")

    options = DevCycleOptions(platform_data=platform_data).check_defaults()

    assert options.platform_data is platform_data


def test_check_defaults_leaves_caller_options_untouched():
    options = DevCycleOptions(bucketing_api_uri="http://localhost:8080/", request_timeout=1)

    checked = options.check_defaults()

    assert checked is not options
    assert checked.bucketing_api_uri == "http://localhost:8080"
    assert checked.request_timeout == MIN_REQUEST_TIMEOUT
    assert options.bucketing_api_uri == "http://localhost:8080/"
    assert options.request_timeout == 1
    assert options.platform_data is None
