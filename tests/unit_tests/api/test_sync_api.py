import json

import pytest
import requests
import responses
from responses import matchers

from DevCycleClient.api.sync_api import (
    build_headers,
    get_all_features,
    get_all_variables,
    get_variable,
    send_track_events,
)
from DevCycleClient.constants import (
    FEATURES_URL,
    TRACK_URL,
    USER_AGENT,
    VARIABLES_URL,
)
from DevCycleClient.exceptions import DevCycleApiError
from tests.utilities.mocks.mock_variables import (
    MOCK_ALL_FEATURES,
    MOCK_ALL_VARIABLES,
    MOCK_BOOLEAN_VARIABLE,
    MOCK_ERROR_RESPONSE,
)
from tests.utilities.testing_constants import (
    CUSTOM_HEADERS,
    CUSTOM_OPTIONS,
    REQUEST_TIMEOUT,
    SDK_KEY,
    URL,
    USER_ID,
    VARIABLE_KEY,
)

FULL_VARIABLE_URL = f"{URL}{VARIABLES_URL}/{VARIABLE_KEY}"
USER_BODY = {"user_id": USER_ID}
HEADERS = build_headers(SDK_KEY, CUSTOM_HEADERS)


def test_build_headers():
    assert HEADERS["Authorization"] == SDK_KEY
    assert HEADERS["Content-Type"] == "application/json"
    assert HEADERS["User-Agent"] == USER_AGENT
    assert HEADERS["X-Test-Header"] == "test"


@responses.activate
def test_get_variable_success():
    responses.add(
        responses.POST, FULL_VARIABLE_URL, json=MOCK_BOOLEAN_VARIABLE, status=200
    )

    result = get_variable(
        URL, VARIABLE_KEY, USER_BODY, HEADERS, CUSTOM_OPTIONS, REQUEST_TIMEOUT
    )

    assert result == MOCK_BOOLEAN_VARIABLE
    request = responses.calls[0].request
    assert json.loads(request.body) == USER_BODY
    assert request.headers["Authorization"] == SDK_KEY


@responses.activate
def test_get_variable_edge_db_query_param():
    responses.add(
        responses.POST,
        FULL_VARIABLE_URL,
        json=MOCK_BOOLEAN_VARIABLE,
        status=200,
        match=[matchers.query_param_matcher({"enableEdgeDB": "true"})],
    )

    result = get_variable(
        URL,
        VARIABLE_KEY,
        USER_BODY,
        HEADERS,
        CUSTOM_OPTIONS,
        REQUEST_TIMEOUT,
        enable_edge_db=True,
    )

    assert result == MOCK_BOOLEAN_VARIABLE


@responses.activate
def test_get_variable_not_found():
    responses.add(
        responses.POST,
        FULL_VARIABLE_URL,
        json={"statusCode": 404, "message": "Variable not found"},
        status=404,
    )

    assert (
        get_variable(
            URL, VARIABLE_KEY, USER_BODY, HEADERS, CUSTOM_OPTIONS, REQUEST_TIMEOUT
        )
        is None
    )


@responses.activate
def test_get_variable_client_error():
    responses.add(
        responses.POST, FULL_VARIABLE_URL, json=MOCK_ERROR_RESPONSE, status=400
    )

    with pytest.raises(DevCycleApiError) as exc_info:
        get_variable(
            URL, VARIABLE_KEY, USER_BODY, HEADERS, CUSTOM_OPTIONS, REQUEST_TIMEOUT
        )

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "user_id should not be empty"


@responses.activate
def test_get_variable_server_error():
    responses.add(responses.POST, FULL_VARIABLE_URL, status=500)

    assert (
        get_variable(
            URL, VARIABLE_KEY, USER_BODY, HEADERS, CUSTOM_OPTIONS, REQUEST_TIMEOUT
        )
        is None
    )
    assert len(responses.calls) == 1


@responses.activate
def test_get_variable_connection_error():
    responses.add(
        responses.POST,
        FULL_VARIABLE_URL,
        body=requests.exceptions.ConnectionError("boom"),
    )

    assert (
        get_variable(
            URL, VARIABLE_KEY, USER_BODY, HEADERS, CUSTOM_OPTIONS, REQUEST_TIMEOUT
        )
        is None
    )


def test_get_variable_invalid_url_is_fatal():
    with pytest.raises(requests.exceptions.MissingSchema):
        get_variable(
            "localhost", VARIABLE_KEY, USER_BODY, HEADERS, CUSTOM_OPTIONS, REQUEST_TIMEOUT
        )


@responses.activate
def test_get_all_variables():
    responses.add(
        responses.POST, URL + VARIABLES_URL, json=MOCK_ALL_VARIABLES, status=200
    )

    result = get_all_variables(
        URL, USER_BODY, HEADERS, CUSTOM_OPTIONS, REQUEST_TIMEOUT
    )

    assert result == MOCK_ALL_VARIABLES


@responses.activate
def test_get_all_variables_client_error():
    responses.add(
        responses.POST,
        URL + VARIABLES_URL,
        json={"statusCode": 401, "message": "Invalid SDK key"},
        status=401,
    )

    with pytest.raises(DevCycleApiError) as exc_info:
        get_all_variables(URL, USER_BODY, HEADERS, CUSTOM_OPTIONS, REQUEST_TIMEOUT)

    assert exc_info.value.status_code == 401


@responses.activate
def test_get_all_features():
    responses.add(
        responses.POST, URL + FEATURES_URL, json=MOCK_ALL_FEATURES, status=200
    )

    result = get_all_features(URL, USER_BODY, HEADERS, CUSTOM_OPTIONS, REQUEST_TIMEOUT)

    assert result == MOCK_ALL_FEATURES


@responses.activate
def test_get_all_features_server_error():
    responses.add(responses.POST, URL + FEATURES_URL, status=503)

    assert (
        get_all_features(URL, USER_BODY, HEADERS, CUSTOM_OPTIONS, REQUEST_TIMEOUT)
        is None
    )


@pytest.mark.parametrize(
    "status,expected",
    [
        (201, True),
        (500, False),
    ],
)
@responses.activate
def test_send_track_events(status, expected):
    responses.add(
        responses.POST, URL + TRACK_URL, json={"message": "ok"}, status=status
    )
    body = {"user": USER_BODY, "events": [{"type": "customEvent"}]}

    result = send_track_events(URL, body, HEADERS, CUSTOM_OPTIONS, REQUEST_TIMEOUT)

    assert result is expected
    assert json.loads(responses.calls[0].request.body) == body
