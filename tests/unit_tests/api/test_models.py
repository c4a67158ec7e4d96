from datetime import datetime, timezone

from DevCycleClient.api.models import (
    ErrorResponse,
    EvaluationReason,
    Event,
    Feature,
    PlatformData,
    User,
    Variable,
)
from DevCycleClient.api.packet_building import build_track_packet, build_user_packet
from DevCycleClient.constants import SDK_VERSION
from tests.utilities.mocks.mock_variables import (
    MOCK_ALL_FEATURES,
    MOCK_BOOLEAN_VARIABLE,
    MOCK_ERROR_RESPONSE,
    MOCK_JSON_VARIABLE,
)
from tests.utilities.testing_constants import USER_ID

PLATFORM_DATA = PlatformData(platform_version="3.12.0", hostname="test-host")


def test_platform_data_default():
    platform_data = PlatformData.default()

    assert platform_data.platform == "Python"
    assert platform_data.sdk_type == "server"
    assert platform_data.sdk_version == SDK_VERSION
    assert platform_data.platform_version


def test_user_to_dict_omits_unset_fields():
    user = User(user_id=USER_ID, country="CA", app_build=12, custom_data={"a": 1})

    assert user.to_dict() == {
        "user_id": USER_ID,
        "country": "CA",
        "appBuild": 12,
        "customData": {"a": 1},
    }


def test_build_user_packet():
    body = build_user_packet(User(user_id=USER_ID, email="a@b.c"), PLATFORM_DATA)

    assert body["user_id"] == USER_ID
    assert body["email"] == "a@b.c"
    assert body["platform"] == "Python"
    assert body["platformVersion"] == "3.12.0"
    assert body["sdkType"] == "server"
    assert body["hostname"] == "test-host"
    assert body["createdDate"].endswith("Z")
    assert body["lastSeenDate"] == body["createdDate"]


def test_variable_from_dict():
    variable = Variable.from_dict(MOCK_BOOLEAN_VARIABLE)

    assert variable.key == "test-variable"
    assert variable.type == "Boolean"
    assert variable.value is True
    assert variable.id == MOCK_BOOLEAN_VARIABLE["_id"]
    assert variable.eval.reason == EvaluationReason.TARGETING_MATCH
    assert variable.eval.details == "All Users"


def test_variable_from_dict_json():
    variable = Variable.from_dict(MOCK_JSON_VARIABLE)

    assert variable.value == {"enabled": True, "limit": 5}


def test_variable_defaulted():
    variable = Variable.defaulted("k", "String", "fallback", "MISSING_VARIABLE")

    assert variable.is_defaulted
    assert variable.value == variable.default_value == "fallback"
    assert variable.eval.reason == EvaluationReason.DEFAULT
    assert variable.to_dict() == {
        "key": "k",
        "type": "String",
        "value": "fallback",
        "defaultValue": "fallback",
        "isDefaulted": True,
        "eval": {"reason": "DEFAULT", "details": "MISSING_VARIABLE"},
    }


def test_feature_from_dict():
    feature = Feature.from_dict(MOCK_ALL_FEATURES["test-feature"])

    assert feature.key == "test-feature"
    assert feature.type == "release"
    assert feature.variation == "615357cf7e9ebdca58446ed0"
    assert feature.variation_key == "variation-on"
    assert feature.variation_name == "Variation On"
    assert feature.eval.reason == "TARGETING_MATCH"


def test_event_to_dict():
    event = Event(
        type="customEvent",
        target="checkout",
        value=3.0,
        client_date=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        meta_data={"cart": 2},
    )

    assert event.to_dict() == {
        "type": "customEvent",
        "target": "checkout",
        "clientDate": "2024-01-02T03:04:05Z",
        "value": 3.0,
        "featureVars": {},
        "metaData": {"cart": 2},
    }


def test_build_track_packet():
    packet = build_track_packet(
        User(user_id=USER_ID), [Event(type="a"), Event(type="b")], PLATFORM_DATA
    )

    assert packet["user"]["user_id"] == USER_ID
    assert [event["type"] for event in packet["events"]] == ["a", "b"]


def test_error_response_from_dict():
    error = ErrorResponse.from_dict(MOCK_ERROR_RESPONSE)

    assert error.status_code == 400
    assert error.message == "user_id should not be empty"


def test_error_response_from_non_json_body():
    error = ErrorResponse.from_dict("<html>", fallback_message="Bad Request")

    assert error.message == "Bad Request"
