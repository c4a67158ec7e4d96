from __future__ import annotations

import socket
from dataclasses import dataclass, field
from datetime import datetime, timezone
from platform import python_version
from typing import Any, Dict, Optional

from DevCycleClient.constants import SDK_PLATFORM, SDK_TYPE, SDK_VERSION
from DevCycleClient.proto.helpers import SDKVariable


class EvaluationReason:
    TARGETING_MATCH = "TARGETING_MATCH"
    SPLIT = "SPLIT"
    DEFAULT = "DEFAULT"
    DISABLED = "DISABLED"
    ERROR = "ERROR"


class DefaultReason:
    MISSING_CONFIG = "MISSING_CONFIG"
    MISSING_VARIABLE = "MISSING_VARIABLE"
    MISSING_FEATURE = "MISSING_FEATURE"
    MISSING_VARIATION = "MISSING_VARIATION"
    MISSING_VARIABLE_FOR_VARIATION = "MISSING_VARIABLE_FOR_VARIATION"
    USER_NOT_IN_ROLLOUT = "USER_NOT_IN_ROLLOUT"
    USER_NOT_TARGETED = "USER_NOT_TARGETED"
    INVALID_VARIABLE_TYPE = "INVALID_VARIABLE_TYPE"
    UNKNOWN = "UNKNOWN"


class EventType:
    VARIABLE_EVALUATED = "variableEvaluated"
    AGG_VARIABLE_EVALUATED = "aggVariableEvaluated"
    VARIABLE_DEFAULTED = "variableDefaulted"
    AGG_VARIABLE_DEFAULTED = "aggVariableDefaulted"


def _isoformat(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _without_none(values: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


@dataclass
class PlatformData:
    platform: str = SDK_PLATFORM
    platform_version: str = ""
    sdk_type: str = SDK_TYPE
    sdk_version: str = SDK_VERSION
    hostname: str = ""

    @classmethod
    def default(cls) -> PlatformData:
        return cls(platform_version=python_version(), hostname=socket.gethostname())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "platform": self.platform,
            "platformVersion": self.platform_version,
            "sdkType": self.sdk_type,
            "sdkVersion": self.sdk_version,
            "hostname": self.hostname,
        }


@dataclass
class User:
    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    language: Optional[str] = None
    country: Optional[str] = None
    app_version: Optional[str] = None
    app_build: Optional[float] = None
    device_model: Optional[str] = None
    custom_data: Optional[Dict[str, Any]] = None
    private_custom_data: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return _without_none(
            {
                "user_id": self.user_id,
                "email": self.email,
                "name": self.name,
                "language": self.language,
                "country": self.country,
                "appVersion": self.app_version,
                "appBuild": self.app_build,
                "deviceModel": self.device_model,
                "customData": self.custom_data,
                "privateCustomData": self.private_custom_data,
            }
        )

    def populated(self, platform_data: PlatformData) -> Dict[str, Any]:
        """
        Builds the user body sent to the bucketing API: the user's own fields,
        creation/last seen dates and the SDK's platform data.
        """
        now = _isoformat(datetime.now(timezone.utc))
        return {
            **self.to_dict(),
            "createdDate": now,
            "lastSeenDate": now,
            **platform_data.to_dict(),
        }


@dataclass
class EvalReason:
    reason: str
    details: Optional[str] = None
    target_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional[EvalReason]:
        if not data:
            return None
        return cls(
            reason=data.get("reason", ""),
            details=data.get("details"),
            target_id=data.get("target_id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _without_none(
            {"reason": self.reason, "details": self.details, "target_id": self.target_id}
        )


@dataclass
class Variable:
    key: str
    type: str
    value: Any
    default_value: Any = None
    is_defaulted: bool = False
    eval: Optional[EvalReason] = None
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> Variable:
        """Maps a wire variable onto a ``Variable``; the value goes through ``SDKVariable``."""
        return cls(
            key=data.get("key", ""),
            type=data.get("type", ""),
            value=SDKVariable.from_api_response(data).get_value(),
            is_defaulted=bool(data.get("isDefaulted", False)),
            eval=EvalReason.from_dict(data.get("eval")),
            id=data.get("_id"),
        )

    @classmethod
    def defaulted(
        cls, key: str, var_type: str, default_value: Any, details: str
    ) -> Variable:
        return cls(
            key=key,
            type=var_type,
            value=default_value,
            default_value=default_value,
            is_defaulted=True,
            eval=EvalReason(reason=EvaluationReason.DEFAULT, details=details),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _without_none(
            {
                "_id": self.id,
                "key": self.key,
                "type": self.type,
                "value": self.value,
                "defaultValue": self.default_value,
                "isDefaulted": self.is_defaulted,
                "eval": self.eval.to_dict() if self.eval else None,
            }
        )


@dataclass
class Feature:
    key: str
    type: str
    id: Optional[str] = None
    variation: Optional[str] = None
    variation_key: Optional[str] = None
    variation_name: Optional[str] = None
    eval_reason: Optional[str] = None
    eval: Optional[EvalReason] = None

    @classmethod
    def from_dict(cls, data: dict) -> Feature:
        return cls(
            key=data.get("key", ""),
            type=data.get("type", ""),
            id=data.get("_id"),
            variation=data.get("_variation"),
            variation_key=data.get("variationKey"),
            variation_name=data.get("variationName"),
            eval_reason=data.get("evalReason"),
            eval=EvalReason.from_dict(data.get("eval")),
        )


@dataclass
class Event:
    type: str
    target: Optional[str] = None
    custom_type: Optional[str] = None
    user_id: Optional[str] = None
    client_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    value: Optional[float] = None
    feature_vars: Dict[str, str] = field(default_factory=dict)
    meta_data: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return _without_none(
            {
                "type": self.type,
                "target": self.target,
                "customType": self.custom_type,
                "user_id": self.user_id,
                "clientDate": _isoformat(self.client_date),
                "value": self.value,
                "featureVars": self.feature_vars,
                "metaData": self.meta_data,
            }
        )


@dataclass
class ErrorResponse:
    message: str
    status_code: Optional[int] = None
    data: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Any, fallback_message: str = "") -> ErrorResponse:
        if not isinstance(data, dict):
            return cls(message=fallback_message)
        message = data.get("message", fallback_message)
        if isinstance(message, list):
            message = ", ".join(str(m) for m in message)
        return cls(
            message=str(message),
            status_code=data.get("statusCode"),
            data=data.get("data"),
        )
