import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional, Union

from DevCycleClient.exceptions import VariableDecodeError
from DevCycleClient.utils import LOGGER


class VariableType(IntEnum):
    Boolean = 0
    Number = 1
    String = 2
    JSON = 3

    @classmethod
    def from_name(cls, name: Any) -> Union["VariableType", Any]:
        """
        Maps a wire type name ("Boolean", "Number", "String", "JSON") to its tag.

        Unknown names are returned as-is so the value can still be carried around;
        extraction treats them as an unrecognized tag.
        """
        if isinstance(name, VariableType):
            return name
        try:
            return cls[name]
        except (KeyError, TypeError):
            return name


@dataclass
class SDKVariable:
    """
    A variable value as returned by the bucketing service: a tag plus exactly one
    populated payload field. JSON values travel as serialized text in ``string_value``.
    """

    type: Any
    key: Optional[str] = None
    bool_value: bool = False
    double_value: float = 0.0
    string_value: str = ""
    eval_reason: Optional[str] = None

    @classmethod
    def from_api_response(cls, data: dict) -> "SDKVariable":
        """
        Builds a tagged value from a wire variable.

        A payload is only kept when its type matches the tag. Otherwise the tag is
        cleared, so extraction yields ``None`` and callers fall back to their default.
        """
        var_type = VariableType.from_name(data.get("type"))
        value = data.get("value")
        variable = cls(
            type=var_type,
            key=data.get("key"),
            eval_reason=data.get("evalReason"),
        )

        if var_type == VariableType.Boolean and isinstance(value, bool):
            variable.bool_value = value
        elif var_type == VariableType.Number and _is_number(value):
            variable.double_value = float(value)
        elif var_type == VariableType.String and isinstance(value, str):
            variable.string_value = value
        elif var_type == VariableType.JSON and isinstance(value, str):
            variable.string_value = value
        elif var_type == VariableType.JSON and isinstance(value, (dict, list)):
            variable.string_value = json.dumps(value)
        elif isinstance(var_type, VariableType):
            LOGGER.debug(
                "Ignoring %s payload for %s variable %s",
                type(value).__name__,
                var_type.name,
                variable.key,
            )
            variable.type = None

        return variable

    def get_value(self, strict: bool = False) -> Any:
        return extract_value(self, strict=strict)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        float(value)
    except OverflowError:
        return False
    return True


def extract_value(variable: SDKVariable, strict: bool = False) -> Any:
    """
    Returns the natively typed value of a tagged variable.

    :param variable: Tagged variable value.
    :param strict: Raise ``VariableDecodeError`` instead of returning ``None``
        when a JSON payload can't be decoded.
    :return: bool, float, str, the decoded JSON value, or ``None`` for an
        unrecognized tag or undecodable JSON.
    """
    if variable.type == VariableType.Boolean:
        return variable.bool_value
    if variable.type == VariableType.Number:
        return float(variable.double_value)
    if variable.type == VariableType.String:
        return variable.string_value
    if variable.type == VariableType.JSON:
        try:
            return json.loads(variable.string_value)
        except (TypeError, ValueError) as exc:
            if strict:
                raise VariableDecodeError(variable.key, variable.string_value) from exc
            LOGGER.debug(
                "Unable to decode JSON value for variable %s: %s", variable.key, exc
            )
            return None

    return None
