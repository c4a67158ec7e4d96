from .helpers import SDKVariable, VariableType, extract_value

__all__ = ["SDKVariable", "VariableType", "extract_value"]
