from abc import ABC, abstractmethod
from typing import Any, Dict

from DevCycleClient.api.models import Event, Feature, User, Variable


class DevCycleClientContract(ABC):
    """This is the public contract for DevCycle clients. All implementers must adhere to this interface. While children
    may expose other methods, these are the methods that a caller can always expect to be present.
    """

    @abstractmethod
    def variable(self, user: User, key: str, default_value: Any) -> Variable:
        pass

    @abstractmethod
    def variable_value(self, user: User, key: str, default_value: Any) -> Any:
        pass

    @abstractmethod
    def all_variables(self, user: User) -> Dict[str, Variable]:
        pass

    @abstractmethod
    def all_features(self, user: User) -> Dict[str, Feature]:
        pass

    @abstractmethod
    def track(self, user: User, event: Event) -> bool:
        pass
