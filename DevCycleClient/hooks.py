from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, List, Optional

from DevCycleClient.exceptions import AfterHookError, BeforeHookError
from DevCycleClient.utils import LOGGER

if TYPE_CHECKING:
    from DevCycleClient.api.models import User, Variable


@dataclass
class HookContext:
    user: "User"
    key: str
    default_value: Any
    variable_details: Optional["Variable"] = None


@dataclass
class EvalHook:
    """
    Callbacks run around a variable evaluation. Each one is optional.

    * ``before(context)`` runs before the evaluation request.
    * ``after(context, variable)`` runs after a successful evaluation.
    * ``on_finally(context, variable)`` always runs, with the variable returned to the caller.
    * ``error(context, exc)`` runs when a before or after hook raised.
    """

    before: Optional[Callable[[HookContext], None]] = None
    after: Optional[Callable[[HookContext, "Variable"], None]] = None
    on_finally: Optional[Callable[[HookContext, "Variable"], None]] = None
    error: Optional[Callable[[HookContext, Exception], None]] = None


class EvalHookRunner:
    def __init__(self, hooks: Optional[List[EvalHook]] = None) -> None:
        self._hooks: List[EvalHook] = list(hooks or [])

    @property
    def hooks(self) -> List[EvalHook]:
        return list(self._hooks)

    def add_hook(self, hook: EvalHook) -> None:
        self._hooks.append(hook)

    def clear_hooks(self) -> None:
        self._hooks = []

    def run_before_hooks(self, context: HookContext) -> None:
        for index, hook in enumerate(self._hooks):
            if hook.before is None:
                continue
            try:
                hook.before(context)
            except Exception as exc:  # pylint: disable=broad-except
                LOGGER.error("Before hook %d failed: %s", index, exc)
                raise BeforeHookError(index, exc) from exc

    def run_after_hooks(self, context: HookContext, variable: "Variable") -> None:
        for index in reversed(range(len(self._hooks))):
            hook = self._hooks[index]
            if hook.after is None:
                continue
            try:
                hook.after(context, variable)
            except Exception as exc:  # pylint: disable=broad-except
                LOGGER.error("After hook %d failed: %s", index, exc)
                raise AfterHookError(index, exc) from exc

    # pylint: disable=broad-except
    def run_on_finally_hooks(self, context: HookContext, variable: "Variable") -> None:
        for index in reversed(range(len(self._hooks))):
            hook = self._hooks[index]
            if hook.on_finally is None:
                continue
            try:
                hook.on_finally(context, variable)
            except Exception as exc:
                LOGGER.error("OnFinally hook %d failed: %s", index, exc)

    # pylint: disable=broad-except
    def run_error_hooks(self, context: HookContext, eval_error: Exception) -> None:
        for index in reversed(range(len(self._hooks))):
            hook = self._hooks[index]
            if hook.error is None:
                continue
            try:
                hook.error(context, eval_error)
            except Exception as exc:
                LOGGER.error("Error hook %d failed: %s", index, exc)
