"""
Observer capability injected into a definition tree.

The observer is an explicit struct of optional callables. Each UI use case
(stack-based detail view, dialog, table panel, tree panel) fills in the subset
it supports; definitions call only what their variant needs and tolerate the
rest being absent. Any object exposing some of these attribute names works
as an observer too.

Asynchronous capabilities (open_definition, close_definition,
definition_closed, resolve_definition, start_order) may return an awaitable
or a plain value.
"""
from dataclasses import dataclass, field
import inspect
from typing import Any, Awaitable, Callable, List, Optional, TYPE_CHECKING, Union

if TYPE_CHECKING:
    from defbind.definition import Definition


@dataclass
class CloseDefinitionData:
    """Payload handed to observer.close_definition()."""
    definition: Optional['Definition'] = None
    data: List[Any] = field(default_factory=list)
    refresh_parent_definition: bool = False
    reopen_after_refresh: bool = False
    force: bool = False


@dataclass
class ComponentDefinitionData:
    """Payload a custom component receives from a ComponentDefinition."""
    definition: 'Definition'
    data: List[Any]
    resolved_data: List[Any]


MaybeAwaitable = Union[Any, Awaitable[Any]]


@dataclass
class DefinitionObserver:
    """Optional capabilities a definition tree may call.

    All fields default to None; a None field means "capability not offered".
    """
    get_component: Optional[Callable[[str], Any]] = None
    get_validator: Optional[Callable[[str], Optional[Callable[[Any], Any]]]] = None
    open_definition: Optional[Callable[['Definition', List[Any]], MaybeAwaitable]] = None
    close_definition: Optional[Callable[[Optional[CloseDefinitionData]], MaybeAwaitable]] = None
    definition_closed: Optional[Callable[[], MaybeAwaitable]] = None
    resolve_definition: Optional[Callable[[Any, str, List[Any]], MaybeAwaitable]] = None
    get_default_rtc: Optional[Callable[[], Any]] = None
    start_order: Optional[Callable[['Definition', List[Any]], MaybeAwaitable]] = None
    translate: Optional[Callable[[str], str]] = None
    after_set_observer: Optional[Callable[['Definition'], None]] = None


def capability(observer: Any, name: str) -> Optional[Callable[..., Any]]:
    """Return the named capability of an observer, or None if absent."""
    if observer is None:
        return None
    func = getattr(observer, name, None)
    return func if callable(func) else None


async def settle(result: MaybeAwaitable) -> Any:
    """Await a capability result if it is awaitable, else return it as is."""
    if inspect.isawaitable(result):
        return await result
    return result
