"""
Capability traits definition variants are composed from.

- Observable: holds the observer capability and cascades it over owned sub-definitions
- Hideable: hidden / hideIfEmpty / hideIfUndefined flags and leaf visibility
- Containerable: ordered, owned child list and container visibility
- Validatable: validator names resolved through the observer

Traits are cooperative mixins: they rely on the Definition they are mixed into
for resolve_data(), set_parent() and the sub-definition registry.
"""
from dataclasses import dataclass
import logging
from typing import Any, Callable, Iterator, List, Optional, Sequence

from defbind.codec import Nested, prop
from defbind.events import DefinitionEvent, DefinitionEventService
from defbind.observer import capability
from defbind.visibility import hides_any

logger = logging.getLogger(__name__)


class Observable:
    """Observer storage and cascading."""

    def _init_observable(self) -> None:
        self._observer: Any = None
        self._on_observer_changed_callbacks: List[Callable[[Any], None]] = []

    @property
    def observer(self) -> Any:
        return self._observer

    def set_observer(self, observer: Any) -> None:
        """Set the observer on this definition and every definition it owns.

        After the whole subtree received the observer, its ``after_set_observer``
        hook (if any) is called once, with this definition.

        Args:
            observer: DefinitionObserver (or any object exposing some of its
                      capabilities), None to detach
        """
        self._cascade_observer(observer)
        after_set_observer = capability(observer, 'after_set_observer')
        if after_set_observer:
            after_set_observer(self)

    def _cascade_observer(self, observer: Any) -> None:
        self._observer = observer
        self._observer_attached(observer)
        for definition in self._owned_definitions():
            definition._cascade_observer(observer)
        for callback in list(self._on_observer_changed_callbacks):
            try:
                callback(observer)
            except Exception as e:
                logger.warning(f"Error in observer_changed callback: {e}")

    def _observer_attached(self, observer: Any) -> None:
        """Hook for variants that derive state from the observer."""

    def _owned_definitions(self) -> Iterator[Any]:
        return iter(())

    def on_observer_changed(self, callback: Callable[[Any], None]) -> None:
        """Subscribe to observer replacement on this definition."""
        if callback not in self._on_observer_changed_callbacks:
            self._on_observer_changed_callbacks.append(callback)

    def off_observer_changed(self, callback: Callable[[Any], None]) -> None:
        if callback in self._on_observer_changed_callbacks:
            self._on_observer_changed_callbacks.remove(callback)

    def translate(self, value: Any) -> Any:
        """Translate through the observer; pass through unchanged without one."""
        translate = capability(self._observer, 'translate')
        return translate(value) if translate else value


@dataclass(eq=False)
class Hideable:
    hidden: bool = prop('hidden', False)
    hide_if_empty: bool = prop('hideIfEmpty', False)
    hide_if_undefined: bool = prop('hideIfUndefined', False)

    def is_hidden_for(self, data: Optional[Sequence[Any]]) -> bool:
        """Check whether the definition is hidden for the passed data.

        Hidden if flagged hidden, or if any value resolved for its data paths is
        empty (with hideIfEmpty) or undefined (with hideIfUndefined).

        Args:
            data: The **unresolved** data array
        """
        if self.hidden:
            return True
        if not self.data_path:
            return False
        return hides_any(self.resolve_data(data), self.hide_if_empty, self.hide_if_undefined)


@dataclass(eq=False)
class Containerable:
    children: List[Any] = prop('children', default_factory=list, nested=Nested.DEFINITIONS)
    trigger_change_children: Optional[DefinitionEvent] = prop(
        'triggerChangeChildren', None, nested=Nested.VALUE, value_type=DefinitionEvent
    )

    def __post_init__(self):
        super().__post_init__()
        self._adopt_children(self.children)

    def _adopt_children(self, children: Sequence[Any]) -> None:
        # children owned by another container are skipped, children and the
        # sub-definition registry must list the same nodes
        adopted = []
        for child in children:
            if child.parent is not None and child.parent is not self:
                logger.warning(
                    f"Skipping child {child.type_name} {child.ident!r} of {self.type_name} {self.ident!r}: "
                    f"already a child of {child.parent.type_name} {child.parent.ident!r}"
                )
                continue
            child.set_parent(self)
            adopted.append(child)
        self.children = adopted

    def set_children(self, children: Optional[Sequence[Any]]) -> None:
        """Replace the child list; new children are parented and observed."""
        for child in self.children:
            self._unregister_sub_definition(child)
        self._adopt_children(children or [])
        for child in self.children:
            child._cascade_observer(self.observer)
        logger.debug(f"Replaced children of {self.type_name} {self.ident!r}: {len(self.children)} child(ren)")

    def is_hidden_for(self, data: Optional[Sequence[Any]]) -> bool:
        # no caching - children can be replaced at any time
        if super().is_hidden_for(data):
            return True
        return self.hide_if_empty and not any(not child.is_hidden_for(data) for child in self.children)

    def bind_change_children(self, event_service: DefinitionEventService) -> Optional[Callable[[], None]]:
        """Replace children whenever the triggerChangeChildren event fires.

        Returns:
            Unsubscribe function, None if the container declares no such event
        """
        event = self.trigger_change_children
        if event is None or not event.event_id:
            return None
        return event_service.subscribe(event.event_id, self.set_children)


@dataclass(eq=False)
class Validatable:
    # comma-separated for multiple validators
    validator_class: str = prop('validatorClass', '')

    def __post_init__(self):
        super().__post_init__()
        self._validators: List[Callable[[Any], Any]] = []

    @property
    def validators(self) -> List[Callable[[Any], Any]]:
        return list(self._validators)

    def _observer_attached(self, observer: Any) -> None:
        super()._observer_attached(observer)
        get_validator = capability(observer, 'get_validator')
        if get_validator is None:
            self._validators = []
            return
        names = [name.strip() for name in self.validator_class.split(',') if name.strip()]
        self._validators = [v for v in (get_validator(name) for name in names) if v is not None]
