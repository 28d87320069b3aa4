"""
Definition: a node of the resolution tree.

A definition pairs one piece of UI/behavior with a data path. The tree is
decoded from the server (or built directly), parented (paths normalized),
given an observer, and then resolved repeatedly against whatever data array
the surrounding UI supplies.

Lifecycle (documented contract, not enforced):
    CREATED -> PARENTED -> OBSERVED -> RESOLVED <-> EDITED -> CLOSED

Core attributes:
- data_path: raw comma separated path list as sent by the server
- _normalized_paths: absolute paths derived from data_path + parent's first path
- _parent: non-owning back-reference, set once
- _sub_definitions: owned definitions, registered by set_parent()
- _dirty: own edit flag (aggregated on read, never stored aggregated)
- _observer: shared, non-owned capability object
- _resolution_bundle: bundle this definition was produced from, if any

Everything else is derived.
"""
from dataclasses import field
import logging
from typing import Any, Callable, ClassVar, Dict, Iterator, List, Optional, Sequence

from defbind import resolver
from defbind.bundle import DefinitionBundle, EncodableDefinitionBundle
from defbind.codec import DefinitionKind, Nested, definition_class, encode_definition, prop
from defbind.diagnostics import DiagnosticKind, DiagnosticRegistry
from defbind.observer import capability, settle
from defbind.paths import normalize_data_path
from defbind.traits import Hideable, Observable
from defbind.values import RuntimeContext

logger = logging.getLogger(__name__)

# Kind -> function collecting the validators in scope of a definition
_validator_collectors: Dict[DefinitionKind, Callable[['Definition'], List[Any]]] = {}


def register_validator_collector(*kinds: DefinitionKind):
    """Register the validator collection function for one or more kinds."""
    def decorator(func: Callable[['Definition'], List[Any]]):
        for kind in kinds:
            _validator_collectors[kind] = func
        return func
    return decorator


@definition_class('Definition', DefinitionKind.DEFINITION)
class Definition(Observable):
    """Base node: data paths, tree links, dirty state, observer and bundle."""

    kind: ClassVar[DefinitionKind]
    type_name: ClassVar[str]

    # Comma separated list with data paths (relative or absolute).
    # Don't use to access data, use the resolve methods.
    data_path: str = prop('dataPath', '')
    ident: str = field(default='', repr=False)

    def __post_init__(self):
        self._parent: Optional['Definition'] = None
        self._sub_definitions: List['Definition'] = []
        self._normalized_paths: List[str] = []
        self._dirty = False
        self._resolution_bundle: Optional[EncodableDefinitionBundle] = None
        self._init_observable()
        self._normalize_paths()

    # ==================== TREE ====================

    @property
    def parent(self) -> Optional['Definition']:
        return self._parent

    @property
    def sub_definitions(self) -> List['Definition']:
        """Owned definitions registered via set_parent(), in registration order."""
        return list(self._sub_definitions)

    def set_parent(self, parent: 'Definition') -> None:
        """Attach this definition to its parent and normalize its paths.

        For the current parent this only re-registers. The parent is immutable once set:
        re-parenting is rejected with a warning.
        """
        if self._parent is parent:
            parent._register_sub_definition(self)
            return
        if self._parent is not None:
            logger.warning(
                f"Ignoring re-parenting of {self.type_name} {self.ident!r}: "
                f"already a child of {self._parent.type_name} {self._parent.ident!r}"
            )
            return
        self._parent = parent
        parent._register_sub_definition(self)
        self._normalize_paths()
        logger.debug(f"Parented {self.type_name} {self.ident!r} -> paths={self._normalized_paths}")

    def _register_sub_definition(self, definition: 'Definition') -> None:
        if not any(sub is definition for sub in self._sub_definitions):
            self._sub_definitions.append(definition)

    def _unregister_sub_definition(self, definition: 'Definition') -> None:
        self._sub_definitions = [sub for sub in self._sub_definitions if sub is not definition]

    def _owned_definitions(self) -> Iterator['Definition']:
        return iter(self._sub_definitions)

    def walk(self) -> Iterator['Definition']:
        """Yield this definition and every definition it owns, depth first."""
        yield self
        for definition in self._owned_definitions():
            yield from definition.walk()

    # ==================== PATHS ====================

    def set_data_path(self, data_path: str) -> None:
        self.data_path = data_path
        self._normalize_paths()

    def _normalize_paths(self) -> None:
        parent_path = self._parent.first_path if self._parent is not None else None
        self._normalized_paths = normalize_data_path(self.data_path, parent_path)
        # descendants inherit from the first path
        for definition in self._sub_definitions:
            definition._normalize_paths()

    @property
    def normalized_paths(self) -> List[str]:
        """All absolute paths. Each starts with ``%``; empty for an empty data path."""
        return list(self._normalized_paths)

    @property
    def first_path(self) -> str:
        """First absolute path, or '' if there is none."""
        return self._normalized_paths[0] if self._normalized_paths else ''

    # ==================== RESOLUTION ====================

    def resolve_data(self, data: Optional[Sequence[Any]]) -> List[Any]:
        """Resolve one value per data path.

        Args:
            data: Data array to resolve the data paths against

        Returns:
            Resolved values in path order (all the data for an empty data path)
        """
        return resolver.resolve_data(self._normalized_paths, data, self.ident)

    def resolve_data_for_first_path(self, data: Optional[Sequence[Any]]) -> Any:
        """Resolve the first data path; None if nothing resolves."""
        return resolver.resolve_first(self._normalized_paths, data, self.ident)

    def resolve_assign_data(self, data: Optional[Sequence[Any]], value: Any) -> bool:
        """Write a value back along the (single) data path and mark the definition dirty.

        Changes between None and '' are not considered changes, so blank UI
        round trips never set the dirty flag.

        Returns:
            True if the value was written
        """
        if resolver.resolve_assign_path(self._normalized_paths, data, value, self.ident):
            self.set_data_changed()
            return True
        return False

    def prune_data(self, data: Optional[Sequence[Any]]) -> List[Any]:
        """Clone the data, keeping only what this definition's paths need."""
        return resolver.prune_data(self._normalized_paths, data)

    # ==================== DIRTY TRACKING ====================

    @property
    def dirty(self) -> bool:
        """Own edit flag only; see has_data_changes() for the aggregate."""
        return self._dirty

    def set_data_changed(self) -> None:
        self._dirty = True

    def has_data_changes(self) -> bool:
        """True if this definition or any owned definition has been edited."""
        return self._dirty or any(definition.has_data_changes() for definition in self._sub_definitions)

    def clear_data_change_state(self) -> None:
        """Discard edit state of the whole subtree (e.g. on forced close)."""
        self._dirty = False
        for definition in self._sub_definitions:
            definition.clear_data_change_state()

    # ==================== VISIBILITY ====================

    def is_hidden_for(self, data: Optional[Sequence[Any]]) -> bool:
        """Without visibility flags a definition is never hidden."""
        return False

    # ==================== SCOPE LOOKUPS ====================

    def get_table_data_source(self) -> Any:
        """Data source of the nearest table in scope, None if there is none."""
        return self._parent.get_table_data_source() if self._parent is not None else None

    def get_validators(self) -> List[Any]:
        """All validators in scope of this definition."""
        collector = _validator_collectors.get(self.kind)
        return collector(self) if collector else []

    # ==================== REMOTE RESOLUTION / BUNDLES ====================

    async def resolve_definition(self, data: Optional[Sequence[Any]]) -> Optional[DefinitionBundle]:
        """Resolve to the definition that shall be shown. None for the plain base."""
        return None

    @property
    def resolution_bundle(self) -> Optional[EncodableDefinitionBundle]:
        return self._resolution_bundle

    def set_resolution_bundle(self, bundle: Optional[EncodableDefinitionBundle]) -> None:
        self._resolution_bundle = bundle

    def get_resolution_bundle(self) -> Optional[EncodableDefinitionBundle]:
        """Bundle this definition was generated from, usually by a definition workflow.

        If not this definition but an ancestor was created from a bundle, a copy
        of the ancestor's bundle is returned, constrained to this definition's ident.

        Returns:
            The bundle, or None if neither this definition nor an ancestor owns one
        """
        definition: Optional[Definition] = self
        while definition is not None and definition._resolution_bundle is None:
            definition = definition._parent
        if definition is None:
            return None
        if definition is self:
            return self._resolution_bundle
        owner_bundle = definition._resolution_bundle
        return EncodableDefinitionBundle(owner_bundle.definition, owner_bundle.data, constraint_id=self.ident)

    def encode(self) -> Dict[str, Any]:
        return encode_definition(self)


@definition_class('BaseDefinition', DefinitionKind.BASE)
class BaseDefinition(Hideable, Definition):
    """Definition that is shown: label, visibility flags, style."""
    label: str = prop('label', '')
    disabled: bool = prop('disabled', False)
    style: str = prop('style', '')

    async def resolve_definition(self, data: Optional[Sequence[Any]]) -> Optional[DefinitionBundle]:
        """A shown definition resolves to itself."""
        return DefinitionBundle(definition=self, data=list(data or []))


@definition_class('DefinitionWorkflow', DefinitionKind.WORKFLOW)
class DefinitionWorkflow(Definition):
    """Reference to a remote workflow that produces the definition to show."""
    rtc: Optional[RuntimeContext] = prop('$rTC', None, nested=Nested.VALUE, value_type=RuntimeContext)
    workflow_fqn: str = prop('$fQN', '')

    async def resolve_definition(self, data: Optional[Sequence[Any]]) -> Optional[DefinitionBundle]:
        """Let the observer run the workflow and remember how it was resolved.

        The resolved definition receives a bundle holding this workflow and the
        data pruned to what this workflow's data paths need.

        Returns:
            The observer's bundle, or None if the observer cannot resolve workflows
        """
        resolve = capability(self.observer, 'resolve_definition')
        if resolve is None:
            DiagnosticRegistry.emit(
                DiagnosticKind.CAPABILITY_MISSING,
                "DefinitionWorkflow: Cannot resolve workflow because the observer function is not defined.",
                definition_ident=self.ident,
                level=logging.ERROR,
            )
            return None

        rtc = self.rtc
        if rtc is None:
            get_default_rtc = capability(self.observer, 'get_default_rtc')
            rtc = get_default_rtc() if get_default_rtc else None

        bundle = await settle(resolve(rtc, self.workflow_fqn, self.resolve_data(data)))
        if bundle is not None and bundle.definition is not None:
            pruned = self.prune_data(data)
            bundle.definition.set_resolution_bundle(EncodableDefinitionBundle(self, pruned))
            logger.debug(f"Captured resolution bundle for {self.workflow_fqn!r} ({len(pruned)} data element(s))")
        return bundle
