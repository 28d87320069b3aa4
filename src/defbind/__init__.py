"""
Definition resolution and data-binding engine.

Resolves server-sent UI definition trees against a data array: every
definition carries comma separated data paths, is normalized against its
parent's path, and resolves, writes back and prunes data through them.

Key Features:
- Path normalization (relative paths inherit the parent's first path)
- Resolution and write-back with blank-insensitive dirty tracking
- Leaf and container visibility rules (hidden / hideIfEmpty / hideIfUndefined)
- Observer capability injection cascaded over the whole tree
- Resolution bundles: pruned, encodable snapshots for re-entering workflows
- Non-fatal diagnostics for bad paths and missing capabilities

Quick Start:
    >>> from defbind import decode_definition, decode_data, DefinitionObserver
    >>>
    >>> form = decode_definition(form_json)
    >>> form.set_observer(DefinitionObserver(translate=i18n.get))
    >>> data = decode_data(data_json)
    >>>
    >>> for child in form.children:
    ...     if not child.is_hidden_for(data):
    ...         print(child.label, child.resolve_text(data))

Architecture:
    Definition tree (owning, parent back-references)
        -> normalized paths -> resolver -> data array (borrowed)
        -> observer (shared capability object)

Modules:
    - paths: Path expression normalization
    - resolver: Resolution, write-back and pruning against the data array
    - visibility: Empty / undefined predicates
    - definition: Base definition node, shown definitions, workflows
    - kinds: Concrete leaf and container variants
    - traits: Observable / Hideable / Containerable / Validatable mixins
    - bundle: Resolution bundles
    - codec: Wire codec and kind registry
    - config: Engine configuration with scoped overrides
    - diagnostics: Non-fatal diagnostics fan-out
"""

# Configuration
from defbind.config import (
    EngineConfig,
    get_engine_config,
    set_engine_config,
    reset_engine_config,
    engine_config_context,
)

# Diagnostics
from defbind.diagnostics import Diagnostic, DiagnosticKind, DiagnosticRegistry

# Data
from defbind.data_object import DataObject, DataObjectLike, ResolvedHead, decode_data

# Paths
from defbind.paths import (
    NULL_PATH,
    SKIP_PATH,
    AbsolutePath,
    normalize_data_path,
    parse_absolute_path,
)

# Resolver
from defbind.resolver import resolve_data, resolve_first, resolve_assign_path, prune_data

# Visibility
from defbind.visibility import is_empty, is_undefined, hides_any

# Observer
from defbind.observer import (
    DefinitionObserver,
    CloseDefinitionData,
    ComponentDefinitionData,
    capability,
    settle,
)

# Codec
from defbind.codec import (
    DefinitionKind,
    Nested,
    decode_definition,
    encode_definition,
    get_definition_class,
    registered_definition_classes,
)

# Values and events
from defbind.values import RuntimeContext, ColumnDefinition, OptionItem
from defbind.events import DefinitionEvent, DefinitionEventService

# Bundles
from defbind.bundle import DefinitionBundle, EncodableDefinitionBundle

# Definitions
from defbind.definition import (
    Definition,
    BaseDefinition,
    DefinitionWorkflow,
    register_validator_collector,
)

# Variants (importing registers them with the codec)
from defbind.kinds import (
    ItemDefinition,
    TextItemDefinition,
    DefinitionListEntryDefinition,
    InputDefinition,
    TextInputDefinition,
    TextAreaDefinition,
    PossibleValuesDefinition,
    DropdownDefinition,
    CheckboxDefinition,
    ButtonDefinition,
    OpenDetailsButtonDefinition,
    StartOrderButtonDefinition,
    ComponentBinding,
    ComponentDefinition,
    ContainerDefinition,
    FormDefinition,
    DefinitionListDefinition,
    PanelBoxDefinition,
    FormPanelDefinition,
    TablePanelDefinition,
    PredefinedTablePanelDefinition,
    TreePanelDefinition,
)

__all__ = [
    # Configuration
    'EngineConfig',
    'get_engine_config',
    'set_engine_config',
    'reset_engine_config',
    'engine_config_context',
    # Diagnostics
    'Diagnostic',
    'DiagnosticKind',
    'DiagnosticRegistry',
    # Data
    'DataObject',
    'DataObjectLike',
    'ResolvedHead',
    'decode_data',
    # Paths
    'NULL_PATH',
    'SKIP_PATH',
    'AbsolutePath',
    'normalize_data_path',
    'parse_absolute_path',
    # Resolver
    'resolve_data',
    'resolve_first',
    'resolve_assign_path',
    'prune_data',
    # Visibility
    'is_empty',
    'is_undefined',
    'hides_any',
    # Observer
    'DefinitionObserver',
    'CloseDefinitionData',
    'ComponentDefinitionData',
    'capability',
    'settle',
    # Codec
    'DefinitionKind',
    'Nested',
    'decode_definition',
    'encode_definition',
    'get_definition_class',
    'registered_definition_classes',
    # Values and events
    'RuntimeContext',
    'ColumnDefinition',
    'OptionItem',
    'DefinitionEvent',
    'DefinitionEventService',
    # Bundles
    'DefinitionBundle',
    'EncodableDefinitionBundle',
    # Definitions
    'Definition',
    'BaseDefinition',
    'DefinitionWorkflow',
    'register_validator_collector',
    # Variants
    'ItemDefinition',
    'TextItemDefinition',
    'DefinitionListEntryDefinition',
    'InputDefinition',
    'TextInputDefinition',
    'TextAreaDefinition',
    'PossibleValuesDefinition',
    'DropdownDefinition',
    'CheckboxDefinition',
    'ButtonDefinition',
    'OpenDetailsButtonDefinition',
    'StartOrderButtonDefinition',
    'ComponentBinding',
    'ComponentDefinition',
    'ContainerDefinition',
    'FormDefinition',
    'DefinitionListDefinition',
    'PanelBoxDefinition',
    'FormPanelDefinition',
    'TablePanelDefinition',
    'PredefinedTablePanelDefinition',
    'TreePanelDefinition',
]

__version__ = '1.0.0'
