"""
Non-fatal diagnostics raised while resolving definitions.

The engine never raises for bad paths, missing observer capabilities or
impossible write-backs. It reports them here instead: every diagnostic is
logged and handed to the registered callbacks (e.g. a UI status bar or a test
recorder), and the tree stays renderable.
"""
from dataclasses import dataclass
from enum import Enum
import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class DiagnosticKind(Enum):
    """Taxonomy of recoverable resolution problems."""
    PATH_RESOLUTION_WARNING = "path_resolution_warning"
    CAPABILITY_MISSING = "capability_missing"
    ASSIGNMENT_MISMATCH = "assignment_mismatch"


@dataclass(frozen=True)
class Diagnostic:
    """Immutable record of one recoverable problem.

    No object references - the offending definition is referenced by ident only.
    """
    kind: DiagnosticKind
    message: str
    path: Optional[str] = None
    definition_ident: Optional[str] = None


class DiagnosticRegistry:
    """Class-level fan-out point for diagnostics.

    Thread safety: Not thread-safe (all operations expected on the UI thread).
    """
    _callbacks: List[Callable[[Diagnostic], None]] = []

    @classmethod
    def add_callback(cls, callback: Callable[[Diagnostic], None]) -> None:
        """Subscribe to diagnostics."""
        if callback not in cls._callbacks:
            cls._callbacks.append(callback)

    @classmethod
    def remove_callback(cls, callback: Callable[[Diagnostic], None]) -> None:
        """Unsubscribe from diagnostics."""
        if callback in cls._callbacks:
            cls._callbacks.remove(callback)

    @classmethod
    def clear_callbacks(cls) -> None:
        cls._callbacks.clear()

    @classmethod
    def emit(
        cls,
        kind: DiagnosticKind,
        message: str,
        path: Optional[str] = None,
        definition_ident: Optional[str] = None,
        level: int = logging.WARNING,
    ) -> Diagnostic:
        """Log a diagnostic and fire all callbacks (best-effort).

        Args:
            kind: Diagnostic category
            message: Human readable description
            path: Data path involved, if any
            definition_ident: Ident of the definition that hit the problem
            level: Logging level (ERROR for missing state-altering capabilities)

        Returns:
            The emitted Diagnostic
        """
        diagnostic = Diagnostic(kind=kind, message=message, path=path, definition_ident=definition_ident)
        logger.log(level, message)
        for callback in list(cls._callbacks):
            try:
                callback(diagnostic)
            except Exception as e:
                logger.warning(f"Error in diagnostic callback: {e}")
        return diagnostic
