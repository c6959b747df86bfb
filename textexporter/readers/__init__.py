"""Source format readers for textexporter."""

from typing import Callable, Dict, List, Optional

from ..exception_handler import ErrorHandler
from ..protocols import Reader
from .textexpander import TextExpanderReader

ReaderFactory = Callable[..., Reader]

# Registry of available readers, keyed by source format name
_READERS: Dict[str, ReaderFactory] = {
    TextExpanderReader.source_format: TextExpanderReader,
}


def get_reader(
    source_format: str,
    *,
    strict: bool = True,
    error_handler: Optional[ErrorHandler] = None,
) -> Reader:
    """Build a reader for the given source format.

    Args:
        source_format: Registered format name (e.g., 'textexpander')
        strict: Abort on the first failing group instead of skipping it
        error_handler: Collector for groups skipped in lenient mode

    Raises:
        KeyError: If no reader is registered under that name
    """
    try:
        factory = _READERS[source_format]
    except KeyError:
        raise KeyError(
            f"Unknown source format: {source_format} (available: {', '.join(available_readers())})"
        ) from None
    return factory(strict=strict, error_handler=error_handler)


def register_reader(source_format: str, factory: ReaderFactory) -> None:
    """Register a custom reader (for plugins/extensions)."""
    _READERS[source_format] = factory


def available_readers() -> List[str]:
    return sorted(_READERS)


__all__ = [
    "TextExpanderReader",
    "available_readers",
    "get_reader",
    "register_reader",
]
