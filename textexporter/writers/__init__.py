"""Target format writers for textexporter."""

from typing import Callable, Dict, List

from ..protocols import Writer
from .autokey import AutoKeyWriter

WriterFactory = Callable[..., Writer]

# Registry of available writers, keyed by target format name
_WRITERS: Dict[str, WriterFactory] = {
    AutoKeyWriter.target_format: AutoKeyWriter,
}


def get_writer(target_format: str, *, send_mode: str = "compat") -> Writer:
    """Build a writer for the given target format.

    Raises:
        KeyError: If no writer is registered under that name
    """
    try:
        factory = _WRITERS[target_format]
    except KeyError:
        raise KeyError(
            f"Unknown target format: {target_format} (available: {', '.join(available_writers())})"
        ) from None
    return factory(send_mode=send_mode)


def register_writer(target_format: str, factory: WriterFactory) -> None:
    """Register a custom writer (for plugins/extensions)."""
    _WRITERS[target_format] = factory


def available_writers() -> List[str]:
    return sorted(_WRITERS)


__all__ = [
    "AutoKeyWriter",
    "available_writers",
    "get_writer",
    "register_writer",
]
