"""Convert text-expansion snippet libraries between vendor formats."""

from .config import ConverterSettings
from .errors import (
    GroupNotFoundError,
    MalformedSourceError,
    SourceNotFoundError,
    TargetUnwritableError,
    TextExporterError,
    UnknownCodeError,
)
from .orchestration import ConversionPipeline, convert
from .readers import TextExpanderReader, get_reader
from .snippet import Group, Index, Snippet
from .writers import AutoKeyWriter, get_writer

__all__ = [
    "AutoKeyWriter",
    "ConversionPipeline",
    "ConverterSettings",
    "Group",
    "GroupNotFoundError",
    "Index",
    "MalformedSourceError",
    "Snippet",
    "SourceNotFoundError",
    "TargetUnwritableError",
    "TextExpanderReader",
    "TextExporterError",
    "UnknownCodeError",
    "convert",
    "get_reader",
    "get_writer",
]
