import logging
import time
from pathlib import Path
from typing import Dict, List, Optional, Union

from tqdm import tqdm

from ..config import ConverterSettings
from ..exception_handler import ErrorHandler
from ..protocols import Reader, WriteStats, Writer
from ..readers import get_reader
from ..writers import get_writer


logger = logging.getLogger("textexporter")


class ConversionPipeline:
    """Read a snippet library in one vendor's format and write it in another's."""

    def __init__(
        self,
        reader: Reader,
        writer: Writer,
        *,
        error_handler: Optional[ErrorHandler] = None,
        show_progress: bool = True,
    ) -> None:
        self.reader = reader
        self.writer = writer
        self.error_handler = error_handler or ErrorHandler()
        self.show_progress = show_progress
        self.errors: List[str] = []
        self._last_run_stats: Optional[Dict[str, Union[int, float]]] = None

    @classmethod
    def from_settings(cls, settings: ConverterSettings, *, show_progress: bool = True) -> "ConversionPipeline":
        """Build the reader and writer named by ``settings``."""
        error_handler = ErrorHandler()
        reader = get_reader(
            settings.source_format,
            strict=settings.strict,
            error_handler=error_handler,
        )
        writer = get_writer(settings.target_format, send_mode=settings.send_mode)
        return cls(reader, writer, error_handler=error_handler, show_progress=show_progress)

    def run(self, source: Union[str, Path], target: Union[str, Path]) -> WriteStats:
        """Convert the library at ``source`` into ``target``."""
        start_time = time.time()
        self.error_handler.clear_errors()
        self.errors = []

        logger.info(
            "Converting %s library %s -> %s library %s",
            self.reader.source_format,
            source,
            self.writer.target_format,
            target,
        )
        index = self.reader.read(source)

        pbar = tqdm(
            total=len(index.groups),
            desc="Writing groups",
            unit="group",
            disable=not self.show_progress,
            leave=False,
        )

        def on_group_complete(title: str, written: int, position: int, total: int) -> None:
            pbar.update(1)
            pbar.set_postfix(group=title[:30], refresh=False)

        try:
            stats = self.writer.write(target, index, on_group_complete=on_group_complete)
        finally:
            pbar.close()

        for failure in self.error_handler.get_error_summary()["failed_groups"]:
            location = failure["group"]
            if failure["snippet_uuid"]:
                location = f"{location} (snippet {failure['snippet_uuid']})"
            self.errors.append(f"{location}: {failure['error']}")

        duration = time.time() - start_time
        self._last_run_stats = {
            "groups": stats.groups,
            "written": stats.written,
            "skipped": stats.skipped,
            "wrapped": stats.wrapped,
            "failed_groups": len(self.errors),
            "duration": duration,
        }
        if self.errors:
            logger.warning("%d groups were skipped while reading %s", len(self.errors), source)

        return stats

    @property
    def last_run_stats(self) -> Optional[Dict[str, Union[int, float]]]:
        """Return summary statistics for the last pipeline run."""
        return self._last_run_stats


def convert(
    source: Union[str, Path],
    target: Union[str, Path],
    settings: Optional[ConverterSettings] = None,
) -> WriteStats:
    """Convenience helper to run a conversion with the given (or default) settings."""
    pipeline = ConversionPipeline.from_settings(settings or ConverterSettings(), show_progress=False)
    return pipeline.run(source, target)
