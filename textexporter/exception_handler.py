import logging
import traceback
from typing import Any, Dict, List, Optional

from .errors import TextExporterError


class ErrorHandler:
    """Collects conversion failures so a lenient run can report what it skipped."""

    def __init__(self, logger_name: str = "textexporter"):
        self.logger = logging.getLogger(logger_name)
        self.errors: List[Dict[str, Any]] = []

    @staticmethod
    def setup_logging(level: str = "INFO", logger_name: str = "textexporter") -> logging.Logger:
        """Configure structured logging for command-line runs."""
        logger = logging.getLogger(logger_name)
        logger.setLevel(getattr(logging, level.upper()))

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def handle_error(self, error: Exception, context: Dict[str, Any]) -> Dict[str, Any]:
        """Process and log error with context information."""
        error_info = {
            "type": type(error).__name__,
            "message": str(error),
            "context": context,
            "traceback": traceback.format_exc() if self.logger.isEnabledFor(logging.DEBUG) else None
        }

        self.logger.error(
            f"{error_info['type']}: {error_info['message']} | Context: {context}"
        )

        self.errors.append(error_info)

        return error_info

    def collect_group_error(
        self,
        error: Exception,
        group_uuid: Optional[str],
        group_title: Optional[str],
        stage: str,
    ) -> Dict[str, Any]:
        """Collect a failure that caused a whole group to be skipped."""
        snippet_uuid = error.snippet_uuid if isinstance(error, TextExporterError) else None
        context = {
            "group_uuid": group_uuid,
            "group_title": group_title,
            "snippet_uuid": snippet_uuid,
            "stage": stage,
        }
        return self.handle_error(error, context)

    def get_error_summary(self) -> Dict[str, Any]:
        """Generate summary of all collected errors."""
        if not self.errors:
            return {"total_errors": 0, "error_types": {}, "failed_groups": []}

        error_types: Dict[str, int] = {}
        failed_groups = []

        for error in self.errors:
            error_type = error["type"]
            error_types[error_type] = error_types.get(error_type, 0) + 1

            context = error.get("context", {})
            failed_groups.append({
                "group": context.get("group_title") or context.get("group_uuid") or "unknown",
                "group_uuid": context.get("group_uuid"),
                "snippet_uuid": context.get("snippet_uuid"),
                "error": error["message"],
                "stage": context.get("stage", "unknown"),
            })

        return {
            "total_errors": len(self.errors),
            "error_types": error_types,
            "failed_groups": failed_groups,
        }

    def clear_errors(self) -> None:
        """Clear collected errors."""
        self.errors.clear()

    def format_error_report(self) -> str:
        """Format user-friendly error report."""
        summary = self.get_error_summary()

        if summary["total_errors"] == 0:
            return ""

        lines = [
            f"\n⚠️  Error Summary: {summary['total_errors']} groups skipped",
            ""
        ]

        if summary["error_types"]:
            lines.append("Error Types:")
            for error_type, count in summary["error_types"].items():
                lines.append(f"  • {error_type}: {count}")
            lines.append("")

        lines.append("Skipped Groups:")
        for failure in summary["failed_groups"][:5]:
            location = failure["group"]
            if failure["snippet_uuid"]:
                location = f"{location} (snippet {failure['snippet_uuid']})"
            lines.append(f"  • {location}: {failure['error']}")

        if len(summary["failed_groups"]) > 5:
            lines.append(f"  ... and {len(summary['failed_groups']) - 5} more")

        return "\n".join(lines)
