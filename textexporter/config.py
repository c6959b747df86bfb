from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("textexporter")

SOURCE_FORMATS = ("textexpander",)
TARGET_FORMATS = ("autokey",)
SEND_MODE_POLICIES = ("compat", "distinct")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(slots=True)
class ConverterSettings:
    """Runtime configuration for a conversion run."""

    source_format: str = "textexpander"
    target_format: str = "autokey"
    strict: bool = True
    # "compat" sends every snippet with a paste; "distinct" types keyboard snippets.
    send_mode: str = "compat"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ConverterSettings":
        def _bool_env(name: str, default: bool) -> bool:
            raw = os.getenv(name)
            if not raw:
                return default
            value = raw.strip().lower()
            if value in {"1", "true", "yes", "on"}:
                return True
            if value in {"0", "false", "no", "off"}:
                return False
            logger.warning("Invalid boolean for %s: %s", name, raw)
            return default

        def _choice_env(name: str, choices: tuple[str, ...], default: str) -> str:
            raw = os.getenv(name)
            if not raw:
                return default
            for choice in choices:
                if raw.strip().lower() == choice.lower():
                    return choice
            logger.warning("Invalid value for %s: %s (expected one of %s)", name, raw, ", ".join(choices))
            return default

        defaults = cls()
        return cls(
            source_format=_choice_env("TEXTEXPORTER_SOURCE_FORMAT", SOURCE_FORMATS, defaults.source_format),
            target_format=_choice_env("TEXTEXPORTER_TARGET_FORMAT", TARGET_FORMATS, defaults.target_format),
            strict=_bool_env("TEXTEXPORTER_STRICT", defaults.strict),
            send_mode=_choice_env("TEXTEXPORTER_SEND_MODE", SEND_MODE_POLICIES, defaults.send_mode),
            log_level=_choice_env(
                "TEXTEXPORTER_LOG_LEVEL",
                LOG_LEVELS,
                defaults.log_level,
            ),
        )


__all__ = ["ConverterSettings", "LOG_LEVELS", "SEND_MODE_POLICIES", "SOURCE_FORMATS", "TARGET_FORMATS"]
