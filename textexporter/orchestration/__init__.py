"""Orchestration components for coordinating a library conversion."""

from .conversion import ConversionPipeline, convert

__all__ = ["ConversionPipeline", "convert"]
