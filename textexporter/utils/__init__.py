"""Shared utility modules for the textexporter project."""

from .file_loader import FileInfo, compile_descriptor_pattern, find_matching_files, select_newest

__all__ = [
    "FileInfo",
    "compile_descriptor_pattern",
    "find_matching_files",
    "select_newest",
]
