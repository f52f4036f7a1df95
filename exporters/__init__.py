"""Exporters for converting dependency graphs to various output formats."""

from .ascii_exporter import to_ascii
from .json_exporter import to_json, scan_to_json

__all__ = ["to_ascii", "to_json", "scan_to_json"]
