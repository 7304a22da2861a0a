"""
rancli CLI module.

Provides filter query compilation and CLI utilities.
"""

from rancli.cli.filter_parser import (
    Filter,
    Filters,
    ObjectType,
    compile_filters,
    compile_kind_filters,
    compile_label_filters,
)

__all__ = [
    "Filter",
    "Filters",
    "ObjectType",
    "compile_filters",
    "compile_kind_filters",
    "compile_label_filters",
]
