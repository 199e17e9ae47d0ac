"""
policywright Policy - Compile, render and hydrate ABAC policy documents
"""

from .compiler import PolicyCompiler, PolicyCompilationError, IncompleteSelectionError
from .renderer import PolicyRenderer, join_list, format_value
from .hydrator import PolicyHydrator
from .loader import (
    PolicyLoadError,
    load_catalog,
    load_document,
    load_references,
    load_selection,
)

__all__ = [
    "PolicyCompiler",
    "PolicyCompilationError",
    "IncompleteSelectionError",
    "PolicyRenderer",
    "join_list",
    "format_value",
    "PolicyHydrator",
    "PolicyLoadError",
    "load_catalog",
    "load_document",
    "load_references",
    "load_selection",
]
