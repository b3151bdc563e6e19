"""
Layer 2: Exposed-function catalog

Selects exported Go functions with command-invocable signatures and extracts
their parameters and documentation.
"""

from catalog.models import (
    ExposedFunction,
    Other,
    Parameter,
    PointerTo,
    Primitive,
    TypeShape,
    classify_shape,
)
from catalog.filter import error_or_void, exported_funcs, select_candidates
from catalog.extractor import (
    combine_comments,
    extract_catalog,
    extract_catalog_to_dict_list,
    extract_functions,
)

__all__ = [
    # Data models
    "ExposedFunction",
    "Parameter",
    "Primitive",
    "PointerTo",
    "Other",
    "TypeShape",
    "classify_shape",
    # Declaration filter
    "exported_funcs",
    "error_or_void",
    "select_candidates",
    # Metadata extraction
    "combine_comments",
    "extract_functions",
    # High-level orchestration
    "extract_catalog",
    "extract_catalog_to_dict_list",
]
