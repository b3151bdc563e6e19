"""
Metadata extraction and the catalog entry point.

This module turns the declarations picked by the filter into ExposedFunction
records, and provides ``extract_catalog`` which runs the whole pipeline
(load, type check, select, extract) for one package directory.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from catalog.filter import select_candidates
from catalog.models import ExposedFunction, Other, Parameter, PointerTo, classify_shape
from core.catalog_config import CatalogConfig, UNSAFE_POLICY_SKIP, UNSAFE_POLICY_TRUNCATE
from core.structured_logging import package_scope, phase_scope
from goparse.comments import CommentIndex
from goparse.loader import load_package
from goparse.syntax import CommentGroup, FuncDecl
from goparse.typecheck import BasicKind, TypeInfo, check_package

logger = logging.getLogger(__name__)


def combine_comments(groups: Iterable[CommentGroup]) -> str:
    """Join the rendered text of comment groups with single spaces."""
    return " ".join(group.text() for group in groups)


def _extract_function(
    fn: FuncDecl,
    info: TypeInfo,
    comments: CommentIndex,
    unsafe_policy: str,
) -> ExposedFunction:
    params: List[Parameter] = []

    for field in fn.params.fields:
        shape = classify_shape(info.type_of(field.type))
        if isinstance(shape, Other):
            continue

        pointer = isinstance(shape, PointerTo)
        primitive = shape.target if isinstance(shape, PointerTo) else shape

        if primitive.kind == BasicKind.UNSAFE_POINTER:
            logger.warning(
                "Can't create command for function %r because its parameter %r is an unsafe.Pointer.",
                fn.name.name,
                field.names[0].name if field.names else field.type.text,
            )
            if unsafe_policy == UNSAFE_POLICY_SKIP:
                continue
            break

        field_comment = combine_comments(comments.comments_for(field))
        # handle a, b, c int
        for ident in field.names:
            name_comment = combine_comments(comments.comments_for(ident))
            params.append(
                Parameter(
                    name=ident.name,
                    primitive_kind=primitive.kind,
                    is_pointer=pointer,
                    documentation=name_comment or field_comment,
                )
            )

    return ExposedFunction(
        name=fn.name.name,
        parameters=tuple(params),
        # only void or single-error functions get here, so any result is the error
        signals_failure=bool(fn.result_fields()),
        documentation=combine_comments(comments.comments_for(fn)),
    )


def extract_functions(
    candidates: Iterable[FuncDecl],
    info: TypeInfo,
    comments: CommentIndex,
    unsafe_policy: str = UNSAFE_POLICY_TRUNCATE,
) -> List[ExposedFunction]:
    """Extract catalog entries for already-selected declarations.

    Parameters whose type is neither primitive nor pointer to primitive are
    dropped. An ``unsafe.Pointer`` parameter is reported and, under the
    ``truncate`` policy, ends parameter extraction for that function; under
    ``skip`` only that parameter group is dropped.

    Args:
        candidates: Declarations returned by the filter.
        info: Resolved signature types.
        comments: Comment associations of the unit.
        unsafe_policy: ``truncate`` or ``skip``.

    Returns:
        One ExposedFunction per candidate, same order.

    Raises:
        ValueError: If ``unsafe_policy`` is unknown.
        KeyError: If a parameter type was never resolved.
    """
    if unsafe_policy not in (UNSAFE_POLICY_TRUNCATE, UNSAFE_POLICY_SKIP):
        raise ValueError(f"Unknown unsafe pointer policy: {unsafe_policy!r}")
    return [_extract_function(fn, info, comments, unsafe_policy) for fn in candidates]


def extract_catalog(
    directory: str,
    config: Optional[CatalogConfig] = None,
) -> List[ExposedFunction]:
    """Extract the exposed-function catalog of the Go package in a directory.

    Args:
        directory: Package directory.
        config: Extraction settings; defaults apply when omitted.

    Returns:
        Catalog entries in declaration order (files sorted by name).

    Raises:
        FileNotFoundError: If the directory does not exist.
        PackageNotFoundError: If the directory has no non-test package.
        AmbiguousPackageError: If it has more than one.
        GoSyntaxError: If a file fails to parse.
        TypeCheckError: If a signature type cannot be resolved.

    Example:
        >>> catalog = extract_catalog("catalog/tests/fixtures/mathpkg")
        >>> [fn.name for fn in catalog]
        ['Add', 'Scale', 'Peek', 'Greet']
    """
    config = config or CatalogConfig()

    with package_scope(directory):
        with phase_scope("load"):
            unit = load_package(directory)
        with phase_scope("typecheck"):
            info = check_package(unit)
        with phase_scope("select"):
            candidates = select_candidates(unit, info, config.failure_type_name)
        with phase_scope("extract"):
            functions = extract_functions(
                candidates,
                info,
                unit.comments,
                unsafe_policy=config.unsafe_pointer_policy,
            )

    logger.info("Extracted %d functions from %s", len(functions), directory)
    return functions


def extract_catalog_to_dict_list(
    directory: str,
    config: Optional[CatalogConfig] = None,
) -> List[Dict[str, Any]]:
    """Extract the catalog and return it as a list of dictionaries."""
    return [fn.to_dict() for fn in extract_catalog(directory, config)]
