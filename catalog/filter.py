"""
Declaration filter: pick the functions that can be exposed as commands.

Two passes over the merged unit's declarations, both pure:
visibility/shape first, then return shape.
"""

import logging
from typing import Iterable, List

from goparse.config import ERROR_TYPE_NAME
from goparse.syntax import CompilationUnit, Decl, FuncDecl
from goparse.typecheck import TypeInfo

logger = logging.getLogger(__name__)


def exported_funcs(decls: Iterable[Decl]) -> List[FuncDecl]:
    """Return the exported, non-method, non-generic top-level functions.

    Args:
        decls: Top-level declarations in source order.

    Returns:
        Function declarations whose name starts with an upper-case letter
        and which have neither a receiver nor type parameters.
    """
    fns = []
    for decl in decls:
        if not isinstance(decl, FuncDecl):
            continue
        # skip all methods
        if decl.is_method:
            continue
        if decl.is_generic:
            logger.debug("Skipping generic function %s", decl.name.name)
            continue
        if decl.name.is_exported():
            fns.append(decl)
    return fns


def error_or_void(
    fns: Iterable[FuncDecl],
    info: TypeInfo,
    failure_type_name: str = ERROR_TYPE_NAME,
) -> List[FuncDecl]:
    """Keep functions that return nothing or only a failure indicator.

    Args:
        fns: Candidate functions.
        info: Resolved signature types.
        failure_type_name: Canonical name of the failure type.

    Returns:
        Functions with no results, or exactly one unnamed/singly-named
        result whose type prints exactly as ``failure_type_name``.
    """
    selected = []
    for fn in fns:
        n = fn.num_results()
        if n > 1:
            continue
        if n == 0:
            selected.append(fn)
            continue

        ret = fn.result_fields()[0]
        # handle (a, b error)
        if len(ret.names) > 1:
            continue
        if str(info.type_of(ret.type)) == failure_type_name:
            selected.append(fn)
        else:
            logger.debug("Skipping %s: returns %s", fn.name.name, info.type_of(ret.type))
    return selected


def select_candidates(
    unit: CompilationUnit,
    info: TypeInfo,
    failure_type_name: str = ERROR_TYPE_NAME,
) -> List[FuncDecl]:
    """Run both filter passes over a compilation unit.

    Args:
        unit: Merged compilation unit.
        info: Resolved signature types of ``unit``.
        failure_type_name: Canonical name of the failure type.

    Returns:
        Selected function declarations in declaration order.
    """
    fns = exported_funcs(unit.decls)
    selected = error_or_void(fns, info, failure_type_name)
    logger.info(
        "Selected %d of %d exported functions in package %s",
        len(selected),
        len(fns),
        unit.package_name,
    )
    return selected
