"""Annotation comment compiler.

Turns the comment block attached to a route handler into an Operation:

    // @Title getWishlist
    // @Description fetch a customer's wishlist
    // @Param wishlist_id path string true "wishlist id"
    // @Success 200 {object} models.Wishlist "ok"
    // @Failure 404 {object} models.ApiError "not found"
    // @Accept json
    // @router /customer/get-wishlist/{wishlist_id} [get]
"""

import logging
from collections.abc import Iterable

from api_annotations.parser.base import Operation
from api_annotations.parser.context import CompileContext
from api_annotations.parser.errors import AnnotationError, MissingAnnotationError
from api_annotations.parser.tags import (
    apply_accept,
    apply_description,
    apply_failure,
    apply_param,
    apply_router,
    apply_success,
    apply_title,
)

logger = logging.getLogger(__name__)

COMMENT_MARKERS = "/#*"

# Checked in order, first prefix match wins.
TAG_HANDLERS = (
    ("@router", apply_router),
    ("@Title", apply_title),
    ("@Description", apply_description),
    ("@Success", apply_success),
    ("@Param", apply_param),
    ("@Failure", apply_failure),
    ("@Accept", apply_accept),
)


def clean_comment_line(line: str) -> str:
    """Strip leading comment markers and surrounding whitespace."""
    return line.strip().lstrip(COMMENT_MARKERS).strip()


def parse_comment(lines: Iterable[str] | None, context: CompileContext | None = None) -> Operation:
    """Compile one comment block into an Operation.

    Raises the first AnnotationError hit by any tag. Tags already applied are
    kept on the partial operation attached to the error as ``error.operation``.
    Raises MissingAnnotationError if the block is empty or has no @router tag.
    """
    context = context or CompileContext()
    lines = list(lines or [])
    if not lines:
        raise MissingAnnotationError()

    operation = Operation()
    for raw_line in lines:
        line = clean_comment_line(raw_line)
        for tag, handler in TAG_HANDLERS:
            if not line.startswith(tag):
                continue
            try:
                operation = handler(operation, line[len(tag):].strip(), context)
            except AnnotationError as e:
                e.operation = operation
                raise
            break
        else:
            if line.startswith("@"):
                logger.debug("Skipping unrecognized tag: %s", line)

    if not operation.path:
        error = MissingAnnotationError()
        error.operation = operation
        raise error
    return operation
