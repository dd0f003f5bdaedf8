"""Grammar parsers for the individual annotation tags.

Each ``parse_*`` function turns the text following a tag keyword into a
structured fragment. Each ``apply_*`` function folds that fragment into an
Operation and returns the updated copy; the input operation is never mutated.
"""

import logging
import re
from functools import partial

from pydantic import BaseModel

from api_annotations.parser.base import Model, Operation, Parameter, ResponseMessage
from api_annotations.parser.context import CompileContext
from api_annotations.parser.errors import ModelResolutionError, ResponseCodeError, TagGrammarError

logger = logging.getLogger(__name__)

OBJECT_MARKER = "{object}"
ARRAY_MARKER = "{array}"

ACCEPT_CONTENT_TYPES = {
    "json": "application/json",
    "xml": "application/xml",
    "plain": "text/plain",
    "html": "text/html",
}

# /customer/get-wishlist/{wishlist_id} [get]
ROUTER_RE = re.compile(r"([\w./\-{}]+)[^\[]+\[([^\]]+)")
# wishlist_id  path  string  true  "wishlist id"
PARAM_RE = re.compile(r'(\w+)\s+(\w+)\s+(\w+)\s+(\w+)\s+"([^"]+)"')
# 200 {object} models.Wishlist "ok"
RESPONSE_RE = re.compile(r'^(\S+)\s+([\w{}]+)\s+([\w./]+)[^"]*(.*)$')
CODE_RE = re.compile(r"\d+", re.ASCII)


class ResponseTag(BaseModel):
    """Parsed payload of an @Success or @Failure tag."""

    code: int
    kind: str
    type_ref: str
    message: str = ""

    @property
    def is_model(self) -> bool:
        return self.kind in (OBJECT_MARKER, ARRAY_MARKER)


def parse_router(text: str) -> tuple[str, str]:
    """Parse ``<path> [<method>]`` into the path and upper-cased method."""
    match = ROUTER_RE.search(text)
    if not match:
        raise TagGrammarError("router", text)
    return match.group(1), match.group(2).upper()


def parse_param(text: str) -> Parameter:
    """Parse ``name location type required "description"``.

    Non-basic types are kept as written; they are not resolved into models.
    """
    match = PARAM_RE.search(text)
    if not match:
        raise TagGrammarError("param", text)
    name, location, param_type, required, description = match.groups()
    return Parameter(
        name=name,
        location=location,
        param_type=param_type,
        required=required.lower() == "true",
        description=description,
    )


def parse_accept(text: str) -> list[str]:
    """Map a comma-separated list of content-type shorthands to MIME types.

    Unknown shorthands are dropped; duplicates are kept.
    """
    tokens = [token.strip() for token in text.split(",")]
    return [ACCEPT_CONTENT_TYPES[token] for token in tokens if token in ACCEPT_CONTENT_TYPES]


def parse_response(text: str) -> ResponseTag:
    """Parse ``<code> <kind> <type> ... "<message>"``."""
    match = RESPONSE_RE.match(text)
    if not match:
        raise TagGrammarError("response", text)
    code, kind, type_ref, message = match.groups()
    if not CODE_RE.fullmatch(code):
        raise ResponseCodeError(code)
    return ResponseTag(code=int(code), kind=kind, type_ref=type_ref, message=message.strip().strip('"'))


def apply_router(operation: Operation, text: str, context: CompileContext) -> Operation:
    path, method = parse_router(text)
    return operation.model_copy(update={"path": path, "method": method})


def apply_title(operation: Operation, text: str, context: CompileContext) -> Operation:
    return operation.model_copy(update={"nickname": text.strip()})


def apply_description(operation: Operation, text: str, context: CompileContext) -> Operation:
    return operation.model_copy(update={"summary": text.strip()})


def apply_param(operation: Operation, text: str, context: CompileContext) -> Operation:
    param = parse_param(text)
    return operation.model_copy(update={"parameters": [*operation.parameters, param]})


def apply_accept(operation: Operation, text: str, context: CompileContext) -> Operation:
    content_types = parse_accept(text)
    return operation.model_copy(update={
        "consumes": [*operation.consumes, *content_types],
        "produces": [*operation.produces, *content_types],
    })


def apply_response(
    operation: Operation, text: str, context: CompileContext, role: str = "success"
) -> Operation:
    """Fold a response tag into the operation, resolving its model if it has one.

    Typed responses overwrite the operation's response shape, so the last
    one wins.
    """
    tag = parse_response(text)
    model_id = None

    if tag.is_model:
        model, nested = _resolve(tag.type_ref, context)
        model_id = model.id
        if tag.kind == ARRAY_MARKER:
            operation = operation.with_items_type(model.id)
        else:
            operation = operation.model_copy(update={"type": model.id, "items": None})
        operation = operation.model_copy(
            update={"models": _merge_models(operation.models, [model, *nested])}
        )

    response = ResponseMessage(code=tag.code, message=tag.message, model=model_id, role=role)
    return operation.model_copy(update={"responses": [*operation.responses, response]})


apply_success = partial(apply_response, role="success")
apply_failure = partial(apply_response, role="failure")


def _resolve(type_ref: str, context: CompileContext) -> tuple[Model, list[Model]]:
    if context.resolver is None:
        raise ModelResolutionError(type_ref, context.package, "no model resolver configured")
    model, nested = context.resolver.resolve(type_ref, context.package)
    logger.debug("Resolved %s to %s (%d nested)", type_ref, model.id, len(nested))
    return model, nested


def _merge_models(known: list[Model], found: list[Model]) -> list[Model]:
    merged = list(known)
    seen = {m.id for m in merged}
    for model in found:
        if model.id not in seen:
            seen.add(model.id)
            merged.append(model)
    return merged
