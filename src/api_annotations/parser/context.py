"""Compilation context shared by every tag parser of one comment block."""

from dataclasses import dataclass
from typing import Protocol

from api_annotations.parser.base import Model

DEFAULT_PACKAGE = "main"


class ModelResolver(Protocol):
    """Turns a type reference into a model plus the nested models it depends on.

    Implementations must be safe to call from several compilations at once.
    """

    def resolve(self, type_ref: str, package: str) -> tuple[Model, list[Model]]:
        ...


@dataclass(frozen=True)
class CompileContext:
    """Package the comment block lives in and the resolver used for its models."""

    resolver: ModelResolver | None = None
    package: str = DEFAULT_PACKAGE
