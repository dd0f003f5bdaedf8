"""Swagger 1.2 style listing built from compiled operations."""

import json

import yaml
from pydantic import BaseModel, Field

from api_annotations.parser.base import Model, Operation

SWAGGER_VERSION = "1.2"


class ApiDeclaration(BaseModel):
    """Operations sharing the first path segment."""

    path: str
    operations: list[Operation]


class ResourceListing(BaseModel):
    api_version: str = Field(serialization_alias="apiVersion")
    swagger_version: str = Field(serialization_alias="swaggerVersion")
    base_path: str = Field(serialization_alias="basePath")
    apis: list[ApiDeclaration]
    models: dict[str, Model]


def build_listing(
    operations: list[Operation], api_version: str = "1.0", base_path: str = "/"
) -> ResourceListing:
    """Group operations into API declarations and merge their discovered models."""
    groups: dict[str, list[Operation]] = {}
    models: dict[str, Model] = {}
    for operation in operations:
        groups.setdefault(_resource_path(operation.path), []).append(operation)
        for model in operation.models:
            models.setdefault(model.id, model)

    return ResourceListing(
        api_version=api_version,
        swagger_version=SWAGGER_VERSION,
        base_path=base_path,
        apis=[ApiDeclaration(path=path, operations=ops) for path, ops in groups.items()],
        models=models,
    )


def dump_listing(listing: ResourceListing, fmt: str = "json") -> str:
    """Render a listing as JSON or YAML text."""
    data = listing.model_dump(mode="json", by_alias=True, exclude_none=True, exclude_defaults=True)
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2, ensure_ascii=False)


def _resource_path(path: str) -> str:
    return "/" + path.strip("/").split("/", 1)[0]
