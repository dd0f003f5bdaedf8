"""YAML-backed model registry.

Resolves response type references into Models, following property references
to discover nested models. Definitions look like:

    package: models
    models:
      Wishlist:
        required: [id]
        properties:
          id: {type: integer}
          items: {type: array, items: WishlistItem}
          owner: {type: Customer}
"""

import logging
import threading
from pathlib import Path

import yaml

from api_annotations.parser.base import Model, ModelProperty, OperationItems, is_basic_type
from api_annotations.parser.context import DEFAULT_PACKAGE
from api_annotations.parser.errors import ModelResolutionError

logger = logging.getLogger(__name__)


def canonical_id(type_ref: str, package: str) -> str:
    """Qualify a type reference with a package unless it already has one."""
    type_ref = type_ref.rsplit("/", 1)[-1]
    if "." in type_ref:
        return type_ref
    return f"{package}.{type_ref}"


class ModelRegistry:
    """Resolves and caches models; each model is built at most once."""

    def __init__(self, definitions: dict[str, dict], default_package: str = DEFAULT_PACKAGE):
        if not isinstance(definitions, dict):
            raise ModelResolutionError("models", default_package, "models must be a mapping of names to definitions")
        self._definitions = {
            canonical_id(str(name), default_package): _check_definition(name, definition, default_package)
            for name, definition in definitions.items()
        }
        self._cache: dict[str, Model] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_file(cls, file_path: Path) -> "ModelRegistry":
        """Load model definitions from a YAML file."""
        doc = yaml.safe_load(file_path.read_text(encoding="utf-8")) or {}
        if not isinstance(doc, dict):
            raise ModelResolutionError("models", DEFAULT_PACKAGE, f"{file_path.name} must hold a mapping")
        return cls(doc.get("models") or {}, default_package=str(doc.get("package", DEFAULT_PACKAGE)))

    def __contains__(self, model_id: str) -> bool:
        return model_id in self._definitions

    def resolve(self, type_ref: str, package: str) -> tuple[Model, list[Model]]:
        """Return the model for ``type_ref`` and every model it transitively references."""
        model_id = canonical_id(type_ref, package)
        if model_id not in self._definitions:
            raise ModelResolutionError(type_ref, package)
        with self._lock:
            models = self._collect(model_id)
        return models[0], models[1:]

    def _collect(self, root_id: str) -> list[Model]:
        found: list[Model] = []
        seen: set[str] = set()
        pending = [root_id]
        while pending:
            model_id = pending.pop(0)
            if model_id in seen:
                continue
            seen.add(model_id)
            model = self._build(model_id)
            found.append(model)
            pending.extend(_referenced_ids(model))
        return found

    def _build(self, model_id: str) -> Model:
        if model_id in self._cache:
            return self._cache[model_id]

        definition = self._definitions[model_id]
        package, name = model_id.rsplit(".", 1)
        properties = {
            str(prop_name): self._build_property(model_id, str(prop_name), spec, package)
            for prop_name, spec in definition["properties"].items()
        }
        model = Model(
            id=model_id,
            name=name,
            properties=properties,
            required=definition["required"],
        )
        self._cache[model_id] = model
        logger.debug("Built model %s with %d properties", model_id, len(properties))
        return model

    def _build_property(self, model_id: str, prop_name: str, spec, package: str) -> ModelProperty:
        spec = spec or {}
        if not isinstance(spec, dict):
            raise ModelResolutionError(model_id, package, f'property "{prop_name}" must be a mapping')
        type_name = spec.get("type", "string")
        description = str(spec.get("description", ""))

        if type_name == "array":
            items_type = spec.get("items")
            if isinstance(items_type, dict):
                items_type = items_type.get("type")
            if not isinstance(items_type, str) or not items_type:
                raise ModelResolutionError(model_id, package, f'array property "{prop_name}" needs an items type')
            if self._is_model(items_type, package):
                items = OperationItems(ref=canonical_id(items_type, package))
            else:
                items = OperationItems(type=self._basic_type(items_type, package))
            return ModelProperty(type="array", items=items, description=description)

        if not isinstance(type_name, str) or not type_name:
            raise ModelResolutionError(model_id, package, f'property "{prop_name}" needs a type name')
        if self._is_model(type_name, package):
            return ModelProperty(ref=canonical_id(type_name, package), description=description)
        return ModelProperty(type=self._basic_type(type_name, package), description=description)

    def _is_model(self, type_ref: str, package: str) -> bool:
        return canonical_id(type_ref, package) in self._definitions

    def _basic_type(self, type_ref: str, package: str) -> str:
        if not is_basic_type(type_ref):
            raise ModelResolutionError(type_ref, package, "undefined nested model")
        return type_ref


def _check_definition(name, definition, package: str) -> dict:
    """Normalize one model definition, rejecting shapes that are not mappings."""
    definition = definition or {}
    if not isinstance(definition, dict):
        raise ModelResolutionError(str(name), package, "definition must be a mapping")
    properties = definition.get("properties") or {}
    if not isinstance(properties, dict):
        raise ModelResolutionError(str(name), package, "properties must be a mapping")
    required = definition.get("required") or []
    if not isinstance(required, list):
        raise ModelResolutionError(str(name), package, "required must be a list")
    return {"properties": properties, "required": [str(field) for field in required]}


def _referenced_ids(model: Model) -> list[str]:
    ids = []
    for prop in model.properties.values():
        if prop.ref:
            ids.append(prop.ref)
        elif prop.items is not None and prop.items.ref:
            ids.append(prop.items.ref)
    return ids
