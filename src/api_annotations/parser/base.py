"""Data models for compiled annotation comments.

The comment compiler folds every recognized tag into an Operation;
response tags may also pull in Models resolved by an external resolver.
Field aliases follow the Swagger 1.2 API declaration format used by the
listing generator.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

BASIC_TYPES = {
    "bool", "boolean",
    "int", "int8", "int16", "int32", "int64", "integer", "long",
    "uint", "uint8", "uint16", "uint32", "uint64",
    "float", "float32", "float64", "double", "number",
    "string", "byte", "rune", "date", "datetime", "time",
}


def is_basic_type(type_name: str) -> bool:
    """Whether a type name is a scalar rather than a model reference."""
    return type_name.lower() in BASIC_TYPES


class OperationItems(BaseModel):
    """Element type of an array-shaped response."""

    model_config = ConfigDict(frozen=True)

    ref: str | None = Field(default=None, serialization_alias="$ref")
    type: str | None = None


class ModelProperty(BaseModel):
    """A single field of a resolved model."""

    model_config = ConfigDict(frozen=True)

    type: str | None = None
    ref: str | None = Field(default=None, serialization_alias="$ref")
    items: OperationItems | None = None
    description: str = ""


class Model(BaseModel):
    """A resolved structural type, identified by its canonical id."""

    model_config = ConfigDict(frozen=True)

    id: str  # package.Name
    name: str
    properties: dict[str, ModelProperty] = {}
    required: list[str] = []


class Parameter(BaseModel):
    """A single documented parameter, from an @Param tag."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: str = Field(serialization_alias="paramType")  # query / path / body / header / form
    param_type: str = Field(serialization_alias="type")
    required: bool
    description: str = ""

    @computed_field(alias="dataType")
    @property
    def data_type(self) -> str:
        return self.param_type


class ResponseMessage(BaseModel):
    """A single documented response, from an @Success or @Failure tag."""

    model_config = ConfigDict(frozen=True)

    code: int
    message: str = ""
    model: str | None = Field(default=None, serialization_alias="responseModel")
    role: Literal["success", "failure"] = Field(default="success", exclude=True)


class ResponseShape(BaseModel):
    """What an operation returns: a basic type, one model, or an array of a model."""

    kind: Literal["basic", "model", "array"]
    ref: str


class Operation(BaseModel):
    """A single API operation compiled from one comment block.

    Operations are frozen; the tag folds build updated copies instead.
    """

    model_config = ConfigDict(frozen=True)

    method: str = Field(default="", serialization_alias="httpMethod")
    path: str = ""
    nickname: str = ""
    summary: str = ""
    type: str = ""
    items: OperationItems | None = None
    parameters: list[Parameter] = []
    responses: list[ResponseMessage] = Field(default=[], serialization_alias="responseMessages")
    consumes: list[str] = []
    produces: list[str] = []
    models: list[Model] = Field(default=[], exclude=True)

    @property
    def shape(self) -> ResponseShape | None:
        if self.type == "array" and self.items is not None:
            if self.items.ref:
                return ResponseShape(kind="array", ref=self.items.ref)
            return ResponseShape(kind="basic", ref=self.items.type or "")
        if self.type:
            kind = "basic" if is_basic_type(self.type) else "model"
            return ResponseShape(kind=kind, ref=self.type)
        return None

    def with_items_type(self, items_type: str) -> "Operation":
        """Return a copy whose response is an array of ``items_type``."""
        if is_basic_type(items_type):
            items = OperationItems(type=items_type)
        else:
            items = OperationItems(ref=items_type)
        return self.model_copy(update={"type": "array", "items": items})
