import pytest
from pydantic import ValidationError

from api_annotations.parser.base import (
    Model,
    Operation,
    OperationItems,
    Parameter,
    ResponseMessage,
    is_basic_type,
)


class TestParameter:
    def test_create_required_param(self):
        p = Parameter(name="id", location="path", param_type="integer", required=True)
        assert p.name == "id"
        assert p.required is True
        assert p.description == ""

    def test_serializes_with_swagger_names(self):
        p = Parameter(name="q", location="query", param_type="string", required=False, description="search")
        data = p.model_dump(by_alias=True)
        assert data == {
            "name": "q",
            "paramType": "query",
            "type": "string",
            "dataType": "string",
            "required": False,
            "description": "search",
        }


class TestResponseMessage:
    def test_role_is_not_serialized(self):
        r = ResponseMessage(code=404, message="missing", role="failure")
        assert r.role == "failure"
        assert "role" not in r.model_dump(by_alias=True)

    def test_model_alias(self):
        r = ResponseMessage(code=200, message="ok", model="models.User")
        assert r.model_dump(by_alias=True)["responseModel"] == "models.User"


class TestBasicTypes:
    def test_scalars_are_basic(self):
        assert is_basic_type("string")
        assert is_basic_type("int64")
        assert is_basic_type("Bool")

    def test_model_names_are_not_basic(self):
        assert not is_basic_type("models.User")
        assert not is_basic_type("Wishlist")


class TestOperation:
    def test_empty_operation(self):
        op = Operation()
        assert op.path == ""
        assert op.parameters == []
        assert op.shape is None

    def test_shape_single_model(self):
        op = Operation(type="models.User")
        assert op.shape.kind == "model"
        assert op.shape.ref == "models.User"

    def test_with_items_type_model(self):
        op = Operation().with_items_type("models.User")
        assert op.type == "array"
        assert op.items == OperationItems(ref="models.User")
        assert op.shape.kind == "array"
        assert op.shape.ref == "models.User"

    def test_with_items_type_basic(self):
        op = Operation().with_items_type("string")
        assert op.items.type == "string"
        assert op.items.ref is None
        assert op.shape.kind == "basic"

    def test_with_items_type_does_not_mutate(self):
        op = Operation()
        op.with_items_type("models.User")
        assert op.type == ""
        assert op.items is None

    def test_operation_is_frozen(self):
        op = Operation(method="GET", path="/x")
        with pytest.raises(ValidationError):
            op.path = "/y"
        assert op.path == "/x"

    def test_model_copy_builds_new_operation(self):
        op = Operation(path="/x")
        updated = op.model_copy(update={"path": "/y"})
        assert (op.path, updated.path) == ("/x", "/y")

    def test_models_are_not_serialized(self):
        op = Operation(method="GET", path="/x", models=[Model(id="main.X", name="X")])
        data = op.model_dump(by_alias=True)
        assert "models" not in data
        assert data["httpMethod"] == "GET"
        assert data["responseMessages"] == []
