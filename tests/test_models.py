from api_spec_sync.model.document import Document, Operation, Parameter, PathItem, Schema
from api_spec_sync.model.route import Route


class TestParameter:
    def test_create_with_wire_names(self):
        p = Parameter.model_validate({"name": "id", "in": "path", "required": True})
        assert p.location == "path"
        assert p.key == ("id", "path")
        assert p.description == ""

    def test_create_with_attribute_names(self):
        p = Parameter(name="limit", location="query")
        assert p.required is False
        assert p.key == ("limit", "query")

    def test_same_name_different_location_are_distinct(self):
        a = Parameter(name="id", location="path")
        b = Parameter(name="id", location="query")
        assert a.key != b.key


class TestSchema:
    def test_nested_properties_and_items(self):
        s = Schema.model_validate({
            "type": "array",
            "items": {"type": "object", "properties": {"name": {"type": "string"}}},
        })
        assert s.items.properties["name"].type == "string"

    def test_ref_alias(self):
        s = Schema.model_validate({"$ref": "#/components/schemas/Pet"})
        assert s.ref == "#/components/schemas/Pet"

    def test_unmodelled_keywords_kept(self):
        s = Schema.model_validate({"type": "string", "enum": ["a", "b"], "x-order": 1})
        assert s.model_extra["enum"] == ["a", "b"]
        assert s.extensions == {"x-order": 1}


class TestOperation:
    def test_integer_status_codes_become_strings(self):
        op = Operation.model_validate({"responses": {200: {"description": "OK"}, "404": {}}})
        assert set(op.responses) == {"200", "404"}

    def test_defaults(self):
        op = Operation()
        assert op.deprecated is False
        assert op.parameters == []
        assert op.request_body is None


class TestPathItem:
    def test_operations_in_method_order(self):
        item = PathItem(post=Operation(summary="create"), get=Operation(summary="list"))
        assert [m for m, _ in item.operations()] == ["GET", "POST"]

    def test_operation_lookup_is_case_insensitive(self):
        item = PathItem(delete=Operation())
        assert item.operation("DELETE") is item.delete
        assert item.operation("get") is None


class TestDocument:
    def test_schemas_empty_without_components(self):
        assert Document().schemas == {}

    def test_extensions_only_x_keys(self):
        doc = Document.model_validate({"openapi": "3.0.3", "x-id": 7, "webhooks": {}})
        assert doc.extensions == {"x-id": 7}


class TestRoute:
    def test_create_from_record(self):
        r = Route.model_validate({
            "method": "GET",
            "path": "/users/{id}",
            "operationId": "getUser",
            "responses": {200: {"description": "OK"}},
            "sourceFile": "users.go",
            "sourceLine": 10,
        })
        assert r.operation_id == "getUser"
        assert list(r.responses) == ["200"]
        assert r.source_location == "users.go:10"

    def test_unknown_source_location(self):
        assert Route(method="GET", path="/").source_location == "<unknown>"
