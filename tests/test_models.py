from api_whispr.spec.base import Endpoint, SpecWarning, WarningKind, param_location, param_type


class TestEndpoint:
    def test_create_minimal_endpoint(self):
        ep = Endpoint(method="GET", path="/api/users")
        assert ep.summary == "No summary provided"
        assert ep.request_body is None
        assert ep.requires_auth is False

    def test_aliases_in_dump(self):
        ep = Endpoint(
            method="POST",
            path="/api/users",
            operationId="createUser",
            requestBody={"required": True},
            security=[{"apiKey": []}],
        )
        data = ep.model_dump(by_alias=True)
        assert data["operationId"] == "createUser"
        assert data["requestBody"] == {"required": True}
        assert ep.requires_auth is True

    def test_body_parameters(self):
        ep = Endpoint(
            method="POST",
            path="/api/users",
            parameters=[
                {"name": "name", "in": "body"},
                {"name": "id", "in": "path"},
                {"name": "email", "location": "body"},
                "junk",
            ],
        )
        assert [p["name"] for p in ep.body_parameters()] == ["name", "email"]

    def test_body_location_checked_alongside_in(self):
        ep = Endpoint(
            method="PUT",
            path="/api/users/{id}",
            parameters=[{"name": "nickname", "in": "query", "location": "body"}],
        )
        assert [p["name"] for p in ep.body_parameters()] == ["nickname"]


class TestParamHelpers:
    def test_location_defaults_to_query(self):
        assert param_location({"name": "q"}) == "query"
        assert param_location({"name": "id", "in": "path"}) == "path"

    def test_type_from_schema_or_type(self):
        assert param_type({"schema": {"type": "integer"}}) == "integer"
        assert param_type({"type": "boolean"}) == "boolean"
        assert param_type({"name": "q"}) == "string"


class TestSpecWarning:
    def test_str_is_message(self):
        warning = SpecWarning(kind=WarningKind.MISSING_TAGS, count=2, message="2 endpoint(s) missing tags")
        assert str(warning) == "2 endpoint(s) missing tags"
