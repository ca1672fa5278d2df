"""
Unit tests for the REST structural and field-level comparators.
"""

from api_change_detector.comparator.endpoint import compare_api_specs, compare_endpoint
from api_change_detector.comparator.fields import (
    compare_parameters,
    compare_request_body,
    compare_responses,
)
from api_change_detector.models.change import ChangeCategory, ChangeType, Severity
from api_change_detector.models.spec import (
    ApiSpec,
    Endpoint,
    HttpMethod,
    Parameter,
    ParameterLocation,
    RequestBody,
    Response,
)


def _with_endpoints(spec: ApiSpec, endpoints: list[Endpoint]) -> ApiSpec:
    return spec.model_copy(update={"endpoints": endpoints})


class TestCompareApiSpecs:
    """Tests for compare_api_specs."""

    def test_identical_specs(self, rest_spec: ApiSpec) -> None:
        """Test that comparing a spec to itself yields no changes."""
        assert compare_api_specs(rest_spec, rest_spec) == []

    def test_endpoint_removed(self) -> None:
        """Test removing GET /api/users."""
        old = ApiSpec(name="API", endpoints=[Endpoint(path="/api/users", method=HttpMethod.GET)])
        new = ApiSpec(name="API")

        changes = compare_api_specs(old, new)

        assert len(changes) == 1
        assert changes[0].type == ChangeType.REMOVED
        assert changes[0].category == ChangeCategory.ENDPOINT
        assert changes[0].severity == Severity.BREAKING
        assert changes[0].path == "/api/users"

    def test_direction_sensitivity(self) -> None:
        """Test that the reverse comparison is an informational addition."""
        old = ApiSpec(name="API", endpoints=[Endpoint(path="/api/users")])
        new = ApiSpec(name="API")

        changes = compare_api_specs(new, old)

        assert len(changes) == 1
        assert changes[0].type == ChangeType.ADDED
        assert changes[0].severity == Severity.INFO
        assert "New endpoint added: GET /api/users" in changes[0].description

    def test_same_path_different_method_is_distinct(self) -> None:
        """Test that endpoints are keyed by method and path."""
        old = ApiSpec(name="API", endpoints=[Endpoint(path="/a", method=HttpMethod.GET)])
        new = ApiSpec(name="API", endpoints=[Endpoint(path="/a", method=HttpMethod.POST)])

        changes = compare_api_specs(old, new)

        assert [(c.type, c.severity) for c in changes] == [
            (ChangeType.ADDED, Severity.INFO),
            (ChangeType.REMOVED, Severity.BREAKING),
        ]

    def test_required_parameter_added(self, rest_spec: ApiSpec, users_endpoint: Endpoint) -> None:
        """Test adding a required filter parameter."""
        changed = users_endpoint.model_copy(
            update={
                "parameters": users_endpoint.parameters
                + [Parameter(name="filter", required=True)],
            }
        )
        new = _with_endpoints(rest_spec, [changed, rest_spec.endpoints[1]])

        changes = compare_api_specs(rest_spec, new)

        assert len(changes) == 1
        assert changes[0].type == ChangeType.ADDED
        assert changes[0].category == ChangeCategory.PARAMETER
        assert changes[0].severity == Severity.BREAKING
        assert "Required parameter" in changes[0].description

    def test_schema_changes_follow_endpoint_changes(self, rest_spec: ApiSpec) -> None:
        """Test that component schema changes come after endpoint changes."""
        new = rest_spec.model_copy(update={"endpoints": rest_spec.endpoints[:1], "schemas": {}})

        changes = compare_api_specs(rest_spec, new)

        assert [c.category for c in changes] == [ChangeCategory.ENDPOINT, ChangeCategory.SCHEMA]
        assert changes[1].path == "schema:User"

    def test_spec_created(self, rest_spec: ApiSpec) -> None:
        """Test comparing against a missing old spec."""
        changes = compare_api_specs(None, rest_spec)

        assert len(changes) == 1
        assert changes[0].type == ChangeType.ADDED
        assert changes[0].severity == Severity.INFO

    def test_spec_removed(self, rest_spec: ApiSpec) -> None:
        """Test comparing against a missing new spec."""
        changes = compare_api_specs(rest_spec, None)

        assert len(changes) == 1
        assert changes[0].type == ChangeType.REMOVED
        assert changes[0].severity == Severity.BREAKING

    def test_both_specs_missing(self) -> None:
        """Test that two missing specs produce no changes."""
        assert compare_api_specs(None, None) == []


class TestCompareEndpoint:
    """Tests for compare_endpoint."""

    def test_deprecated(self) -> None:
        """Test deprecating an endpoint."""
        old = Endpoint(path="/a")
        new = Endpoint(path="/a", deprecated=True)

        changes = compare_endpoint(old, new)

        assert len(changes) == 1
        assert changes[0].type == ChangeType.DEPRECATED
        assert changes[0].severity == Severity.WARNING

    def test_method_changed(self) -> None:
        """Test a method change on a matched endpoint."""
        changes = compare_endpoint(
            Endpoint(path="/a", method=HttpMethod.PUT),
            Endpoint(path="/a", method=HttpMethod.PATCH),
        )

        assert len(changes) == 1
        assert changes[0].severity == Severity.BREAKING
        assert changes[0].description == "HTTP method changed from PUT to PATCH"


class TestCompareParameters:
    """Tests for parameter comparison."""

    def test_optional_parameter_added(self) -> None:
        """Test adding an optional parameter."""
        changes = compare_parameters([], [Parameter(name="q")], "/search")

        assert len(changes) == 1
        assert changes[0].severity == Severity.INFO
        assert changes[0].path == "/search parameter:q"

    def test_parameter_removed(self) -> None:
        """Test removing a parameter."""
        changes = compare_parameters([Parameter(name="q")], [], "/search")

        assert changes[0].type == ChangeType.REMOVED
        assert changes[0].severity == Severity.DANGEROUS

    def test_type_changed(self) -> None:
        """Test changing a parameter type."""
        changes = compare_parameters(
            [Parameter(name="id", type="integer")],
            [Parameter(name="id", type="string")],
            "/a",
        )

        assert len(changes) == 1
        assert changes[0].severity == Severity.BREAKING
        assert changes[0].path == "/a parameter:id.type"

    def test_required_transitions(self) -> None:
        """Test optional-to-required and required-to-optional."""
        tightened = compare_parameters(
            [Parameter(name="id")],
            [Parameter(name="id", required=True)],
        )
        relaxed = compare_parameters(
            [Parameter(name="id", required=True)],
            [Parameter(name="id")],
        )

        assert tightened[0].severity == Severity.BREAKING
        assert relaxed[0].severity == Severity.INFO

    def test_location_changed(self) -> None:
        """Test moving a parameter from query to header."""
        changes = compare_parameters(
            [Parameter(name="token", location=ParameterLocation.QUERY)],
            [Parameter(name="token", location=ParameterLocation.HEADER)],
        )

        assert len(changes) == 1
        assert changes[0].severity == Severity.BREAKING


class TestCompareRequestBody:
    """Tests for request body comparison."""

    def test_required_body_added(self) -> None:
        """Test adding a required request body."""
        changes = compare_request_body(None, RequestBody(required=True), "/a")

        assert changes[0].type == ChangeType.ADDED
        assert changes[0].severity == Severity.BREAKING
        assert changes[0].path == "/a.requestBody"

    def test_optional_body_added(self) -> None:
        """Test adding an optional request body."""
        changes = compare_request_body(None, RequestBody(), "/a")

        assert changes[0].severity == Severity.INFO

    def test_body_removed(self) -> None:
        """Test removing the request body."""
        changes = compare_request_body(RequestBody(), None, "/a")

        assert changes[0].severity == Severity.DANGEROUS

    def test_schema_and_content_type_changed(self) -> None:
        """Test schema and media type changes."""
        changes = compare_request_body(
            RequestBody(schema_ref="UserV1", content_type="application/json"),
            RequestBody(schema_ref="UserV2", content_type="application/xml"),
            "/a",
        )

        assert [c.severity for c in changes] == [Severity.DANGEROUS, Severity.WARNING]


class TestCompareResponses:
    """Tests for response comparison."""

    def test_response_added_and_removed(self) -> None:
        """Test response additions and removals."""
        changes = compare_responses(
            [Response(status_code="404")],
            [Response(status_code="200")],
            "/a",
        )

        assert [(c.type, c.severity) for c in changes] == [
            (ChangeType.ADDED, Severity.INFO),
            (ChangeType.REMOVED, Severity.DANGEROUS),
        ]

    def test_content_type_change_is_not_breaking(self) -> None:
        """Test that a response media type change is only a warning."""
        changes = compare_responses(
            [Response(status_code="200", content_type="application/json")],
            [Response(status_code="200", content_type="text/plain")],
        )

        assert len(changes) == 1
        assert changes[0].severity == Severity.WARNING
