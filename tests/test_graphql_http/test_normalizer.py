"""
Unit tests for the request normalizer.

Pure transformation from GET query strings and POST bodies to
ExecutionRequest, no engine involved.
"""

import dataclasses

import pytest

from src.graphql_http.models import ExecutionRequest
from src.graphql_http.normalizer import normalize_request, parse_variables
from src.shared.exceptions import (
    MalformedBodyError,
    MalformedVariablesError,
    MissingQueryError,
)


# ─── GET ────────────────────────────────────────────────────


class TestNormalizeGet:
    """Query-string extraction."""

    def test_query_only(self):
        req = normalize_request("GET", {"query": "{ hello }"})
        assert req == ExecutionRequest(query="{ hello }")

    def test_variables_and_operation_name(self):
        req = normalize_request(
            "GET",
            {
                "query": "query Greet($n: String!) { greet(name: $n) }",
                "variables": '{"n": "Ada"}',
                "operationName": "Greet",
            },
        )
        assert req.variables == {"n": "Ada"}
        assert req.operation_name == "Greet"

    def test_lowercase_method(self):
        req = normalize_request("get", {"query": "{ hello }"})
        assert req.query == "{ hello }"

    def test_body_ignored(self):
        req = normalize_request("GET", {"query": "{ hello }"}, {"query": "{ other }"})
        assert req.query == "{ hello }"

    def test_invalid_variables_json(self):
        with pytest.raises(MalformedVariablesError) as exc_info:
            normalize_request("GET", {"query": "{ hello }", "variables": "{nope"})
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Variables are invalid JSON."

    def test_variables_must_be_object(self):
        with pytest.raises(MalformedVariablesError):
            normalize_request("GET", {"query": "{ hello }", "variables": "[1, 2]"})

    def test_null_variables_treated_as_absent(self):
        req = normalize_request("GET", {"query": "{ hello }", "variables": "null"})
        assert req.variables is None

    def test_missing_query(self):
        with pytest.raises(MissingQueryError) as exc_info:
            normalize_request("GET", {})
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Must provide query string."

    def test_empty_query(self):
        with pytest.raises(MissingQueryError):
            normalize_request("GET", {"query": ""})

    def test_empty_operation_name_is_none(self):
        req = normalize_request("GET", {"query": "{ hello }", "operationName": ""})
        assert req.operation_name is None


# ─── POST ───────────────────────────────────────────────────


class TestNormalizePost:
    """Decoded body extraction."""

    def test_body_keys(self):
        req = normalize_request(
            "POST",
            {},
            {"query": "{hello}", "variables": {"a": 1}, "operationName": None},
        )
        assert req == ExecutionRequest(query="{hello}", variables={"a": 1})

    def test_query_string_ignored(self):
        with pytest.raises(MissingQueryError):
            normalize_request("POST", {"query": "{ hello }"}, {})

    def test_variables_as_json_string(self):
        req = normalize_request("POST", {}, {"query": "{hello}", "variables": '{"a": 1}'})
        assert req.variables == {"a": 1}

    def test_variables_wrong_type(self):
        with pytest.raises(MalformedVariablesError):
            normalize_request("POST", {}, {"query": "{hello}", "variables": 42})

    def test_missing_body(self):
        with pytest.raises(MissingQueryError):
            normalize_request("POST", {}, None)

    def test_body_not_an_object(self):
        with pytest.raises(MalformedBodyError) as exc_info:
            normalize_request("POST", {}, ["{hello}"])
        assert exc_info.value.status_code == 400

    def test_query_not_a_string(self):
        with pytest.raises(MalformedBodyError):
            normalize_request("POST", {}, {"query": 123})

    def test_operation_name_not_a_string(self):
        with pytest.raises(MalformedBodyError):
            normalize_request("POST", {}, {"query": "{hello}", "operationName": 1})


# ─── Helpers ────────────────────────────────────────────────


class TestParseVariables:
    def test_mapping_is_copied(self):
        original = {"a": 1}
        parsed = parse_variables(original)
        assert parsed == original
        assert parsed is not original

    def test_none(self):
        assert parse_variables(None) is None


def test_execution_request_is_immutable():
    req = ExecutionRequest(query="{ hello }")
    with pytest.raises(dataclasses.FrozenInstanceError):
        req.query = "{ other }"
