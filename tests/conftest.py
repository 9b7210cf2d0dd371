"""
Shared fixtures for the GraphQL HTTP adapter tests.

Schemas here mirror the ones the adapter is expected to serve: a plain
``hello`` schema, one with a failing resolver for partial results, one
with a mutation type, and one whose Query type has no fields.
"""

import traceback

import httpx
import pytest
from fastapi import FastAPI
from graphql import GraphQLObjectType, GraphQLSchema, build_schema

from src.graphql_http import register_graphql


HELLO_SDL = """
type Query {
  hello: String
}
"""

MIXED_SDL = """
type Query {
  hello: String
  greet(name: String!): String
  boom: String
  whoami: String
}

type Mutation {
  setGreeting(text: String!): String
}
"""


def _debug_format_error(error):
    """Error view with message, locations and stack."""
    source = error.original_error or error
    return {
        "message": error.message,
        "locations": [loc.formatted for loc in error.locations or []],
        "stack": "".join(
            traceback.format_exception(type(source), source, source.__traceback__)
        ),
    }


def _boom(info):
    raise ValueError("kaboom")


def _whoami(info):
    request = info.context["request"]
    return request.headers.get("x-user", "anonymous")


@pytest.fixture
def hello_schema():
    return build_schema(HELLO_SDL)


@pytest.fixture
def hello_root():
    return {"hello": lambda info: "Hello world!"}


@pytest.fixture
def mixed_schema():
    return build_schema(MIXED_SDL)


@pytest.fixture
def mixed_root():
    return {
        "hello": lambda info: "Hello world!",
        "greet": lambda info, name: f"Hello {name}!",
        "boom": _boom,
        "whoami": _whoami,
        "setGreeting": lambda info, text: text,
    }


@pytest.fixture
def fieldless_schema():
    return GraphQLSchema(
        query=GraphQLObjectType(
            name="Query",
            description="i haz the queries",
            fields=lambda: {},
        )
    )


@pytest.fixture
def make_app():
    """Build a FastAPI app with the GraphQL routes registered."""

    def _make_app(**options) -> FastAPI:
        app = FastAPI()
        options.setdefault("route", {"path": "/graphql"})
        register_graphql(app, **options)
        return app

    return _make_app


async def _send(app: FastAPI, method: str, url: str, **kwargs) -> httpx.Response:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.request(method, url, **kwargs)


@pytest.fixture
def send():
    """Send one in-process request to an ASGI app."""
    return _send


@pytest.fixture
def debug_formatter():
    """Error formatter exposing message, locations and stack."""
    return _debug_format_error
