"""
Demo schema served by the gateway.

A single ``hello`` field resolved from the root value, enough to
exercise the GraphQL endpoint end to end.
"""

from graphql import build_schema

schema = build_schema(
    """
    type Query {
      hello: String
    }
    """
)

root = {
    "hello": lambda info: "Hello world!",
}
