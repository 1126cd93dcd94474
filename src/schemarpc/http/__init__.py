"""HTTP primitives shared by the server dispatcher and the test client."""

from schemarpc.http.headers import Headers
from schemarpc.http.query import BODY_PARAM, QueryParams, build_query, encode_component
from schemarpc.http.request import Request
from schemarpc.http.response import Response, ResponseWriter

__all__ = [
    "BODY_PARAM",
    "Headers",
    "QueryParams",
    "Request",
    "Response",
    "ResponseWriter",
    "build_query",
    "encode_component",
]
