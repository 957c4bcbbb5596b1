"""HTTP blueprints for the Wellnest API.

Handlers stay thin: they validate the request with a marshmallow schema,
call one service function with the caller's id and serialise the
result. Errors raised by services are turned into responses by the
handlers in :mod:`wellnest.errors`.
"""

from __future__ import annotations

from flask import request

from ..schemas.common import PaginationSchema


def json_body(schema, partial: bool = False) -> dict:
    """Validate the JSON request body with ``schema``."""
    return schema.load(request.get_json(silent=True) or {}, partial=partial)


def query_args(schema) -> dict:
    return schema.load(request.args)


def page_args(schema=None) -> tuple[int, int]:
    args = (schema or PaginationSchema()).load(request.args)
    return args["page"], args["limit"]
