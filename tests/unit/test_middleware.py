"""Unit tests for request-ID handling."""

import uuid

import pytest

from app.core.middleware import resolve_request_id


@pytest.mark.parametrize("incoming", ["req-123", "a1b2c3", "trace:abc.def_1", "x" * 64])
def test_well_formed_request_id_is_reused(incoming):
    assert resolve_request_id(incoming) == incoming


@pytest.mark.parametrize(
    "incoming",
    [None, "", "x" * 65, "abc def", "id\nforged log line", '{"level": "ERROR"}'],
)
def test_malformed_request_id_is_replaced(incoming):
    request_id = resolve_request_id(incoming)
    assert request_id != incoming
    assert str(uuid.UUID(request_id)) == request_id
