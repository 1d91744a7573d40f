"""Response Factory — verifies the two envelope shapes and not-found normalization.

Tests cover:
    - success_response is identity on data
    - failure_response default status and body shape
    - not_found_response capitalizes the target regardless of input case
"""

from dataclasses import FrozenInstanceError

import pytest

from catalog_api.core.responses import (
    Failure, Success, failure_response, not_found_response, success_response,
)


def test_success_response_returns_data_unchanged():
    payload = {"items": [1, 2, 3]}
    result = success_response(payload)
    assert result.data is payload
    assert result.success is True


def test_success_body_shape():
    assert success_response([1]).to_body() == {"success": True, "data": [1]}


def test_success_with_none_data_keeps_shape():
    assert success_response(None).to_body() == {"success": True, "data": None}


def test_failure_response_defaults_to_400():
    result = failure_response(message="bad input")
    assert result.status_code == 400
    assert result.success is False
    assert result.to_body() == {
        "success": False, "statusCode": 400, "message": "bad input",
    }


def test_not_found_response_for_book():
    assert not_found_response("book").to_body() == {
        "success": False, "statusCode": 404, "message": "Book not found",
    }


def test_not_found_response_normalizes_case():
    assert not_found_response("BOOK").message == "Book not found"
    assert not_found_response("aUTHOR").message == "Author not found"


def test_results_are_frozen():
    result = failure_response(500, "boom")
    with pytest.raises(FrozenInstanceError):
        result.status_code = 200


def test_exactly_one_shape_per_result():
    assert "data" not in failure_response(400, "x").to_body()
    assert "statusCode" not in success_response(1).to_body()
    assert isinstance(success_response(1), Success)
    assert isinstance(failure_response(400, "x"), Failure)
