import json

from crudkit.schemas.responses import ApiResponse, error_response, respond


def test_success_envelope_shape():
    envelope = ApiResponse.ok({"id": "1"}, "Created", 201)

    assert envelope.model_dump(by_alias=True) == {
        "statusCode": 201,
        "data": {"id": "1"},
        "message": "Created",
        "success": True,
    }


def test_respond_sets_status_and_body():
    response = respond([1, 2], "Listed")

    assert response.status_code == 200
    assert json.loads(response.body) == {"statusCode": 200, "data": [1, 2], "message": "Listed", "success": True}


def test_error_envelope_drops_empty_members():
    response = error_response(404, {"name": "NOT_FOUND", "message": "Product not found"})

    assert response.status_code == 404
    assert json.loads(response.body) == {
        "success": False,
        "error": {"name": "NOT_FOUND", "message": "Product not found"},
    }
