import json

from fastapi import APIRouter
from fastapi.exceptions import RequestValidationError

from triptally.core.errors import (
    GENERIC_ERROR_MESSAGE,
    NotFoundError,
    TransactionFailure,
    ValidationError,
    validation_error_handler,
)


def test_validation_error_body_includes_field():
    err = ValidationError("title is required", field="title")
    assert err.status_code == 400
    assert err.to_dict() == {
        "error": "validation_error",
        "message": "title is required",
        "field": "title",
    }


def test_validation_error_without_field():
    assert "field" not in ValidationError("no fields to update").to_dict()


def test_status_codes():
    assert NotFoundError("Trip not found").status_code == 404
    assert TransactionFailure("rolled back").status_code == 500
    assert TransactionFailure("rolled back").to_dict()["error"] == "transaction_failed"


def test_unexpected_errors_get_generic_message(client):
    router = APIRouter()

    @router.get("/boom")
    async def boom():
        raise RuntimeError("database unreachable at /secret/path")

    client.app.include_router(router)
    resp = client.get("/boom")
    assert resp.status_code == 500
    assert resp.json() == {"error": "internal_error", "message": GENERIC_ERROR_MESSAGE}


def test_transaction_failure_is_reported(client, make_trip, monkeypatch):
    from triptally.db.dal import Database

    def explode(self, trip_id):
        raise TransactionFailure(f"Failed to delete trip {trip_id}; no changes were applied")

    monkeypatch.setattr(Database, "delete_trip_cascade", explode)
    trip = make_trip()
    resp = client.delete(f"/api/trips/{trip['id']}")
    assert resp.status_code == 500
    assert resp.json()["error"] == "transaction_failed"


def test_request_validation_without_location_omits_field():
    exc = RequestValidationError([{"loc": ("body",), "msg": "Field required", "type": "missing"}])
    resp = validation_error_handler(None, exc)
    assert resp.status_code == 400
    assert json.loads(resp.body) == {"error": "validation_error", "message": "Field required"}


def test_request_validation_names_the_parameter():
    exc = RequestValidationError(
        [{"loc": ("path", "trip_id"), "msg": "String too long", "type": "string_too_long"}]
    )
    body = json.loads(validation_error_handler(None, exc).body)
    assert body["field"] == "trip_id"
