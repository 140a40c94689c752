"""Tests for application wiring: health check and error mapping."""

import logging

import pytest
from sqlalchemy.exc import OperationalError

from farmdirect.db.session import get_db

from farmdirect.core.errors import (
    ConflictError,
    ForbiddenError,
    InsufficientStockError,
    InternalError,
    InvalidTokenError,
    InvalidTransitionError,
    NotFoundError,
    UnknownSubjectError,
    ValidationError,
)
from farmdirect.main import app, status_code_for


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


@pytest.mark.parametrize("error,expected", [
    (ValidationError("bad"), 400),
    (InsufficientStockError(1, "Kale", 2, 3), 400),
    (InvalidTransitionError("DONE", "CANCELED"), 400),
    (InvalidTokenError(), 401),
    (UnknownSubjectError(7), 401),
    (ForbiddenError(), 403),
    (NotFoundError("Order", 1), 404),
    (ConflictError("taken"), 409),
    (InternalError(), 500),
])
def test_status_code_for(error, expected):
    assert status_code_for(error) == expected


class BrokenSession:
    """Session stand-in whose every query fails at the driver."""

    def query(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    def close(self):
        pass

    def rollback(self):
        pass


def test_database_error_returns_generic_500(client, consumer, auth_headers, caplog):
    headers = auth_headers(consumer)

    def broken_get_db():
        yield BrokenSession()

    app.dependency_overrides[get_db] = broken_get_db
    with caplog.at_level(logging.ERROR, logger="farmdirect.main"):
        response = client.get("/catalog/products", headers=headers)

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error", "error_type": "InternalError"}
    assert "database is locked" not in response.text
    assert any(
        record.name == "farmdirect.main" and "Database error on GET /catalog/products" in record.getMessage()
        for record in caplog.records
    )
