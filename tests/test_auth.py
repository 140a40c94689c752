"""Tests for registration, login and bearer token handling."""

from datetime import timedelta

import pytest
from jose import jwt

from farmdirect.auth.security import create_access_token, verify_token
from farmdirect.core.errors import InvalidTokenError
from farmdirect.models.user import User, UserRole


def farmer_payload(**overrides):
    payload = {
        "role": "FARMER",
        "name": "Maria Silva",
        "email": "maria@mail.com",
        "password": "hortas123",
        "city": "Campinas",
        "phone": "19988887777",
        "property_name": "Sitio Boa Vista",
        "address": "Estrada Municipal 10",
    }
    payload.update(overrides)
    return payload


class TestRegister:
    def test_register_farmer(self, client, db):
        response = client.post("/auth/register", json=farmer_payload())

        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["user"]["role"] == "FARMER"
        assert data["user"]["farmer_profile"] == {
            "property_name": "Sitio Boa Vista",
            "address": "Estrada Municipal 10",
        }
        assert "password_hash" not in data["user"]

        stored = db.query(User).filter(User.email == "maria@mail.com").one()
        assert stored.password_hash != "hortas123"

    def test_register_consumer_without_profile(self, client):
        payload = farmer_payload(role="CONSUMER", email="joao@mail.com")
        del payload["property_name"], payload["address"]

        response = client.post("/auth/register", json=payload)

        assert response.status_code == 201
        assert response.json()["user"]["farmer_profile"] is None

    @pytest.mark.parametrize("missing", ["property_name", "address"])
    def test_farmer_requires_profile_fields(self, client, missing):
        payload = farmer_payload()
        del payload[missing]

        response = client.post("/auth/register", json=payload)

        assert response.status_code == 422

    def test_duplicate_email(self, client):
        assert client.post("/auth/register", json=farmer_payload()).status_code == 201

        response = client.post("/auth/register", json=farmer_payload(name="Other"))

        assert response.status_code == 409
        assert response.json()["detail"] == "Email already in use"

    @pytest.mark.parametrize("field,value", [
        ("password", "123"),
        ("phone", "123"),
        ("email", "not-an-email"),
        ("role", "ADMIN"),
    ])
    def test_invalid_fields(self, client, field, value):
        response = client.post("/auth/register", json=farmer_payload(**{field: value}))
        assert response.status_code == 422


class TestLogin:
    def test_login_returns_token(self, client, consumer, password):
        response = client.post("/auth/login", json={"email": consumer.email, "password": password})

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == consumer.id
        assert verify_token(data["access_token"]).sub == consumer.id

    def test_wrong_password(self, client, consumer):
        response = client.post("/auth/login", json={"email": consumer.email, "password": "nope"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_unknown_email(self, client):
        response = client.post("/auth/login", json={"email": "ghost@mail.com", "password": "whatever"})
        assert response.status_code == 401

    def test_token_form(self, client, farmer, password):
        response = client.post("/auth/token", data={"username": farmer.email, "password": password})

        assert response.status_code == 200
        assert response.json()["token_type"] == "bearer"


class TestTokens:
    def test_verify_round_trip(self, farmer):
        payload = verify_token(create_access_token(farmer))
        assert payload.sub == farmer.id
        assert payload.role == UserRole.FARMER

    def test_expired_token(self, farmer):
        token = create_access_token(farmer, expires_delta=timedelta(minutes=-1))

        with pytest.raises(InvalidTokenError, match="expired"):
            verify_token(token)

    def test_foreign_signature(self, farmer):
        token = jwt.encode({"sub": str(farmer.id), "role": "FARMER"}, "some-other-secret", algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            verify_token(token)

    def test_expired_token_is_401(self, client, consumer):
        token = create_access_token(consumer, expires_delta=timedelta(minutes=-1))

        response = client.get("/me/", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error_type"] == "InvalidTokenError"

    def test_unknown_subject_is_401(self, client, db, consumer):
        token = create_access_token(consumer)
        db.delete(consumer)
        db.commit()

        response = client.get("/me/", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error_type"] == "UnknownSubjectError"
