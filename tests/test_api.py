import logging

import pytest
from fastapi.testclient import TestClient

from travel_quote.api.app import app
from travel_quote.pricing.config import PaymentSettings, PricingConfig
from travel_quote.service import quotes as quote_service

client = TestClient(app)


def _body(**overrides):
    body = {"category": "standard", "zone": "Europa", "duration": 10, "travelers": [{"age": 30}]}
    body.update(overrides)
    return body


class TestHealth:
    def test_health(self, cached_config):
        res = client.get("/health")

        assert res.status_code == 200
        assert res.json() == {"status": "ok", "plans": 3, "zones": 2, "currency": "USD"}


class TestQuoteEndpoint:
    def test_quote(self, cached_config):
        res = client.post("/quote", json=_body())

        assert res.status_code == 200
        data = res.json()
        assert data["warnings"] == []
        assert data["quote"]["subtotal"] == pytest.approx(112.0)
        assert data["quote"]["tax"] == pytest.approx(21.28)
        assert data["quote"]["commission"] == pytest.approx(11.2)
        assert data["quote"]["total"] == pytest.approx(144.48)
        assert data["quote"]["price_per_day"] == pytest.approx(11.2)

    def test_quote_from_dates(self, cached_config):
        res = client.post(
            "/quote",
            json=_body(duration=None, departure_date="2026-05-01", return_date="2026-05-11"),
        )

        assert res.status_code == 200
        assert res.json()["quote"]["duration"] == 10

    def test_unmatched_age_warning(self, cached_config):
        res = client.post("/quote", json=_body(travelers=[{"age": 200}]))

        assert res.status_code == 200
        assert res.json()["warnings"][0]["kind"] == "AgeBracketUnmatched"

    @pytest.mark.parametrize(
        "overrides,status,code",
        [
            ({"zone": "Atlantida"}, 404, "zone_not_found"),
            ({"category": "platinum"}, 404, "plan_not_found"),
            ({"travelers": []}, 422, "empty_traveler_list"),
            ({"duration": 0}, 422, "invalid_duration"),
            ({"travelers": [{"age": -4}]}, 422, "invalid_traveler"),
        ],
    )
    def test_typed_errors(self, cached_config, overrides, status, code):
        res = client.post("/quote", json=_body(**overrides))

        assert res.status_code == status
        assert res.json()["error"] == code
        assert "quote" not in res.json()

    def test_strict_ages_from_env(self, cached_config, monkeypatch):
        monkeypatch.setenv("QUOTE_UNMATCHED_AGE", "reject")

        res = client.post("/quote", json=_body(travelers=[{"age": 200}]))

        assert res.status_code == 422
        assert res.json()["error"] == "age_bracket_unmatched"

    def test_schema_validation(self, cached_config):
        res = client.post("/quote", json={"zone": "Europa", "duration": 3, "travelers": [{"age": 30}]})

        assert res.status_code == 422

    def test_broken_configuration(self, clean_env, monkeypatch, caplog):
        broken = PricingConfig(plans=(), zones=(), age_ranges=(), payment=PaymentSettings())
        monkeypatch.setattr(quote_service, "_CACHED_CONFIG", broken)

        with caplog.at_level(logging.ERROR, logger="travel_quote.api.app"):
            res = client.post("/quote", json=_body())

        assert res.status_code == 503
        assert res.json()["error"] == "invalid_configuration"
        assert "Pricing configuration unusable: Plan catalog is empty." in caplog.messages


class TestCompareEndpoint:
    def test_compare(self, cached_config):
        res = client.post("/quote/plans", json={"zone": "Europa", "duration": 10, "travelers": [{"age": 30}]})

        assert res.status_code == 200
        quotes = res.json()["quotes"]
        assert [q["plan"] for q in quotes] == ["Basic", "Standard", "Premium"]
        assert quotes[1]["total"] == pytest.approx(144.48)

    def test_compare_unknown_zone(self, cached_config):
        res = client.post("/quote/plans", json={"zone": "Atlantida", "duration": 10, "travelers": [{"age": 30}]})

        assert res.status_code == 404


class TestLambdaHandler:
    def test_handler_wraps_app(self, cached_config, monkeypatch):
        import importlib

        from mangum import Mangum

        monkeypatch.setenv("PRELOAD_CONFIG", "true")
        module = importlib.import_module("travel_quote.api.lambda_handler")

        assert isinstance(module.handler, Mangum)
        assert quote_service._CACHED_CONFIG is cached_config
