from __future__ import annotations

from math import isclose

from flask.testing import FlaskClient


def projection_payload() -> dict:
    return {
        "initialCapital": 1000,
        "monthlyContribution": 1000,
        "nominalRate": 8,
        "rateBasis": "ANNUAL",
        "horizon": {"count": 14, "unit": "MONTHS"},
        "mode": "PROJECT",
        "target": 1000000,
    }


def test_projection_endpoint_returns_expected_shape(client: FlaskClient):
    resp = client.post("/api/projection", json=projection_payload())

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["mode"] == "PROJECT"
    assert body["months"] == 14
    assert len(body["history"]) == 15
    assert set(body["history"][0]) == {"month", "total", "contributed", "interest", "interestThisMonth"}
    assert [row["months"] for row in body["yearlyBreakdown"]] == [12, 2]
    assert body["yearlyBreakdown"][1]["annualContribution"] == 2000
    assert body["targetReachedInMonths"] == -1
    assert body["targetReached"] is False
    assert body["requiredMonthlyContribution"] is None
    assert isclose(body["finalTotal"], body["totalInvested"] + body["totalInterest"])


def test_form_text_values_are_accepted(client: FlaskClient):
    payload = projection_payload()
    payload.update({"initialCapital": "1000", "monthlyContribution": "", "nominalRate": "abc"})

    resp = client.post("/api/projection", json=payload)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["finalTotal"] == 1000
    assert body["powerFactor"] == 0


def test_time_to_million_with_original_mode_name(client: FlaskClient):
    payload = projection_payload()
    payload["mode"] = "TIME_TO_MILLION"

    resp = client.post("/api/projection", json=payload)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["mode"] == "SOLVE_TIME_TO_TARGET"
    assert body["targetReached"] is True
    assert body["history"][-1]["month"] == body["targetReachedInMonths"]


def test_contribution_for_million(client: FlaskClient):
    payload = projection_payload()
    payload.update({"mode": "SOLVE_CONTRIBUTION_FOR_TARGET", "horizon": {"count": 26, "unit": "YEARS"}})

    resp = client.post("/api/projection", json=payload)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["requiredMonthlyContribution"] > 0
    assert body["monthlyContribution"] == body["requiredMonthlyContribution"]
    assert isclose(body["finalTotal"], 1_000_000, rel_tol=1e-9)


def test_empty_body_uses_defaults(client: FlaskClient):
    resp = client.post("/api/projection", json={})

    assert resp.status_code == 200
    assert resp.get_json()["mode"] == "SOLVE_TIME_TO_TARGET"


def test_non_object_body_uses_defaults(client: FlaskClient):
    resp = client.post("/api/projection", json=[1, 2, 3])

    assert resp.status_code == 200


def test_invalid_mode_returns_422(client: FlaskClient):
    payload = projection_payload()
    payload["mode"] = "LOTTERY"

    resp = client.post("/api/projection", json=payload)

    assert resp.status_code == 422
    body = resp.get_json()
    assert "detail" in body
    assert body["detail"][0]["loc"] == ["mode"]


def test_advice_endpoint_returns_projection_and_text(client: FlaskClient, fake_client):
    resp = client.post("/api/projection/advice", json=projection_payload())

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["advice"] == "Aporte com constância e deixe os juros trabalharem."
    assert body["projection"]["months"] == 14
    assert len(fake_client.responses.calls) == 1


def test_advice_endpoint_survives_service_failure(client: FlaskClient, fake_client):
    fake_client.responses.error = ConnectionError("offline")

    resp = client.post("/api/projection/advice", json=projection_payload())

    assert resp.status_code == 200
    assert resp.get_json()["advice"] == "O tempo é o melhor amigo dos juros compostos."


def test_huge_integer_in_raw_body_is_coerced(client: FlaskClient):
    body = '{"initialCapital": 1' + "0" * 400 + ', "mode": "PROJECT", "horizon": {"count": 12, "unit": "months"}}'

    resp = client.post("/api/projection", data=body, content_type="application/json")

    assert resp.status_code == 200
    payload = resp.get_json()
    assert payload["history"][0]["total"] == 0
    assert payload["totalInvested"] == 12 * 1000


def test_lowercase_enum_values_are_accepted(client: FlaskClient):
    payload = projection_payload()
    payload.update({"rateBasis": "annual", "horizon": {"count": 14, "unit": "months"}, "mode": "project"})

    resp = client.post("/api/projection", json=payload)

    assert resp.status_code == 200
    assert resp.get_json()["months"] == 14
