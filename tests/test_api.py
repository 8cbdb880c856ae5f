"""
Integration tests for the HTTP API.
Runs the FastAPI app against an in-memory SQLite database.
"""
from typing import Dict
from unittest.mock import patch

from fastapi.testclient import TestClient

from simulafin.core.exceptions import PersistenceError
from tests.factories import create_user, login

PROPOSAL = {
    "property_value": "R$ 500.000",
    "down_payment_percentage": 20,
    "term_years": 30,
    "name": "Maria Souza",
    "cpf": "529.982.247-25",
    "signature_data": "data:image/png;base64,iVBORw0KGgo=",
}


def test_health(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Correlation-ID" in response.headers


def test_register_sets_cookie_session(client: TestClient):
    response = client.post("/auth/register", json={
        "name": "Novo Cliente",
        "email": "Novo@SimulaFin.com.br",
        "password": "segredo123"
    })
    assert response.status_code == 201
    assert "access_token" in response.cookies

    me = client.get("/auth/me")
    assert me.status_code == 200
    assert me.json()["email"] == "novo@simulafin.com.br"
    assert me.json()["is_admin"] is False

    duplicate = client.post("/auth/register", json={
        "name": "Outro",
        "email": "novo@simulafin.com.br",
        "password": "segredo123"
    })
    assert duplicate.status_code == 400


def test_login_rejects_wrong_password(client: TestClient):
    create_user("cliente@simulafin.com.br")

    response = client.post("/auth/login", json={"email": "cliente@simulafin.com.br", "password": "wrong"})

    assert response.status_code == 401


def test_simulation_requires_authentication(client: TestClient):
    response = client.post("/financiamento/simular", json={"property_value": 500000})

    assert response.status_code == 401


def test_simulate_and_store(client: TestClient, customer_headers: Dict[str, str]):
    response = client.post(
        "/financiamento/simular",
        json={"property_value": "R$ 500.000", "down_payment_percentage": 20, "term_years": 30},
        headers=customer_headers
    )

    assert response.status_code == 201
    data = response.json()
    assert data["saved"] is True
    assert data["down_payment"] == 100000.0
    assert data["financed_amount"] == 400000.0
    assert data["monthly_amortization"] == 1111.11
    assert data["monthly_payment"] == 5111.11
    assert data["total_interest"] == 722000.0
    assert data["total_amount"] == 1122000.0
    assert data["property_value_display"] == "R$ 500.000,00"
    assert data["table"] is None

    history = client.get("/financiamento/simulacoes", headers=customer_headers)
    assert history.status_code == 200
    assert [s["id"] for s in history.json()] == [data["simulation_id"]]
    assert history.json()[0]["total_amount"] == 1122000.0
    assert history.json()[0]["total_interest"] == 722000.0


def test_simulate_with_table(client: TestClient, customer_headers: Dict[str, str]):
    response = client.post(
        "/financiamento/simular?include_table=true",
        json={"property_value": 120000, "down_payment_percentage": 50, "term_years": 1},
        headers=customer_headers
    )

    table = response.json()["table"]
    assert len(table) == 12
    assert table[0]["interest"] == 600.0
    assert table[-1]["balance"] == 0.0


def test_simulate_rejects_low_down_payment(client: TestClient, customer_headers: Dict[str, str]):
    response = client.post(
        "/financiamento/simular",
        json={"property_value": 100000, "down_payment_percentage": 19, "term_years": 10},
        headers=customer_headers
    )

    assert response.status_code == 400
    assert "20%" in response.json()["detail"]
    assert client.get("/financiamento/simulacoes", headers=customer_headers).json() == []


def test_only_owner_deletes_simulation(client: TestClient, customer_headers: Dict[str, str]):
    created = client.post(
        "/financiamento/simular",
        json={"property_value": 300000, "down_payment_percentage": 30, "term_years": 20},
        headers=customer_headers
    ).json()

    create_user("intruso@simulafin.com.br")
    intruder = login(client, "intruso@simulafin.com.br")

    assert client.delete(f"/financiamento/simulacoes/{created['simulation_id']}", headers=intruder).status_code == 404
    assert client.delete(f"/financiamento/simulacoes/{created['simulation_id']}", headers=customer_headers).status_code == 204
    assert client.get(f"/financiamento/simulacoes/{created['simulation_id']}", headers=customer_headers).status_code == 404


def test_submit_proposal(client: TestClient, customer_headers: Dict[str, str]):
    response = client.post("/propostas", json=PROPOSAL, headers=customer_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["user_cpf"] == "52998224725"
    assert data["user_email"] == "cliente@simulafin.com.br"
    # Money is returned in cents, without float residue
    assert data["total_amount"] == 1122000.0
    assert data["total_interest"] == 722000.0
    assert data["monthly_payment"] == 5111.11

    mine = client.get("/propostas/minhas", headers=customer_headers).json()
    assert [s["id"] for s in mine] == [data["id"]]
    assert mine[0]["total_amount"] == 1122000.0

    document = client.get(f"/propostas/{data['id']}/documento", headers=customer_headers)
    assert document.status_code == 200
    assert document.json()["client"]["cpf"] == "529.982.247-25"


def test_submit_proposal_rejects_short_cpf(client: TestClient, customer_headers: Dict[str, str]):
    response = client.post("/propostas", json={**PROPOSAL, "cpf": "123.456.789"}, headers=customer_headers)

    assert response.status_code == 422


def test_admin_panel_denied_to_customers(client: TestClient, customer_headers: Dict[str, str]):
    assert client.get("/admin/check", headers=customer_headers).json() == {"is_admin": False}
    assert client.get("/admin/submissoes", headers=customer_headers).status_code == 403


def test_admin_review_flow(client: TestClient, customer_headers: Dict[str, str], admin_headers: Dict[str, str]):
    first = client.post("/propostas", json=PROPOSAL, headers=customer_headers).json()
    second = client.post(
        "/propostas",
        json={**PROPOSAL, "name": "Pedro Alves", "cpf": "11144477735", "property_value": 820000},
        headers=customer_headers
    ).json()

    assert client.get("/admin/check", headers=admin_headers).json() == {"is_admin": True}

    listing = client.get("/admin/submissoes", headers=admin_headers)
    assert listing.status_code == 200
    assert {s["id"] for s in listing.json()} == {first["id"], second["id"]}

    search = client.get("/admin/submissoes", params={"search": "PEDRO"}, headers=admin_headers).json()
    assert [s["id"] for s in search] == [second["id"]]

    # Customers cannot decide on proposals
    denied = client.patch(f"/admin/submissoes/{first['id']}/status", json={"status": "approved"}, headers=customer_headers)
    assert denied.status_code == 403

    approved = client.patch(f"/admin/submissoes/{first['id']}/status", json={"status": "approved"}, headers=admin_headers)
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"
    assert approved.json()["total_amount"] == first["total_amount"]
    assert approved.json()["created_at"] == first["created_at"]

    invalid = client.patch(f"/admin/submissoes/{first['id']}/status", json={"status": "archived"}, headers=admin_headers)
    assert invalid.status_code == 422

    missing = client.patch("/admin/submissoes/unknown/status", json={"status": "review"}, headers=admin_headers)
    assert missing.status_code == 404

    filtered = client.get("/admin/submissoes", params={"status": "approved"}, headers=admin_headers).json()
    assert [s["id"] for s in filtered] == [first["id"]]

    summary = client.get("/admin/submissoes/resumo", headers=admin_headers).json()
    assert summary == {"total": 2, "pending": 1, "review": 0, "approved": 1, "rejected": 0}

    # Admins can read any proposal document
    assert client.get(f"/propostas/{second['id']}/documento", headers=admin_headers).status_code == 200


def test_document_hidden_from_other_customers(client: TestClient, customer_headers: Dict[str, str]):
    created = client.post("/propostas", json=PROPOSAL, headers=customer_headers).json()

    create_user("outro@simulafin.com.br")
    other = login(client, "outro@simulafin.com.br")

    assert client.get(f"/propostas/{created['id']}/documento", headers=other).status_code == 404


def test_simulation_result_returned_when_history_write_fails(client: TestClient, customer_headers: Dict[str, str]):
    with patch("simulafin.financiamento.router.save_simulation", side_effect=PersistenceError("Error saving simulation")):
        response = client.post(
            "/financiamento/simular",
            json={"property_value": 500000, "down_payment_percentage": 20, "term_years": 30},
            headers=customer_headers
        )

    assert response.status_code == 201
    assert response.json()["saved"] is False
    assert response.json()["simulation_id"] is None
    assert response.json()["monthly_payment"] == 5111.11


def test_submission_write_failure_is_reported(client: TestClient, customer_headers: Dict[str, str]):
    with patch(
        "simulafin.propostas.repository.SqlSubmissionRepository.insert",
        side_effect=PersistenceError("Error saving submission")
    ):
        response = client.post("/propostas", json=PROPOSAL, headers=customer_headers)

    assert response.status_code == 503
    assert response.json()["detail"] == "Error saving submission"
    assert client.get("/propostas/minhas", headers=customer_headers).json() == []
