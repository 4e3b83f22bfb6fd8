import pytest

from passguess.config import EstimatorOptions
from passguess.web.api import create_app


@pytest.fixture
def client():
    app = create_app(options=EstimatorOptions().with_min_length(4))
    app.config["TESTING"] = True
    return app.test_client()


def test_home(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "running" in resp.get_json()["message"]


def test_score(client):
    resp = client.post("/score", json={"password": "password"})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["score"] == 0
    assert "password" not in data
    assert data["feedback"]["warning"] == "This is a top-10 common password."


def test_score_with_user_inputs(client):
    plain = client.post("/score", json={"password": "zorbulon99"}).get_json()
    penalised = client.post("/score", json={"password": "zorbulon99", "user_inputs": ["zorbulon"]}).get_json()
    assert penalised["guesses"] < plain["guesses"]


def test_policy_violation_is_a_bad_request(client):
    resp = client.post("/score", json={"password": "abc"})
    assert resp.status_code == 400
    assert "minimum length" in resp.get_json()["error"]


def test_bad_payloads(client):
    assert client.post("/score", json={"password": 1234}).status_code == 400
    assert client.post("/score", json={"password": "zorbulon", "user_inputs": "x"}).status_code == 400
