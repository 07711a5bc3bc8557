"""Tests for the HTTP endpoints."""

import csv
import io

import pytest

from src.assertions.solver import parse_solver_result
from src.web.app import init_app

CANDIDATES = ["Alice", "Bob", "Chuan"]

OK_PAYLOAD = {
    "Ok": {
        "assertions": [
            {"type": "NEB", "winner": 0, "loser": 1, "difficulty": 1.1, "margin": 320},
            {
                "assertion": {"type": "NEN", "winner": 0, "loser": 2, "continuing": [0, 2]},
                "difficulty": 2.7,
                "margin": 120,
            },
        ],
        "difficulty": 2.7,
        "margin": 120,
        "winner": 0,
        "num_candidates": 3,
    }
}


def solver(request):
    if request.contest_name == "Tied":
        return parse_solver_result({"Err": {"TiedWinners": [1, 0]}})
    return parse_solver_result(OK_PAYLOAD)


@pytest.fixture
def client(tmp_path):
    app = init_app(str(tmp_path / "assertions.db"), solver=solver)
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def generate(client, contest):
    return client.post(
        "/raire/generate-assertions",
        json={
            "contestName": contest,
            "totalAuditableBallots": 1000,
            "timeLimitSeconds": 5,
            "candidates": CANDIDATES,
        },
    )


def export_body(contest, candidates=CANDIDATES):
    return {"contestName": contest, "candidates": candidates, "riskLimit": 0.05}


class TestGenerateEndpoint:
    def test_generate(self, client):
        response = generate(client, "Mayor")
        assert response.status_code == 200
        assert response.get_json() == {"contestName": "Mayor", "winner": "Alice"}

    def test_solver_failure(self, client):
        response = generate(client, "Tied")
        assert response.status_code == 500
        assert response.headers["error_code"] == "TIED_WINNERS"
        assert response.get_data(as_text=True) == "Tied winners: Alice, Bob."

    def test_malformed_body(self, client):
        response = client.post("/raire/generate-assertions", json={"contestName": "Mayor"})
        assert response.status_code == 400
        assert response.get_json()["error"] == "Invalid request"


class TestExportEndpoints:
    def test_csv(self, client):
        generate(client, "Mayor")
        response = client.post("/raire/get-assertions-csv", json=export_body("Mayor"))

        assert response.status_code == 200
        assert response.mimetype == "text/csv"
        rows = list(csv.reader(io.StringIO(response.get_data(as_text=True))))
        assert rows[0] == ["Contest name", "Mayor"]
        assert rows[4] == ["Margin", "120", "2"]
        assert rows[12][:5] == ["1", "NEB", "Alice", "Bob", ""]
        assert rows[13][:5] == ["2", "NEN", "Alice", "Chuan", "Alice, Chuan"]

    def test_json(self, client):
        generate(client, "Mayor")
        response = client.post("/raire/get-assertions-json", json=export_body("Mayor"))

        assert response.status_code == 200
        report = response.get_json()
        assert report["metadata"]["contest"] == "Mayor"
        assert report["metadata"]["risk_limit"] == 0.05
        assert report["solution"]["Ok"]["winner"] == "Alice"
        assert report["solution"]["Ok"]["difficulty"] == pytest.approx(2.7)

    def test_no_assertions(self, client):
        response = client.post("/raire/get-assertions-csv", json=export_body("Nowhere"))
        assert response.status_code == 500
        assert response.headers["error_code"] == "NO_ASSERTIONS_PRESENT"
        assert response.get_data(as_text=True) == (
            "No assertion generation summary for contest Nowhere."
        )

    def test_after_failed_generation(self, client):
        generate(client, "Tied")
        response = client.post("/raire/get-assertions-json", json=export_body("Tied"))
        assert response.status_code == 500
        assert response.headers["error_code"] == "NO_ASSERTIONS_PRESENT"

    def test_wrong_candidates(self, client):
        generate(client, "Mayor")
        response = client.post(
            "/raire/get-assertions-json", json=export_body("Mayor", ["Alice", "Bob"])
        )
        assert response.status_code == 500
        assert response.headers["error_code"] == "WRONG_CANDIDATE_NAMES"

    def test_negative_risk_limit(self, client):
        body = export_body("Mayor")
        body["riskLimit"] = -0.1
        response = client.post("/raire/get-assertions-json", json=body)
        assert response.status_code == 400
