from fastapi.testclient import TestClient

from backend.app.core.config import Settings, get_settings
from backend.app.main import app
from backend.app.services.openai_client import OracleCallFailed, get_oracle


class FakeOracle:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    async def complete(self, instructions, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply


def client_with(oracle, settings=None):
    app.dependency_overrides[get_oracle] = lambda: oracle
    app.dependency_overrides[get_settings] = lambda: settings or Settings(openai_api_key="test")
    return TestClient(app)


def teardown_function():
    app.dependency_overrides.clear()


def test_recipes_success():
    oracle = FakeOracle(reply='Here you go: [{"id":1,"title":"Soup"}] Enjoy!')
    resp = client_with(oracle).post("/api/recipes", json={"ingredients": ["carrot"]})

    assert resp.status_code == 200
    assert resp.json() == {"recipes": [{"id": 1, "title": "Soup"}]}
    assert "vegetarian: true" in oracle.prompts[0]


def test_dietary_flags_forwarded():
    oracle = FakeOracle(reply="[]")
    client_with(oracle).post(
        "/api/recipes",
        json={"ingredients": [], "dietary": {"vegetarian": False, "vegan": False, "glutenFree": True, "dairyFree": False}},
    )
    assert "vegetarian: false, vegan: false, gluten free: true, dairy free: false" in oracle.prompts[0]


def test_missing_body_fields_default():
    oracle = FakeOracle(reply="[]")
    resp = client_with(oracle).post("/api/recipes", json={})
    assert resp.json() == {"recipes": []}
    assert "Ingredients: []" in oracle.prompts[0]


def test_midwest_uses_regional_prompt():
    oracle = FakeOracle(reply="[]")
    resp = client_with(oracle).post("/api/midwest", json={"ingredients": ["corn"]})
    assert resp.status_code == 200
    assert "popular in the midwest" in oracle.prompts[0]


def test_malformed_json_is_200_with_diagnostics():
    resp = client_with(FakeOracle(reply="[{bad json}]")).post("/api/recipes", json={"ingredients": ["x"]})
    assert resp.status_code == 200
    assert resp.json() == {
        "error": "Parsing failed",
        "kind": "malformed_json",
        "raw": "[{bad json}]",
        "arrayString": "[{bad json}]",
    }


def test_no_array_is_200_with_raw_text():
    resp = client_with(FakeOracle(reply="Sorry, I can't help.")).post("/api/midwest", json={"ingredients": ["x"]})
    assert resp.status_code == 200
    body = resp.json()
    assert body["kind"] == "no_array_delimiters"
    assert body["raw"] == "Sorry, I can't help."
    assert body["arrayString"] is None


def test_oracle_failure_is_500():
    resp = client_with(FakeOracle(error=OracleCallFailed("invalid api key"))).post("/api/recipes", json={"ingredients": ["x"]})
    assert resp.status_code == 500
    assert resp.json() == {"error": "invalid api key"}


def test_schema_violation_when_validation_enabled():
    oracle = FakeOracle(reply='[{"id": 1, "title": "Soup"}]')
    resp = client_with(oracle, Settings(openai_api_key="test", validate_recipes=True)).post(
        "/api/recipes", json={"ingredients": ["x"]}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["kind"] == "schema_violation"
    assert body["details"]


def test_invalid_body_rejected():
    resp = client_with(FakeOracle(reply="[]")).post("/api/recipes", json={"ingredients": "carrot"})
    assert resp.status_code == 422


def test_health():
    resp = client_with(FakeOracle(reply="[]")).get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.json()["openai_configured"] is True


def test_health_without_api_key():
    resp = client_with(FakeOracle(reply="[]"), Settings(openai_api_key="")).get("/api/health")
    assert resp.json()["openai_configured"] is False


def test_nan_in_reply_is_malformed_json():
    reply = '[{"id": 1, "readyInMinutes": NaN}]'
    resp = client_with(FakeOracle(reply=reply)).post("/api/recipes", json={"ingredients": ["x"]})
    assert resp.status_code == 200
    assert resp.json()["kind"] == "malformed_json"
    assert resp.json()["arrayString"] == reply


def test_null_ingredients_treated_as_empty():
    oracle = FakeOracle(reply="[]")
    resp = client_with(oracle).post("/api/recipes", json={"ingredients": None})
    assert resp.status_code == 200
    assert resp.json() == {"recipes": []}
    assert "Ingredients: []" in oracle.prompts[0]
