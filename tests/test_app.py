import pytest

from app import create_app
from conftest import FakeGateway
from reflector import config


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def client(gateway):
    app = create_app(gateway=gateway, seed=True)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def empty_client(gateway):
    app = create_app(gateway=gateway, seed=False)
    app.config["TESTING"] = True
    return app.test_client()


def test_seeded_entries(client) -> None:
    response = client.get("/api/entries")
    assert response.status_code == 200
    entries = response.get_json()["entries"]
    assert len(entries) == 8
    assert entries[0]["id"] == "entry-1"
    assert set(entries[0]) == {"id", "createdAt", "text"}
    stamps = [entry["createdAt"] for entry in entries]
    assert stamps == sorted(stamps, reverse=True)
    assert [entry["id"] for entry in entries[:3]] == ["entry-1", "entry-8", "entry-7"]


def test_create_entry(client) -> None:
    response = client.post("/api/entries", json={"text": "  Calm evening with a friend  "})
    assert response.status_code == 201
    created = response.get_json()["entry"]
    assert created["text"] == "Calm evening with a friend"

    entries = client.get("/api/entries").get_json()["entries"]
    assert entries[0]["id"] == created["id"]
    assert len(entries) == 9


@pytest.mark.parametrize("body", [
    {"text": "   "},
    {"text": 42},
    {"note": "wrong field"},
    {"text": "x" * (config.MAX_ENTRY_LENGTH + 1)},
])
def test_create_entry_validation(empty_client, body) -> None:
    response = empty_client.post("/api/entries", json=body)
    assert response.status_code == 400
    assert "error" in response.get_json()


def test_create_entry_without_body(empty_client) -> None:
    response = empty_client.post("/api/entries", data="not json", content_type="text/plain")
    assert response.status_code == 400


def test_analyzed_entries_newest_first(client) -> None:
    response = client.get("/api/entries/analyzed")
    assert response.status_code == 200
    entries = response.get_json()["entries"]
    assert len(entries) == 8
    assert entries[0]["id"] == "entry-1"
    assert entries[1]["id"] == "entry-8"
    assert entries[0]["tags"] == ["creative"]
    assert entries[0]["sentiment"] == "neutral"
    assert entries[0]["sentimentScore"] == 0.5


def test_analyzed_entries_report_gateway_failure() -> None:
    app = create_app(gateway=FakeGateway(fail_load=True), seed=True)
    response = app.test_client().get("/api/entries/analyzed")
    assert response.status_code == 503
    assert "Analysis failed" in response.get_json()["error"]


def test_weekly_insights(client) -> None:
    response = client.get("/api/insights?period=weekly")
    assert response.status_code == 200
    summary = response.get_json()
    assert summary["period"] == "weekly"
    assert 1 <= len(summary["insights"]) <= 3
    assert len(summary["themeKeywords"]) <= 5
    assert summary["averageSentiment"] == 0.5
    assert summary["insights"][0] == "Mood stayed steady; consistency is working."
    assert summary["id"].startswith("insight-weekly-")


def test_insights_default_to_weekly(client) -> None:
    assert client.get("/api/insights").get_json()["period"] == "weekly"


def test_insights_survive_gateway_failure() -> None:
    app = create_app(gateway=FakeGateway(fail_load=True), seed=True)
    response = app.test_client().get("/api/insights?period=monthly")
    assert response.status_code == 200
    assert response.get_json()["averageSentiment"] == 0.5


def test_insights_reject_unknown_period(client) -> None:
    response = client.get("/api/insights?period=daily")
    assert response.status_code == 400


def test_empty_journal_insights(empty_client) -> None:
    summary = empty_client.get("/api/insights?period=weekly").get_json()
    assert summary["insights"] == ["Add a few entries to see insights."]
    assert summary["averageSentiment"] == 0
    assert summary["themeKeywords"] == []


def test_narrative_insights_fallback(client) -> None:
    response = client.get("/api/insights/narrative?period=monthly")
    assert response.status_code == 200
    summary = response.get_json()
    assert summary["period"] == "monthly"
    assert len(summary["insights"]) == 3
    assert summary["insights"][0].startswith("You stayed consistent")


def test_prompt_follows_latest_entry(empty_client) -> None:
    assert empty_client.get("/api/prompt").get_json()["prompt"] == (
        "What stood out to you today? Start with one detail."
    )
    empty_client.post("/api/entries", json={"text": "Stressed before the deadline"})
    assert empty_client.get("/api/prompt").get_json()["prompt"].startswith(
        "What helped you steady yourself today?"
    )


def test_privacy_info(client, monkeypatch) -> None:
    monkeypatch.setattr(config, "GROQ_API_KEY", None)
    response = client.get("/api/privacy")
    assert response.status_code == 200
    info = response.get_json()
    assert info["cloud_sync"] is False
    assert info["text_generation"] == "offline fallback"
    assert "analysis runs locally" in info["message"]


def test_privacy_info_discloses_groq(client, monkeypatch) -> None:
    monkeypatch.setattr(config, "GROQ_API_KEY", "test-key")
    info = client.get("/api/privacy").get_json()
    assert info["text_generation"] == "groq"
    assert "Groq" in info["message"]
    assert "analysis runs locally" not in info["message"]
