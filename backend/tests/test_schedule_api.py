from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.deps import get_db
from app.db.models.interaction_rule import InteractionRuleRecord
from app.db.models.item_profile import ItemProfileRecord
from app.main import app


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    ItemProfileRecord.__table__.create(bind=engine)
    InteractionRuleRecord.__table__.create(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client, TestingSessionLocal
    app.dependency_overrides.clear()


def _seed_profile(session_factory, canonical_name: str, display_name: str, timing: dict, tags=None) -> None:
    session = session_factory()
    try:
        session.add(
            ItemProfileRecord(
                canonical_name=canonical_name,
                display_name=display_name,
                kind="med",
                tags=tags or [],
                timing=timing,
            )
        )
        session.commit()
    finally:
        session.close()


def test_generate_schedule_with_builtin_catalog(client) -> None:
    test_client, _ = client
    payload = {
        "date": "2024-05-01",
        "wake_time": "07:00",
        "items": [
            {"canonical_name": "levothyroxine", "display_name": "Levothyroxine 50mcg", "dose": "50 mcg"},
            {"canonical_name": "iron_supplement", "display_name": "Iron"},
            {"canonical_name": "calcium_supplement", "display_name": "Calcium"},
        ],
    }

    resp = test_client.post("/schedule/generate", json=payload, headers={"X-Request-Id": "sched-1"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["request_id"] == "sched-1"
    assert resp.headers["X-Request-Id"] == "sched-1"
    schedule = body["schedule"]
    assert schedule["date"] == "2024-05-01"
    times = {item["canonical_name"]: item["scheduled_time"] for item in schedule["items"]}
    assert times["levothyroxine"] == "07:00"
    assert times["iron_supplement"] == "08:00"
    assert times["calcium_supplement"] == "11:00"
    assert schedule["overall_confidence"] == 90
    assert [(warning["rule_key"], warning["affected_items"]) for warning in schedule["warnings"]] == [
        ("thyroid-vs-iron-divalent", ["Levothyroxine 50mcg", "Iron"])
    ]
    assert schedule["items"][0]["dose"] == "50 mcg"
    assert "medical advice" in schedule["disclaimer"].lower()
    assert body["confidence_label"] in {"Well-supported", "Commonly recommended", "Informational"}
    assert len(body["explanations"]) == 3
    assert body["explanations"][0].startswith("Levothyroxine 50mcg is scheduled at 07:00.")


def test_database_profile_overrides_builtin(client) -> None:
    test_client, session_factory = client
    _seed_profile(
        session_factory,
        "omega3",
        "Omega-3 (clinic)",
        {"preferred_windows": [{"start": "19:00", "end": "21:00"}]},
    )

    resp = test_client.post(
        "/schedule/generate",
        json={"date": "2024-05-01", "items": [{"canonical_name": "omega3", "display_name": "Fish oil"}]},
    )

    assert resp.status_code == 200
    item = resp.json()["schedule"]["items"][0]
    assert item["scheduled_time"] == "20:00"
    assert item["slot_label"] == "evening"
    assert item["display_name"] == "Fish oil"


def test_inline_profiles_and_rules_are_used(client) -> None:
    test_client, _ = client
    payload = {
        "date": "2024-05-01",
        "items": [
            {"canonical_name": "custom_a", "display_name": "A"},
            {"canonical_name": "custom_b", "display_name": "B"},
        ],
        "profiles": [
            {"canonical_name": "custom_a", "display_name": "A", "timing": {"flexible": True}},
            {"canonical_name": "custom_b", "display_name": "B", "timing": {"flexible": True}},
        ],
        "rules": [
            {
                "rule_key": "a-vs-b",
                "applies_to": ["custom_a"],
                "constraint": {"type": "MIN_SEPARATION_MINUTES", "minutes": 180, "other": {"type": "name", "value": "custom_b"}},
            }
        ],
    }

    resp = test_client.post("/schedule/generate", json=payload)

    assert resp.status_code == 200
    times = {item["canonical_name"]: item["scheduled_time"] for item in resp.json()["schedule"]["items"]}
    assert times == {"custom_a": "09:00", "custom_b": "12:00"}


def test_meal_overrides_are_honored(client) -> None:
    test_client, _ = client
    payload = {
        "date": "2024-05-01",
        "meals": {"breakfast": "08:00", "lunch": "12:30"},
        "items": [{"canonical_name": "omega3", "display_name": "Omega-3"}],
    }

    resp = test_client.post("/schedule/generate", json=payload)

    item = resp.json()["schedule"]["items"][0]
    assert item["with_food"] is True
    assert item["scheduled_time"] in {"08:00", "12:30"}


@pytest.mark.parametrize(
    "overrides",
    [{"date": "2024-02-30"}, {"wake_time": "25:00"}, {"meals": {"dinner": "supper"}}],
)
def test_invalid_call_inputs_return_422(client, overrides) -> None:
    test_client, _ = client
    payload = {"date": "2024-05-01", "items": [{"canonical_name": "omega3", "display_name": "Omega-3"}]}
    payload.update(overrides)

    resp = test_client.post("/schedule/generate", json=payload)

    assert resp.status_code == 422
    assert resp.headers.get("X-Request-Id")


def test_invalid_inline_profile_is_rejected(client) -> None:
    test_client, _ = client
    payload = {
        "date": "2024-05-01",
        "items": [],
        "profiles": [
            {
                "canonical_name": "bad",
                "display_name": "Bad",
                "timing": {"preferred_windows": [{"start": "morning", "end": "09:00"}]},
            }
        ],
    }

    assert test_client.post("/schedule/generate", json=payload).status_code == 422


def test_date_defaults_to_today(client) -> None:
    from datetime import date

    test_client, _ = client

    resp = test_client.post("/schedule/generate", json={"items": []})

    assert resp.status_code == 200
    assert resp.json()["schedule"]["date"] == date.today().isoformat()
    assert resp.json()["schedule"]["overall_confidence"] == 100


def test_catalog_endpoint_lists_builtin_entries(client) -> None:
    test_client, _ = client

    resp = test_client.get("/schedule/catalog")

    assert resp.status_code == 200
    body = resp.json()
    names = {profile["canonical_name"] for profile in body["profiles"]}
    assert {"levothyroxine", "iron_supplement", "caffeine"}.issubset(names)
    assert any(rule["rule_key"] == "sucralfate-binds-meds" for rule in body["rules"])
    assert body["request_id"] == resp.headers["X-Request-Id"]
