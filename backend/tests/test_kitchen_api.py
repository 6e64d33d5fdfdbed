"""
Tests for the saved-state endpoints under /api/v1/kitchen.

get_session is overridden with a KitchenSession on a MemoryStore and get_kitchen_ai
with StubKitchenAI, so every request shares one in-memory kitchen.
"""

import json

import pytest
from fastapi.testclient import TestClient

from conftest import StubKitchenAI
from longevity_chef.config import get_settings
from longevity_chef.main import app
from longevity_chef.routers.kitchen import get_session
from longevity_chef.services.kitchen_ai import get_kitchen_ai
from longevity_chef.services.session import KitchenSession
from longevity_chef.storage import PANTRY_KEY, PLAN_KEY, JsonFileStore, MemoryStore

PREFIX = "/api/v1/kitchen"


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def session(store, profile):
    return KitchenSession(store, profile=profile)


@pytest.fixture
def stub():
    return StubKitchenAI()


@pytest.fixture
def client(session, stub):
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_kitchen_ai] = lambda: stub
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def recipe_payload(salmon_recipe):
    return salmon_recipe.model_dump(mode="json", by_alias=True)


def test_get_session_reads_state_file(tmp_path, monkeypatch):
    path = tmp_path / "kitchen.json"
    JsonFileStore(str(path)).set(PANTRY_KEY, "miso")
    monkeypatch.setenv("STATE_FILE", str(path))
    get_settings.cache_clear()
    try:
        session = get_session()
    finally:
        get_settings.cache_clear()
    assert session.pantry == "miso"


def test_state(client):
    body = client.get(f"{PREFIX}/state").json()
    assert body["profile"]["dietaryRestrictions"] == ["No Red Meat"]
    assert body["favorites"] == []
    assert list(body["plan"]) == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
    assert body["shoppingList"] == []
    assert body["pantryItems"] == ""


def test_profile_and_pantry_updates(client, session):
    res = client.put(f"{PREFIX}/profile", json={"name": "Sam", "maxCookingMinutes": 20})
    assert res.json()["maxCookingMinutes"] == 20
    assert session.profile.name == "Sam"

    res = client.put(f"{PREFIX}/pantry", json={"pantryItems": "rice, beans"})
    assert res.json() == {"pantryItems": "rice, beans"}
    assert session.pantry == "rice, beans"


class TestPlanEndpoints:

    def test_add_move_remove(self, client, store, recipe_payload):
        res = client.post(f"{PREFIX}/plan/Monday", json=recipe_payload)
        assert res.status_code == 201
        assert res.json()["Monday"][0]["id"] == "salmon-1"

        res = client.post(f"{PREFIX}/plan/move", json={
            "fromDay": "Monday", "toDay": "Friday", "recipe": recipe_payload,
        })
        assert res.json()["Monday"] == []
        assert json.loads(store.get(PLAN_KEY))["Friday"][0]["id"] == "salmon-1"

        res = client.delete(f"{PREFIX}/plan/Friday/salmon-1")
        assert res.json()["Friday"] == []

    @pytest.mark.parametrize("method, path", [
        ("post", "/plan/Funday"),
        ("delete", "/plan/Funday/salmon-1"),
        ("post", "/plan/Funday/regenerate"),
    ])
    def test_unknown_day_is_404(self, client, recipe_payload, method, path):
        kwargs = {"json": recipe_payload} if method == "post" else {}
        res = getattr(client, method)(f"{PREFIX}{path}", **kwargs)
        assert res.status_code == 404

    def test_regenerate(self, client, stub, recipe_payload):
        client.post(f"{PREFIX}/plan/Tuesday", json=recipe_payload)

        res = client.post(f"{PREFIX}/plan/Tuesday/regenerate", json=recipe_payload)

        assert res.json()["recipe"]["title"] == "New Recipe 1"
        assert stub.calls == [("generate", 1, 2, None, None)]

    def test_auto_plan_and_clear(self, client, session, stub):
        res = client.post(f"{PREFIX}/plan/auto", json={
            "ingredientsToUseUp": "tofu", "selectedDays": ["Monday", "Tuesday"], "maxTime": 30,
        })

        plan = res.json()["plan"]
        assert [r["title"] for r in plan["Monday"]] == ["Use-up Recipe 1"]
        assert stub.calls == [("generate", 2, 2, "tofu", 30)]
        assert session.pantry == "tofu"

        state = client.delete(f"{PREFIX}/plan").json()
        assert all(recipes == [] for recipes in state["plan"].values())
        assert state["pantryItems"] == ""

    def test_auto_plan_without_days(self, client, stub):
        res = client.post(f"{PREFIX}/plan/auto", json={"selectedDays": []})
        assert res.json() == {"plan": None}
        assert stub.calls == []


class TestFavoriteEndpoints:

    def test_toggle(self, client, session, recipe_payload):
        assert client.post(f"{PREFIX}/favorites/toggle", json=recipe_payload).json() == {"favorite": True}
        assert session.is_favorite("salmon-1")
        assert client.post(f"{PREFIX}/favorites/toggle", json=recipe_payload).json() == {"favorite": False}

    def test_customize_updates_saved_copies(self, client, session, stub, salmon_recipe, recipe_payload):
        client.post(f"{PREFIX}/favorites/toggle", json=recipe_payload)
        client.post(f"{PREFIX}/plan/Monday", json=recipe_payload)
        stub.customized = salmon_recipe.model_copy(update={"title": "Spicy Salmon"})

        res = client.post(f"{PREFIX}/recipes/customize", json={"recipe": recipe_payload, "instruction": "spicy"})

        assert res.json()["recipe"]["title"] == "Spicy Salmon"
        assert session.favorites[0].title == "Spicy Salmon"
        assert session.plan["Monday"][0].title == "Spicy Salmon"


class TestShoppingEndpoints:

    def test_generate_and_edit(self, client, session, stub, recipe_payload, shopping_items):
        client.post(f"{PREFIX}/plan/Monday", json=recipe_payload)
        stub.shopping = shopping_items

        res = client.post(f"{PREFIX}/shopping-list/generate")
        assert [i["name"] for i in res.json()] == ["broccoli", "salmon"]

        assert client.post(f"{PREFIX}/shopping-list/0/checked").json()["checked"] is True
        assert client.post(f"{PREFIX}/shopping-list/1/already-have").json()["alreadyHave"] is True

        res = client.delete(f"{PREFIX}/shopping-list/0")
        assert [i["name"] for i in res.json()] == ["salmon"]

    def test_add_item(self, client, stub):
        res = client.post(f"{PREFIX}/shopping-list/items", json={"name": "kale", "amount": "1 bunch"})
        assert res.json()["item"]["category"] == "Produce"

        res = client.post(f"{PREFIX}/shopping-list/items", json={"name": " ", "amount": "1"})
        assert res.json() == {"item": None}

    @pytest.mark.parametrize("method, path", [
        ("post", "/shopping-list/3/checked"),
        ("post", "/shopping-list/-1/already-have"),
        ("delete", "/shopping-list/0"),
    ])
    def test_missing_item_is_404(self, client, method, path):
        assert getattr(client, method)(f"{PREFIX}{path}").status_code == 404
