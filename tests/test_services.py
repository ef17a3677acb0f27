import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock
from lightbnb.errors import InvalidFilter, StoreError
from lightbnb.schemas.search import SearchFilter
from lightbnb.services import properties, reservations, users
from lightbnb.services.properties import SearchFound, SearchNoMatches, SearchStoreUnavailable

PROPERTY_ROW = {
    "id": 1,
    "owner_id": 7,
    "title": "Speed lamp",
    "description": "description",
    "thumbnail_photo_url": "https://images.example.com/1.jpeg",
    "cover_photo_url": "https://images.example.com/1-cover.jpeg",
    "cost_per_night": 93061,
    "street": "536 Namsub Highway",
    "city": "Sotboske",
    "province": "Quebec",
    "post_code": "28142",
    "country": "Canada",
    "parking_spaces": 6,
    "number_of_bathrooms": 4,
    "number_of_bedrooms": 8,
    "active": True,
}

class FakeStore:
    def __init__(self, rows=None, error=None):
        self.execute = AsyncMock(return_value=rows or [], side_effect=error)

@pytest.mark.asyncio
async def test_search_returns_found_outcome():
    store = FakeStore(rows=[{**PROPERTY_ROW, "average_rating": 4.2}])
    outcome = await properties.get_all_properties({"city": "Sot"}, store=store)
    assert isinstance(outcome, SearchFound)
    found = list(outcome.properties)
    assert found[0].city == "Sotboske"
    assert found[0].average_rating == pytest.approx(4.2)
    # one-shot
    assert list(outcome.properties) == []
    query_text, parameters = store.execute.await_args.args
    assert "WHERE city LIKE $1" in query_text
    assert parameters == ["%Sot%", 10]

@pytest.mark.asyncio
async def test_search_distinguishes_no_matches():
    store = FakeStore(rows=[])
    outcome = await properties.get_all_properties({}, limit=5, store=store)
    assert isinstance(outcome, SearchNoMatches)
    assert store.execute.await_args.args[1] == [5]

@pytest.mark.asyncio
async def test_search_reports_store_failure():
    store = FakeStore(error=StoreError("connection refused"))
    outcome = await properties.get_all_properties({"owner_id": 7}, store=store)
    assert outcome == SearchStoreUnavailable(reason="connection refused")

@pytest.mark.asyncio
async def test_search_rejects_malformed_filter_before_querying():
    store = FakeStore()
    with pytest.raises(InvalidFilter):
        await properties.get_all_properties({"maximum_price_per_night": "lots"}, store=store)
    store.execute.assert_not_awaited()

@pytest.mark.asyncio
async def test_search_accepts_search_filter_and_limit_override():
    store = FakeStore()
    await properties.get_all_properties(SearchFilter(owner_id=7), limit=3, store=store)
    assert store.execute.await_args.args[1] == [7, 3]

@pytest.mark.asyncio
async def test_search_uses_default_store(monkeypatch):
    store = FakeStore()
    monkeypatch.setattr("lightbnb.services.properties.get_store", lambda: store)
    outcome = await properties.get_all_properties()
    assert isinstance(outcome, SearchNoMatches)
    store.execute.assert_awaited_once()

@pytest.mark.asyncio
async def test_add_property_binds_typed_values():
    store = FakeStore(rows=[PROPERTY_ROW])
    payload = {k: v for k, v in PROPERTY_ROW.items() if k not in ("id", "province", "active")}
    payload["provence"] = "Quebec"
    created = await properties.add_property(payload, store=store)
    assert created.id == 1
    query_text, values = store.execute.await_args.args
    assert query_text.startswith("INSERT INTO properties")
    assert "RETURNING *" in query_text
    assert len(values) == 14
    assert values[0] == 7
    assert values[5] == 93061
    assert values[8] == "Quebec"

@pytest.mark.asyncio
async def test_add_property_propagates_store_error():
    store = FakeStore(error=StoreError("violates foreign key constraint"))
    payload = {"owner_id": 999, "title": "t", "cost_per_night": 1, "city": "c"}
    with pytest.raises(StoreError):
        await properties.add_property(payload, store=store)

@pytest.mark.asyncio
async def test_get_user_with_email():
    row = {"id": 1, "name": "Devin Sanders", "email": "tristanjacobs@gmail.com", "password": "hash"}
    store = FakeStore(rows=[row])
    user = await users.get_user_with_email("tristanjacobs@gmail.com", store=store)
    assert user.name == "Devin Sanders"
    assert store.execute.await_args.args == ("SELECT * FROM users WHERE email = $1;", ["tristanjacobs@gmail.com"])

@pytest.mark.asyncio
async def test_get_user_with_id_not_found():
    store = FakeStore(rows=[])
    assert await users.get_user_with_id(42, store=store) is None
    assert store.execute.await_args.args[1] == [42]

@pytest.mark.asyncio
async def test_get_user_propagates_store_error():
    store = FakeStore(error=StoreError("timeout"))
    with pytest.raises(StoreError):
        await users.get_user_with_id(1, store=store)

@pytest.mark.asyncio
async def test_add_user_returns_created_row():
    store = FakeStore(rows=[{"id": 5, "name": "A", "email": "a@example.com", "password": "pw"}])
    created = await users.add_user({"name": "A", "email": "a@example.com", "password": "pw"}, store=store)
    assert created.id == 5
    query_text, values = store.execute.await_args.args
    assert "INSERT INTO users (name, email, password)" in query_text
    assert values == ["A", "a@example.com", "pw"]

@pytest.mark.asyncio
async def test_get_all_reservations_binds_guest_and_limit():
    row = {
        **PROPERTY_ROW,
        "reservation_id": 3,
        "guest_id": 1,
        "start_date": date(2030, 9, 13),
        "end_date": date(2030, 9, 26),
        "average_rating": 3.9,
    }
    store = FakeStore(rows=[row])
    result = await reservations.get_all_reservations(1, store=store)
    assert result[0].reservation_id == 3
    assert result[0].id == 1
    query_text, parameters = store.execute.await_args.args
    assert "reservations.guest_id = $1" in query_text
    assert "ORDER BY reservations.start_date" in query_text
    assert parameters == [1, 10]

@pytest.mark.asyncio
async def test_get_all_reservations_rejects_bad_limit():
    with pytest.raises(ValueError):
        await reservations.get_all_reservations(1, limit=0, store=FakeStore())

@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [0, -1])
async def test_search_rejects_bad_limit_override_on_search_filter(limit):
    store = FakeStore()
    with pytest.raises(InvalidFilter) as excinfo:
        await properties.get_all_properties(SearchFilter(owner_id=7), limit=limit, store=store)
    assert "limit" in excinfo.value.fields
    store.execute.assert_not_awaited()

@pytest.mark.asyncio
async def test_search_query_is_not_logged_by_default(monkeypatch):
    logger = MagicMock()
    monkeypatch.setattr("lightbnb.services.properties.logger", logger)
    await properties.get_all_properties({}, store=FakeStore())
    logger.debug.assert_not_called()
