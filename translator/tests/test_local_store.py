import json

import pytest

from translator.errors import HistoryEntryNotFound, PersistenceFailure
from translator.models import HistoryDraft
from translator.preferences import ThemePreference
from translator.storage import InMemoryKeyValueStore, JsonFileKeyValueStore, LocalHistoryStore


def _draft(index: int) -> HistoryDraft:
    return HistoryDraft(
        source_text=f"text {index}",
        translation=f"translation {index}",
        source_language="en",
        target_language="fr",
    )


@pytest.mark.asyncio
async def test_fifty_one_appends_evict_the_oldest():
    store = LocalHistoryStore(InMemoryKeyValueStore())

    appended = [await store.append(_draft(i)) for i in range(1, 52)]
    listed = await store.list()

    assert len(listed) == 50
    assert [entry.source_text for entry in listed] == [f"text {i}" for i in range(51, 1, -1)]
    assert [entry.id for entry in listed] == [entry.id for entry in reversed(appended[1:])]
    assert appended[0].id not in {entry.id for entry in listed}


@pytest.mark.asyncio
async def test_append_assigns_identity_and_timestamp():
    store = LocalHistoryStore(InMemoryKeyValueStore())

    first = await store.append(_draft(1))
    second = await store.append(_draft(2))

    assert first.id and second.id and first.id != second.id
    assert first.created_at.tzinfo is not None
    assert first.created_at <= second.created_at
    assert first.is_favorite is False


@pytest.mark.asyncio
async def test_set_favorite_twice_is_idempotent_and_toggle_round_trips():
    store = LocalHistoryStore(InMemoryKeyValueStore())
    entry = await store.append(_draft(1))

    await store.set_favorite(entry.id, True)
    await store.set_favorite(entry.id, True)
    assert (await store.get(entry.id)).is_favorite is True

    assert await store.toggle_favorite(entry.id) is False
    assert await store.toggle_favorite(entry.id) is True
    assert await store.toggle_favorite(entry.id) is False
    assert (await store.list())[0].is_favorite is False


@pytest.mark.asyncio
async def test_unknown_id_raises_not_found():
    store = LocalHistoryStore(InMemoryKeyValueStore())
    await store.append(_draft(1))

    with pytest.raises(HistoryEntryNotFound):
        await store.set_favorite("nope", True)
    with pytest.raises(HistoryEntryNotFound):
        await store.toggle_favorite("nope")


@pytest.mark.asyncio
async def test_clear_all_empties_only_the_history_slot():
    kv = InMemoryKeyValueStore({"theme": "dark"})
    store = LocalHistoryStore(kv)
    await store.append(_draft(1))

    await store.clear_all()

    assert await store.list() == []
    assert kv.get("theme") == "dark"


@pytest.mark.asyncio
async def test_slot_layout_is_newest_first_json_array():
    kv = InMemoryKeyValueStore()
    store = LocalHistoryStore(kv, key="history")
    await store.append(_draft(1))
    await store.append(_draft(2))

    items = json.loads(kv.get("history"))

    assert [item["source_text"] for item in items] == ["text 2", "text 1"]
    assert set(items[0]) == {
        "id",
        "created_at",
        "source_text",
        "translation",
        "source_language",
        "target_language",
        "is_favorite",
    }


@pytest.mark.asyncio
async def test_corrupt_slot_is_a_persistence_failure():
    store = LocalHistoryStore(InMemoryKeyValueStore({"translation_history": "{not json"}))

    with pytest.raises(PersistenceFailure):
        await store.list()
    with pytest.raises(PersistenceFailure):
        await store.append(_draft(1))


@pytest.mark.asyncio
async def test_json_file_store_survives_a_restart(tmp_path):
    path = tmp_path / "nested" / "state.json"
    store = LocalHistoryStore(JsonFileKeyValueStore(path))
    entry = await store.append(_draft(1))
    await store.set_favorite(entry.id, True)

    reopened = LocalHistoryStore(JsonFileKeyValueStore(path))
    (restored,) = await reopened.list()

    assert restored == entry.with_favorite(True)


def test_json_file_store_missing_file_reads_empty(tmp_path):
    kv = JsonFileKeyValueStore(tmp_path / "absent.json")
    assert kv.get("anything") is None
    kv.delete("anything")
    assert not (tmp_path / "absent.json").exists()


def test_json_file_store_unreadable_file_fails(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(PersistenceFailure):
        JsonFileKeyValueStore(path).get("theme")


def test_theme_preference_defaults_and_toggles():
    kv = InMemoryKeyValueStore()
    theme = ThemePreference(kv)

    assert theme.get() == "light"
    assert theme.toggle() == "dark"
    assert kv.get("theme") == "dark"
    assert ThemePreference(kv).get() == "dark"

    kv.set("theme", "purple")
    assert theme.get() == "light"
    with pytest.raises(ValueError):
        theme.set("purple")
