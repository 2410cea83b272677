"""Tests for store module."""

import sqlite3

import pytest

from promptbot.contracts import EventKind, TopicState, TurnEvent, UserProfile
from promptbot.errors import StateStoreError
from promptbot.store import (
    CONVERSATION_SCOPE,
    TOPIC_STATE_NAME,
    USER_PROFILE_NAME,
    USER_SCOPE,
    MemoryStorage,
    SqliteStorage,
    Storage,
    TurnLogWriter,
    topic_state_accessor,
    user_profile_accessor,
)


@pytest.fixture(params=["memory", "sqlite"])
def storage(request, tmp_path):
    if request.param == "memory":
        return MemoryStorage()
    return SqliteStorage(tmp_path / "state.db")


class TestStorage:
    def test_implements_protocol(self, storage):
        assert isinstance(storage, Storage)

    def test_read_missing(self, storage):
        assert storage.read(("user", "u1", "profile")) is None

    def test_write_and_read(self, storage):
        key = ("user", "u1", "profile")
        storage.write(key, {"user_name": "Alice"})
        assert storage.read(key) == {"user_name": "Alice"}

    def test_overwrite(self, storage):
        key = ("user", "u1", "profile")
        storage.write(key, {"user_name": "Alice"})
        storage.write(key, {"user_name": "Bob"})
        assert storage.read(key) == {"user_name": "Bob"}

    def test_read_returns_copy(self, storage):
        key = ("user", "u1", "profile")
        storage.write(key, {"user_name": "Alice"})
        storage.read(key)["user_name"] = "Mallory"
        assert storage.read(key) == {"user_name": "Alice"}

    def test_delete(self, storage):
        key = ("user", "u1", "profile")
        storage.write(key, {})
        assert storage.delete(key) is True
        assert storage.delete(key) is False
        assert storage.read(key) is None

    def test_clear_by_scope(self, storage):
        storage.write(("user", "u1", "p"), {})
        storage.write(("user", "u2", "p"), {})
        storage.write(("conversation", "c1", "p"), {})

        assert storage.clear("user") == 2
        assert storage.read(("conversation", "c1", "p")) == {}

        assert storage.clear() == 1
        assert storage.read(("conversation", "c1", "p")) is None


class TestSqliteStorage:
    def test_persists_across_instances(self, tmp_path):
        db_path = tmp_path / "nested" / "state.db"
        SqliteStorage(db_path).write(("user", "u1", "p"), {"age": 30})
        assert SqliteStorage(db_path).read(("user", "u1", "p")) == {"age": 30}


class TestStatePropertyAccessor:
    @pytest.mark.asyncio
    async def test_default_factory_when_missing(self, storage):
        accessor = topic_state_accessor(storage)
        state = await accessor.get("c1", TopicState.new)
        assert state == TopicState.new()

    @pytest.mark.asyncio
    async def test_default_model_without_factory(self, storage):
        assert await user_profile_accessor(storage).get("u1") == UserProfile()

    @pytest.mark.asyncio
    async def test_read_your_writes(self, storage):
        accessor = user_profile_accessor(storage)
        profile = UserProfile(user_name="Alice", age=30)
        await accessor.set("u1", profile)
        assert await accessor.get("u1", UserProfile) == profile

    @pytest.mark.asyncio
    async def test_scopes_are_independent(self, storage):
        await topic_state_accessor(storage).set("same-id", TopicState())
        await user_profile_accessor(storage).set("same-id", UserProfile(user_name="A"))

        assert storage.read((CONVERSATION_SCOPE, "same-id", TOPIC_STATE_NAME)) == {
            "topic": None,
            "prompt": None,
        }
        assert storage.read((USER_SCOPE, "same-id", USER_PROFILE_NAME))["user_name"] == "A"

    @pytest.mark.asyncio
    async def test_delete(self, storage):
        accessor = user_profile_accessor(storage)
        await accessor.set("u1", UserProfile(user_name="Alice"))
        assert await accessor.delete("u1") is True
        assert await accessor.get("u1") == UserProfile()

    @pytest.mark.asyncio
    async def test_invalid_stored_state(self, storage):
        storage.write((USER_SCOPE, "u1", USER_PROFILE_NAME), {"age": "not a number"})
        with pytest.raises(StateStoreError):
            await user_profile_accessor(storage).get("u1")

    @pytest.mark.asyncio
    async def test_corrupt_json(self, tmp_path):
        db_path = tmp_path / "state.db"
        storage = SqliteStorage(db_path)
        conn = sqlite3.connect(db_path)
        conn.execute(
            "INSERT INTO state VALUES (?, ?, ?, ?, ?)",
            (USER_SCOPE, "u1", USER_PROFILE_NAME, "{not json", "2024-01-01"),
        )
        conn.commit()
        conn.close()

        with pytest.raises(StateStoreError):
            await user_profile_accessor(storage).get("u1")


def make_event(conversation_id="c1", turn_id=1, seq=0, kind=EventKind.TURN_STARTED, **payload):
    return TurnEvent(
        conversation_id=conversation_id,
        turn_id=turn_id,
        seq=seq,
        ts_monotonic=1000.0 + seq,
        kind=kind,
        payload=payload,
    )


class TestTurnLogWriter:
    def test_append_and_replay(self, tmp_path):
        log = TurnLogWriter(tmp_path / "test.db")

        log.append(make_event(seq=0, text="hello"))
        log.append(make_event(seq=1, kind=EventKind.TURN_COMPLETED, messages=["hi"]))

        events = list(log.replay_turn("c1", 1))
        assert len(events) == 2
        assert events[0].kind == EventKind.TURN_STARTED
        assert events[0].payload == {"text": "hello"}
        assert events[1].kind == EventKind.TURN_COMPLETED

    def test_next_seq(self, tmp_path):
        log = TurnLogWriter(tmp_path / "test.db")

        assert log.next_seq("c1", 1) == 0
        assert log.next_seq("c1", 1) == 1
        assert log.next_seq("c1", 1) == 2
        assert log.next_seq("c1", 2) == 0  # New turn resets

    def test_duplicate_seq_rejected(self, tmp_path):
        log = TurnLogWriter(tmp_path / "test.db")
        log.append(make_event(seq=0))
        with pytest.raises(sqlite3.IntegrityError):
            log.append(make_event(seq=0))
        assert log.count_events("c1") == 1

    def test_replay_conversation(self, tmp_path):
        log = TurnLogWriter(tmp_path / "test.db")

        for turn_id in (3, 1, 2):
            log.append(make_event(turn_id=turn_id))
        log.append(make_event(conversation_id="other"))

        events = list(log.replay_conversation("c1"))
        assert [e.turn_id for e in events] == [1, 2, 3]

    def test_get_events_by_kind(self, tmp_path):
        log = TurnLogWriter(tmp_path / "test.db")

        log.append(make_event(seq=0))
        log.append(make_event(seq=1, kind=EventKind.FIELD_CAPTURED, field="UserName"))
        log.append(make_event(turn_id=2, seq=0, kind=EventKind.FIELD_CAPTURED, field="Age"))

        captured = log.get_events_by_kind("c1", EventKind.FIELD_CAPTURED)
        assert [e.payload["field"] for e in captured] == ["Age", "UserName"]

    def test_get_last_turn_id(self, tmp_path):
        log = TurnLogWriter(tmp_path / "test.db")

        assert log.get_last_turn_id("c1") == 0
        for turn_id in range(1, 6):
            log.append(make_event(turn_id=turn_id))
        assert log.get_last_turn_id("c1") == 5

    def test_get_conversation_ids(self, tmp_path):
        log = TurnLogWriter(tmp_path / "test.db")

        log.append(make_event(conversation_id="a"))
        log.append(make_event(conversation_id="b"))
        log.append(make_event(conversation_id="a", turn_id=2))

        assert log.get_conversation_ids() == ["a", "b"]

    def test_count_events(self, tmp_path):
        log = TurnLogWriter(tmp_path / "test.db")

        log.append(make_event(seq=0))
        log.append(make_event(seq=1))
        log.append(make_event(turn_id=2))
        log.append(make_event(conversation_id="other"))

        assert log.count_events() == 4
        assert log.count_events("c1") == 3
        assert log.count_events("c1", 1) == 2
