"""Tests for contracts module."""

import pytest
from pydantic import ValidationError

from promptbot.contracts import (
    PROFILE_TOPIC,
    Activity,
    ActivityKind,
    EventKind,
    TopicState,
    TurnEvent,
    UserProfile,
)


class TestTopicState:
    def test_new_starts_profile_topic(self):
        state = TopicState.new()
        assert state.topic == PROFILE_TOPIC
        assert state.prompt is None
        assert state.collecting

    def test_idle_state_not_collecting(self):
        assert not TopicState().collecting

    def test_immutable(self):
        state = TopicState.new()
        with pytest.raises(ValidationError):
            state.prompt = "UserName"

    def test_json_round_trip_keeps_prompt(self):
        state = TopicState(topic=PROFILE_TOPIC, prompt="Age")
        assert TopicState.model_validate(state.model_dump(mode="json")) == state


class TestUserProfile:
    def test_empty_profile(self):
        profile = UserProfile()
        assert profile.user_name is None
        assert profile.age is None
        assert profile.work_place is None

    def test_copy_with_update(self):
        profile = UserProfile(user_name="Alice")
        updated = profile.model_copy(update={"age": 30})
        assert updated.age == 30
        assert updated.user_name == "Alice"
        assert profile.age is None


class TestActivity:
    def test_message_factory(self):
        activity = Activity.message("hello", "c1", "u1")
        assert activity.kind is ActivityKind.MESSAGE
        assert activity.text == "hello"

    def test_requires_identities(self):
        with pytest.raises(ValidationError):
            Activity.message("hello", "", "u1")

    def test_kind_from_wire_value(self):
        activity = Activity(kind="conversationUpdate", conversation_id="c1", user_id="u1")
        assert activity.kind is ActivityKind.CONVERSATION_UPDATE


class TestTurnEvent:
    def test_event_creation(self):
        event = TurnEvent(
            conversation_id="c1",
            turn_id=1,
            seq=0,
            ts_monotonic=1000.0,
            kind=EventKind.TURN_STARTED,
            payload={"text": "hello"},
        )
        assert event.conversation_id == "c1"
        assert event.kind == EventKind.TURN_STARTED

    def test_event_immutable(self):
        event = TurnEvent(
            conversation_id="c1",
            turn_id=1,
            seq=0,
            ts_monotonic=1000.0,
            kind=EventKind.TURN_STARTED,
        )
        with pytest.raises(ValidationError):
            event.turn_id = 2

    def test_turn_ids_start_at_one(self):
        with pytest.raises(ValidationError):
            TurnEvent(
                conversation_id="c1",
                turn_id=0,
                seq=0,
                ts_monotonic=1000.0,
                kind=EventKind.TURN_STARTED,
            )
