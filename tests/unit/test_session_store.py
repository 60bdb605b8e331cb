"""Unit tests for SessionStore and title generation."""

import json

import pytest
import pytest_check as check

import pdfchat.store.session_store as session_store_module
from pdfchat.models.schemas import Attachment, ChatMessage, Role
from pdfchat.store.session_store import (
    DEFAULT_TITLE,
    STORAGE_KEY,
    SessionStore,
    generate_title,
    new_session_id,
)


class TestGenerateTitle:
    def test_short_message_kept_unmodified(self) -> None:
        message = "What does section 3 say?"

        assert generate_title(message) == message

    def test_exactly_thirty_characters_kept(self) -> None:
        message = "x" * 30

        assert generate_title(message) == message

    def test_long_message_truncated_with_ellipsis(self) -> None:
        message = "Summarize the termination clauses of this contract"

        assert len(message) == 50
        assert generate_title(message) == message[:30] + "..."

    def test_empty_message_is_new_chat(self) -> None:
        assert generate_title("") == DEFAULT_TITLE


class TestSessionIds:
    def test_id_is_millisecond_timestamp(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(session_store_module.time, "time", lambda: 1718000000.5)

        assert new_session_id() == "1718000000500"

    def test_collision_bumps_id(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(session_store_module.time, "time", lambda: 1718000000.5)

        assert new_session_id({"1718000000500", "1718000000501"}) == "1718000000502"

    def test_sessions_created_in_same_millisecond_are_unique(
        self, store: SessionStore, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(session_store_module.time, "time", lambda: 1718000000.0)

        ids = {store.create().id for _ in range(3)}

        assert len(ids) == 3


class TestSessionStoreMutations:
    def test_create_persists_immediately(
        self, store: SessionStore, storage: dict[str, str]
    ) -> None:
        session = store.create()

        saved = json.loads(storage[STORAGE_KEY])
        check.equal(len(saved), 1)
        check.equal(saved[0]["id"], session.id)
        check.equal(saved[0]["title"], DEFAULT_TITLE)
        check.equal(saved[0]["messages"], [])
        check.is_in("createdAt", saved[0])

    def test_newest_session_first(self, store: SessionStore) -> None:
        first = store.create()
        second = store.create()

        assert [s.id for s in store.sessions] == [second.id, first.id]

    def test_create_then_delete_leaves_empty_list(
        self, store: SessionStore, storage: dict[str, str]
    ) -> None:
        session = store.create()

        assert store.delete(session.id) is True
        assert store.sessions == []
        assert json.loads(storage[STORAGE_KEY]) == []

    def test_delete_unknown_id(self, store: SessionStore) -> None:
        store.create()

        assert store.delete("missing") is False
        assert len(store.sessions) == 1

    def test_update_sets_title_from_first_message_once(self, store: SessionStore) -> None:
        session = store.create()
        first = ChatMessage(role=Role.USER, content="What does section 3 say?")

        store.update(session.id, [first])
        store.update(
            session.id,
            [first, ChatMessage(role=Role.USER, content="And what about section 4?")],
        )

        assert store.get(session.id).title == "What does section 3 say?"

    def test_update_with_empty_first_message_keeps_default_title(
        self, store: SessionStore
    ) -> None:
        session = store.create()
        attachment = Attachment(content_type="application/pdf", url="https://f.test/doc")

        store.update(session.id, [ChatMessage(role=Role.USER, attachments=[attachment])])

        assert store.get(session.id).title == DEFAULT_TITLE

    def test_update_unknown_session(self, store: SessionStore) -> None:
        assert store.update("missing", []) is None


class TestSessionStorePersistence:
    def test_round_trip_preserves_sessions(self, storage: dict[str, str]) -> None:
        store = SessionStore(storage)
        session = store.create()
        messages = [
            ChatMessage(
                role=Role.USER,
                content="Summarize this",
                attachments=[
                    Attachment(
                        content_type="application/pdf",
                        url="data:application/pdf;base64,JVBERi0=",
                        name="doc.pdf",
                    )
                ],
            ),
            ChatMessage(role=Role.ASSISTANT, content="It is a report about Q3."),
        ]
        store.update(session.id, messages)

        reloaded = SessionStore(storage).get(session.id)

        assert reloaded is not None
        assert reloaded.created_at == session.created_at
        assert reloaded.messages == messages
        assert reloaded.title == "Summarize this"

    def test_truncated_json_yields_empty_list(self, storage: dict[str, str]) -> None:
        store = SessionStore(storage)
        store.create()
        storage[STORAGE_KEY] = storage[STORAGE_KEY][:-5]

        reloaded = SessionStore(storage)

        assert reloaded.sessions == []
        assert STORAGE_KEY not in storage

    def test_non_list_payload_discarded(self) -> None:
        storage = {STORAGE_KEY: json.dumps({"id": "1"})}

        assert SessionStore(storage).sessions == []
        assert STORAGE_KEY not in storage

    def test_invalid_record_dropped_others_kept(self) -> None:
        good = {
            "id": "1718000000000",
            "title": "Kept",
            "messages": [{"role": "user", "content": "hi"}],
            "createdAt": "2024-06-10T06:13:20.000Z",
        }
        bad = {"id": "1718000000001", "title": "Broken", "createdAt": "not a date"}
        storage = {STORAGE_KEY: json.dumps([bad, good])}

        sessions = SessionStore(storage).sessions

        assert [s.title for s in sessions] == ["Kept"]

    def test_duplicate_ids_keep_first(self) -> None:
        record = {"id": "1", "title": "First", "messages": [], "createdAt": "2024-06-10T06:13:20Z"}
        storage = {STORAGE_KEY: json.dumps([record, {**record, "title": "Second"}])}

        assert [s.title for s in SessionStore(storage).sessions] == ["First"]

    def test_missing_key_is_empty(self) -> None:
        assert SessionStore({}).sessions == []
