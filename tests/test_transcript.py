"""Unit tests for the transcript module."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from causerie.errors import TranscriptError
from causerie.transcript import (
    ChangeKind,
    MessageStatus,
    Role,
    Transcript,
)


class TestAppend:
    """Tests for appending messages."""

    def test_messages_keep_insertion_order(self, transcript):
        """Test that messages come back in the order they were appended."""
        user = transcript.append_user("Hello")
        assistant = transcript.append_placeholder()

        assert [m.id for m in transcript.messages] == [user.id, assistant.id]
        assert [m.role for m in transcript] == [Role.USER, Role.ASSISTANT]
        assert len(transcript) == 2
        assert transcript.last() == assistant

    def test_ids_are_unique(self, transcript):
        """Test that every appended message gets a fresh id."""
        ids = {transcript.append_user(f"msg {i}").id for i in range(50)}
        assert len(ids) == 50

    def test_placeholder_starts_empty_and_streaming(self, transcript):
        """Test the initial state of an assistant placeholder."""
        placeholder = transcript.append_placeholder()

        assert placeholder.content == ""
        assert placeholder.status is MessageStatus.STREAMING
        assert placeholder.is_streaming

    def test_user_message_is_complete(self, transcript):
        """Test that user messages cannot grow."""
        user = transcript.append_user("Hello")

        assert user.status is MessageStatus.COMPLETE
        with pytest.raises(TranscriptError):
            transcript.append_fragment(user.id, "!")

    def test_unknown_id_raises(self, transcript):
        """Test that mutating an unknown message fails."""
        with pytest.raises(TranscriptError, match="Unknown message id"):
            transcript.append_fragment("nope", "x")


class TestStreamingMutations:
    """Tests for folding, finalizing and failing a placeholder."""

    def test_fragments_are_concatenated(self, transcript):
        """Test that fragments are appended in order."""
        placeholder = transcript.append_placeholder()

        transcript.append_fragment(placeholder.id, "Bon")
        transcript.append_fragment(placeholder.id, "jour")

        assert transcript.get(placeholder.id).content == "Bonjour"

    def test_finalize_freezes_content(self, transcript):
        """Test that a finalized message can no longer change."""
        placeholder = transcript.append_placeholder()
        transcript.append_fragment(placeholder.id, "Bonjour")

        final = transcript.finalize(placeholder.id)

        assert final.status is MessageStatus.COMPLETE
        assert final.content == "Bonjour"
        with pytest.raises(TranscriptError):
            transcript.append_fragment(placeholder.id, "!")
        with pytest.raises(TranscriptError):
            transcript.fail(placeholder.id, "error")
        with pytest.raises(TranscriptError):
            transcript.finalize(placeholder.id)

    def test_fail_replaces_content_in_full(self, transcript):
        """Test that failing replaces rather than appends."""
        placeholder = transcript.append_placeholder()
        transcript.append_fragment(placeholder.id, "He")

        failed = transcript.fail(placeholder.id, "Erreur")

        assert failed.content == "Erreur"
        assert failed.status is MessageStatus.FAILED
        with pytest.raises(TranscriptError):
            transcript.append_fragment(placeholder.id, "llo")

    def test_snapshots_are_not_mutated(self, transcript):
        """Test that a snapshot taken earlier keeps its old content."""
        placeholder = transcript.append_placeholder()
        before = transcript.messages

        transcript.append_fragment(placeholder.id, "Bon")

        assert before[0].content == ""
        assert transcript.messages[0].content == "Bon"
        assert before[0].id == transcript.messages[0].id

    @given(st.lists(st.text(min_size=1), max_size=30))
    def test_content_is_concatenation_of_fragments(self, fragments: list[str]):
        """Property test: content equals the ordered concatenation of fragments."""
        transcript = Transcript()
        placeholder = transcript.append_placeholder()

        for fragment in fragments:
            transcript.append_fragment(placeholder.id, fragment)

        assert transcript.finalize(placeholder.id).content == "".join(fragments)


class TestObservers:
    """Tests for change notifications."""

    def test_every_mutation_notifies(self, transcript):
        """Test the sequence of change kinds for a full turn."""
        changes = []
        transcript.subscribe(changes.append)

        transcript.append_user("Hello")
        placeholder = transcript.append_placeholder()
        transcript.append_fragment(placeholder.id, "Bon")
        transcript.append_fragment(placeholder.id, "jour")
        transcript.finalize(placeholder.id)

        assert [c.kind for c in changes] == [
            ChangeKind.APPENDED,
            ChangeKind.APPENDED,
            ChangeKind.UPDATED,
            ChangeKind.UPDATED,
            ChangeKind.FINALIZED,
        ]
        assert changes[3].message.content == "Bonjour"

    def test_unsubscribe_stops_notifications(self, transcript):
        """Test that the returned callable unsubscribes."""
        changes = []
        unsubscribe = transcript.subscribe(changes.append)

        transcript.append_user("one")
        unsubscribe()
        transcript.append_user("two")
        unsubscribe()  # idempotent

        assert len(changes) == 1

    def test_faulty_observer_does_not_break_others(self, transcript):
        """Test that an observer raising does not stop the mutation."""
        def broken(change):
            raise RuntimeError("boom")

        changes = []
        transcript.subscribe(broken)
        transcript.subscribe(changes.append)

        message = transcript.append_user("Hello")

        assert transcript.get(message.id).content == "Hello"
        assert len(changes) == 1

    def test_clear_notifies_and_empties(self, transcript):
        """Test clearing the conversation."""
        changes = []
        transcript.append_user("Hello")
        transcript.subscribe(changes.append)

        transcript.clear()

        assert len(transcript) == 0
        assert transcript.last() is None
        assert changes[-1].kind is ChangeKind.CLEARED
        assert changes[-1].message is None


class TestContext:
    """Tests for building generation context."""

    def _exchange(self, transcript, question, outcome):
        """Append a question and settle its reply: 'ok', 'empty', 'failed' or 'open'."""
        transcript.append_user(question)
        reply = transcript.append_placeholder()
        if outcome == "ok":
            transcript.append_fragment(reply.id, f"re: {question}")
            transcript.finalize(reply.id)
        elif outcome == "empty":
            transcript.finalize(reply.id)
        elif outcome == "failed":
            transcript.append_fragment(reply.id, "partial")
            transcript.fail(reply.id, "Erreur")
        return reply

    def test_only_answered_exchanges_are_context(self, transcript):
        """Test that failed and streaming replies drop out with their question."""
        self._exchange(transcript, "first", "ok")
        self._exchange(transcript, "second", "failed")
        self._exchange(transcript, "third", "open")

        context = transcript.to_context()

        assert [(m.role, m.content) for m in context] == [
            ("user", "first"),
            ("assistant", "re: first"),
        ]

    def test_empty_reply_drops_its_question(self, transcript):
        self._exchange(transcript, "first", "empty")
        self._exchange(transcript, "second", "ok")

        context = transcript.to_context()

        assert [m.content for m in context] == ["second", "re: second"]

    def test_context_before_message(self, transcript):
        """Test limiting context to messages preceding a given id."""
        self._exchange(transcript, "first", "ok")
        second = self._exchange(transcript, "second", "ok")

        context = transcript.to_context(before=second.id)

        assert [m.content for m in context] == ["first", "re: first"]

    @given(st.lists(st.sampled_from(["ok", "empty", "failed"]), max_size=8))
    def test_context_alternates_roles(self, outcomes):
        """Property: context is user/assistant pairs whatever the turn outcomes."""
        transcript = Transcript()
        for index, outcome in enumerate(outcomes):
            self._exchange(transcript, f"q{index}", outcome)

        roles = [m.role for m in transcript.to_context()]

        assert roles == ["user", "assistant"] * outcomes.count("ok")

    def test_history_before(self, transcript):
        first = transcript.append_user("first")
        placeholder = transcript.append_placeholder()

        assert transcript.history_before(placeholder.id) == (first,)
        assert transcript.history_before(first.id) == ()

    def test_history_before_unknown_id(self, transcript):
        with pytest.raises(TranscriptError):
            transcript.history_before("missing")
