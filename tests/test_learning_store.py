import pytest

from backend.app.brain.models import ContextMessage, ConversationContext, FeedbackType, Intent
from backend.app.brain.store import score_knowledge_entry
from backend.app.core.db.relational import (
    DBChatConversation,
    DBChatFeedback,
    DBChatMessage,
    DBKnowledgeEntry,
    build_session_factory,
    session_scope,
)


def record(store, message="What are your technical skills?", response="React and Node.js", session_id="s1", intent="skills"):
    return store.record_turn(session_id, message, response, intent, 0.8, 12)


def update_entry(engine, entry_id, **fields):
    with session_scope(build_session_factory(engine)) as db:
        row = db.get(DBKnowledgeEntry, entry_id)
        for key, value in fields.items():
            setattr(row, key, value)


def test_score_weights():
    assert score_knowledge_entry(1.0, 1.0, 1.0) == pytest.approx(1.0)
    assert score_knowledge_entry(0.0, 1.0, 1.0) == pytest.approx(0.6)
    assert score_knowledge_entry(0.5, 0.0, 0.0) == pytest.approx(0.2)


def test_record_turn_writes_user_and_bot_messages(store, engine):
    ids = record(store)
    record(store, message="and your projects?", response="Plenty", intent="projects")

    with session_scope(build_session_factory(engine)) as db:
        conversation = db.get(DBChatConversation, ids["conversationId"])
        assert conversation.total_messages == 4
        user_row = db.get(DBChatMessage, ids["messageId"])
        assert user_row.sender == "USER"
        assert user_row.response == "React and Node.js"
        assert user_row.response_time_ms == 12
        assert db.query(DBChatMessage).filter(DBChatMessage.sender == "BOT").count() == 2


def test_record_turn_uses_given_message_id(store):
    ids = store.record_turn("s1", "hello", "hi!", "greeting", 0.8, 3, message_id="fixed-id")
    assert ids["messageId"] == "fixed-id"


def test_conversation_context_returns_recent_messages_in_order(store):
    record(store)
    record(store, message="and your projects?", response="Plenty", intent="projects")

    context = store.analyze_conversation_context("s1")
    assert [m.sender for m in context.previous_messages] == ["USER", "BOT", "USER", "BOT"]
    assert context.previous_messages[0].content == "What are your technical skills?"
    assert context.recent_intents() == ["skills", "skills", "projects", "projects"]
    assert store.analyze_conversation_context("unknown").previous_messages == []


def test_helpful_feedback_creates_one_knowledge_entry(store, engine):
    ids = record(store)
    assert store.record_feedback(None, ids["messageId"], 5) is True

    entries = store.get_learned_knowledge()
    assert len(entries) == 1
    entry = entries[0]
    assert entry.question == "what are your technical skills?"
    assert entry.answer == "React and Node.js"
    assert entry.intent == "skills"
    assert entry.usage_count == 1
    assert entry.success_rate == 1.0
    assert entry.confidence == pytest.approx(0.7)
    assert entry.source == "learned"

    with session_scope(build_session_factory(engine)) as db:
        feedback = db.query(DBChatFeedback).one()
        assert feedback.feedback_type == FeedbackType.HELPFUL.value
        assert feedback.conversation_id == ids["conversationId"]
        assert db.get(DBChatMessage, ids["messageId"]).was_helpful is True


def test_unhelpful_feedback_without_entry_learns_nothing(store):
    ids = record(store)
    assert store.record_feedback(ids["conversationId"], ids["messageId"], 2, FeedbackType.COMPLAINT, "meh") is True
    assert store.get_learned_knowledge() == []


def test_feedback_on_unknown_message_fails(store):
    assert store.record_feedback(None, "missing", 5) is False


def test_repeated_feedback_updates_running_mean(store):
    first = record(store)
    store.record_feedback(None, first["messageId"], 5)
    second = record(store)
    store.record_feedback(None, second["messageId"], 4)

    entry = store.get_learned_knowledge()[0]
    assert entry.usage_count == 2
    assert entry.success_rate == pytest.approx(1.0)
    assert entry.confidence == pytest.approx(0.75)

    third = record(store)
    store.record_feedback(None, third["messageId"], 1)
    entry = store.get_learned_knowledge()[0]
    assert entry.usage_count == 3
    assert entry.success_rate == pytest.approx(2 / 3)
    assert entry.confidence == pytest.approx(0.7)


def test_confidence_stays_within_bounds(store):
    ids = record(store)
    rates = []
    for _ in range(12):
        entry = store.learn_from_feedback(ids["messageId"], True)
        rates.append(entry.success_rate)
    assert entry.confidence == pytest.approx(1.0)
    assert entry.confidence <= 1.0
    assert rates == sorted(rates)

    for _ in range(30):
        entry = store.learn_from_feedback(ids["messageId"], False)
        assert 0.0 <= entry.success_rate <= 1.0
    assert entry.confidence == 0.0


def test_find_learned_response_prefers_exact_question(store):
    ids = record(store)
    store.record_feedback(None, ids["messageId"], 5)

    learned = store.find_learned_response("What are your technical skills?", "skills")
    assert learned is not None
    assert learned.response == "React and Node.js"
    assert learned.confidence == pytest.approx(0.7)
    assert learned.score == pytest.approx(0.4 + 0.21 + 0.3)


def test_entry_scoring_exactly_threshold_is_rejected(store, engine):
    entry = store.add_knowledge("completely unrelated words", "Nope", "skills")
    update_entry(engine, entry.id, confidence=1.0, success_rate=1.0)
    assert store.find_learned_response("hello there friend", "skills") is None


def test_question_substring_makes_candidate_across_intents(store, engine):
    entry = store.add_knowledge("react hooks", "Hooks answer", "skills")
    update_entry(engine, entry.id, confidence=1.0, success_rate=1.0)

    learned = store.find_learned_response("Tell me about React hooks please", "projects")
    assert learned is not None
    assert learned.entry_id == entry.id
    assert store.find_learned_response("Tell me about state management", "projects") is None


def test_inactive_entries_are_ignored(store, engine):
    entry = store.add_knowledge("react hooks", "Hooks answer", "skills")
    update_entry(engine, entry.id, confidence=1.0, success_rate=1.0)
    store.set_knowledge_active(entry.id, False)
    assert store.find_learned_response("react hooks", "skills") is None
    assert store.get_learned_knowledge() == []


def test_knowledge_admin_operations(store):
    entry = store.add_knowledge("  Where Are You Based ", "Hanoi", "about")
    assert entry.question == "where are you based"
    assert entry.source == "static"
    assert entry.keywords == ["where", "are", "you", "based"]

    assert store.get_knowledge(entry.id).answer == "Hanoi"
    assert store.set_knowledge_active(entry.id, False).is_active is False
    assert store.set_knowledge_active("missing", True) is None
    assert store.delete_knowledge(entry.id) is True
    assert store.delete_knowledge(entry.id) is False
    assert store.get_knowledge(entry.id) is None


def test_learn_new_pattern_only_below_threshold(store):
    assert store.learn_new_pattern("asdkjasdkj random gibberish", "default", 0.8) is None

    pattern = store.learn_new_pattern("asdkjasdkj random gibberish", "default", 0.3)
    assert pattern.pattern == "asdkjasdkj|random|gibberish"
    assert pattern.keywords == ["asdkjasdkj", "random", "gibberish"]
    assert pattern.examples == ["asdkjasdkj random gibberish"]
    assert pattern.success_count == 1

    again = store.learn_new_pattern("asdkjasdkj random gibberish", "default", 0.3)
    assert again.id == pattern.id
    assert again.success_count == 2
    assert again.total_attempts == 2
    assert again.examples == ["asdkjasdkj random gibberish"]
    assert len(store.list_patterns()) == 1


def test_learn_new_pattern_needs_keywords(store):
    assert store.learn_new_pattern("a b c", "default", 0.3) is None


def test_improved_intent_detection_overrides_above_threshold(store):
    store.learn_new_pattern("asdkjasdkj random gibberish", "default", 0.3)

    result = store.improved_intent_detection("random gibberish asdkjasdkj again")
    assert result.intent == Intent.DEFAULT
    assert result.confidence == pytest.approx(1.0)
    assert result.source == "learned_pattern"

    assert store.improved_intent_detection("random words") is None
    assert store.improved_intent_detection("") is None


def test_improved_intent_detection_boundary(store):
    store.learn_new_pattern("alpha bravo charlie delta", "projects", 0.3)
    store.learn_new_pattern("echo foxtrot golf hotel india", "skills", 0.3)

    assert store.improved_intent_detection("alpha bravo charlie").intent == Intent.PROJECTS
    assert store.improved_intent_detection("echo foxtrot golf") is None


def test_context_breaks_pattern_ties(store):
    store.learn_new_pattern("alpha bravo charlie", "skills", 0.3)
    store.learn_new_pattern("alpha bravo charlie", "about", 0.3)
    context = ConversationContext(
        session_id="s1",
        previous_messages=[ContextMessage(content="who are you", sender="USER", intent="about")],
    )
    assert store.improved_intent_detection("alpha bravo charlie", context).intent == Intent.ABOUT


def test_end_conversation_opens_a_new_one_next_turn(store):
    record(store)
    assert store.end_conversation("s1", satisfaction=4) is True
    assert store.end_conversation("s1") is False
    record(store)

    stats = store.get_conversation_stats()
    assert stats["totalConversations"] == 2
    assert stats["totalMessages"] == 4
    assert stats["averageSatisfaction"] == 4.0


def test_conversation_stats(store):
    ids = record(store)
    store.record_feedback(None, ids["messageId"], 5)
    store.learn_new_pattern("asdkjasdkj random", "default", 0.3)

    assert store.get_conversation_stats() == {
        "totalConversations": 1,
        "totalMessages": 2,
        "helpfulMessages": 1,
        "ratedMessages": 1,
        "averageSatisfaction": 0.0,
        "knowledgeEntries": 1,
        "learningPatterns": 1,
    }
