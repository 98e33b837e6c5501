import pytest

from backend.app.brain.intent import (
    COMMAND_CONFIDENCE,
    DEFAULT_CONFIDENCE,
    INTENT_RULES,
    RULE_CONFIDENCE,
    IntentClassifier,
    classify_intent,
    compile_triggers,
)
from backend.app.brain.models import Intent


@pytest.fixture
def classifier():
    return IntentClassifier()


@pytest.mark.parametrize(
    "message, expected",
    [
        ("tới trang chủ", Intent.NAVIGATE_HOME),
        ("go to about", Intent.NAVIGATE_ABOUT),
        ("chuyển tới projects", Intent.NAVIGATE_PROJECTS),
        ("vào trang blog", Intent.NAVIGATE_BLOG),
        ("about page", Intent.NAVIGATE_ABOUT),
        ("bật dark mode", Intent.THEME_DARK),
        ("turn on light mode", Intent.THEME_LIGHT),
        ("chế độ tự động", Intent.THEME_SYSTEM),
        ("Xin chào", Intent.GREETING),
        ("Hello", Intent.GREETING),
        ("Tell me about your projects", Intent.PROJECTS),
        ("Tell me about yourself", Intent.ABOUT),
        ("What are your technical skills?", Intent.SKILLS),
        ("How can I contact you?", Intent.CONTACT),
        ("What do you write about in your blog?", Intent.BLOG),
        ("asdkjasdkj random", Intent.DEFAULT),
        ("xyz random gibberish test", Intent.DEFAULT),
    ],
)
def test_classify_examples(classifier, message, expected):
    assert classifier.classify(message).intent == expected


def test_rule_table_order_is_the_precedence():
    assert [rule.intent for rule in INTENT_RULES] == [
        Intent.THEME_DARK,
        Intent.THEME_LIGHT,
        Intent.THEME_SYSTEM,
        Intent.NAVIGATE_HOME,
        Intent.NAVIGATE_ABOUT,
        Intent.NAVIGATE_PROJECTS,
        Intent.NAVIGATE_BLOG,
        Intent.NAVIGATE_CONTACT,
        Intent.NAVIGATE_GENERAL,
        Intent.BLOG,
        Intent.CONTACT,
        Intent.PROJECTS,
        Intent.SKILLS,
        Intent.ABOUT,
        Intent.GREETING,
        Intent.HELP,
    ]


@pytest.mark.parametrize(
    "message, expected",
    [
        ("bật dark mode cho trang dự án", Intent.THEME_DARK),
        ("chuyển tới projects", Intent.NAVIGATE_PROJECTS),
        ("tell me about your blog and contact", Intent.BLOG),
        ("email me about your projects", Intent.CONTACT),
    ],
)
def test_higher_priority_category_wins(classifier, message, expected):
    assert classifier.classify(message).intent == expected


def test_confidences(classifier):
    assert classifier.classify("bật dark mode").confidence == COMMAND_CONFIDENCE
    assert classifier.classify("Tell me about your projects").confidence == RULE_CONFIDENCE
    assert classifier.classify("asdkjasdkj random").confidence == DEFAULT_CONFIDENCE


@pytest.mark.parametrize("message", ["", "   ", "🚀🔥", None])
def test_empty_or_symbol_only_input_is_default(classifier, message):
    result = classifier.classify(message)
    assert result.intent == Intent.DEFAULT
    assert result.confidence == DEFAULT_CONFIDENCE


def test_matching_ignores_case_and_diacritics(classifier):
    assert classifier.classify("hỗ trợ").intent == Intent.HELP
    assert classifier.classify("HO TRO").intent == Intent.HELP
    assert classifier.classify("KỸ NĂNG của bạn").intent == Intent.SKILLS
    assert classifier.classify("ky nang cua ban").intent == Intent.SKILLS


def test_detect_command(classifier):
    command = classifier.detect_command("go to about")
    assert command is not None
    assert command.intent == Intent.NAVIGATE_ABOUT
    assert command.confidence == COMMAND_CONFIDENCE
    assert classifier.detect_command("Tell me about your projects") is None


def test_navigation_verb_without_target_is_general(classifier):
    assert classifier.classify("go to somewhere nice").intent == Intent.NAVIGATE_GENERAL


def test_word_boundary_triggers():
    assert compile_triggers([" hi ", "Chế độ tối"]) == (" hi ", "che do toi")
    # "hi" inside another word is not a greeting
    assert classify_intent("this is it") == Intent.DEFAULT
    assert classify_intent("hi there") == Intent.GREETING


def test_classification_is_deterministic(classifier):
    first = classifier.classify("What are your technical skills?")
    for _ in range(5):
        assert classifier.classify("What are your technical skills?") == first


@pytest.mark.parametrize(
    "message, expected",
    [
        ("Website có giao diện sang trọng không?", Intent.PROJECTS),
        ("Tôi trang bị kỹ năng gì cho dự án?", Intent.PROJECTS),
        ("Bật sang tiếng Anh được không?", Intent.DEFAULT),
        ("chế độ tôi thích nhất", Intent.DEFAULT),
        ("theme tôi chọn là gì", Intent.DEFAULT),
    ],
)
def test_typed_accents_that_differ_are_not_commands(classifier, message, expected):
    assert classifier.detect_command(message) is None
    assert classifier.classify(message).intent == expected


@pytest.mark.parametrize(
    "message, expected",
    [
        ("giao diện sáng", Intent.THEME_LIGHT),
        ("giao dien sang", Intent.THEME_LIGHT),
        ("bật sáng", Intent.THEME_LIGHT),
        ("chế độ tối", Intent.THEME_DARK),
        ("che do toi", Intent.THEME_DARK),
        ("tới trang blog", Intent.NAVIGATE_BLOG),
        ("toi trang lien he", Intent.NAVIGATE_CONTACT),
    ],
)
def test_commands_match_with_or_without_accents(classifier, message, expected):
    assert classifier.classify(message).intent == expected


def test_bare_home_navigates_home(classifier):
    assert classifier.classify("home").intent == Intent.NAVIGATE_HOME
    assert classifier.classify("Home!").intent == Intent.NAVIGATE_HOME
    assert classifier.classify("I work from home").intent != Intent.NAVIGATE_HOME
