"""
Rule-based intent classification.

Rules are checked top to bottom and the first predicate that matches wins, so
the table order is the precedence: theme commands, navigation commands, then
blog > contact > projects > skills > about > greeting > help, else default.

Trigger phrases are normalized exactly like user input (diacritics removed,
lowercased, punctuation turned into spaces). A trigger written with a leading
or trailing space only matches on a word boundary.

Command phrases change the page or the theme, so they are also checked against
the accents the user actually typed: "giao diện sang trọng" is not
"giao diện sáng", while the unaccented "giao dien sang" still is.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, NamedTuple

from backend.app.brain.models import Classification, Intent
from backend.app.brain.text import fold_with_accents, normalize_text

COMMAND_CONFIDENCE = 0.95
RULE_CONFIDENCE = 0.8
DEFAULT_CONFIDENCE = 0.3


def _boundaries(phrase: str) -> tuple[str, str]:
    return (" " if phrase.startswith(" ") else "", " " if phrase.endswith(" ") else "")


def compile_triggers(phrases: Iterable[str]) -> tuple[str, ...]:
    compiled: list[str] = []
    for phrase in phrases:
        core = normalize_text(phrase)
        if not core:
            continue
        lead, tail = _boundaries(phrase)
        compiled.append(f"{lead}{core}{tail}")
    return tuple(compiled)


def contains_any(padded_text: str, triggers: tuple[str, ...]) -> bool:
    return any(t in padded_text for t in triggers)


class PaddedText(NamedTuple):
    folded: str
    accented: str


def pad_message(message: str | None) -> PaddedText:
    folded, accented = fold_with_accents(message)
    return PaddedText(f" {folded} ", f" {accented} ")


@dataclass(frozen=True)
class CommandPhrase:
    folded: str
    accented: str


def compile_phrases(phrases: Iterable[str]) -> tuple[CommandPhrase, ...]:
    compiled: list[CommandPhrase] = []
    for phrase in phrases:
        folded, accented = fold_with_accents(phrase)
        if not folded:
            continue
        lead, tail = _boundaries(phrase)
        compiled.append(CommandPhrase(f"{lead}{folded}{tail}", f"{lead}{accented}{tail}"))
    return tuple(compiled)


def phrase_in(text: PaddedText, phrase: CommandPhrase) -> bool:
    """True when `phrase` occurs in `text` and the typed accents there agree with it.

    A span typed without any accents matches on letters alone.
    """
    size = len(phrase.folded)
    start = text.folded.find(phrase.folded)
    while start != -1:
        span = text.accented[start:start + size]
        if span == phrase.accented or span == phrase.folded:
            return True
        start = text.folded.find(phrase.folded, start + 1)
    return False


def any_phrase(text: PaddedText, phrases: tuple[CommandPhrase, ...]) -> bool:
    return any(phrase_in(text, p) for p in phrases)


THEME_DARK_TRIGGERS = compile_phrases([
    "dark mode", "dark theme", "switch to dark", "turn on dark", "theme tối",
    "chế độ tối", "giao diện tối", "chế độ đêm", "night mode",
])
THEME_LIGHT_TRIGGERS = compile_phrases([
    "light mode", "light theme", "switch to light", "turn on light", "theme sáng",
    "chế độ sáng", "giao diện sáng", "đổi sang sáng", "chuyển sang sáng", "bật sáng",
])
THEME_SYSTEM_TRIGGERS = compile_phrases([
    "system theme", "system mode", "auto theme", "auto mode", "follow system",
    "theo hệ thống", "chế độ tự động", "giao diện tự động", "theme tự động",
])

NAVIGATION_VERBS = compile_phrases([
    "đi tới", "đi đến", "chuyển tới", "chuyển đến", "chuyển sang trang", "tới trang",
    "đến trang", "vào trang", "mở trang", "dẫn tới", "dẫn đến",
    "go to", "navigate to", "take me to", "bring me to", "open the", "open page", " visit ",
])

NAVIGATION_TARGETS: dict[Intent, tuple[tuple[CommandPhrase, ...], tuple[CommandPhrase, ...]]] = {
    # intent: (targets that need a navigation verb, phrases that are commands on their own)
    Intent.NAVIGATE_HOME: (
        compile_phrases([" home", "trang chủ", "homepage", "main page"]),
        compile_phrases(["home page", "trang chủ", "homepage"]),
    ),
    Intent.NAVIGATE_ABOUT: (
        compile_phrases(["about", "giới thiệu"]),
        compile_phrases(["about page", "trang giới thiệu"]),
    ),
    Intent.NAVIGATE_PROJECTS: (
        compile_phrases(["project", "dự án", "portfolio"]),
        compile_phrases(["projects page", "project page", "trang dự án", "danh sách dự án", "xem dự án"]),
    ),
    Intent.NAVIGATE_BLOG: (
        compile_phrases(["blog", "bài viết"]),
        compile_phrases(["blog page", "trang blog"]),
    ),
    Intent.NAVIGATE_CONTACT: (
        compile_phrases(["contact", "liên hệ"]),
        compile_phrases(["contact page", "trang liên hệ", "form liên hệ"]),
    ),
}

# A message made of nothing but one of these words is a navigation command.
BARE_PAGE_NAMES: dict[Intent, frozenset[str]] = {
    Intent.NAVIGATE_HOME: frozenset({"home"}),
}

TOPIC_TRIGGERS: dict[Intent, tuple[str, ...]] = {
    Intent.BLOG: compile_triggers([
        "blog", "bài viết", "article", "tutorial", "hướng dẫn", "publish", "writing",
        "what do you write", "viết gì", "viết về", "chia sẻ kiến thức", "tin tức",
        "best practices", " post ", " posts ", "step by step", "nextjs 15",
    ]),
    Intent.CONTACT: compile_triggers([
        "liên hệ", "liên lạc", "contact", "email", "e-mail", "mail", "phone", "điện thoại",
        "communicate", "communication", "get in touch", "reach you", "reach out", "hire",
        "thuê", "hợp tác", "collaborat", "work together", "linkedin", "twitter", "facebook",
        "zalo", "social media", "mạng xã hội", "địa chỉ", "address",
    ]),
    Intent.PROJECTS: compile_triggers([
        "dự án", "project", "portfolio", "sản phẩm", "ứng dụng", " app ", " apps ", "website",
        "demo", "github", "repositor", " repo ", "source code", "mã nguồn", "showcase", " built ",
    ]),
    Intent.SKILLS: compile_triggers([
        "kỹ năng", "skill", "technolog", "công nghệ", "programming", "lập trình", "coding",
        "frontend", "front-end", "backend", "back-end", "full stack", "fullstack", "devops",
        "react", " node", "javascript", "typescript", "python", "framework", "tech stack",
        "expertise", "chuyên môn", "biết gì", "ngôn ngữ", "language", "database", "docker",
    ]),
    Intent.ABOUT: compile_triggers([
        "giới thiệu", "about", "background", "experience", "kinh nghiệm", "education", "học vấn",
        "career", "sự nghiệp", "bản thân", "là ai", "who are you", "who is", "yourself",
        "your name", " tên ", "values", "giá trị", "principle", "philosophy", "triết lý",
        "passion", "đam mê", "goal", "mục tiêu", "vision", "future", "tương lai", "owner",
        "chủ sở hữu", "thông tin cá nhân", "personal", "hobby", "hobbies", "sở thích",
        " ở đâu", "where are you", "located",
    ]),
    Intent.GREETING: compile_triggers([
        "xin chào", "chào", "hello", " hi ", " hey ", "good morning", "good afternoon",
        "good evening", "greetings",
    ]),
    Intent.HELP: compile_triggers([
        "help", "giúp", "hỗ trợ", "support", "assist", "what can you do", "làm được gì",
        "có thể làm gì",
    ]),
}



@dataclass(frozen=True)
class IntentRule:
    intent: Intent
    predicate: Callable[[PaddedText], bool]
    confidence: float


def _triggers_rule(intent: Intent, triggers: tuple[str, ...], confidence: float) -> IntentRule:
    return IntentRule(intent, lambda text: contains_any(text.folded, triggers), confidence)


def _command_rule(intent: Intent, phrases: tuple[CommandPhrase, ...]) -> IntentRule:
    return IntentRule(intent, lambda text: any_phrase(text, phrases), COMMAND_CONFIDENCE)


def _navigation_rule(
    intent: Intent,
    targets: tuple[CommandPhrase, ...],
    direct: tuple[CommandPhrase, ...],
) -> IntentRule:
    bare = BARE_PAGE_NAMES.get(intent, frozenset())

    def predicate(text: PaddedText) -> bool:
        if text.folded.strip() in bare or any_phrase(text, direct):
            return True
        return any_phrase(text, NAVIGATION_VERBS) and any_phrase(text, targets)

    return IntentRule(intent, predicate, COMMAND_CONFIDENCE)


def _build_rules() -> tuple[IntentRule, ...]:
    rules = [
        _command_rule(Intent.THEME_DARK, THEME_DARK_TRIGGERS),
        _command_rule(Intent.THEME_LIGHT, THEME_LIGHT_TRIGGERS),
        _command_rule(Intent.THEME_SYSTEM, THEME_SYSTEM_TRIGGERS),
    ]
    for intent, (targets, direct) in NAVIGATION_TARGETS.items():
        rules.append(_navigation_rule(intent, targets, direct))
    rules.append(_command_rule(Intent.NAVIGATE_GENERAL, NAVIGATION_VERBS))
    for intent, triggers in TOPIC_TRIGGERS.items():
        rules.append(_triggers_rule(intent, triggers, RULE_CONFIDENCE))
    return tuple(rules)


INTENT_RULES: tuple[IntentRule, ...] = _build_rules()


class IntentClassifier:
    def __init__(self, rules: tuple[IntentRule, ...] = INTENT_RULES):
        self.rules = rules

    def classify(self, message: str | None) -> Classification:
        text = pad_message(message)
        if text.folded.strip():
            for rule in self.rules:
                if rule.predicate(text):
                    return Classification(intent=rule.intent, confidence=rule.confidence)
        return Classification(intent=Intent.DEFAULT, confidence=DEFAULT_CONFIDENCE)

    def detect_command(self, message: str | None) -> Classification | None:
        """Return the theme/navigation command in `message`, if it is one."""
        result = self.classify(message)
        return result if result.intent.is_command else None


_default_classifier = IntentClassifier()


def classify_intent(message: str | None) -> Intent:
    return _default_classifier.classify(message).intent
