"""
Intent -> response bank dispatch.
"""

from __future__ import annotations

import random

from backend.app.brain.models import Intent
from backend.app.content.store import ContentStore
from backend.app.responses.about import AboutBank
from backend.app.responses.base import ResponseBank
from backend.app.responses.blog import BlogBank
from backend.app.responses.contact import ContactBank
from backend.app.responses.general import DefaultBank, GreetingBank, HelpBank, fallback_for
from backend.app.responses.projects import ProjectsBank
from backend.app.responses.skills import SkillsBank


class ResponseBanks:
    def __init__(self, content: ContentStore | None, rng: random.Random | None = None, timeout_seconds: float = 3.0):
        self.content = content
        self.rng = rng or random.Random()
        args = (content, self.rng, timeout_seconds)
        self.banks: dict[Intent, ResponseBank] = {
            Intent.PROJECTS: ProjectsBank(*args),
            Intent.SKILLS: SkillsBank(*args),
            Intent.ABOUT: AboutBank(*args),
            Intent.CONTACT: ContactBank(*args),
            Intent.BLOG: BlogBank(*args),
            Intent.GREETING: GreetingBank(*args),
            Intent.HELP: HelpBank(*args),
            Intent.DEFAULT: DefaultBank(*args),
        }

    def respond(self, intent: Intent, query: str) -> str:
        """Bank answer for `intent`; command intents get their fixed confirmation."""
        bank = self.banks.get(intent)
        if bank is None:
            return fallback_for(intent)
        text = bank.respond(query or "")
        return text if text.strip() else fallback_for(intent)

    def close(self) -> None:
        if self.content is not None:
            self.content.close()
