import random
import time
from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from backend.app.brain.service import ChatbotRouter
from backend.app.brain.store import LearningStore
from backend.app.content.models import AboutContent, ContactInfo, HomeContent, PostSummary, ProjectSummary
from backend.app.content.store import ContentStore
from backend.app.core.config import get_settings
from backend.app.core.db.relational import build_engine, init_relational_db
from backend.app.responses.registry import ResponseBanks
from backend.main import create_app


class FakeContentStore(ContentStore):
    def __init__(self, fail: bool = False, delay: float = 0.0):
        self.fail = fail
        self.delay = delay
        self.calls: list[str] = []
        self.home = HomeContent(title="Hi, I'm Jane Doe", subtitle="Full-stack developer", description="I build web apps.")
        self.about = AboutContent(
            about_description="Developer from Hanoi who enjoys clean code.",
            skills="React, Next.js, TypeScript, Node.js",
            experience="5 years building web products",
            education="B.Sc. Computer Science",
        )
        self.contact = ContactInfo(
            email="jane@example.com",
            phone="+84 123 456 789",
            address="Hanoi, Vietnam",
            github_url="https://github.com/janedoe",
            linkedin_url="https://linkedin.com/in/janedoe",
        )
        self.projects = [
            ProjectSummary(title="Weather Board", description="Forecast dashboard"),
            ProjectSummary(title="Shopfront", description="E-commerce site"),
            ProjectSummary(title="Taskly", description="Kanban boards"),
            ProjectSummary(title="Old Project", description="Not recent"),
        ]
        self.posts = [
            PostSummary(title="Hooks in Depth", slug="hooks-in-depth", excerpt="useEffect and friends"),
            PostSummary(title="Shipping Next.js", slug="shipping-nextjs", excerpt="Deploy notes"),
        ]

    def _call(self, name: str):
        self.calls.append(name)
        if self.delay:
            time.sleep(self.delay)
        if self.fail:
            raise RuntimeError(f"{name} unavailable")

    def get_home_content(self):
        self._call("home")
        return self.home

    def get_about_content(self):
        self._call("about")
        return self.about

    def get_contact_info(self):
        self._call("contact")
        return self.contact

    def list_recent_projects(self, limit):
        self._call("projects")
        return self.projects[:limit]

    def list_recent_published_posts(self, limit):
        self._call("posts")
        return self.posts[:limit]


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def engine(tmp_path):
    eng = build_engine(f"sqlite:///{tmp_path / 'chatbot.db'}")
    init_relational_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine):
    return LearningStore(engine=engine)


@pytest.fixture
def content():
    return FakeContentStore()


@pytest.fixture
def failing_content():
    return FakeContentStore(fail=True)


@pytest.fixture
def slow_content():
    return FakeContentStore(delay=1.0)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(7)


@pytest.fixture
def settings():
    return replace(
        get_settings(),
        enable_learning=True,
        content_timeout_seconds=5.0,
        store_timeout_seconds=5.0,
        cache_ttl_seconds=300.0,
        cache_max_entries=1000,
        background_workers=1,
        background_max_pending=64,
    )


@pytest.fixture
def banks(content, rng):
    return ResponseBanks(content, rng=rng, timeout_seconds=5.0)


@pytest.fixture
def chatbot(banks, store, settings):
    router = ChatbotRouter(banks=banks, store=store, settings=settings)
    yield router
    router.close()


@pytest.fixture
def client(chatbot):
    app = create_app(chatbot=chatbot)
    with TestClient(app) as test_client:
        yield test_client
