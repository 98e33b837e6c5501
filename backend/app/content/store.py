"""
Content store abstraction.

Backed by the relational content tables by default, or by the portfolio site's
public JSON API when CONTENT_STORE=http. Failures propagate; the response banks
decide how to degrade.
"""

from __future__ import annotations

from typing import Any

import httpx
from sqlalchemy import Engine

from backend.app.content.models import AboutContent, ContactInfo, HomeContent, PostSummary, ProjectSummary
from backend.app.core.config import Settings, get_settings
from backend.app.core.db.relational import (
    DBAboutContent,
    DBBlogPost,
    DBContactInfo,
    DBHomeContent,
    DBProject,
    build_session_factory,
    get_engine,
    init_relational_db,
    session_scope,
)


class ContentStore:
    def get_home_content(self) -> HomeContent | None:
        raise NotImplementedError

    def get_about_content(self) -> AboutContent | None:
        raise NotImplementedError

    def get_contact_info(self) -> ContactInfo | None:
        raise NotImplementedError

    def list_recent_projects(self, limit: int) -> list[ProjectSummary]:
        raise NotImplementedError

    def list_recent_published_posts(self, limit: int) -> list[PostSummary]:
        raise NotImplementedError

    def close(self) -> None:
        pass


class DatabaseContentStore(ContentStore):
    def __init__(self, engine: Engine | None = None):
        self.engine = engine or get_engine()
        self._session_factory = build_session_factory(self.engine)
        init_relational_db(self.engine)

    def get_home_content(self) -> HomeContent | None:
        with session_scope(self._session_factory) as db:
            row = db.query(DBHomeContent).order_by(DBHomeContent.updated_at.desc()).first()
            if row is None:
                return None
            return HomeContent(title=row.title or "", subtitle=row.subtitle or "", description=row.description or "")

    def get_about_content(self) -> AboutContent | None:
        with session_scope(self._session_factory) as db:
            row = db.query(DBAboutContent).order_by(DBAboutContent.updated_at.desc()).first()
            if row is None:
                return None
            return AboutContent(
                about_description=row.about_description or "",
                skills=row.skills or "",
                experience=row.experience or "",
                education=row.education or "",
            )

    def get_contact_info(self) -> ContactInfo | None:
        with session_scope(self._session_factory) as db:
            row = db.query(DBContactInfo).order_by(DBContactInfo.updated_at.desc()).first()
            if row is None:
                return None
            return ContactInfo(
                email=row.email or "",
                phone=row.phone or "",
                address=row.address or "",
                github_url=row.github_url or "",
                linkedin_url=row.linkedin_url or "",
                twitter_url=row.twitter_url or "",
            )

    def list_recent_projects(self, limit: int) -> list[ProjectSummary]:
        with session_scope(self._session_factory) as db:
            rows = db.query(DBProject).order_by(DBProject.created_at.desc()).limit(max(0, limit)).all()
            return [ProjectSummary(title=r.title, description=r.description or "") for r in rows]

    def list_recent_published_posts(self, limit: int) -> list[PostSummary]:
        with session_scope(self._session_factory) as db:
            rows = (
                db.query(DBBlogPost)
                .filter(DBBlogPost.published.is_(True))
                .order_by(DBBlogPost.created_at.desc())
                .limit(max(0, limit))
                .all()
            )
            return [PostSummary(title=r.title, slug=r.slug, excerpt=r.excerpt or "") for r in rows]


class HttpContentStore(ContentStore):
    def __init__(self, base_url: str, timeout_seconds: float = 3.0, transport: httpx.BaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout_seconds, transport=transport)

    def _get(self, path: str) -> Any:
        resp = self._client.get(path)
        resp.raise_for_status()
        return resp.json()

    def _get_object(self, path: str) -> dict[str, Any] | None:
        data = self._get(path)
        return data if isinstance(data, dict) and data else None

    def _get_list(self, path: str) -> list[dict[str, Any]]:
        data = self._get(path)
        return [x for x in data if isinstance(x, dict)] if isinstance(data, list) else []

    def get_home_content(self) -> HomeContent | None:
        data = self._get_object("/api/home")
        return HomeContent.from_dict(data) if data else None

    def get_about_content(self) -> AboutContent | None:
        data = self._get_object("/api/about")
        return AboutContent.from_dict(data) if data else None

    def get_contact_info(self) -> ContactInfo | None:
        data = self._get_object("/api/contact-info")
        return ContactInfo.from_dict(data) if data else None

    def list_recent_projects(self, limit: int) -> list[ProjectSummary]:
        rows = self._get_list("/api/projects")
        return [ProjectSummary.from_dict(r) for r in rows if r.get("title")][: max(0, limit)]

    def list_recent_published_posts(self, limit: int) -> list[PostSummary]:
        rows = self._get_list("/api/blog")
        published = [r for r in rows if r.get("title") and r.get("published", True)]
        return [PostSummary.from_dict(r) for r in published][: max(0, limit)]

    def close(self) -> None:
        self._client.close()


def build_content_store(settings: Settings | None = None, engine: Engine | None = None) -> ContentStore:
    settings = settings or get_settings()
    if settings.content_store == "http":
        return HttpContentStore(settings.content_base_url, timeout_seconds=settings.content_timeout_seconds)
    return DatabaseContentStore(engine=engine)
