"""
Read-only portfolio content consumed by the response banks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def _text(data: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = data.get(key)
        if value:
            return str(value).strip()
    return ""


@dataclass
class HomeContent:
    title: str = ""
    subtitle: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HomeContent":
        return cls(
            title=_text(data, "title"),
            subtitle=_text(data, "subtitle"),
            description=_text(data, "description"),
        )


@dataclass
class AboutContent:
    about_description: str = ""
    skills: str = ""
    experience: str = ""
    education: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AboutContent":
        return cls(
            about_description=_text(data, "aboutDescription", "about_description", "description"),
            skills=_text(data, "skills"),
            experience=_text(data, "experience"),
            education=_text(data, "education"),
        )


@dataclass
class ContactInfo:
    email: str = ""
    phone: str = ""
    address: str = ""
    github_url: str = ""
    linkedin_url: str = ""
    twitter_url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ContactInfo":
        return cls(
            email=_text(data, "email"),
            phone=_text(data, "phone"),
            address=_text(data, "address"),
            github_url=_text(data, "githubUrl", "github_url"),
            linkedin_url=_text(data, "linkedinUrl", "linkedin_url"),
            twitter_url=_text(data, "twitterUrl", "twitter_url"),
        )

    def social_links(self) -> list[tuple[str, str]]:
        links = [("GitHub", self.github_url), ("LinkedIn", self.linkedin_url), ("Twitter", self.twitter_url)]
        return [(label, url) for label, url in links if url]


@dataclass
class ProjectSummary:
    title: str
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProjectSummary":
        return cls(title=_text(data, "title"), description=_text(data, "description"))


@dataclass
class PostSummary:
    title: str
    slug: str = ""
    excerpt: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PostSummary":
        return cls(title=_text(data, "title"), slug=_text(data, "slug"), excerpt=_text(data, "excerpt"))
