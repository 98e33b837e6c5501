"""
About bank: owner profile (built from live content), experience, education,
values and future goals.
"""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from backend.app.brain.intent import compile_triggers
from backend.app.brain.text import normalize_text
from backend.app.content.models import AboutContent, ContactInfo, HomeContent
from backend.app.responses.base import CannedAnswer, ResponseBank, answers, detect_subtopic, select_answer

DEFAULT_OWNER_NAME = "Portfolio Owner"

_NAME_RE = re.compile(
    r"(?:Hi,?\s*I['’]?m\s*|Hello,?\s*I['’]?m\s*|I['’]?m\s*|My name is\s*|Hello,?\s*I am\s*)(.+)|(.+)$",
    re.IGNORECASE,
)


def extract_owner_name(title: str | None) -> str:
    """Pull the owner's name out of a home-page title such as "Hi, I'm Jane Doe"."""
    text = (title or "").strip()
    if not text:
        return DEFAULT_OWNER_NAME
    match = _NAME_RE.search(text)
    if match is None:
        return DEFAULT_OWNER_NAME
    name = (match.group(1) or match.group(2) or "").strip().rstrip("!.")
    return name or DEFAULT_OWNER_NAME


@dataclass
class OwnerProfile:
    name: str = DEFAULT_OWNER_NAME
    subtitle: str = ""
    description: str = ""
    email: str = ""
    location: str = ""
    skills: str = ""
    experience: str = ""
    education: str = ""
    links: tuple[tuple[str, str], ...] = ()

    @classmethod
    def build(
        cls,
        home: HomeContent | None,
        about: AboutContent | None,
        contact: ContactInfo | None,
    ) -> "OwnerProfile":
        return cls(
            name=extract_owner_name(home.title if home else ""),
            subtitle=home.subtitle if home else "",
            description=(about.about_description if about else "") or (home.description if home else ""),
            email=contact.email if contact else "",
            location=contact.address if contact else "",
            skills=about.skills if about else "",
            experience=about.experience if about else "",
            education=about.education if about else "",
            links=tuple(contact.social_links()) if contact else (),
        )

    def summary(self) -> str:
        lines = [f"👤 **{self.name}**" + (f" - {self.subtitle}" if self.subtitle else "")]
        if self.description:
            lines.append(self.description)
        if self.location:
            lines.append(f"📍 {self.location}")
        if self.email:
            lines.append(f"📧 {self.email}")
        if self.skills:
            lines.append(f"🌟 {self.skills}")
        for label, url in self.links:
            lines.append(f"🔗 {label}: {url}")
        return "\n".join(lines)

    def answers(self) -> tuple[CannedAnswer, ...]:
        links = ", ".join(f"{label}: {url}" for label, url in self.links)
        return (
            CannedAnswer.of(
                "owner name",
                f"👤 **Name:** {self.name}, a full-stack developer who enjoys building useful products.",
                " tên ", "your name", "là ai", "who are you", "owner", "chủ sở hữu",
            ),
            CannedAnswer.of(
                "location",
                f"📍 **Location:** {self.location or 'Vietnam'}, open to remote work worldwide.",
                " ở đâu", "where", "location", "located", "địa điểm",
            ),
            CannedAnswer.of(
                "email",
                f"📧 **Email:** {self.email or 'please use the contact form'}",
                "email", "mail",
            ),
            CannedAnswer.of(
                "skills",
                f"🌟 **Expertise:** {self.skills or 'full-stack web development with React, Next.js, TypeScript and Node.js.'}",
                "skill", "kỹ năng", "chuyên môn", "expertise",
            ),
            CannedAnswer.of(
                "hobbies",
                "🎯 **Hobbies:** exploring new tech, coding challenges, trying new frameworks and open source.",
                "sở thích", "hobby", "hobbies",
            ),
            CannedAnswer.of(
                "links",
                f"💻 **Links:** {links or 'see the Contact page'}",
                "github", "linkedin", "twitter", "social",
            ),
            CannedAnswer.of("introduce yourself personal information", self.summary(), "giới thiệu", "introduce", "cá nhân", "personal"),
        )


ABOUT_GENERAL = answers(
    "I'm a full-stack developer who loves building modern web applications.",
    "Tôi là một full-stack developer đam mê công nghệ, thích xây dựng sản phẩm web hiện đại.",
    "A computer science background plus hands-on experience shipping real software.",
    "Self-motivated learner who keeps picking up new technologies and applying them in projects.",
    "Problem solver with an analytical mindset and a soft spot for clean, maintainable code.",
)

EXPERIENCE = answers(
    "Experience spans freelance work and personal products, from landing pages to full-stack platforms.",
    "Kinh nghiệm làm việc với các dự án full-stack, từ thiết kế giao diện đến triển khai hệ thống.",
    "Worked in agile teams with code reviews, sprint planning and cross-functional collaboration.",
    "Shipped projects end to end: requirements, architecture, implementation, deployment and maintenance.",
)

EDUCATION = answers(
    "Computer science background, plus continuous self-study through courses and documentation.",
    "Học vấn nền tảng về khoa học máy tính, luôn tự học thêm công nghệ mới.",
    "Certifications and online courses in web development, cloud and software architecture.",
)

VALUES = answers(
    "I value clean code, honest communication and building things that actually help users.",
    "Giá trị cốt lõi: chất lượng, minh bạch và luôn đặt người dùng lên hàng đầu.",
    "Quality over speed, but shipping matters: small increments, tested and reviewed.",
    "Knowledge sharing: writing, mentoring and contributing to open source.",
)

FUTURE_GOALS = answers(
    "Next goal: grow into a technical lead role and build products with real impact.",
    "Mục tiêu tương lai: trở thành technical lead và tạo ra sản phẩm có ích cho cộng đồng.",
    "Going deeper into AI integration, system design and scalable architecture.",
)

SUBTOPICS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("owner_info", compile_triggers([
        " tên ", "name", "owner", "chủ sở hữu", "là ai", "who are you", "giới thiệu", "introduce",
        "cá nhân", "personal", "sở thích", "hobby", "hobbies", "địa điểm", "location", " ở đâu", "where",
    ])),
    ("experience", compile_triggers(["experience", "kinh nghiệm", " work", " job", "career", "làm việc"])),
    ("education", compile_triggers(["education", "học vấn", "study", "học tập", "degree", "certification"])),
    ("values", compile_triggers(["value", "giá trị", "principle", "approach", "philosophy", "belief"])),
    ("future_goals", compile_triggers(["future", "goal", " plan", "aspiration", "tương lai", "mục tiêu"])),
)

BANKS = {
    "about_general": ABOUT_GENERAL,
    "experience": EXPERIENCE,
    "education": EDUCATION,
    "values": VALUES,
    "future_goals": FUTURE_GOALS,
}


class AboutBank(ResponseBank):
    topic = "about"

    def load_profile(self) -> OwnerProfile:
        if self.content is None:
            return OwnerProfile()
        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="owner-profile") as pool:
            home = pool.submit(self.fetch, "get_home_content", self.content.get_home_content)
            about = pool.submit(self.fetch, "get_about_content", self.content.get_about_content)
            contact = pool.submit(self.fetch, "get_contact_info", self.content.get_contact_info)
            return OwnerProfile.build(home.result(), about.result(), contact.result())

    def respond(self, query: str) -> str:
        subtopic = detect_subtopic(query, SUBTOPICS, "about_general")
        if subtopic == "owner_info":
            profile = self.load_profile()
            return select_answer(query, profile.answers(), self.rng)

        text = select_answer(query, BANKS[subtopic], self.rng)
        about = self.fetch("get_about_content", self.content.get_about_content) if self.content else None
        if about is not None:
            normalized = normalize_text(query)
            if about.education and (subtopic == "education" or "education" in normalized):
                text += f"\n\n📚 **Education:** {about.education}"
            if about.experience and (subtopic == "experience" or "experience" in normalized):
                text += f"\n\n💼 **Experience:** {about.experience}"
            if about.skills and "skill" in normalized:
                text += f"\n\n⚡ **Skills:** {about.skills}"
        return text
