"""
Blog bank: featured articles, writing-process and tutorial answers, recent
published posts and the blog's categories.
"""

from __future__ import annotations

from backend.app.brain.intent import compile_triggers, contains_any
from backend.app.brain.text import normalize_text
from backend.app.responses.base import CannedAnswer, ResponseBank, answers, detect_subtopic, select_answer

FEATURED_ARTICLES: tuple[CannedAnswer, ...] = (
    CannedAnswer.of(
        "react best practices",
        "⚛️ **React Best Practices**\n\nComponent design, hooks patterns, memoization and testing strategies for maintainable React apps.",
        "react best practices", "react",
    ),
    CannedAnswer.of(
        "nextjs 15 features",
        "🚀 **What's New in Next.js 15**\n\nThe App Router, server actions, partial prerendering and the caching changes that matter.",
        "nextjs 15", "nextjs", "next js",
    ),
    CannedAnswer.of(
        "typescript advanced",
        "🔷 **Advanced TypeScript**\n\nGenerics, conditional and mapped types, and typing real-world APIs without `any`.",
        "typescript",
    ),
    CannedAnswer.of(
        "ai chatbot",
        "🤖 **Building a Learning Chatbot**\n\nIntent detection, response caching and learning from user feedback, step by step.",
        "ai chatbot", "chatbot",
    ),
    CannedAnswer.of(
        "career tips",
        "📈 **Career Tips for Developers**\n\nGrowing from junior to senior: ownership, communication and picking what to learn next.",
        "career tips", "career",
    ),
    CannedAnswer.of(
        "coding interview",
        "🎯 **Acing Technical Interviews**\n\nAlgorithms, system design, take-home tasks and how to talk through your thinking.",
        "coding interview", "interview",
    ),
    CannedAnswer.of(
        "responsive design",
        "📱 **Responsive Design in Practice**\n\nMobile-first layouts, fluid typography and testing across devices.",
        "responsive design", "responsive",
    ),
    CannedAnswer.of(
        "web performance",
        "⚡ **Web Performance Optimization**\n\nCore Web Vitals, bundle splitting, image optimization and caching strategies.",
        "web performance", "performance",
    ),
    CannedAnswer.of(
        "docker containerization",
        "🐳 **Docker for Web Developers**\n\nDockerfiles, multi-stage builds and local environments that match production.",
        "docker",
    ),
)

WRITING_PROCESS = answers(
    "My writing process: pick a real problem, research it, build a working example, then explain it simply.",
    "Every article is reviewed for technical accuracy and tested code samples before publishing.",
    "Tôi lên kế hoạch nội dung theo chủ đề, viết bản nháp, kiểm tra code rồi mới xuất bản.",
    "I publish when a post is genuinely useful: quality over frequency.",
)

TUTORIAL_TOPICS = answers(
    "Tutorials walk through building features step by step, with full code examples.",
    "Các bài hướng dẫn đi từng bước, có code mẫu đầy đủ để bạn làm theo.",
    "Learning guides cover React, Next.js, TypeScript, Node.js and deployment.",
)

BLOG_GENERAL = answers(
    "I write about web development, career growth and technology insights.",
    "Blog chia sẻ kinh nghiệm lập trình, hướng dẫn kỹ thuật và góc nhìn về công nghệ.",
    "Topics include React, Next.js, TypeScript, full-stack development, AI integration and performance.",
    "Check the Blog section for tutorials, deep dives and lessons learned from real projects.",
)

SUBTOPICS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("writing_process", compile_triggers(["writing", "content", "publish", "planning", "research", "quality"])),
    ("tutorial_topics", compile_triggers(["tutorial", "guide", "learn", "how to", "step by step", "example", "hướng dẫn"])),
)

BANKS = {"writing_process": WRITING_PROCESS, "tutorial_topics": TUTORIAL_TOPICS, "blog_general": BLOG_GENERAL}

CATEGORIES = (
    "💻 **Technical tutorials:** step-by-step guides and code examples",
    "🚀 **Performance:** optimization techniques and best practices",
    "🔧 **Tools & workflows:** development efficiency",
    "📈 **Career growth:** professional development",
    "🌟 **Industry insights:** trends and technology analysis",
)

RECENT_POSTS = 5


def find_featured_article(query: str) -> str | None:
    """Return the featured article whose title or keyword appears in `query`."""
    padded = f" {normalize_text(query)} "
    for article in FEATURED_ARTICLES:
        if contains_any(padded, article.triggers):
            return article.answer
    return None


class BlogBank(ResponseBank):
    topic = "blog"

    def respond(self, query: str) -> str:
        text = find_featured_article(query)
        if text is None:
            subtopic = detect_subtopic(query, SUBTOPICS, "blog_general")
            text = select_answer(query, BANKS[subtopic], self.rng)

        posts = self.fetch("list_recent_published_posts", self.content.list_recent_published_posts, RECENT_POSTS) if self.content else None
        if posts:
            titles = ", ".join(f'"{p.title}"' for p in posts)
            text += f"\n\n**📖 Recent posts:** {titles}"
        else:
            text += "\n\n🚀 More articles are on the way. Stay tuned!"
        text += "\n\n**📂 Blog categories:**\n" + "\n".join(CATEGORIES)
        return text
