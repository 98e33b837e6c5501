"""
Greeting, help and default answers, the confirmations sent with navigation
and theme commands, and the fixed fallback sentences.
"""

from __future__ import annotations

from backend.app.brain.models import Intent
from backend.app.responses.base import ResponseBank, answers, select_answer

GREETINGS = answers(
    "Xin chào! 👋 Tôi là trợ lý của portfolio này. Hỏi tôi về dự án, kỹ năng, kinh nghiệm, blog hoặc thông tin liên hệ nhé!",
    "Hi there! 🌟 Welcome to the portfolio. Ask me anything about projects, skills, background, the blog or how to get in touch!",
    "Chào bạn! 🚀 Tôi sẵn sàng trả lời mọi câu hỏi về portfolio, dự án, kỹ năng và kinh nghiệm.",
    "Hello! 💻 I'm here to help you explore this portfolio. Try asking about projects or technical skills.",
)

HELP = answers(
    "🔍 **Tôi có thể giúp bạn về:**\n"
    "• 🚀 **Projects** - các dự án đã thực hiện\n"
    "• 💻 **Skills** - kỹ năng và công nghệ\n"
    "• 👨‍💻 **About** - background, kinh nghiệm, học vấn\n"
    "• 📝 **Blog** - bài viết và hướng dẫn\n"
    "• 📧 **Contact** - thông tin liên hệ\n"
    "• 🧭 Điều hướng (\"đi tới trang blog\") và đổi giao diện (\"bật dark mode\")",
    "💡 **I can help you with:**\n"
    "• 🎯 **Projects** - portfolio work and applications\n"
    "• 🛠️ **Skills** - languages and frameworks\n"
    "• 📋 **About** - experience and background\n"
    "• ✍️ **Blog** - articles and tutorials\n"
    "• 🤝 **Contact** - ways to get in touch\n"
    "• 🧭 Navigation (\"go to projects\") and themes (\"switch to dark mode\")",
)

DEFAULTS = answers(
    "Tôi có thể giúp bạn tìm hiểu về dự án, kỹ năng, kinh nghiệm, blog hoặc thông tin liên hệ. Bạn muốn biết gì cụ thể?",
    "Xin chào! Tôi có thể hỗ trợ bạn về projects, skills, experience, blog posts và contact information.",
    "Hi there! I can help you learn about projects, skills, background, blog content and ways to get in touch.",
    "I'm not sure I understood that. Try asking about projects, skills, experience, the blog or contact details!",
)

NAVIGATION_MESSAGES: dict[Intent, str] = {
    Intent.NAVIGATE_HOME: "🏠 **Đang chuyển đến trang Home...**\n\nOverview, featured projects and a quick look at the skills.",
    Intent.NAVIGATE_ABOUT: "👤 **Đang chuyển đến trang About...**\n\nBackground, experience, education and personal interests.",
    Intent.NAVIGATE_PROJECTS: "🚀 **Đang chuyển đến trang Projects...**\n\nLive demos, source code links and the tech behind each project.",
    Intent.NAVIGATE_BLOG: "📝 **Đang chuyển đến trang Blog...**\n\nTutorials, insights and lessons learned.",
    Intent.NAVIGATE_CONTACT: "📧 **Đang chuyển đến trang Contact...**\n\nContact form, email and social links.",
    Intent.NAVIGATE_GENERAL: (
        "🧭 **Navigation options:**\n"
        "• 🏠 **Home** - overview\n"
        "• 👤 **About** - background and experience\n"
        "• 🚀 **Projects** - showcase and demos\n"
        "• 📝 **Blog** - articles\n"
        "• 📧 **Contact** - get in touch\n\n"
        "Try \"go to projects\" or \"đi tới trang blog\"."
    ),
}

THEME_MESSAGES: dict[Intent, str] = {
    Intent.THEME_DARK: "🌙 **Đã chuyển sang Dark Mode.** Easier on the eyes at night!",
    Intent.THEME_LIGHT: "☀️ **Đã chuyển sang Light Mode.** Bright and clear!",
    Intent.THEME_SYSTEM: "🖥️ **Đã chuyển sang chế độ System.** The theme now follows your device settings.",
}

FALLBACKS: dict[Intent, str] = {
    Intent.GREETING: "Xin chào! Tôi là chatbot của portfolio này. Tôi có thể giúp bạn tìm hiểu về kinh nghiệm, kỹ năng, dự án và thông tin liên hệ.",
    Intent.HELP: "Tôi có thể giúp bạn về dự án, kỹ năng, kinh nghiệm, blog và thông tin liên hệ. Hãy hỏi cụ thể nhé!",
    Intent.PROJECTS: "Tôi có thể giới thiệu các dự án trong portfolio. Hãy hỏi về một dự án cụ thể hoặc tech stack!",
    Intent.SKILLS: "Kỹ năng chính gồm React, Next.js, TypeScript, Node.js và full-stack development. Bạn muốn biết chi tiết về kỹ năng nào?",
    Intent.ABOUT: "Đây là portfolio của một full-stack developer đam mê công nghệ web hiện đại. Bạn muốn biết gì về background?",
    Intent.CONTACT: "Bạn có thể liên hệ qua contact form, email hoặc mạng xã hội. Hãy vào trang Contact để xem chi tiết!",
    Intent.BLOG: "Blog chia sẻ kinh nghiệm phát triển, hướng dẫn và góc nhìn công nghệ, nhiều bài về React, Next.js và best practices!",
    Intent.DEFAULT: "Tôi có thể giúp bạn tìm hiểu về dự án, kỹ năng, kinh nghiệm, blog hoặc thông tin liên hệ. Bạn muốn biết gì cụ thể?",
}

ERROR_FALLBACK = (
    "Xin chào! Tôi có thể giúp bạn tìm hiểu về dự án, kỹ năng, kinh nghiệm và thông tin liên hệ. "
    "Hãy hỏi tôi bất cứ điều gì!"
)


def fallback_for(intent: Intent) -> str:
    """Fixed fallback sentence for every intent the classifier can emit."""
    if intent.is_navigation:
        return NAVIGATION_MESSAGES[intent]
    if intent.is_theme:
        return THEME_MESSAGES[intent]
    return FALLBACKS.get(intent, FALLBACKS[Intent.DEFAULT])


class GreetingBank(ResponseBank):
    topic = "greeting"

    def respond(self, query: str) -> str:
        return self.rng.choice(list(GREETINGS)).answer


class HelpBank(ResponseBank):
    topic = "help"

    def respond(self, query: str) -> str:
        return select_answer(query, HELP, self.rng)


class DefaultBank(ResponseBank):
    topic = "default"

    def respond(self, query: str) -> str:
        return self.rng.choice(list(DEFAULTS)).answer

