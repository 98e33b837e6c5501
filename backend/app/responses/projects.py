"""
Projects bank: a catalogue of showcased projects plus general, tech-stack,
source-code and demo Q&A. General answers list the most recent projects.
"""

from __future__ import annotations

from backend.app.brain.intent import compile_triggers
from backend.app.responses.base import CannedAnswer, ResponseBank, detect_subtopic, select_answer

PROJECT_CATALOGUE: tuple[CannedAnswer, ...] = (
    CannedAnswer.of(
        "portfolio website",
        "🌟 **Portfolio Website with AI Chatbot**\n\n"
        "Personal portfolio with a built-in assistant that learns from feedback.\n\n"
        "🔧 **Tech stack:** Next.js, React, TypeScript, Tailwind CSS, PostgreSQL, Prisma\n"
        "✨ **Features:** learning chatbot, admin dashboard, markdown blog, responsive layout",
        "portfolio", "website", "chatbot",
    ),
    CannedAnswer.of(
        "weather dashboard",
        "🌤️ **Weather Dashboard**\n\n"
        "Real-time weather for several cities with a 7-day forecast and charts.\n\n"
        "🔧 **Tech stack:** React, Chart.js, Redux Toolkit, OpenWeatherMap API\n"
        "✨ **Features:** geolocation, favourite cities, interactive charts, dark/light theme",
        "weather", "thời tiết",
    ),
    CannedAnswer.of(
        "e-commerce platform",
        "🛒 **E-commerce Platform**\n\n"
        "Full-stack shop with catalogue search, cart, checkout and Stripe payments.\n\n"
        "🔧 **Tech stack:** Next.js, TypeScript, Node.js, Express, MongoDB, Stripe\n"
        "✨ **Features:** order tracking, inventory dashboard, reviews, email notifications",
        "e-commerce", "ecommerce", " shop", "bán hàng",
    ),
    CannedAnswer.of(
        "task management app",
        "📋 **Task Management App**\n\n"
        "Kanban boards with real-time team collaboration.\n\n"
        "🔧 **Tech stack:** React, Material-UI, GraphQL, PostgreSQL, Socket.io\n"
        "✨ **Features:** drag-and-drop boards, assignments, deadlines, time tracking, offline sync",
        "task", "todo", "công việc",
    ),
    CannedAnswer.of(
        "social media app",
        "📱 **Social Media App**\n\n"
        "Mobile social platform with messaging, feeds and 24h stories.\n\n"
        "🔧 **Tech stack:** React Native, Expo, Node.js, Socket.io, Redis, MongoDB\n"
        "✨ **Features:** group chats, push notifications, media upload, follow system",
        "social media", "mạng xã hội",
    ),
    CannedAnswer.of(
        "blog platform",
        "✍️ **Blog Publishing Platform**\n\n"
        "CMS for writers with markdown editing and SEO tooling.\n\n"
        "🔧 **Tech stack:** Next.js, MDX, Tailwind CSS, PostgreSQL\n"
        "✨ **Features:** multi-author support, comment moderation, tags, newsletter, analytics",
        "blog platform", "cms",
    ),
    CannedAnswer.of(
        "cryptocurrency tracker",
        "💰 **Cryptocurrency Tracker**\n\n"
        "Live prices and portfolio P&L for 1000+ coins.\n\n"
        "🔧 **Tech stack:** React, Chart.js, CoinGecko API, WebSocket\n"
        "✨ **Features:** price alerts, historical charts, watchlist, news feed",
        "crypto", "bitcoin", "tiền ảo",
    ),
    CannedAnswer.of(
        "recipe app",
        "👨‍🍳 **Recipe Sharing App**\n\n"
        "Community recipes with ingredient search and meal planning.\n\n"
        "🔧 **Tech stack:** React, Material-UI, Node.js, MongoDB, Elasticsearch\n"
        "✨ **Features:** photo upload, ratings, shopping lists, nutrition info",
        "recipe", "món ăn", "nấu ăn",
    ),
    CannedAnswer.of(
        "fitness tracker",
        "💪 **Fitness Tracker**\n\n"
        "Workout and nutrition logging with progress analytics.\n\n"
        "🔧 **Tech stack:** React Native, PostgreSQL, Victory Native, HealthKit / Google Fit\n"
        "✨ **Features:** custom plans, goals, social challenges, wearable sync",
        "fitness", " gym",
    ),
    CannedAnswer.of(
        "music streaming app",
        "🎵 **Music Streaming App**\n\n"
        "Streaming service with playlists and recommendations.\n\n"
        "🔧 **Tech stack:** React, Web Audio API, Node.js, AWS S3, Redis\n"
        "✨ **Features:** offline downloads, lyrics, audio visualisation, cross-device sync",
        "music", "nhạc", "streaming",
    ),
)

PROJECTS_GENERAL = (
    CannedAnswer.of("bạn có những dự án gì", "Tôi có nhiều dự án: web app, mobile app và các công cụ hữu ích. Bạn muốn xem dự án nào?"),
    CannedAnswer.of("show me your projects", "I have several projects including full-stack web apps, AI-powered tools and mobile apps. Which kind interests you most?"),
    CannedAnswer.of("what is your best project", "The portfolio site with its learning chatbot is the most complete one, covering both engineering and UX. Want the details?"),
    CannedAnswer.of("how many projects do you have", "10+ finished projects and a few in progress, from web apps to AI tools and mobile apps."),
    CannedAnswer.of("dự án mới nhất là gì", "Dự án mới nhất chính là chatbot portfolio này, có khả năng học từ các cuộc hội thoại!"),
    CannedAnswer.of("which project was most challenging", "The chatbot's learning system: intent detection, feedback learning and keeping the database fast."),
    CannedAnswer.of("any team projects", "Yes, several. They taught me git workflows, code review and clear team communication."),
    CannedAnswer.of("any open source projects", "Many projects are open source on GitHub. Sharing knowledge matters to me."),
)

TECH_STACK = (
    CannedAnswer.of("what technologies do you use", "Main stack: React, Next.js, TypeScript, Node.js, PostgreSQL, Prisma and Tailwind CSS."),
    CannedAnswer.of("dùng công nghệ gì", "Tech stack chính: React, Next.js, TypeScript, Node.js, PostgreSQL, Prisma, Tailwind CSS."),
    CannedAnswer.of("what frontend frameworks", "Mostly React with Next.js for SSR/SSG, TypeScript for type safety and Tailwind CSS for styling."),
    CannedAnswer.of("what database", "PostgreSQL in production with Prisma for type-safe queries and migrations."),
    CannedAnswer.of("any cloud services", "Vercel and AWS for hosting, Cloudinary for images, plus CDN caching."),
    CannedAnswer.of("devops tools", "Docker for containers and GitHub Actions for CI/CD."),
    CannedAnswer.of("testing frameworks", "Jest, React Testing Library, Cypress for end-to-end tests and Postman for APIs."),
)

SOURCE_CODE = (
    CannedAnswer.of("can i see the code", "Absolutely. The GitHub repositories have code samples and documentation."),
    CannedAnswer.of("source code available", "Most projects publish their source on GitHub."),
    CannedAnswer.of("github profile", "Bạn có thể xem toàn bộ dự án trên GitHub của tôi, kể cả các đóng góp open source."),
    CannedAnswer.of("git workflow", "Feature branches, conventional commit messages and reviewed pull requests."),
    CannedAnswer.of("code quality", "Clean code, documentation, tests and code reviews on every project."),
)

DEMOS = (
    CannedAnswer.of("can i see a live demo", "Yes! This portfolio is the live demo: you're talking to its chatbot right now."),
    CannedAnswer.of("có demo live không", "Có! Chính portfolio này là bản demo, bạn đang trò chuyện với chatbot theo thời gian thực."),
    CannedAnswer.of("working examples", "Every project has a working example, from small web apps to the AI assistant."),
    CannedAnswer.of("mobile demo", "The site is responsive; try it on a phone or resize the window."),
)

PROJECT_DETAILS = (
    CannedAnswer.of("project architecture", "Component-based, modular design with clear separation of concerns."),
    CannedAnswer.of("development process", "Agile cycles: planning, building, testing, deploying and iterating."),
    CannedAnswer.of("project timeline", "Usually 2 to 8 weeks depending on scope."),
    CannedAnswer.of("security measures", "Authentication, authorization, input validation and encrypted secrets."),
    CannedAnswer.of("chi tiết dự án", "Mỗi dự án đều có tài liệu chi tiết: tech stack, tính năng và bài học rút ra."),
)

SUBTOPICS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("specific_projects", tuple(t for item in PROJECT_CATALOGUE for t in item.triggers)),
    ("demo", compile_triggers(["demo", " live ", " xem "])),
    ("github", compile_triggers(["github", "source", " code", "repo"])),
    ("techstack", compile_triggers(["tech", "công nghệ", "framework", "database", "stack"])),
    ("project_details", compile_triggers(["chi tiết", "detail", "architecture", "process", "timeline"])),
)

BANKS = {
    "projects_general": PROJECTS_GENERAL,
    "techstack": TECH_STACK,
    "github": SOURCE_CODE,
    "demo": DEMOS,
    "project_details": PROJECT_DETAILS,
}

RECENT_PROJECTS = 3


class ProjectsBank(ResponseBank):
    topic = "projects"

    def respond(self, query: str) -> str:
        subtopic = detect_subtopic(query, SUBTOPICS, "projects_general")
        if subtopic == "specific_projects":
            text = select_answer(query, PROJECT_CATALOGUE, self.rng)
            return text + (
                "\n\n💡 **Want more?** Ask about the tech stack, a live demo, the source code or other projects."
            )

        text = select_answer(query, BANKS[subtopic], self.rng, min_overlap=0.3)
        if subtopic == "techstack":
            text += (
                "\n\n⚡ **Main stack:**\n"
                "• Frontend: React, Next.js, TypeScript, Tailwind CSS\n"
                "• Backend: Node.js, PostgreSQL, Prisma\n"
                "• Tools: Docker, GitHub Actions, Vercel"
            )
        if subtopic == "projects_general":
            projects = self.fetch("list_recent_projects", self.content.list_recent_projects, RECENT_PROJECTS) if self.content else None
            if projects:
                lines = [f"{i}. **{p.title}** - {p.description}".rstrip(" -") for i, p in enumerate(projects, start=1)]
                text += "\n\n📂 **Recent projects:**\n" + "\n".join(lines)
            names = ", ".join(item.prompt.title() for item in PROJECT_CATALOGUE)
            text += f"\n\n💬 Ask me about any of these: {names}."
        return text
