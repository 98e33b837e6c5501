"""
Skills bank: frontend, backend, devops and tooling answers.
"""

from __future__ import annotations

from backend.app.brain.intent import compile_triggers
from backend.app.responses.base import ResponseBank, answers, detect_subtopic, select_answer

FRONTEND = answers(
    "Frontend is my strongest area: React, Next.js and TypeScript with Tailwind CSS for styling.",
    "Tôi làm frontend với React, Next.js, TypeScript và Tailwind CSS, chú trọng responsive design và accessibility.",
    "I build reusable component libraries and keep pages fast with code splitting, lazy loading and image optimization.",
    "State management with Redux Toolkit, Zustand or React Context, and server state with React Query or SWR.",
    "Animations with Framer Motion, designs handed off from Figma, and HTML/CSS that works across browsers.",
)

BACKEND = answers(
    "Backend work in Node.js with Express and Next.js API routes, PostgreSQL and Prisma ORM.",
    "Tôi xây dựng REST và GraphQL API với Node.js, dữ liệu trên PostgreSQL hoặc MongoDB.",
    "Authentication with NextAuth.js, JWT and OAuth, plus input validation and rate limiting on every API.",
    "Database design, migrations and query optimization for PostgreSQL, with Redis caching when it pays off.",
    "Real-time features with WebSocket and Socket.io, and webhook integrations with third-party services.",
)

DEVOPS = answers(
    "Docker for containerized builds and GitHub Actions pipelines for tests and deployments.",
    "Deployments on Vercel and AWS (EC2, S3), with CDN caching and environment-based configuration.",
    "Tôi dùng Docker, CI/CD với GitHub Actions và triển khai lên Vercel hoặc AWS.",
    "Monitoring, logging and error tracking so production issues show up before users report them.",
)

TOOLS = answers(
    "Daily tools: VS Code, Git and GitHub, Postman, Figma and the browser devtools.",
    "Testing with Jest, React Testing Library and Cypress; linting and formatting with ESLint and Prettier.",
    "Build tooling with Vite, Webpack and the Next.js compiler.",
    "Công cụ hằng ngày: VS Code, Git, Postman, Figma, Jest và Cypress.",
)

SUBTOPICS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("frontend", compile_triggers(["frontend", "front-end", "react", "javascript", " css", " html", " ui ", "component", "nextjs", "next js"])),
    ("backend", compile_triggers(["backend", "back-end", "server", " api", "database", "node", "express", "mongodb", "postgres"])),
    ("devops", compile_triggers(["devops", "deploy", "docker", "cloud", " aws", "ci cd", "kubernetes", "infrastructure"])),
    ("tools_tech", compile_triggers(["tool", "công cụ", "technolog", "framework", "library", "software", "testing"])),
)

BANKS = {"frontend": FRONTEND, "backend": BACKEND, "devops": DEVOPS, "tools_tech": TOOLS}


class SkillsBank(ResponseBank):
    topic = "skills"

    def respond(self, query: str) -> str:
        subtopic = detect_subtopic(query, SUBTOPICS, "frontend")
        text = select_answer(query, BANKS[subtopic], self.rng)
        about = self.fetch("get_about_content", self.content.get_about_content) if self.content else None
        if about is not None and about.skills:
            text += f"\n\n🚀 **Skills:** {about.skills}"
        return text
