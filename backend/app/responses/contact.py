"""
Contact bank: channel-specific answers followed by the live contact details.
"""

from __future__ import annotations

from backend.app.brain.intent import compile_triggers
from backend.app.responses.base import ResponseBank, answers, detect_subtopic, select_answer

EMAIL = answers(
    "Email is the best way to reach me; I usually reply within 24 hours.",
    "Bạn có thể gửi email cho tôi, tôi thường phản hồi trong vòng 24 giờ.",
    "For project enquiries, an email with a short brief and timeline helps me answer quickly.",
)

PHONE = answers(
    "Phone calls work for urgent matters during business hours (GMT+7).",
    "Bạn có thể gọi điện trong giờ hành chính nếu cần trao đổi gấp.",
)

SOCIAL = answers(
    "You can also find me on LinkedIn and GitHub; messages there are welcome.",
    "Kết nối với tôi qua LinkedIn hoặc GitHub nhé!",
    "LinkedIn is great for professional opportunities, GitHub for code collaboration.",
)

FORM = answers(
    "The contact form on the Contact page sends your message straight to my inbox.",
    "Bạn có thể dùng form liên hệ ở trang Contact, tin nhắn sẽ được gửi trực tiếp cho tôi.",
)

GENERAL = answers(
    "Happy to hear from you! Use the contact form, email or social links on the Contact page.",
    "Bạn có thể liên hệ qua form, email hoặc mạng xã hội. Tôi luôn sẵn sàng trao đổi!",
    "Open to freelance work, full-time roles and collaborations. Let's talk!",
    "Tôi luôn sẵn sàng hợp tác cho các dự án thú vị. Hãy liên hệ bất cứ lúc nào!",
) + EMAIL + SOCIAL + FORM

SUBTOPICS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("email", compile_triggers(["email", "mail"])),
    ("phone", compile_triggers(["phone", "điện thoại", " call"])),
    ("social", compile_triggers(["social", "linkedin", "github", "twitter", "facebook", "mạng xã hội"])),
    ("form", compile_triggers([" form"])),
)

BANKS = {"email": EMAIL, "phone": PHONE, "social": SOCIAL, "form": FORM, "general": GENERAL}


class ContactBank(ResponseBank):
    topic = "contact"

    def respond(self, query: str) -> str:
        subtopic = detect_subtopic(query, SUBTOPICS, "general")
        if subtopic == "general":
            text = select_answer(query, GENERAL, self.rng, min_overlap=0.3)
        else:
            text = self.rng.choice(list(BANKS[subtopic])).answer

        info = self.fetch("get_contact_info", self.content.get_contact_info) if self.content else None
        if info is None:
            return text
        details = []
        if info.email:
            details.append(f"📧 Email: {info.email}")
        if info.phone:
            details.append(f"📞 Phone: {info.phone}")
        if info.address:
            details.append(f"📍 Address: {info.address}")
        if details:
            text += "\n\n**Contact information:**\n" + "\n".join(details)
        links = info.social_links()
        if links:
            text += "\n\n**Social links:**\n" + "\n".join(f"{label}: {url}" for label, url in links)
        return text
