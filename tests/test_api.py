from fastapi.testclient import TestClient

from backend.app.brain.service import ChatbotRouter
from backend.main import create_app


def ask(client, message, **extra):
    resp = client.post("/api/chatbot", json={"message": message, **extra})
    assert resp.status_code == 200
    return resp.json()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.json()["router_ready"] is True


def test_theme_command_envelope(client):
    body = ask(client, "bật dark mode")
    assert body["intent"] == "theme_dark"
    assert body["themeAction"] == "dark"
    assert body["source"] == "theme_direct"
    assert body["confidence"] == 0.95
    assert body["sessionId"].startswith("session_")
    assert isinstance(body["responseTime"], int)


def test_navigation_envelope_keeps_session(client):
    body = ask(client, "chuyển tới projects", sessionId="abc", userId="u1")
    assert body["intent"] == "navigate_projects"
    assert body["navigationAction"] == "/projects"
    assert body["sessionId"] == "abc"


def test_empty_message_is_answered(client):
    body = ask(client, "")
    assert body["intent"] == "default"
    assert body["response"]


def test_missing_message_is_rejected(client):
    assert client.post("/api/chatbot", json={"sessionId": "abc"}).status_code == 422


def test_feedback_flow(client, chatbot):
    body = ask(client, "What are your technical skills?", sessionId="s1")
    assert chatbot.tasks.drain()

    resp = client.patch("/api/chatbot", json={"messageId": body["messageId"], "rating": 5, "feedbackType": "HELPFUL"})
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}

    knowledge = client.get("/api/admin/chatbot/knowledge").json()["entries"]
    assert len(knowledge) == 1
    assert knowledge[0]["usageCount"] == 1
    assert knowledge[0]["successRate"] == 1.0


def test_feedback_validation(client):
    assert client.patch("/api/chatbot", json={"messageId": "m", "rating": 6}).status_code == 422
    assert client.patch("/api/chatbot", json={"messageId": "m", "rating": 0}).status_code == 422
    assert client.patch("/api/chatbot", json={"messageId": "m", "rating": 3, "feedbackType": "BOGUS"}).status_code == 422


def test_feedback_for_unknown_message_fails(client):
    resp = client.patch("/api/chatbot", json={"conversationId": "c", "messageId": "missing", "rating": 4})
    assert resp.status_code == 500
    assert resp.json() == {"ok": False}


def test_end_conversation(client, chatbot):
    ask(client, "Hello", sessionId="s1")
    assert chatbot.tasks.drain()
    assert client.post("/api/chatbot/end", json={"sessionId": "s1", "satisfaction": 4}).json() == {"ok": True}
    assert client.post("/api/chatbot/end", json={"sessionId": "s1"}).json() == {"ok": False}
    assert client.post("/api/chatbot/end", json={"sessionId": "s1", "satisfaction": 9}).status_code == 422


def test_admin_stats(client, chatbot):
    ask(client, "Hello", sessionId="s1")
    assert chatbot.tasks.drain()
    body = client.get("/api/admin/chatbot/stats").json()
    assert body["totalConversations"] == 1
    assert body["totalMessages"] == 2
    assert body["cache"]["size"] == 1
    assert body["learningEnabled"] is True


def test_admin_knowledge_lifecycle(client):
    resp = client.post(
        "/api/admin/chatbot/knowledge",
        json={"question": "Where are you based?", "answer": "Hanoi", "intent": "about"},
    )
    assert resp.status_code == 201
    entry = resp.json()
    assert entry["source"] == "static"
    assert entry["isActive"] is True

    listed = client.get("/api/admin/chatbot/knowledge", params={"limit": 10}).json()["entries"]
    assert [e["id"] for e in listed] == [entry["id"]]

    resp = client.patch(f"/api/admin/chatbot/knowledge/{entry['id']}", json={"isActive": False})
    assert resp.json()["isActive"] is False
    assert client.get("/api/admin/chatbot/knowledge").json()["entries"] == []

    assert client.delete(f"/api/admin/chatbot/knowledge/{entry['id']}").json() == {"ok": True}
    assert client.delete(f"/api/admin/chatbot/knowledge/{entry['id']}").status_code == 404
    assert client.patch("/api/admin/chatbot/knowledge/missing", json={"isActive": True}).status_code == 404


def test_admin_rejects_unknown_intent(client):
    resp = client.post("/api/admin/chatbot/knowledge", json={"question": "q", "answer": "a", "intent": "weather"})
    assert resp.status_code == 422


def test_admin_patterns(client, chatbot):
    ask(client, "asdkjasdkj random")
    assert chatbot.tasks.drain()
    patterns = client.get("/api/admin/chatbot/patterns").json()["patterns"]
    assert [p["pattern"] for p in patterns] == ["asdkjasdkj|random"]


def test_admin_cache(client):
    ask(client, "Tell me about your projects")
    assert client.get("/api/admin/chatbot/cache").json()["size"] == 1
    assert client.delete("/api/admin/chatbot/cache").json() == {"ok": True, "cleared": 1}
    assert client.get("/api/admin/chatbot/cache").json()["size"] == 0


def test_admin_without_store_is_unavailable(banks, settings):
    router = ChatbotRouter(banks=banks, store=None, settings=settings)
    with TestClient(create_app(chatbot=router)) as client:
        assert client.get("/api/admin/chatbot/stats").status_code == 503
        assert client.get("/api/admin/chatbot/cache").status_code == 200
        resp = client.patch("/api/chatbot", json={"messageId": "m", "rating": 5})
        assert resp.status_code == 500


def test_platform_endpoints(client):
    arch = client.get("/api/v1/platform/architecture").json()
    assert arch["precedence"][0] == "theme_dark"
    assert arch["precedence"][-1] == "help"
    config = client.get("/api/v1/platform/config").json()
    assert config["learning_enabled"] is True
    assert config["cache"]["similarity_threshold"] == 0.8
