import json

import pytest
import requests

from app.modules.assistant.gemini_client import GeminiClient, GeminiError
from app.modules.assistant.service import parse_exercises, strip_code_fences

EXERCISES = [
    {"name": "Goblet squat", "sets": 3, "reps": "10", "equipment": "dumbbells"},
    {"name": "Plank", "sets": 3, "reps": "45s", "equipment": "bodyweight"},
]


def test_chat_requires_message(client, gemini):
    response = client.post("/api/ai-bot", json={"message": "   "})
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Please enter your message"}


def test_chat_without_api_key(client):
    response = client.post("/api/ai-bot", json={"message": "hi"})
    assert response.status_code == 500
    assert response.json()["message"] == "API key is not found, add it to .env file"


def test_chat_anonymous(client, gemini):
    response = client.post("/api/ai-bot", json={"message": "How do I warm up?"})
    assert response.json() == {"success": True, "response": "Stay hydrated and keep moving."}
    assert "How do I warm up?" in gemini.prompts[0]
    assert "User Profile" not in gemini.prompts[0]


def test_chat_is_personalised_with_profile(logged_in, gemini, profile_payload):
    logged_in.post("/api/profile/save", json=profile_payload)
    logged_in.post("/api/ai-bot", json={"message": "Plan my week"})
    assert "Fitness Goal: strength" in gemini.prompts[0]


def test_chat_upstream_failure(client, gemini):
    def fail(prompt, temperature=0.7):
        raise GeminiError("Gemini HTTP 503")
    gemini.generate = fail
    response = client.post("/api/ai-bot", json={"message": "hi"})
    assert response.status_code == 500
    assert response.json()["message"] == "internal server error try again later"


def test_generate_exercises_requires_cookie(client, gemini):
    response = client.post("/api/generate-exercises")
    assert response.status_code == 401
    assert response.json()["message"] == "Not authenticated"

    client.cookies.set("token", "garbage")
    assert client.post("/api/generate-exercises").json()["message"] == "Invalid token"


def test_generate_exercises_requires_profile(logged_in, gemini):
    response = logged_in.post("/api/generate-exercises")
    assert response.status_code == 404
    assert response.json()["message"] == "Profile not found. Please complete your profile first."


def test_generate_exercises_without_api_key(logged_in, profile_payload):
    logged_in.post("/api/profile/save", json=profile_payload)
    response = logged_in.post("/api/generate-exercises")
    assert response.status_code == 500
    assert response.json()["message"] == "API key not configured"


def test_generate_exercises_strips_fences(logged_in, gemini, profile_payload):
    logged_in.post("/api/profile/save", json=profile_payload)
    gemini.reply = "```json\n" + json.dumps(EXERCISES) + "\n```"
    response = logged_in.post("/api/generate-exercises")
    assert response.status_code == 200
    assert response.json() == {"success": True, "exercises": EXERCISES}
    assert "6-8 exercises" in gemini.prompts[0]
    assert '"dumbbells"' in gemini.prompts[0]


def test_generate_exercises_unparseable_reply(logged_in, gemini, profile_payload):
    logged_in.post("/api/profile/save", json=profile_payload)
    gemini.reply = "Sorry, I cannot help with that."
    response = logged_in.post("/api/generate-exercises")
    assert response.status_code == 500
    assert response.json()["message"] == "Failed to generate exercises. Please try again."


@pytest.mark.parametrize("text", [
    json.dumps(EXERCISES),
    "```json\n" + json.dumps(EXERCISES) + "\n```",
    "```\n" + json.dumps(EXERCISES) + "\n```",
])
def test_parse_exercises_variants(text):
    assert parse_exercises(text) == EXERCISES


def test_parse_exercises_rejects_objects():
    with pytest.raises(ValueError):
        parse_exercises('{"name": "Plank"}')


def test_strip_code_fences_leaves_plain_text():
    assert strip_code_fences("  [1, 2]  ") == "[1, 2]"


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self.ok = status_code < 400
        self._payload = payload

    def json(self):
        return self._payload


class FakeHTTP:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


def test_gemini_client_extracts_text():
    http = FakeHTTP(FakeResponse(200, {
        "candidates": [{"content": {"parts": [{"text": "Hello "}, {"text": "there"}]}}]
    }))
    client = GeminiClient("key", model="gemini-test", api_base="https://example.test/v1", timeout=5, session=http)
    assert client.generate("hi") == "Hello there"
    url, kwargs = http.calls[0]
    assert url == "https://example.test/v1/models/gemini-test:generateContent"
    assert kwargs["params"] == {"key": "key"}
    assert kwargs["timeout"] == 5
    assert kwargs["json"]["contents"][0]["parts"][0]["text"] == "hi"


@pytest.mark.parametrize("http", [
    FakeHTTP(FakeResponse(503, {})),
    FakeHTTP(FakeResponse(200, {"candidates": []})),
    FakeHTTP(error=requests.ConnectionError("boom")),
])
def test_gemini_client_failures(http):
    with pytest.raises(GeminiError):
        GeminiClient("key", session=http).generate("hi")
