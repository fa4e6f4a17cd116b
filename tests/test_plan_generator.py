import json

import pytest
import requests

from fitlog import plan_generator
from fitlog.plan_generator import (
    PlanGenerationError,
    build_prompt,
    fallback_plan,
    generate_gym_plan,
    parse_ai_response,
)

REQ = {
    "fitness_goal": "strength",
    "fitness_level": "beginner",
    "days_per_week": 3,
    "equipment_access": "home",
}

AI_PLAN = {
    "overview": "Three full body days.",
    "goals": ["Get stronger"],
    "weeklySchedule": [{"day": 1, "dayName": "Day 1", "focus": "Full", "exercises": []}],
    "progressionNotes": "Add weight.",
}


class FakeResponse:
    def __init__(self, status_code=200, body=None, reason="OK"):
        self.status_code = status_code
        self._body = body
        self.reason = reason

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


def _completion(content):
    return {"choices": [{"message": {"content": content}}]}


def test_prompt_mentions_request():
    prompt = build_prompt(REQ)
    assert "3-day per week" in prompt
    assert "Strength & Power Development" in prompt
    assert "Home Equipment" in prompt


def test_parse_extracts_json_from_prose():
    content = "Here you go!\n```json\n" + json.dumps(AI_PLAN) + "\n```"
    result = parse_ai_response(content, REQ)
    assert result["plan_content"]["overview"] == "Three full body days."
    assert result["weekly_schedule"] == AI_PLAN["weeklySchedule"]


@pytest.mark.parametrize(
    "content",
    ["no json here", "{not valid json}", json.dumps({"goals": []}), json.dumps({"overview": "x", "weeklySchedule": "nope"})],
)
def test_parse_falls_back_on_unusable_output(content):
    assert parse_ai_response(content, REQ) == fallback_plan(REQ)


def test_fallback_has_one_day_per_requested_day():
    plan = fallback_plan(REQ)
    assert len(plan["weekly_schedule"]) == 3
    assert plan["plan_content"]["weeklySchedule"] == plan["weekly_schedule"]
    assert "beginner" in plan["plan_content"]["overview"]


def test_generate_posts_to_openrouter(monkeypatch):
    calls = {}
    body = _completion(json.dumps(AI_PLAN))

    def fake_post(url, headers=None, json=None, timeout=None):
        calls.update(url=url, headers=headers, json=json, timeout=timeout)
        return FakeResponse(body=body)

    monkeypatch.setattr(plan_generator.requests, "post", fake_post)

    result = generate_gym_plan(REQ, api_key="k", model="m", url="http://ai.test", timeout=5)

    assert result["plan_content"]["goals"] == ["Get stronger"]
    assert calls["url"] == "http://ai.test"
    assert calls["headers"]["Authorization"] == "Bearer k"
    assert calls["json"]["model"] == "m"
    assert calls["timeout"] == 5


def test_generate_requires_api_key():
    with pytest.raises(PlanGenerationError):
        generate_gym_plan(REQ, api_key=None)


def test_generate_raises_on_http_error(monkeypatch):
    monkeypatch.setattr(
        plan_generator.requests,
        "post",
        lambda *a, **kw: FakeResponse(401, {"error": {"message": "bad key"}}, "Unauthorized"),
    )
    with pytest.raises(PlanGenerationError, match="bad key"):
        generate_gym_plan(REQ, api_key="k")


def test_generate_raises_on_network_error(monkeypatch):
    def boom(*a, **kw):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(plan_generator.requests, "post", boom)
    with pytest.raises(PlanGenerationError):
        generate_gym_plan(REQ, api_key="k")


def test_generate_raises_on_empty_content(monkeypatch):
    monkeypatch.setattr(
        plan_generator.requests, "post", lambda *a, **kw: FakeResponse(body={"choices": []})
    )
    with pytest.raises(PlanGenerationError):
        generate_gym_plan(REQ, api_key="k")


@pytest.mark.parametrize(
    "body, match",
    [
        (["not", "an", "object"], "Too Many Requests"),
        ({"error": "quota exceeded"}, "quota exceeded"),
        ({"error": ["odd"]}, "Too Many Requests"),
    ],
)
def test_generate_tolerates_odd_error_bodies(monkeypatch, body, match):
    monkeypatch.setattr(
        plan_generator.requests, "post", lambda *a, **kw: FakeResponse(429, body, "Too Many Requests")
    )
    with pytest.raises(PlanGenerationError, match=match):
        generate_gym_plan(REQ, api_key="k")


@pytest.mark.parametrize(
    "body",
    [
        ["choices"],
        {"choices": "nope"},
        {"choices": ["text"]},
        {"choices": [{"message": "text"}]},
    ],
)
def test_generate_rejects_odd_success_bodies(monkeypatch, body):
    monkeypatch.setattr(plan_generator.requests, "post", lambda *a, **kw: FakeResponse(body=body))
    with pytest.raises(PlanGenerationError):
        generate_gym_plan(REQ, api_key="k")
