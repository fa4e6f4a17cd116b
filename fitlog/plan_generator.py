# backend/fitlog/plan_generator.py
import json
import logging
import re
from typing import Any, Dict

import requests

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODEL = "openai/gpt-4o-mini"

SYSTEM_PROMPT = (
    "You are an expert fitness trainer and workout plan designer. Create detailed, "
    "practical workout plans tailored to individual goals and constraints. Always "
    "provide structured, actionable plans with specific exercises, sets, and reps."
)

GOAL_LABELS = {
    "weight_loss": "Weight Loss & Fat Burning",
    "muscle_gain": "Muscle Growth & Hypertrophy",
    "strength": "Strength & Power Development",
    "endurance": "Endurance & Conditioning",
    "general_fitness": "General Fitness & Health",
}

LEVEL_LABELS = {
    "beginner": "Beginner (0-1 years training)",
    "intermediate": "Intermediate (1-3 years training)",
    "advanced": "Advanced (3+ years training)",
}

EQUIPMENT_LABELS = {
    "gym": "Full Gym Access (barbells, dumbbells, machines, cables)",
    "home": "Home Equipment (dumbbells, resistance bands, adjustable bench)",
    "bodyweight": "Bodyweight Only (minimal equipment)",
}


class PlanGenerationError(Exception):
    pass


def format_goal(goal: str) -> str:
    return GOAL_LABELS.get(goal, goal)


def format_level(level: str) -> str:
    return LEVEL_LABELS.get(level, level)


def format_equipment(equipment: str) -> str:
    return EQUIPMENT_LABELS.get(equipment, equipment)


def build_prompt(req: Dict[str, Any]) -> str:
    days = req["days_per_week"]
    level = format_level(req["fitness_level"])
    return f"""Create a comprehensive {days}-day per week gym workout plan with the following details:

**User Profile:**
- Fitness Goal: {format_goal(req["fitness_goal"])}
- Experience Level: {level}
- Training Days Per Week: {days}
- Equipment Access: {format_equipment(req["equipment_access"])}

**Requirements:**
1. Provide a brief overview of the plan (2-3 sentences)
2. List 3-5 specific goals this plan will help achieve
3. Create a detailed weekly schedule with {days} workout days
4. For each workout day, include the day number and name, the primary focus area,
   5-8 specific exercises with sets, reps and weight guidance, and brief form notes
5. Add progression notes for how to advance the plan over 4-8 weeks

**Output Format:**
Respond with JSON in exactly this shape:
{{
  "overview": "Brief plan overview",
  "goals": ["Goal 1", "Goal 2", "Goal 3"],
  "weeklySchedule": [
    {{
      "day": 1,
      "dayName": "Upper Body Push",
      "focus": "Chest, Shoulders, Triceps",
      "exercises": [
        {{"name": "Bench Press", "sets": 4, "reps": "8-10",
          "weight": "Start with 60-70% of 1RM", "notes": "Focus on controlled descent"}}
      ]
    }}
  ],
  "progressionNotes": "How to progress over time"
}}

Make the plan challenging but appropriate for a {level} level trainee."""


def fallback_plan(req: Dict[str, Any]) -> Dict[str, Any]:
    """Generic full-body plan used when the model output is unusable."""
    days = int(req["days_per_week"])
    goal = format_goal(req["fitness_goal"]).lower()
    level = format_level(req["fitness_level"]).split(" ")[0].lower()
    equipment = format_equipment(req["equipment_access"]).lower()

    schedule = [
        {
            "day": i + 1,
            "dayName": f"Day {i + 1} - Full Body",
            "focus": "Full Body Workout",
            "exercises": [
                {"name": "Squats", "sets": 3, "reps": "10-12", "weight": "Bodyweight or light weight"},
                {"name": "Push-ups", "sets": 3, "reps": "8-12", "weight": "Bodyweight"},
                {"name": "Rows", "sets": 3, "reps": "10-12", "weight": "Light to moderate"},
                {"name": "Plank", "sets": 3, "reps": "30-60 seconds", "weight": "Bodyweight"},
            ],
        }
        for i in range(days)
    ]

    return {
        "plan_content": {
            "overview": f"A {days}-day per week {goal} plan for {level} level with {equipment}.",
            "goals": [
                f"Achieve {goal}",
                "Build consistent training habits",
                "Improve overall fitness and health",
            ],
            "weeklySchedule": schedule,
            "progressionNotes": "Increase weight by 5-10% when you can complete all sets with good form.",
        },
        "weekly_schedule": schedule,
    }


def parse_ai_response(content: str, req: Dict[str, Any]) -> Dict[str, Any]:
    match = re.search(r"\{[\s\S]*\}", content or "")
    try:
        if not match:
            raise ValueError("no JSON object in model output")
        parsed = json.loads(match.group(0))
        schedule = parsed.get("weeklySchedule")
        if not parsed.get("overview") or not isinstance(schedule, list):
            raise ValueError("model output is missing overview or weeklySchedule")
    except (ValueError, AttributeError) as e:
        logger.warning("Unusable plan from model (%s), using fallback plan", e)
        return fallback_plan(req)

    return {
        "plan_content": {
            "overview": parsed["overview"],
            "goals": parsed.get("goals") or [],
            "weeklySchedule": schedule,
            "progressionNotes": parsed.get("progressionNotes") or "",
        },
        "weekly_schedule": schedule,
    }


def generate_gym_plan(
    req: Dict[str, Any],
    api_key: str,
    model: str = DEFAULT_MODEL,
    url: str = DEFAULT_URL,
    timeout: int = 60,
) -> Dict[str, Any]:
    """
    req: {fitness_goal, fitness_level, days_per_week, equipment_access}
    Returns {plan_content, weekly_schedule}.
    """
    if not api_key:
        raise PlanGenerationError("OPENROUTER_API_KEY is not set")

    try:
        resp = requests.post(
            url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            json={
                "model": model,
                "messages": [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(req)},
                ],
                "temperature": 0.7,
                "max_tokens": 2000,
            },
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise PlanGenerationError(f"OpenRouter request failed: {e}") from e

    if not resp.ok:
        try:
            body = resp.json()
        except ValueError:
            body = None
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            detail = error.get("message")
        else:
            detail = error if isinstance(error, str) else None
        raise PlanGenerationError(f"OpenRouter API error: {detail or resp.reason}")

    try:
        body = resp.json()
    except ValueError as e:
        raise PlanGenerationError("OpenRouter returned a non-JSON body") from e
    if not isinstance(body, dict):
        raise PlanGenerationError("Unexpected response shape from OpenRouter API")

    choices = body.get("choices")
    first = choices[0] if isinstance(choices, list) and choices else None
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not content:
        raise PlanGenerationError("No content received from OpenRouter API")

    return parse_ai_response(content, req)
