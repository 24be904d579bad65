import json
from datetime import datetime, timezone
from typing import Optional

from app.modules.profiles.schemas import ProfileResponse

ASSISTANT_SYSTEM_PROMPT = """## Overview
You are AI Fitness & Diet Planner called (Healthify). Your job is to assist users with fitness, nutrition, workout plans, and general physical health only. Always be polite, supportive, and reply in the user's language. The current date and time is {now}

## Rules
- Answer only fitness, nutrition, workouts, and physical health topics
- If the user asks about anything outside this scope, politely explain that you are specialized only in fitness, diet, and exercise
- Do not provide medical diagnoses, medications, or treatments
- Promote safe and sustainable habits

## Instructions
1) Detect the user's language and respond using the same language
2) If the user requests a diet or workout plan and no profile is given below, ask for height, weight, age, gender, goals, activity level, and injuries
3) Provide personalized guidance only after collecting the required information
"""

EXERCISE_FIELDS = """- name: Exercise name
- description: Brief description (1-2 sentences)
- sets: Number of sets
- reps: Reps or duration
- restTime: Rest time between sets
- difficulty: beginner/intermediate/advanced
- muscleGroups: Array of targeted muscle groups
- tips: Array of 2-3 important tips for proper form
- equipment: Required equipment (or "bodyweight")"""


def profile_summary(profile: ProfileResponse) -> str:
    injuries = json.dumps(profile.injuries) if profile.injuries else "None"
    return (
        f"- Name: {profile.first_name} {profile.last_name}\n"
        f"- Age: {profile.age}\n"
        f"- Gender: {profile.gender}\n"
        f"- Height: {profile.height:g}cm\n"
        f"- Weight: {profile.weight:g}kg\n"
        f"- Fitness Goal: {profile.goal}\n"
        f"- Fitness Level: {profile.level}\n"
        f"- Training Location: {profile.place}\n"
        f"- Available Equipment: {json.dumps(profile.equipment)}\n"
        f"- Training Days per Week: {profile.days}\n"
        f"- Session Duration: {profile.session_time} minutes\n"
        f"- Injuries/Limitations: {injuries}\n"
        f"- Able to train: {'Yes' if profile.able else 'No'}"
    )


def build_chat_prompt(message: str, profile: Optional[ProfileResponse] = None) -> str:
    prompt = ASSISTANT_SYSTEM_PROMPT.format(now=datetime.now(timezone.utc).isoformat())
    if profile is not None:
        prompt += f"\n## User Profile\n{profile_summary(profile)}\n"
    return f"{prompt}\nThe previous was the system rules.\nuser message : {message}"


def build_exercises_prompt(profile: ProfileResponse) -> str:
    return (
        "You are a professional fitness coach. Based on the user's profile below, "
        "generate a personalized workout plan with 6-8 exercises.\n\n"
        f"User Profile:\n{profile_summary(profile)}\n\n"
        "Generate a JSON array of exercises. Each exercise should have:\n"
        f"{EXERCISE_FIELDS}\n\n"
        "Make sure exercises match the user's fitness level, available equipment, "
        "training location, and consider any injuries. "
        "Return ONLY a valid JSON array, no additional text."
    )
