"""
Client-local state: recent chat messages and the generated workout plan.

Both live in a JSON file on the client and are never sent to the server.
Losing the file loses the history.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

MAX_MESSAGES = 10


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    timestamp: float = Field(default_factory=time.time)


class WorkoutWeek(BaseModel):
    week: int
    exercises: List[Dict[str, Any]]
    generated_at: float = Field(default_factory=time.time)


def _read_json(path: Path) -> Optional[Any]:
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error(f"Failed to read {path}: {e}")
        return None


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


class ChatHistory:
    """The last MAX_MESSAGES chat messages, oldest dropped first"""

    def __init__(self, path: Union[str, Path], max_messages: int = MAX_MESSAGES):
        self.path = Path(path)
        self.max_messages = max_messages
        self.messages: List[ChatMessage] = self._load()

    def _load(self) -> List[ChatMessage]:
        data = _read_json(self.path)
        if not isinstance(data, list):
            return []
        try:
            return [ChatMessage(**m) for m in data][-self.max_messages:]
        except (TypeError, ValidationError) as e:
            logger.error(f"Discarding unreadable chat history: {e}")
            return []

    def add(self, role: str, content: str) -> ChatMessage:
        message = ChatMessage(role=role, content=content)
        self.messages = (self.messages + [message])[-self.max_messages:]
        self.save()
        return message

    def save(self) -> None:
        _write_json(self.path, [m.model_dump() for m in self.messages])

    def clear(self) -> None:
        self.messages = []
        if self.path.exists():
            self.path.unlink()

    def __len__(self) -> int:
        return len(self.messages)


class WorkoutPlanBook:
    """Generated exercises per week; regenerating a week replaces it"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.weeks: List[WorkoutWeek] = []
        self.current_week = 1
        self._load()

    def _load(self) -> None:
        data = _read_json(self.path)
        if not isinstance(data, dict):
            return
        try:
            self.weeks = [WorkoutWeek(**w) for w in data.get("weeks", [])]
            self.current_week = max(1, int(data.get("current_week", 1)))
        except (TypeError, ValueError, ValidationError) as e:
            logger.error(f"Discarding unreadable workout plan: {e}")
            self.weeks, self.current_week = [], 1

    def save(self) -> None:
        _write_json(self.path, {
            "weeks": [w.model_dump() for w in self.weeks],
            "current_week": self.current_week,
        })

    def get_week(self, week: Optional[int] = None) -> Optional[WorkoutWeek]:
        week = self.current_week if week is None else week
        return next((w for w in self.weeks if w.week == week), None)

    def set_week(self, exercises: List[Dict[str, Any]], week: Optional[int] = None) -> WorkoutWeek:
        week = self.current_week if week is None else week
        new_week = WorkoutWeek(
            week=week,
            exercises=[{**ex, "completed": False} for ex in exercises],
        )
        self.weeks = sorted(
            [w for w in self.weeks if w.week != week] + [new_week],
            key=lambda w: w.week,
        )
        self.save()
        return new_week

    def go_to_week(self, week: int) -> int:
        self.current_week = max(1, week)
        self.save()
        return self.current_week

    def toggle_completed(self, index: int, week: Optional[int] = None) -> bool:
        workout = self.get_week(week)
        if workout is None:
            raise KeyError(f"no plan for week {self.current_week if week is None else week}")
        if index < 0:
            raise IndexError(f"exercise index {index} out of range")
        exercise = workout.exercises[index]
        exercise["completed"] = not exercise.get("completed", False)
        self.save()
        return exercise["completed"]
