"""Quiz attempt models"""
from typing import Optional
from datetime import datetime, timezone
from pydantic import BaseModel, Field, field_validator, model_validator
from uuid import uuid4


class QuizAttempt(BaseModel):
    """One completed quiz submission, immutable once written"""
    id: str = Field(default_factory=lambda: uuid4().hex)
    quiz_id: str
    quiz_title: str = ""
    subject: Optional[str] = None  # Explicit subject; falls back to the title heuristic
    score: float = Field(ge=0, le=100)  # Percentage
    total_questions: int = Field(ge=0)
    correct_answers: int = Field(ge=0)
    time_taken: float = Field(default=0, ge=0)  # Seconds
    answers: dict[int, int] = Field(default_factory=dict)  # Question index -> option index
    completed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator('completed_at')
    @classmethod
    def normalize_completed_at(cls, v: datetime) -> datetime:
        """Store completion times in UTC so stored values sort chronologically"""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @model_validator(mode="after")
    def validate_correct_answers(self) -> "QuizAttempt":
        """Ensure correct answers never exceed the question count"""
        if self.correct_answers > self.total_questions:
            raise ValueError(
                f"correct_answers ({self.correct_answers}) cannot exceed "
                f"total_questions ({self.total_questions})"
            )
        return self
