from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from quiz_engine.core.config import settings


class QuestionCreate(BaseModel):
    text: str = Field(min_length=1)
    options: List[str] = Field(min_length=2)
    correct_index: int = Field(ge=0)

    @model_validator(mode="after")
    def _correct_index_in_range(self):
        if self.correct_index >= len(self.options):
            raise ValueError("correct_index must point at one of the options")
        return self


class QuizCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    category_id: Optional[int] = Field(default=None, ge=1)
    questions: List[QuestionCreate] = Field(min_length=1)


class CategoryOut(BaseModel):
    category_id: int
    name: str


class QuizSummaryOut(BaseModel):
    quiz_id: int
    title: str
    description: str
    category_id: Optional[int] = None
    user_id: int
    question_count: int


class QuizQuestionOut(BaseModel):
    question_id: int
    text: str
    options: List[str]


class QuizTakeOut(BaseModel):
    quiz_id: int
    title: str
    description: str
    questions: List[QuizQuestionOut]


class SubmitAnswer(BaseModel):
    question_id: int = Field(ge=1)
    answer_index: int = Field(ge=0)

    @field_validator("answer_index")
    @classmethod
    def _bounded_index(cls, v: int) -> int:
        if v > settings.MAX_OPTION_INDEX:
            raise ValueError(f"answer_index must be <= {settings.MAX_OPTION_INDEX}")
        return v


class QuizSubmitRequest(BaseModel):
    time_spent: int = Field(default=0, ge=0)
    answers: List[SubmitAnswer] = Field(default_factory=list)


class AttemptResult(BaseModel):
    attempt_id: int
    quiz_id: int
    score: int
    correct_count: int
    total_questions: int


class QuestionSnapshot(BaseModel):
    """Frozen copy of a question as it looked when the attempt was graded."""

    text: str
    options: List[str]
    correctAnswer: int = Field(ge=0)

    @model_validator(mode="after")
    def _correct_answer_in_range(self):
        if self.correctAnswer >= len(self.options):
            raise ValueError("correctAnswer is outside the option list")
        return self


class QuestionResult(BaseModel):
    question_id: int
    text: str
    options: List[str]
    correct_answer_index: int
    chosen_index: Optional[int] = None
    is_correct: bool


class ResultView(BaseModel):
    attempt_id: int
    quiz_id: int
    quiz_title: str
    user_id: int
    score: int
    time_spent: int
    completed_at: Optional[datetime] = None
    total_questions: int
    correct_answers: int
    wrong_answers: int
    questions: List[QuestionResult]


class AttemptSummaryOut(BaseModel):
    attempt_id: int
    quiz_id: int
    quiz_title: str
    score: int
    time_spent: int
    completed_at: Optional[datetime] = None
