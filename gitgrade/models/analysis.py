from typing import List
from pydantic import BaseModel, Field, field_validator

MAX_COMMIT_SAMPLE = 20


class AnalysisPayload(BaseModel):
    file_count: int = Field(..., ge=0, description="Number of files (blobs) in the recursive tree")
    has_readme: bool
    readme_length: int = Field(default=0, ge=0, description="README length in characters, 0 when absent")
    commit_count: int = Field(
        ..., ge=0,
        description="Commits retrieved within the fetch window. Capped by the fetch limit, NOT the repository's total commit count."
    )
    commit_message_sample: List[str] = Field(
        default_factory=list, max_length=MAX_COMMIT_SAMPLE,
        description="Newest-first prefix of the retrieved commit messages"
    )


def _require_text(value: object) -> str:
    if not isinstance(value, str):
        raise ValueError("must be a string")
    if not value.strip():
        raise ValueError("must not be blank")
    return value


class RoadmapItem(BaseModel):
    title: str = Field(..., description="Short name of the action item")
    explanation: str = Field(..., description="One-sentence explanation of the action item")

    @field_validator("title", "explanation", mode="before")
    @classmethod
    def _non_blank(cls, value: object) -> str:
        return _require_text(value)


class AnalysisReport(BaseModel):
    score: int = Field(..., ge=0, le=100, description="Overall quality score, 0-100")
    rating: str = Field(..., description="One short descriptive label, e.g. 'Intermediate'")
    summary: str = Field(..., description="3-4 sentences: one key strength, one major area for improvement")
    roadmap: List[RoadmapItem] = Field(..., min_length=3, max_length=3)

    @field_validator("score", mode="before")
    @classmethod
    def _numeric_score(cls, value: object) -> int:
        # bool is an int subclass, "80" is text: both are the wrong type here
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("score must be a number")
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError("score must be a whole number")
            return int(value)
        return value

    @field_validator("rating", "summary", mode="before")
    @classmethod
    def _non_blank(cls, value: object) -> str:
        return _require_text(value)
