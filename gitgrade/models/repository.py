from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from gitgrade.errors import InvalidRepositoryReference


class RepositoryIdentifier(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str = Field(..., min_length=1, description="Account or organisation that owns the repository")
    name: str = Field(..., min_length=1, description="Repository name without the .git suffix")

    @classmethod
    def from_parts(cls, owner: Optional[str], name: Optional[str]) -> "RepositoryIdentifier":
        owner = (owner or "").strip()
        name = (name or "").strip()
        if not owner or not name:
            raise InvalidRepositoryReference("Owner and repository name are required.")
        return cls(owner=owner, name=name)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


class TreeEntry(BaseModel):
    path: str
    kind: EntryKind


class CommitRecord(BaseModel):
    message: str


class RepositoryDetails(BaseModel):
    name: str
    full_name: str
    description: Optional[str] = None
    stars: int = Field(default=0, description="Stargazer count")
    forks: int = 0
    html_url: str
