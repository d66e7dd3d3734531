from typing import Optional
from pydantic import BaseModel
from gitgrade.models.analysis import AnalysisReport
from gitgrade.models.repository import RepositoryDetails


class RenderManifest(BaseModel):
    report: AnalysisReport
    details: Optional[RepositoryDetails] = None
    commit_window: int = 100
    theme: str = "dark"  # dark, light


def create_manifest(
    report: AnalysisReport,
    details: Optional[RepositoryDetails] = None,
    commit_window: int = 100,
    theme: str = "dark",
) -> RenderManifest:
    """
    Wraps the report with the repository it describes and rendering preferences.
    """
    return RenderManifest(report=report, details=details, commit_window=commit_window, theme=theme)
