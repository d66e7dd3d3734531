from typing import Iterable, List, Optional
from gitgrade.models.analysis import MAX_COMMIT_SAMPLE, AnalysisPayload
from gitgrade.models.repository import CommitRecord, EntryKind, TreeEntry


def reduce_features(
    tree: Iterable[TreeEntry],
    readme: Optional[str],
    commits: List[CommitRecord],
    max_messages: int = MAX_COMMIT_SAMPLE,
) -> AnalysisPayload:
    """
    Collapses the raw GitHub responses into the small payload the prompt is built from.

    `commit_count` is the size of the fetched window (at most the fetch limit),
    not the repository's lifetime commit total.
    """
    file_count = sum(1 for entry in tree if entry.kind == EntryKind.FILE)
    sample_size = max(0, min(max_messages, MAX_COMMIT_SAMPLE))

    return AnalysisPayload(
        file_count=file_count,
        has_readme=readme is not None,
        readme_length=len(readme) if readme is not None else 0,
        commit_count=len(commits),
        commit_message_sample=[c.message for c in commits[:sample_size]],
    )
