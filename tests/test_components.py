from gitgrade.models.repository import CommitRecord, EntryKind, TreeEntry
from gitgrade.probes.normalizer import reduce_features
from gitgrade.refinery.prompt import build_prompt


def _commits(n):
    return [CommitRecord(message=f"message {i}") for i in range(n)]


def test_reducer_counts_files_only():
    tree = [
        TreeEntry(path="a.py", kind=EntryKind.FILE),
        TreeEntry(path="pkg", kind=EntryKind.DIRECTORY),
        TreeEntry(path="pkg/b.py", kind=EntryKind.FILE),
    ]
    payload = reduce_features(tree, "hello", _commits(2))
    assert payload.file_count == 2
    assert payload.has_readme is True
    assert payload.readme_length == 5
    assert payload.commit_count == 2


def test_reducer_absent_readme():
    payload = reduce_features([], None, [])
    assert payload.has_readme is False
    assert payload.readme_length == 0
    assert payload.commit_message_sample == []


def test_reducer_empty_readme_is_still_present():
    payload = reduce_features([], "", [])
    assert payload.has_readme is True
    assert payload.readme_length == 0


def test_commit_sample_is_ordered_prefix():
    for n in (0, 1, 19, 20, 21, 100):
        commits = _commits(n)
        payload = reduce_features([], None, commits)
        assert payload.commit_count == n
        assert len(payload.commit_message_sample) == min(n, 20)
        assert payload.commit_message_sample == [c.message for c in commits[: len(payload.commit_message_sample)]]


def test_reducer_is_deterministic():
    tree = [TreeEntry(path="a.py", kind=EntryKind.FILE)]
    commits = _commits(30)
    assert reduce_features(tree, "readme", commits) == reduce_features(tree, "readme", commits)
    # inputs are left untouched
    assert len(commits) == 30


def test_prompt_contains_payload_fields():
    tree = [TreeEntry(path=f"f{i}", kind=EntryKind.FILE) for i in range(5)]
    payload = reduce_features(tree, None, _commits(3))
    prompt = build_prompt(payload)

    assert "Total Files: 5" in prompt
    assert "README exists: false" in prompt
    assert "README length (characters): 0" in prompt
    assert "Recent Commits (last 100): 3" in prompt
    assert "Sample Commit Messages: message 0, message 1, message 2" in prompt


def test_prompt_states_output_contract():
    prompt = build_prompt(reduce_features([], "x" * 600, _commits(12)))
    assert "README exists: true" in prompt
    assert "0 to 100" in prompt
    assert "< 500 chars" in prompt
    assert "< 10" in prompt
    assert "exactly 3" in prompt
    assert '"score", "rating", "summary", and "roadmap"' in prompt
    assert build_prompt(reduce_features([], "x" * 600, _commits(12))) == prompt
