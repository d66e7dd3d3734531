from gitgrade.models.analysis import AnalysisPayload

DEFAULT_COMMIT_WINDOW = 100

# --- Prompts ---

MENTOR_PROMPT = """
You are an expert software engineering mentor reviewing a student's GitHub repository.
Analyze the following repository data and provide a constructive evaluation.

Repository Data:
- Total Files: {file_count}
- README exists: {has_readme}
- README length (characters): {readme_length}
- Recent Commits (last {commit_window}): {commit_count}
- Sample Commit Messages: {commit_messages}

Based on this data, perform the following tasks:
1.  Provide a **score** as an integer from 0 to 100 that reflects the project's quality against the standards of a strong student portfolio piece. A short README (< 500 chars) or few commits (< 10) should result in a lower score.
2.  Provide a **rating**: one short descriptive label (e.g., "Beginner", "Intermediate", "Advanced").
3.  Write a concise **summary** (3-4 sentences) that highlights exactly one key strength and exactly one major area for improvement.
4.  Generate a **roadmap** of exactly 3 personalized, high-impact action items. For each item, provide a "title" and a one-sentence "explanation".

Your entire output must be a single, valid JSON object with exactly the keys "score", "rating", "summary", and "roadmap", and nothing else. Do not include any other text, markdown, or code fences.
"""


def build_prompt(payload: AnalysisPayload, commit_window: int = DEFAULT_COMMIT_WINDOW) -> str:
    """
    Renders the analysis payload into the instruction sent to the model.
    The output contract in the template is the only thing steering the model
    towards a parseable answer, so keep it in sync with AnalysisReport.
    """
    return MENTOR_PROMPT.format(
        file_count=payload.file_count,
        # JSON-style booleans, as the model sees them elsewhere in the contract
        has_readme=str(payload.has_readme).lower(),
        readme_length=payload.readme_length,
        commit_window=commit_window,
        commit_count=payload.commit_count,
        commit_messages=", ".join(m.strip() for m in payload.commit_message_sample),
    )
