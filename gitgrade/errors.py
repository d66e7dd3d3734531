from typing import Any, Dict, Optional


class GitGradeError(Exception):
    """
    Base class for every failure the grading pipeline reports to its caller.
    `kind` lets a UI tell failures apart, `status_code` is what an HTTP layer should answer with.
    """
    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> Dict[str, Any]:
        return {"kind": self.kind, "detail": self.message}


class ConfigurationError(GitGradeError):
    kind = "configuration"
    status_code = 500


class InvalidRepositoryReference(GitGradeError):
    kind = "invalid_request"
    status_code = 400


class RemoteNotFound(GitGradeError):
    kind = "not_found"
    status_code = 404

    def __init__(self, message: str = "Repository not found."):
        super().__init__(message)


class RemoteUnauthorized(GitGradeError):
    kind = "unauthorized"
    status_code = 401

    def __init__(self, message: str = "GitHub token is invalid or expired."):
        super().__init__(message)


class RemoteApiError(GitGradeError):
    kind = "remote_api"

    def __init__(self, status: Optional[int], message: str):
        if status is None:
            super().__init__(message)
        else:
            super().__init__(f"GitHub API error ({status}): {message}")
        self.status = status
        self.remote_message = message

    @property
    def status_code(self) -> int:  # type: ignore[override]
        # Transport failures have no upstream status
        return self.status if self.status and self.status >= 400 else 502


class ModelUnavailable(GitGradeError):
    kind = "model_unavailable"
    status_code = 502


class MalformedModelOutput(GitGradeError):
    kind = "malformed_model_output"
    status_code = 502

    def __init__(self, reason: str):
        super().__init__(f"Model returned an unusable report: {reason}")
        self.reason = reason


class RequestTimeout(GitGradeError):
    kind = "timeout"
    status_code = 504
