import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote
import httpx
from pydantic import ValidationError
from gitgrade.errors import (
    InvalidRepositoryReference,
    RemoteApiError,
    RemoteNotFound,
    RemoteUnauthorized,
)
from gitgrade.models.repository import (
    CommitRecord,
    EntryKind,
    RepositoryDetails,
    RepositoryIdentifier,
    TreeEntry,
)

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
MAX_PAGE_SIZE = 100

JSON_ACCEPT = "application/vnd.github.v3+json"
RAW_ACCEPT = "application/vnd.github.v3.raw"

_TREE_KINDS = {"blob": EntryKind.FILE, "tree": EntryKind.DIRECTORY}


def parse_repository_url(url: str) -> RepositoryIdentifier:
    """
    Extracts owner/repo from a `github.com/owner/repo[.git]` style URL.
    """
    if not url or "github.com" not in url:
        raise InvalidRepositoryReference("Invalid GitHub URL format.")

    parts = url.strip().split("github.com/", 1)
    if len(parts) < 2:
        raise InvalidRepositoryReference("Invalid GitHub URL format.")

    path = parts[1].split("?", 1)[0].split("#", 1)[0]
    repo_path = [p for p in path.split("/") if p]
    if len(repo_path) < 2:
        raise InvalidRepositoryReference("Invalid GitHub URL format (owner/repo missing).")

    owner = repo_path[0]
    repo = repo_path[1]
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    return RepositoryIdentifier.from_parts(owner, repo)


class GithubProbe:
    """
    Async accessor over the GitHub REST API. Use as an async context manager;
    the underlying connection pool lives for one analysis request.
    """

    def __init__(
        self,
        token: str,
        api_url: str = GITHUB_API_URL,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.headers = {
            "Authorization": f"token {token}",
            "Accept": JSON_ACCEPT,
            "User-Agent": "gitgrade",
        }
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers=self.headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "GithubProbe":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_repository(self, repo: RepositoryIdentifier) -> Dict[str, Any]:
        response = await self._get(self._repo_path(repo))
        return self._json(response, dict)

    async def fetch_default_branch(self, repo: RepositoryIdentifier) -> str:
        data = await self.fetch_repository(repo)
        branch = data.get("default_branch")
        if not branch or not isinstance(branch, str):
            raise RemoteApiError(None, f"GitHub reported no default branch for {repo}")
        return branch

    async def fetch_details(self, repo: RepositoryIdentifier) -> RepositoryDetails:
        data = await self.fetch_repository(repo)
        try:
            return RepositoryDetails(
                name=data.get("name") or repo.name,
                full_name=data.get("full_name") or repo.full_name,
                description=data.get("description"),
                stars=data.get("stargazers_count") or 0,
                forks=data.get("forks_count") or 0,
                html_url=data.get("html_url") or f"https://github.com/{repo.full_name}",
            )
        except ValidationError as e:
            raise RemoteApiError(None, f"Unexpected repository metadata from GitHub for {repo}") from e

    async def fetch_tree(self, repo: RepositoryIdentifier, branch: str) -> List[TreeEntry]:
        response = await self._get(
            f"{self._repo_path(repo)}/git/trees/{quote(branch, safe='')}",
            params={"recursive": "1"},
        )
        data = self._json(response, dict)
        if data.get("truncated"):
            logger.warning("Tree listing for %s was truncated by GitHub; counts are partial", repo)

        entries = []
        listing = data.get("tree") or []
        if not isinstance(listing, list):
            raise RemoteApiError(response.status_code, "Unexpected response from GitHub")
        for item in listing:
            if not isinstance(item, dict) or not isinstance(item.get("path"), str):
                continue
            kind = _TREE_KINDS.get(item.get("type"))
            if kind is None:
                # submodules show up as "commit" entries
                continue
            entries.append(TreeEntry(path=item["path"], kind=kind))
        return entries

    async def fetch_file_content(self, repo: RepositoryIdentifier, path: str) -> Optional[str]:
        """
        Returns the raw file text, or None when the file does not exist.
        Every other failure is raised.
        """
        try:
            response = await self._get(
                f"{self._repo_path(repo)}/contents/{quote(path)}",
                headers={"Accept": RAW_ACCEPT},
            )
        except RemoteNotFound:
            logger.debug("%s has no %s", repo, path)
            return None
        return response.text

    async def fetch_recent_commits(self, repo: RepositoryIdentifier, limit: int = 100) -> List[CommitRecord]:
        """
        Newest-first commit records, at most `limit` of them.
        """
        per_page = max(1, min(limit, MAX_PAGE_SIZE))
        commits: List[CommitRecord] = []
        page = 1
        while len(commits) < limit:
            response = await self._get(
                f"{self._repo_path(repo)}/commits",
                params={"per_page": str(per_page), "page": str(page)},
            )
            batch = self._json(response, list)
            for item in batch:
                commit = item.get("commit") if isinstance(item, dict) else None
                message = commit.get("message") if isinstance(commit, dict) else None
                if not isinstance(message, str):
                    message = ""
                commits.append(CommitRecord(message=message))
            if len(batch) < per_page:
                break
            page += 1
        return commits[:limit]

    def _repo_path(self, repo: RepositoryIdentifier) -> str:
        return f"/repos/{quote(repo.owner, safe='')}/{quote(repo.name, safe='')}"

    async def _get(self, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.get(path, **kwargs)
        except httpx.HTTPError as e:
            raise RemoteApiError(None, f"Network error while connecting to GitHub: {e}") from e

        if response.status_code == 404:
            raise RemoteNotFound()
        if response.status_code == 401:
            raise RemoteUnauthorized()
        if not response.is_success:
            raise RemoteApiError(response.status_code, self._error_message(response))
        return response

    def _json(self, response: httpx.Response, expected_type: type) -> Any:
        """
        Decodes a successful response body, insisting on the expected top-level type.
        """
        try:
            data = response.json()
        except ValueError as e:
            raise RemoteApiError(response.status_code, "Unexpected response from GitHub") from e
        if not isinstance(data, expected_type):
            raise RemoteApiError(response.status_code, "Unexpected response from GitHub")
        return data

    def _error_message(self, response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text[:200] or "Unknown GitHub API error"
        if isinstance(data, dict) and data.get("message"):
            return data["message"]
        return "Unknown GitHub API error"
