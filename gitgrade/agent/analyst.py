import asyncio
import logging
from typing import Any, Awaitable, List, Optional, Tuple
import httpx
from gitgrade.config import Settings
from gitgrade.errors import RequestTimeout
from gitgrade.models.analysis import AnalysisReport
from gitgrade.models.repository import CommitRecord, RepositoryDetails, RepositoryIdentifier, TreeEntry
from gitgrade.probes.github import GithubProbe, parse_repository_url
from gitgrade.probes.normalizer import reduce_features
from gitgrade.refinery.engine import GenerativeModel, build_model
from gitgrade.refinery.prompt import build_prompt
from gitgrade.refinery.validator import parse_report

logger = logging.getLogger(__name__)

README_PATH = "README.md"


async def gather_fail_fast(*aws: Awaitable[Any]) -> List[Any]:
    """
    Like asyncio.gather, but the first failure cancels the remaining awaitables
    before it is re-raised.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class RepositoryAnalyst:
    """
    Runs one grading request end to end:
    fetch (tree, README, commits concurrently) -> reduce -> prompt -> model -> validate.

    Holds no per-request state, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        settings: Settings,
        model: Optional[GenerativeModel] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.model = model if model is not None else build_model(settings)
        self.transport = transport

    def _open_probe(self) -> GithubProbe:
        return GithubProbe(
            token=self.settings.github_token,
            api_url=self.settings.github_api_url,
            timeout=self.settings.http_timeout,
            transport=self.transport,
        )

    async def resolve(self, url: str) -> RepositoryDetails:
        """
        Parses a GitHub URL and returns the repository's basic metadata.
        """
        repo = parse_repository_url(url)
        async with self._open_probe() as probe:
            details = await probe.fetch_details(repo)
        logger.debug("Resolved %s -> %s", url, details.full_name)
        return details

    async def analyze(self, owner: str, repo: str) -> AnalysisReport:
        identifier = RepositoryIdentifier.from_parts(owner, repo)
        try:
            return await asyncio.wait_for(self._analyze(identifier), timeout=self.settings.request_timeout)
        except asyncio.TimeoutError as e:
            raise RequestTimeout(
                f"Analysis of {identifier} did not finish within {self.settings.request_timeout:g}s"
            ) from e

    def analyze_sync(self, owner: str, repo: str) -> AnalysisReport:
        return asyncio.run(self.analyze(owner, repo))

    async def _analyze(self, identifier: RepositoryIdentifier) -> AnalysisReport:
        tree, readme, commits = await self._collect(identifier)

        payload = reduce_features(tree, readme, commits)
        logger.debug(
            "Payload for %s: %d files, readme=%s (%d chars), %d commits",
            identifier, payload.file_count, payload.has_readme, payload.readme_length, payload.commit_count,
        )

        prompt = build_prompt(payload, commit_window=self.settings.commit_limit)
        raw = await self.model.invoke(prompt)
        logger.debug("Model returned %d characters", len(raw or ""))

        report = parse_report(raw)
        logger.info("Graded %s: %d/100 (%s)", identifier, report.score, report.rating)
        return report

    async def _collect(
        self, identifier: RepositoryIdentifier
    ) -> Tuple[List[TreeEntry], Optional[str], List[CommitRecord]]:
        async with self._open_probe() as probe:

            async def fetch_tree() -> List[TreeEntry]:
                branch = await probe.fetch_default_branch(identifier)
                return await probe.fetch_tree(identifier, branch)

            logger.debug("Fetching tree, README and commits for %s", identifier)
            tree, readme, commits = await gather_fail_fast(
                fetch_tree(),
                probe.fetch_file_content(identifier, README_PATH),
                probe.fetch_recent_commits(identifier, self.settings.commit_limit),
            )
        return tree, readme, commits
