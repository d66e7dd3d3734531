import json
from typing import Callable, Dict, List, Optional, Union
import httpx
import pytest
from gitgrade.config import Settings

Route = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]

REPORT = {
    "score": 80,
    "rating": "Intermediate",
    "summary": "Clean layout and a helpful README. Tests are missing entirely.",
    "roadmap": [
        {"title": "Add tests", "explanation": "Cover the core modules with unit tests."},
        {"title": "Set up CI", "explanation": "Run the tests on every push."},
        {"title": "Document setup", "explanation": "Explain how to run the project locally."},
    ],
}


class FakeModel:
    """Stands in for the generative model; records every prompt it receives."""

    def __init__(self, completion: str = json.dumps(REPORT), error: Optional[Exception] = None, delay: float = 0):
        self.completion = completion
        self.error = error
        self.delay = delay
        self.prompts: List[str] = []

    async def invoke(self, prompt: str) -> str:
        import asyncio
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.completion


def github_routes(
    readme: Optional[str] = "# Demo\n\nA demo project.",
    commits: int = 3,
    tree: Optional[list] = None,
) -> Dict[str, Route]:
    if tree is None:
        tree = [
            {"path": "README.md", "type": "blob"},
            {"path": "src", "type": "tree"},
            {"path": "src/app.py", "type": "blob"},
            {"path": "vendor/lib", "type": "commit"},
        ]
    routes: Dict[str, Route] = {
        "/repos/octo/demo": httpx.Response(200, json={
            "name": "demo",
            "full_name": "octo/demo",
            "description": "A demo project",
            "stargazers_count": 42,
            "forks_count": 7,
            "html_url": "https://github.com/octo/demo",
            "default_branch": "trunk",
        }),
        "/repos/octo/demo/git/trees/trunk": httpx.Response(200, json={"tree": tree, "truncated": False}),
        "/repos/octo/demo/commits": httpx.Response(
            200, json=[{"sha": str(i), "commit": {"message": f"commit {i}"}} for i in range(commits)]
        ),
    }
    if readme is None:
        routes["/repos/octo/demo/contents/README.md"] = httpx.Response(404, json={"message": "Not Found"})
    else:
        routes["/repos/octo/demo/contents/README.md"] = httpx.Response(200, text=readme)
    return routes


def mock_transport(routes: Dict[str, Route], seen: Optional[List[httpx.Request]] = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        route = routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if callable(route):
            return route(request)
        return httpx.Response(route.status_code, headers=route.headers, content=route.content)

    return httpx.MockTransport(handler)


@pytest.fixture
def settings() -> Settings:
    return Settings(github_token="gh-test-token", ai_api_key="ai-test-key", request_timeout=5.0)
