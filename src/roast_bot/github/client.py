import httpx

from roast_bot.exceptions import FetchError, PublishError
from roast_bot.github.schemas import FileChange

DIFF_MEDIA_TYPE = "application/vnd.github.diff"
JSON_MEDIA_TYPE = "application/vnd.github+json"


class GitHubClient:
    """Асинхронный клиент GitHub REST API: diff, файлы PR и комментарии."""

    def __init__(
        self,
        token: str | None,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Accept": JSON_MEDIA_TYPE, "X-GitHub-Api-Version": "2022-11-28"}
        # Без токена запросы анонимные
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.http = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self.http.aclose()

    async def get_pr_diff(self, owner: str, repo: str, number: int) -> str:
        resp = await self._get(
            f"/repos/{owner}/{repo}/pulls/{number}",
            headers={"Accept": DIFF_MEDIA_TYPE},
        )
        return resp.text

    async def list_files(self, owner: str, repo: str, number: int) -> list[FileChange]:
        # Только первая страница, дальше не идём
        resp = await self._get(f"/repos/{owner}/{repo}/pulls/{number}/files")
        try:
            return [FileChange.model_validate(item) for item in resp.json()]
        except ValueError as e:
            raise FetchError(f"Неожиданный ответ со списком файлов PR #{number}: {e}") from e

    async def create_comment(self, owner: str, repo: str, number: int, body: str) -> None:
        try:
            resp = await self.http.post(
                f"/repos/{owner}/{repo}/issues/{number}/comments",
                json={"body": body},
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise PublishError(f"Не удалось создать комментарий в PR #{number}: {e}") from e

    async def _get(self, path: str, headers: dict | None = None) -> httpx.Response:
        try:
            resp = await self.http.get(path, headers=headers)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise FetchError(f"GET {path}: {e}") from e
        return resp
