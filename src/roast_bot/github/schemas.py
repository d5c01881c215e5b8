from pydantic import BaseModel, ConfigDict


class FileChange(BaseModel):
    """Изменённый файл PR."""

    model_config = ConfigDict(extra="ignore")

    filename: str
    additions: int = 0
    deletions: int = 0


class PullRequestEvent(BaseModel):
    """PR, по которому пришло событие."""

    action: str
    owner: str
    repo: str
    number: int
    title: str
    body: str | None = None
    installation_id: int | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def from_payload(cls, payload: dict) -> "PullRequestEvent":
        pr = payload["pull_request"]
        repository = payload["repository"]
        installation = payload.get("installation")
        if not isinstance(installation, dict):
            installation = {}
        return cls(
            action=payload.get("action", ""),
            owner=repository["owner"]["login"],
            repo=repository["name"],
            number=pr["number"],
            title=pr.get("title") or "",
            body=pr.get("body"),
            installation_id=installation.get("id"),
        )
