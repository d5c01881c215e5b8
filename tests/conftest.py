import pytest

from roast_bot.config import Settings
from roast_bot.github.schemas import FileChange, PullRequestEvent


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        github_app_id="",
        github_private_key="",
        github_webhook_secret="",
        github_token="ghp_test",
        ai_provider="groq",
        groq_api_key="gsk_test",
    )


@pytest.fixture
def event():
    return PullRequestEvent(
        action="opened",
        owner="octo",
        repo="hello",
        number=42,
        title="Fix typo",
        body=None,
    )


@pytest.fixture
def files():
    return [FileChange(filename="a.txt", additions=1, deletions=1)]


@pytest.fixture
def pr_payload():
    return {
        "action": "opened",
        "number": 42,
        "pull_request": {"number": 42, "title": "Fix typo", "body": None},
        "repository": {"name": "hello", "full_name": "octo/hello", "owner": {"login": "octo"}},
        "installation": {"id": 777},
    }
