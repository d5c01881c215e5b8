from roast_bot.github.app_auth import GitHubAppAuth
from roast_bot.github.client import GitHubClient
from roast_bot.github.schemas import FileChange, PullRequestEvent

__all__ = ["GitHubAppAuth", "GitHubClient", "FileChange", "PullRequestEvent"]
