import asyncio

import typer
import uvicorn
from github import Auth, Github, GithubException
from rich.console import Console
from rich.markup import escape

from roast_bot.agents import RoastAgent
from roast_bot.config import Settings, get_settings
from roast_bot.exceptions import FetchError, PublishError
from roast_bot.github import GitHubClient, PullRequestEvent
from roast_bot.llm import build_prompt, build_provider
from roast_bot.server import create_app

app = typer.Typer(
    name="roast-bot",
    help="GitHub App, который оставляет остроумное ревью на каждый PR",
    no_args_is_help=True,
    add_completion=False,
)
console = Console()


def load_pull_request(token: str | None, repo: str, number: int) -> PullRequestEvent:
    """Прочитать заголовок и описание PR через PyGithub."""
    client = Github(auth=Auth.Token(token)) if token else Github()
    pr = client.get_repo(repo).get_pull(number)
    return PullRequestEvent(
        action="manual",
        owner=pr.base.repo.owner.login,
        repo=pr.base.repo.name,
        number=pr.number,
        title=pr.title,
        body=pr.body,
    )


def _settings_with_token(token: str | None) -> Settings:
    settings = get_settings()
    if token:
        settings.github_token = token
    return settings


def _github_error(e: GithubException, what: str, repo: str) -> None:
    if e.status == 404:
        console.print(f"[red]{what} не найден в {escape(repo)}[/red]")
    else:
        message = e.data.get("message", str(e)) if isinstance(e.data, dict) else str(e)
        console.print(f"[red]Ошибка GitHub: {escape(message)}[/red]")


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Адрес (по умолчанию HOST)"),
    port: int | None = typer.Option(None, "--port", help="Порт (по умолчанию PORT или 3000)"),
):
    """Запустить сервер вебхуков."""
    settings = get_settings()
    server_app = create_app(settings)
    host = host or settings.host
    port = port or settings.port
    console.print(f"[green]🤖 PR Roast Bot слушает {host}:{port}[/green]")
    uvicorn.run(server_app, host=host, port=port)


@app.command()
def review(
    pr: int = typer.Option(..., "--pr", "-p", help="Номер PR"),
    repo: str = typer.Option(..., "--repo", "-r", help="Репозиторий (owner/repo)"),
    token: str | None = typer.Option(None, "--token", "-t", help="GitHub токен"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Напечатать комментарий, не публикуя"),
):
    """Сделать ревью существующего PR вручную."""
    settings = _settings_with_token(token)

    try:
        event = load_pull_request(settings.github_token, repo, pr)
    except GithubException as e:
        _github_error(e, f"PR #{pr}", repo)
        raise typer.Exit(1)

    provider = build_provider(settings)

    async def _run() -> str:
        async with GitHubClient(settings.github_token, settings.github_api_url, settings.provider_timeout) as github:
            agent = RoastAgent(provider, github)
            if not dry_run:
                return await agent.roast(event)
            diff = await github.get_pr_diff(event.owner, event.repo, event.number)
            files = await github.list_files(event.owner, event.repo, event.number)
            return await agent.generate_roast(event, files, diff)

    try:
        body = asyncio.run(_run())
    except (FetchError, PublishError) as e:
        console.print(f"[red]PR #{pr}: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if dry_run:
        console.print(body, markup=False)


@app.command()
def prompt(
    pr: int = typer.Option(..., "--pr", "-p", help="Номер PR"),
    repo: str = typer.Option(..., "--repo", "-r", help="Репозиторий (owner/repo)"),
    token: str | None = typer.Option(None, "--token", "-t", help="GitHub токен"),
):
    """Показать промпт, который уйдёт провайдеру."""
    settings = _settings_with_token(token)

    try:
        event = load_pull_request(settings.github_token, repo, pr)
    except GithubException as e:
        _github_error(e, f"PR #{pr}", repo)
        raise typer.Exit(1)

    async def _fetch():
        async with GitHubClient(settings.github_token, settings.github_api_url, settings.provider_timeout) as github:
            diff = await github.get_pr_diff(event.owner, event.repo, event.number)
            files = await github.list_files(event.owner, event.repo, event.number)
            return files, diff

    try:
        files, diff = asyncio.run(_fetch())
    except FetchError as e:
        console.print(f"[red]PR #{pr}: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(build_prompt(event.title, event.body, files, diff), markup=False, highlight=False)


if __name__ == "__main__":
    app()
