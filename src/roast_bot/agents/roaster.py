from rich.console import Console
from rich.markup import escape

from roast_bot.config import Settings
from roast_bot.exceptions import FetchError, PublishError
from roast_bot.github import GitHubAppAuth, GitHubClient
from roast_bot.github.schemas import FileChange, PullRequestEvent
from roast_bot.llm import BaseProvider, build_prompt

console = Console()

FALLBACK_COMMENT = (
    "🤖 Beep boop! My AI brain is temporarily offline. "
    "But hey, at least your code compiled! That's worth celebrating, right? 🎉"
)


class RoastAgent:
    def __init__(self, provider: BaseProvider, github: GitHubClient):
        self.provider = provider
        self.github = github

    async def roast(self, event: PullRequestEvent) -> str:
        """Сделать ревью PR и оставить комментарий. Возвращает текст комментария.

        Каждый вызов создаёт новый комментарий: повторная доставка вебхука
        даст дубликат.
        """
        owner, repo, number = event.owner, event.repo, event.number

        # 1. Получаем diff и список файлов
        console.print(f"[blue]Читаю PR #{number} в {escape(event.full_name)}...[/blue]")
        diff = await self.github.get_pr_diff(owner, repo, number)
        files = await self.github.list_files(owner, repo, number)

        # 2. Генерируем ревью
        console.print(f"[blue]Генерирую ревью через {self.provider.name}...[/blue]")
        body = await self.generate_roast(event, files, diff)

        # 3. Публикуем
        await self.github.create_comment(owner, repo, number, body)
        console.print(f"[green]Комментарий опубликован в PR #{number}[/green]")
        return body

    async def generate_roast(self, event: PullRequestEvent, files: list[FileChange], diff: str) -> str:
        prompt = build_prompt(event.title, event.body, files, diff)
        try:
            return await self.provider.generate(prompt)
        except Exception as e:
            console.print(f"[red]Ошибка генерации для PR #{event.number}: {escape(str(e))}[/red]")
            return FALLBACK_COMMENT


async def resolve_token(settings: Settings, app_auth: GitHubAppAuth, event: PullRequestEvent) -> str:
    if event.installation_id is not None and app_auth.configured:
        return await app_auth.get_installation_token(event.installation_id)
    if settings.github_token:
        return settings.github_token
    raise FetchError(f"Нет учётных данных GitHub для {event.full_name}")


async def run_review_safely(
    settings: Settings,
    provider: BaseProvider,
    app_auth: GitHubAppAuth,
    event: PullRequestEvent,
) -> None:
    """Точка входа фоновой задачи: все ошибки логируются и не пробрасываются."""
    try:
        token = await resolve_token(settings, app_auth, event)
        async with GitHubClient(token, settings.github_api_url, settings.provider_timeout) as github:
            await RoastAgent(provider, github).roast(event)
    except FetchError as e:
        console.print(f"[red]PR #{event.number}: не удалось получить данные: {escape(str(e))}[/red]")
    except PublishError as e:
        console.print(f"[red]PR #{event.number}: не удалось опубликовать комментарий: {escape(str(e))}[/red]")
    except Exception as e:
        console.print(f"[red]PR #{event.number}: ошибка обработки: {escape(repr(e))}[/red]")
