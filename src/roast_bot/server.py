import hashlib
import hmac
import json
from contextlib import asynccontextmanager

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, Response
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from roast_bot.agents import run_review_safely
from roast_bot.config import Settings
from roast_bot.github import GitHubAppAuth, PullRequestEvent
from roast_bot.llm import build_provider

console = Console()

WEBHOOK_PATH = "/api/github/webhooks"
REVIEW_ACTIONS = ("opened", "synchronize")


def verify_signature(payload: bytes, signature: str, secret: str | None) -> bool:
    if not secret:
        return True
    expected = "sha256=" + hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature)


def is_review_event(event: str | None, data: dict) -> bool:
    return event == "pull_request" and isinstance(data, dict) and data.get("action") in REVIEW_ACTIONS


def create_app(settings: Settings) -> FastAPI:
    provider = build_provider(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        console.print(f"[green]PR Roast Bot запущен, провайдер: {provider.name}[/green]")
        yield
        console.print("[yellow]PR Roast Bot остановлен[/yellow]")

    app = FastAPI(title="PR Roast Bot", lifespan=lifespan)
    app.state.settings = settings
    app.state.provider = provider
    app.state.app_auth = GitHubAppAuth(
        app_id=settings.github_app_id or "",
        private_key=settings.github_private_key or "",
        api_url=settings.github_api_url,
        timeout=settings.provider_timeout,
    )

    @app.get("/", response_class=HTMLResponse)
    async def health():
        return f"PR Roast Bot is alive! 🔥<br>AI Provider: {app.state.provider.name}"

    @app.post(WEBHOOK_PATH)
    async def webhook(request: Request, background_tasks: BackgroundTasks):
        payload = await request.body()
        signature = request.headers.get("X-Hub-Signature-256", "")

        if not verify_signature(payload, signature, app.state.settings.github_webhook_secret):
            raise HTTPException(status_code=401, detail="Invalid signature")

        event = request.headers.get("X-GitHub-Event")
        delivery = escape(request.headers.get("X-GitHub-Delivery", "-"))
        try:
            data = json.loads(payload) if payload else {}
        except ValueError:
            console.print(f"[yellow]Невалидный JSON в вебхуке ({delivery})[/yellow]")
            return Response(status_code=200)

        if not is_review_event(event, data):
            action = data.get("action") if isinstance(data, dict) else None
            console.print(f"[dim]Пропускаю {escape(str(event))}.{escape(str(action))} ({delivery})[/dim]")
            return Response(status_code=200)

        try:
            pr_event = PullRequestEvent.from_payload(data)
        except (AttributeError, KeyError, TypeError, ValidationError) as e:
            console.print(f"[yellow]Неполный payload pull_request ({delivery}): {escape(repr(e))}[/yellow]")
            return Response(status_code=200)

        console.print(
            f"[blue]PR #{pr_event.number} в {escape(pr_event.full_name)}: {escape(pr_event.title)} "
            f"({event}.{pr_event.action}, {delivery})[/blue]"
        )

        # Ответ уходит сразу, пайплайн работает после него и сам глотает ошибки
        background_tasks.add_task(
            run_review_safely,
            app.state.settings,
            app.state.provider,
            app.state.app_auth,
            pr_event,
        )
        return {"status": "ok"}

    return app
