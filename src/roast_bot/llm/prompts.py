from roast_bot.github.schemas import FileChange

DIFF_LIMIT = 3000

NO_DESCRIPTION = "No description provided"

SYSTEM_PERSONA = (
    "You are a witty, sarcastic code reviewer who gives brutally honest but constructive feedback."
)

ROAST_PROMPT = """{persona} 
Review this Pull Request and provide a roast that:
- Points out actual issues or improvements (if any)
- Is funny and witty but not mean-spirited
- Gives actionable feedback
- Ends with something encouraging

PR Title: {title}
PR Description: {description}

Files Changed:
{files}

Diff (first {limit} chars):
{diff}

Write your review as a GitHub comment. Use markdown formatting. Start with a hook line, then provide feedback, and end positively."""


def format_files(files: list[FileChange]) -> str:
    return "\n".join(f"- {f.filename} (+{f.additions}/-{f.deletions})" for f in files)


def build_prompt(title: str, description: str | None, files: list[FileChange], diff: str) -> str:
    """Собрать промпт для ревью. Diff режется по символам, без учёта ханков."""
    return ROAST_PROMPT.format(
        persona=SYSTEM_PERSONA,
        title=title,
        description=description or NO_DESCRIPTION,
        files=format_files(files),
        limit=DIFF_LIMIT,
        diff=diff[:DIFF_LIMIT],
    )
