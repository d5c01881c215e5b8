class RoastBotError(Exception):
    """Базовая ошибка бота."""


class FetchError(RoastBotError):
    """Не удалось получить diff или список файлов PR."""


class ProviderError(RoastBotError):
    """Провайдер генерации упал или вернул ответ неожиданной формы."""


class PublishError(RoastBotError):
    """Не удалось опубликовать комментарий."""
