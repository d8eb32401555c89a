class ArticleBotError(Exception):
    """Base class for every failure raised by the article pipeline."""


class ServiceCallError(ArticleBotError):
    """The completion service could not be reached or answered with an error."""


class NoContentError(ArticleBotError):
    """The completion service answered without any text segment."""


class MalformedPayloadError(ArticleBotError):
    """The response text could not be turned into an article record."""


class MissingTemplateError(ArticleBotError):
    """The article template file does not exist or cannot be read."""


class NamingCollisionError(ArticleBotError):
    """An article with the same filename already exists."""


class IndexUpdateSkipped(ArticleBotError):
    """The index page or its card container was not found."""
