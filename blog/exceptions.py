"""
Error taxonomy for the article store.

``ArticleNotFoundError`` deliberately covers both "does not exist" and
"exists but the requester may not see it"; handlers map it to 404 in both
cases.
"""


class ArticleError(Exception):
    """Base class for article-domain errors."""


class ArticleNotFoundError(ArticleError):
    def __init__(self, article_id: int) -> None:
        self.article_id = article_id
        super().__init__(f"Article {article_id} not found")


class ArticleValidationError(ArticleError):
    """Malformed input reaching the service layer."""


class StorageError(ArticleError):
    """The durable store failed; not recovered locally."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Storage failure during {operation}")
