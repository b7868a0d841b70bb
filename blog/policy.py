"""
Access policy for articles.

Pure predicates over an explicit ``Requester`` and an article (or ``None``
when the article does not exist).  Nothing here touches the database; the
HTTP layer resolves the requester and loads the article, then asks.

Viewing and modifying are separate rules: a public article is readable by
anyone but still only writable by its author or an administrator.
"""
from __future__ import annotations

from typing import Optional, Protocol

from pydantic import BaseModel, ConfigDict


class Requester(BaseModel):
    """Identity of the caller, threaded explicitly into every decision."""

    model_config = ConfigDict(frozen=True)

    user_id: Optional[int] = None
    is_admin: bool = False

    @classmethod
    def anonymous(cls) -> "Requester":
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


class OwnedArticle(Protocol):
    author_id: int
    is_public: bool


def _is_author(requester: Requester, article: OwnedArticle) -> bool:
    return requester.user_id is not None and requester.user_id == article.author_id


def can_view(requester: Requester, article: Optional[OwnedArticle]) -> bool:
    """Admins, the author, or anyone when the article is public."""
    if article is None:
        return False
    return requester.is_admin or article.is_public or _is_author(requester, article)


def can_modify(requester: Requester, article: Optional[OwnedArticle]) -> bool:
    """Admins or the author; gates edit, delete and visibility toggle."""
    if article is None:
        return False
    return requester.is_admin or _is_author(requester, article)
