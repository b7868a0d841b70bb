"""
User service — the small user registry behind identity resolution.

Users carry the ``is_admin`` flag the access policy consults.  The list
is fetched without pagination because it is expected to stay small.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blog.models import User
from blog.schemas import UserCreate
from blog.services import article_service


def _user_to_dict(user: User) -> dict:
    """Serialise a User ORM instance to a plain dict (list view)."""
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "display_name": user.display_name,
        "is_admin": user.is_admin,
        "created_at": user.created_at,
    }


async def get_users(db: AsyncSession) -> list[dict]:
    """Return all users ordered by creation (newest first)."""
    q = select(User).order_by(User.created_at.desc(), User.id.desc())

    result = await db.execute(q)
    return [_user_to_dict(u) for u in result.scalars().all()]


async def get_user_record(db: AsyncSession, user_id: int) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: int, public_only: bool = True) -> dict | None:
    """
    Return the detail dict for *user_id* including summaries of their
    articles.

    With *public_only* (the default) drafts are left out, so a profile
    page shows only what every visitor may read.  Returns None when the
    user does not exist.
    """
    user = await get_user_record(db, user_id)
    if user is None:
        return None

    articles = await article_service.list_by_author(db, user.id)
    data = _user_to_dict(user)
    data["articles"] = [a for a in articles if a["is_public"] or not public_only]
    return data


async def create_user(db: AsyncSession, data: UserCreate) -> dict:
    """
    Create a new user and return its serialised dict.

    Email and username uniqueness is enforced at the database level
    (unique constraints in the schema); the router is responsible for
    translating integrity errors into 409 responses.
    """
    user = User(
        username=data.username,
        email=data.email,
        display_name=data.display_name,
        is_admin=data.is_admin,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return _user_to_dict(user)
