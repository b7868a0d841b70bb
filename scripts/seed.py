"""Development data seeder: one administrator, some authors, mixed drafts and public articles."""
import asyncio
import argparse
import random
import time
from datetime import datetime, timezone, timedelta
from blog.database import engine, async_session, Base
from blog.models import User
from blog.services import article_service

TOPICS = ["python", "fastapi", "postgresql", "docker", "testing", "security",
          "performance", "devops", "typescript", "graphql"]

async def seed(small: bool = False):
    num_users = 5 if small else 50
    num_articles = 50 if small else 5000

    print(f"Seeding: 1 admin, {num_users} authors, {num_articles} articles")
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        session.add(User(username="admin", email="admin@example.com", display_name="Admin", is_admin=True))

        authors = []
        for i in range(num_users):
            user = User(
                username=f"author_{i:04d}",
                email=f"author_{i:04d}@example.com",
                display_name=f"Author {i}",
            )
            session.add(user)
            authors.append(user)
        await session.flush()
        print(f"  Created {len(authors)} authors")

        published = 0
        for i in range(num_articles):
            topic = random.choice(TOPICS)
            article_id = await article_service.create_article(
                session,
                title=f"Article {i}: notes on {topic}",
                content=f"This is the full content of article {i} about {topic}. " * 20,
                author_id=random.choice(authors).id,
            )
            # ~80% get approved at some point in the last year
            if random.random() < 0.8:
                when = datetime.now(timezone.utc) - timedelta(days=random.randint(0, 365))
                await article_service.toggle_visibility(session, article_id, now=lambda: when)
                published += 1

        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print(f"  Articles: {num_articles} ({published} public)")


def main():
    parser = argparse.ArgumentParser(description="Seed the blog database")
    parser.add_argument("--small", action="store_true", help="Use small dataset (50 articles)")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small))


if __name__ == "__main__":
    main()
