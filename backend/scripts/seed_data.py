"""Seed script for development data.

Creates:
- A "welcome" page visitors can comment on
- One example comment on it

Can be run multiple times safely (skips if exists).
"""
import asyncio
import os
import sys
from pathlib import Path

# Make the pagecomments package importable when run from a checkout
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from sqlalchemy import select

from pagecomments.core.database import get_db
from pagecomments.models.page import Page
from pagecomments.models.page_comment import PageComment


async def seed_data():
    """Seed development data."""
    print("Starting database seeding...")

    url_segment = os.environ.get("SEED_PAGE_SEGMENT", "welcome")

    async for db in get_db():
        page = await db.scalar(select(Page).where(Page.url_segment == url_segment))
        if page:
            print(f"✓ Page '{url_segment}' already exists (ID: {page.id})")
        else:
            page = Page(
                url_segment=url_segment,
                title="Welcome",
                content="Tell us what you think in the comments below.",
            )
            db.add(page)
            await db.flush()
            db.add(
                PageComment(
                    page_id=page.id,
                    name="Site Admin",
                    email="admin@example.org",
                    comment="First!",
                )
            )
            print(f"✓ Created page '{url_segment}' (ID: {page.id})")

        await db.commit()

    print("\n✓ Database seeding completed successfully!")
    print(f"\nOpen the page at: /pages/{page.id}")


if __name__ == "__main__":
    asyncio.run(seed_data())
