import pytest

from app.core.seeding_logic import POSTS_DATA, seed_category_fees, seed_posts
from app.models.post import Post


@pytest.mark.asyncio
async def test_list_active_posts(client, db_session, post):
    db_session.add(Post(post_name="Archived Post", post_code="ARC", is_active=False))
    await db_session.commit()

    res = await client.get("/api/posts")
    assert res.status_code == 200
    assert [p["post_code"] for p in res.json()] == ["JRC"]


@pytest.mark.asyncio
async def test_seeding_is_idempotent(client, db_session):
    for _ in range(2):
        await seed_posts(db_session)
        await seed_category_fees(db_session)
        await db_session.commit()

    res = await client.get("/api/posts")
    assert len(res.json()) == len(POSTS_DATA)
