from decimal import Decimal
from sqlmodel import select
from loguru import logger
from app.core.constants import DEFAULT_CATEGORY_FEES
from app.models.post import Post, CategoryPayment
from app.models.user import UserRole
from app.services.auth_service import get_user_by_email, create_user
from app.core.database import AsyncSessionLocal
from app.core.config import settings

# ----------------------------------------------------------------
# 1. DEFINE STATIC DATA
# ----------------------------------------------------------------

POSTS_DATA = [
    {"post_name": "Assistant Teacher (Primary)", "post_code": "ATP"},
    {"post_name": "Graduate Trained Teacher", "post_code": "GTT"},
    {"post_name": "Junior Clerk", "post_code": "JRC"},
    {"post_name": "Police Constable", "post_code": "PCN"},
    {"post_name": "Staff Nurse", "post_code": "SNR"},
]


# ----------------------------------------------------------------
# 2. SEEDING FUNCTIONS
# ----------------------------------------------------------------

async def seed_all():
    """Master function to run all seeding logic."""
    async with AsyncSessionLocal() as session:
        try:
            await seed_posts(session)
            await seed_category_fees(session)
            await session.commit()

            await seed_admin_user(session)
            logger.success("Seeding complete.")
        except Exception as e:
            logger.error(f"Seeding Failed: {e}")
            await session.rollback()


async def seed_posts(session):
    for p in POSTS_DATA:
        stmt = select(Post).where(Post.post_code == p["post_code"])
        result = await session.execute(stmt)
        if not result.scalar_one_or_none():
            logger.info(f"Creating Post: {p['post_name']}")
            session.add(Post(post_name=p["post_name"], post_code=p["post_code"]))
    await session.flush()


async def seed_category_fees(session):
    for category, amount in DEFAULT_CATEGORY_FEES.items():
        stmt = select(CategoryPayment).where(CategoryPayment.category == category)
        result = await session.execute(stmt)
        if not result.scalar_one_or_none():
            logger.info(f"Setting fee for {category.upper()}: {amount}")
            session.add(CategoryPayment(category=category, amount=Decimal(amount)))
    await session.flush()


async def seed_admin_user(session):
    if not settings.SUPER_ADMIN_EMAIL or not settings.SUPER_ADMIN_PASSWORD:
        logger.warning("Missing Super Admin credentials in settings.")
        return

    existing = await get_user_by_email(session, settings.SUPER_ADMIN_EMAIL)
    if existing:
        logger.info("Super Admin already exists. Skipping.")
        return

    logger.info(f"Seeding Super Admin: {settings.SUPER_ADMIN_EMAIL}")
    await create_user(
        session=session,
        name=settings.SUPER_ADMIN_NAME or "Super Admin",
        email=settings.SUPER_ADMIN_EMAIL,
        password=settings.SUPER_ADMIN_PASSWORD,
        role=UserRole.Admin,
    )
    logger.success("Super Admin created successfully.")
