from sqlalchemy.future import select
from app.models.profile import Profile


async def get_profile_by_user_id(db, user_id: int):
    result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    return result.scalar_one_or_none()


async def create_profile(db, user_id: int, data: dict) -> Profile:
    profile = Profile(user_id=user_id, **data)
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile


async def update_profile(db, profile: Profile, data: dict) -> Profile:
    for field, value in data.items():
        setattr(profile, field, value)
    await db.commit()
    await db.refresh(profile)
    return profile
