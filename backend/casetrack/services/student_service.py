"""Student search and lookups."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from casetrack.models.review import Review
from casetrack.models.student import Student
from casetrack.services.errors import NotFoundError

MIN_SEARCH_LENGTH = 3


async def search_students(db: AsyncSession, query: str, limit: int = 10) -> list[Student]:
    """Case-insensitive name search. Queries shorter than three characters match nothing."""
    query = (query or "").strip()
    if len(query) < MIN_SEARCH_LENGTH:
        return []

    result = await db.execute(
        select(Student)
        .where(Student.name.ilike(f"%{query}%"))
        .order_by(Student.name)
        .limit(limit)
    )
    return list(result.scalars().all())


async def get_student(db: AsyncSession, student_id: UUID) -> Student:
    result = await db.execute(select(Student).where(Student.id == student_id))
    student = result.scalar_one_or_none()
    if not student:
        raise NotFoundError(f"Student {student_id} not found")
    return student


async def get_student_reviews(db: AsyncSession, student_id: UUID) -> list[Review]:
    await get_student(db, student_id)
    result = await db.execute(
        select(Review)
        .where(Review.student_id == student_id)
        .order_by(Review.review_date.desc(), Review.created_at.desc())
    )
    return list(result.scalars().all())
