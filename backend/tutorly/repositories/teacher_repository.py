# backend/tutorly/repositories/teacher_repository.py
"""
Teacher Repository for the Tutorly platform.

Covers the public teacher directory (filtered listing, detail, popular
subjects) and the two atomic counters kept on teacher_profiles: the booking
lock sequence and the incremental rating aggregate.
"""

from decimal import Decimal
import logging
from typing import List, Optional, Sequence, Tuple, cast

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, selectinload

from ..core.enums import RoleName
from ..core.exceptions import RepositoryException
from ..models.teacher import TeacherProfile, TeacherSubject
from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class TeacherRepository(BaseRepository[TeacherProfile]):
    """Repository for teacher profiles and subjects."""

    def __init__(self, db: Session):
        super().__init__(db, TeacherProfile)

    def _teacher_query(self) -> Query:
        return (
            self.db.query(User)
            .join(TeacherProfile, TeacherProfile.teacher_id == User.id)
            .options(selectinload(User.teacher_profile), selectinload(User.subjects))
            .filter(User.role == RoleName.TEACHER.value, User.is_active.is_(True))
        )

    def get_teacher(self, teacher_id: str) -> Optional[User]:
        """Active teacher account with profile and subjects loaded."""
        try:
            return cast(
                Optional[User], self._teacher_query().filter(User.id == teacher_id).first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting teacher {teacher_id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve teacher: {str(e)}")

    def get_profile(self, teacher_id: str) -> Optional[TeacherProfile]:
        return cast(
            Optional[TeacherProfile],
            self.db.query(TeacherProfile).filter(TeacherProfile.teacher_id == teacher_id).first(),
        )

    def list_teachers(
        self,
        *,
        subject: Optional[str] = None,
        min_rating: Optional[float] = None,
        max_price: Optional[float] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[User], int]:
        """
        Filtered, paginated directory listing.

        Returns:
            (page of teachers, total matching count)
        """
        try:
            query = self._teacher_query()
            if subject:
                matching = select(TeacherSubject.teacher_id).where(
                    TeacherSubject.name.icontains(subject.strip(), autoescape=True)
                )
                query = query.filter(User.id.in_(matching))
            if min_rating is not None:
                query = query.filter(TeacherProfile.rating >= min_rating)
            if max_price is not None:
                query = query.filter(TeacherProfile.hourly_rate <= Decimal(str(max_price)))

            total = query.order_by(None).count()
            teachers = (
                query.order_by(
                    TeacherProfile.rating.desc(),
                    TeacherProfile.total_reviews.desc(),
                    User.created_at.asc(),
                )
                .offset(offset)
                .limit(limit)
                .all()
            )
            return cast(List[User], teachers), total
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing teachers: {str(e)}")
            raise RepositoryException(f"Failed to list teachers: {str(e)}")

    def top_rated(self, limit: int) -> List[User]:
        return cast(
            List[User],
            self._teacher_query()
            .order_by(TeacherProfile.rating.desc(), TeacherProfile.total_reviews.desc())
            .limit(limit)
            .all(),
        )

    def popular_subjects(self, limit: int) -> List[Tuple[str, int]]:
        """Subjects ordered by how many active teachers offer them."""
        teacher_count = func.count(func.distinct(TeacherSubject.teacher_id))
        rows = (
            self.db.query(TeacherSubject.name, teacher_count)
            .join(User, User.id == TeacherSubject.teacher_id)
            .filter(User.role == RoleName.TEACHER.value, User.is_active.is_(True))
            .group_by(TeacherSubject.name)
            .order_by(teacher_count.desc(), TeacherSubject.name.asc())
            .limit(limit)
            .all()
        )
        return [(name, int(count)) for name, count in rows]

    def replace_subjects(self, teacher: User, subjects: Sequence[str]) -> None:
        """Replace the teacher's subject rows, de-duplicating case-insensitively.

        Rows whose name survives are kept so the unique (teacher, name)
        constraint never sees a delete-then-insert of the same value.
        """
        existing = {subject.name.lower(): subject for subject in teacher.subjects}
        seen = set()
        replacement: List[TeacherSubject] = []
        for raw in subjects:
            name = raw.strip()
            key = name.lower()
            if not name or key in seen:
                continue
            seen.add(key)
            row = existing.get(key)
            if row is None:
                row = TeacherSubject(name=name)
            else:
                row.name = name
            replacement.append(row)
        teacher.subjects = replacement
        self.db.flush()

    # ==========================================
    # Atomic counters
    # ==========================================

    def acquire_booking_lock(self, teacher_id: str) -> bool:
        """
        Bump booking_sequence for the teacher inside the current transaction.

        The UPDATE takes a row lock on PostgreSQL and the database write lock
        on SQLite, so concurrent booking transactions for the same teacher are
        serialized until commit/rollback. Returns False if no profile exists.
        """
        result = self.db.execute(
            update(TeacherProfile)
            .where(TeacherProfile.teacher_id == teacher_id)
            .values(booking_sequence=TeacherProfile.booking_sequence + 1)
            .execution_options(synchronize_session=False)
        )
        return bool(result.rowcount)

    def apply_review_rating(self, teacher_id: str, rating: int) -> None:
        """Fold one rating into the running mean with a single UPDATE."""
        new_sum = TeacherProfile.rating_sum + rating
        new_count = TeacherProfile.total_reviews + 1
        self.db.execute(
            update(TeacherProfile)
            .where(TeacherProfile.teacher_id == teacher_id)
            .values(
                rating_sum=new_sum,
                total_reviews=new_count,
                rating=new_sum * 1.0 / new_count,
            )
            .execution_options(synchronize_session=False)
        )
        self.db.expire_all()
