"""
Store capabilities used by the services, and their SQLAlchemy implementations.

The services depend only on `UserStore` / `PharmacyStore`; a concrete store is
injected when the request is wired up (see `deps.py`).
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .exceptions import ConflictError
from .models import Pharmacy, User

logger = logging.getLogger(__name__)

Coordinate = Tuple[float, float]

USER_EMAIL_CONFLICT = "User with this email already exists."
PHARMACY_EMAIL_CONFLICT = "Pharmacy with this email already exists."


class UserStore:
    def find_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def find_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def create(self, username: str, email: str, password: str) -> User:
        raise NotImplementedError

    def save(self, user: User) -> User:
        raise NotImplementedError


class PharmacyStore:
    def find_by_email(self, email: str, exclude_id: Optional[str] = None) -> Optional[Pharmacy]:
        raise NotImplementedError

    def find_by_id(self, pharmacy_id: str) -> Optional[Pharmacy]:
        raise NotImplementedError

    def list_all(self) -> List[Pharmacy]:
        raise NotImplementedError

    def create(self, fields: Dict[str, Any]) -> Pharmacy:
        raise NotImplementedError

    def update_by_id(self, pharmacy_id: str, fields: Dict[str, Any]) -> Optional[Pharmacy]:
        raise NotImplementedError

    def delete_by_id(self, pharmacy_id: str) -> bool:
        raise NotImplementedError

    def save(self, pharmacy: Pharmacy) -> Pharmacy:
        raise NotImplementedError

    def aggregate(
        self,
        center: Optional[Coordinate] = None,
        text: Optional[str] = None,
        text_fields: Sequence[str] = (),
        match_mode: str = "contains",
        on_guard: Optional[bool] = None,
        max_distance: Optional[float] = None,
    ) -> List[Dict[str, Any]]:
        raise NotImplementedError


class _SqlStore:
    conflict_message = "Record already exists."

    def __init__(self, db: Session):
        self._db = db

    def _commit(self) -> None:
        """Commit, turning a unique-index violation into ConflictError."""
        try:
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            message = str(exc.orig).lower()
            if "unique" not in message and "duplicate key" not in message:
                raise
            logger.warning("Unique constraint rejected write: %s", exc.orig)
            raise ConflictError(self.conflict_message) from exc


class SqlUserStore(_SqlStore, UserStore):
    conflict_message = USER_EMAIL_CONFLICT

    def find_by_email(self, email: str) -> Optional[User]:
        return self._db.query(User).filter(User.email == email).first()

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self._db.get(User, user_id)

    def create(self, username: str, email: str, password: str) -> User:
        user = User(username=username, email=email, password=password)
        self._db.add(user)
        self._commit()
        self._db.refresh(user)
        return user

    def save(self, user: User) -> User:
        self._db.add(user)
        self._commit()
        self._db.refresh(user)
        return user


class SqlPharmacyStore(_SqlStore, PharmacyStore):
    conflict_message = PHARMACY_EMAIL_CONFLICT

    def find_by_email(self, email: str, exclude_id: Optional[str] = None) -> Optional[Pharmacy]:
        query = self._db.query(Pharmacy).filter(Pharmacy.email == email)
        if exclude_id is not None:
            query = query.filter(Pharmacy.id != exclude_id)
        return query.first()

    def find_by_id(self, pharmacy_id: str) -> Optional[Pharmacy]:
        return self._db.get(Pharmacy, pharmacy_id)

    def list_all(self) -> List[Pharmacy]:
        return self._db.query(Pharmacy).all()

    def create(self, fields: Dict[str, Any]) -> Pharmacy:
        pharmacy = Pharmacy(**fields)
        self._db.add(pharmacy)
        self._commit()
        self._db.refresh(pharmacy)
        return pharmacy

    def update_by_id(self, pharmacy_id: str, fields: Dict[str, Any]) -> Optional[Pharmacy]:
        pharmacy = self.find_by_id(pharmacy_id)
        if pharmacy is None:
            return None
        for key, value in fields.items():
            setattr(pharmacy, key, value)
        return self.save(pharmacy)

    def delete_by_id(self, pharmacy_id: str) -> bool:
        pharmacy = self.find_by_id(pharmacy_id)
        if pharmacy is None:
            return False
        self._db.delete(pharmacy)
        self._db.commit()
        return True

    def save(self, pharmacy: Pharmacy) -> Pharmacy:
        self._db.add(pharmacy)
        self._commit()
        self._db.refresh(pharmacy)
        return pharmacy

    def aggregate(
        self,
        center: Optional[Coordinate] = None,
        text: Optional[str] = None,
        text_fields: Sequence[str] = (),
        match_mode: str = "contains",
        on_guard: Optional[bool] = None,
        max_distance: Optional[float] = None,
    ) -> List[Dict[str, Any]]:
        """
        Run a single filtered query over pharmacies.

        Args:
            center: (latitude, longitude) to measure `distance` from, in metres
            text: Case-insensitive text matched against `text_fields`
            text_fields: Pharmacy column names searched by `text`
            match_mode: "contains" or "prefix"
            on_guard: Restrict to pharmacies with this guard flag
            max_distance: Drop rows further than this from `center`

        Returns:
            Pharmacy dictionaries; with a center, each carries `distance` and
            rows are ordered nearest first
        """
        distance = None
        if center is not None:
            latitude, longitude = center
            distance = func.geo_distance(Pharmacy.latitude, Pharmacy.longitude, latitude, longitude)
            stmt = select(Pharmacy, distance.label("distance"))
        else:
            stmt = select(Pharmacy)

        if on_guard is not None:
            stmt = stmt.where(Pharmacy.is_on_gard.is_(on_guard))

        if text:
            stmt = stmt.where(_text_filter(text, text_fields, match_mode))

        if distance is not None:
            if max_distance is not None:
                stmt = stmt.where(distance <= max_distance)
            stmt = stmt.order_by(distance.asc())

        if distance is None:
            return [pharmacy.to_dict() for pharmacy in self._db.scalars(stmt).all()]
        return [
            {**pharmacy.to_dict(), "distance": row_distance}
            for pharmacy, row_distance in self._db.execute(stmt).all()
        ]


def _text_filter(text: str, fields: Sequence[str], match_mode: str):
    if not fields:
        raise ValueError("At least one search field is required")
    clauses = []
    for field in fields:
        column = getattr(Pharmacy, field, None)
        if column is None or field not in Pharmacy.__table__.columns:
            raise ValueError(f"Unknown pharmacy search field '{field}'")
        if match_mode == "prefix":
            clauses.append(column.istartswith(text, autoescape=True))
        elif match_mode == "contains":
            clauses.append(column.icontains(text, autoescape=True))
        else:
            raise ValueError(f"Invalid match_mode '{match_mode}'. Must be one of: contains, prefix")
    return or_(*clauses)
