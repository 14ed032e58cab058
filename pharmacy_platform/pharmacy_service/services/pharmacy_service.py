import logging
from typing import Any, Dict, List, Optional, Sequence

from ..exceptions import ConflictError
from ..models import Pharmacy
from ..repositories import PHARMACY_EMAIL_CONFLICT, Coordinate, PharmacyStore

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_FIELDS = ("name", "city", "detailed_address")


class PharmacyService:
    def __init__(
        self,
        pharmacies: PharmacyStore,
        search_fields: Sequence[str] = DEFAULT_SEARCH_FIELDS,
        match_mode: str = "contains",
    ):
        self.pharmacies = pharmacies
        self.search_fields = tuple(search_fields)
        self.match_mode = match_mode

    def create(self, data: Dict[str, Any]) -> Pharmacy:
        if self.pharmacies.find_by_email(data["email"]):
            logger.warning("Pharmacy creation rejected, email already in use: %s", data["email"])
            raise ConflictError(PHARMACY_EMAIL_CONFLICT)

        pharmacy = self.pharmacies.create(data)
        logger.info("Pharmacy created: id=%s, name=%s", pharmacy.id, pharmacy.name)
        return pharmacy

    def list_all(self) -> List[Pharmacy]:
        return self.pharmacies.list_all()

    def get_by_id(self, pharmacy_id: str) -> Optional[Pharmacy]:
        return self.pharmacies.find_by_id(pharmacy_id)

    def update(self, pharmacy_id: str, fields: Dict[str, Any]) -> Optional[Pharmacy]:
        """
        Merge `fields` into an existing pharmacy.

        Returns:
            The updated pharmacy, or None if `pharmacy_id` does not exist

        Raises:
            ConflictError: If `fields` moves the email onto another pharmacy's
        """
        email = fields.get("email")
        if email and self.pharmacies.find_by_email(email, exclude_id=pharmacy_id):
            logger.warning("Pharmacy update rejected, email already in use: %s", email)
            raise ConflictError(PHARMACY_EMAIL_CONFLICT)

        pharmacy = self.pharmacies.update_by_id(pharmacy_id, fields)
        if pharmacy is not None:
            logger.info("Pharmacy updated: id=%s, fields=%s", pharmacy_id, sorted(fields))
        return pharmacy

    def delete(self, pharmacy_id: str) -> bool:
        deleted = self.pharmacies.delete_by_id(pharmacy_id)
        if deleted:
            logger.info("Pharmacy deleted: id=%s", pharmacy_id)
        return deleted

    def set_on_duty(self, pharmacy_id: str) -> Optional[Pharmacy]:
        pharmacy = self.pharmacies.find_by_id(pharmacy_id)
        if pharmacy is None:
            return None
        pharmacy.is_on_duty = True
        return self.pharmacies.save(pharmacy)

    def set_on_guard(self, pharmacy_id: str, on_guard: bool = True) -> Optional[Pharmacy]:
        pharmacy = self.pharmacies.find_by_id(pharmacy_id)
        if pharmacy is None:
            return None
        pharmacy.is_on_gard = on_guard
        return self.pharmacies.save(pharmacy)

    def find_guard_pharmacies(
        self, center: Coordinate, max_distance: Optional[float] = None
    ) -> List[Dict[str, Any]]:
        """Guard pharmacies nearest `center` first, each with a `distance` in metres."""
        return self.pharmacies.aggregate(center=center, on_guard=True, max_distance=max_distance)

    def search(
        self,
        query: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> List[Any]:
        """
        Text and/or proximity search.

        With no criteria this is `list_all()`. A query is matched against the
        configured search fields; a coordinate adds `distance` to each result
        and orders results nearest first.
        """
        has_center = latitude is not None and longitude is not None
        if not query and not has_center:
            return self.list_all()

        return self.pharmacies.aggregate(
            center=(latitude, longitude) if has_center else None,
            text=query or None,
            text_fields=self.search_fields,
            match_mode=self.match_mode,
        )
