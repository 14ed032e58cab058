"""
Pharmacy Router - CRUD, duty/guard flags and geo search.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..schemas import DeleteResponse, PharmacyCreate, PharmacyResponse, PharmacyUpdate
from ..services.pharmacy_service import PharmacyService
from ..deps import get_pharmacy_service

router = APIRouter(prefix="/pharmacies", tags=["pharmacies"])
logger = logging.getLogger(__name__)


def _found(pharmacy, pharmacy_id: str):
    if pharmacy is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Pharmacy {pharmacy_id} not found")
    return pharmacy


@router.post("", response_model=PharmacyResponse, status_code=status.HTTP_201_CREATED)
def create_pharmacy(payload: PharmacyCreate, service: PharmacyService = Depends(get_pharmacy_service)):
    return service.create(payload.model_dump())


@router.get("", response_model=List[PharmacyResponse])
def list_pharmacies(service: PharmacyService = Depends(get_pharmacy_service)):
    return service.list_all()


@router.get("/guard", response_model=List[PharmacyResponse])
def find_guard_pharmacies(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    max_distance: Optional[float] = Query(None, gt=0, alias="maxDistance", description="Radius in metres"),
    service: PharmacyService = Depends(get_pharmacy_service),
):
    return service.find_guard_pharmacies((latitude, longitude), max_distance=max_distance)


@router.get("/search", response_model=List[PharmacyResponse])
def search_pharmacies(
    query: Optional[str] = Query(None, description="Text matched against name, city and address"),
    latitude: Optional[float] = Query(None, ge=-90, le=90),
    longitude: Optional[float] = Query(None, ge=-180, le=180),
    service: PharmacyService = Depends(get_pharmacy_service),
):
    """
    Search pharmacies by text and/or proximity.

    Raises:
        422: If only one of latitude/longitude is supplied
    """
    if (latitude is None) != (longitude is None):
        raise HTTPException(
            status_code=422,
            detail="latitude and longitude must be supplied together"
        )
    results = service.search(query=query, latitude=latitude, longitude=longitude)
    logger.debug("Pharmacy search: query=%s, latitude=%s, longitude=%s, results=%s",
                 query, latitude, longitude, len(results))
    return results


@router.get("/{pharmacy_id}", response_model=PharmacyResponse)
def get_pharmacy(pharmacy_id: str, service: PharmacyService = Depends(get_pharmacy_service)):
    return _found(service.get_by_id(pharmacy_id), pharmacy_id)


@router.patch("/{pharmacy_id}", response_model=PharmacyResponse)
def update_pharmacy(
    pharmacy_id: str,
    payload: PharmacyUpdate,
    service: PharmacyService = Depends(get_pharmacy_service),
):
    return _found(service.update(pharmacy_id, payload.changes()), pharmacy_id)


@router.delete("/{pharmacy_id}", response_model=DeleteResponse)
def delete_pharmacy(pharmacy_id: str, service: PharmacyService = Depends(get_pharmacy_service)):
    if not service.delete(pharmacy_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Pharmacy {pharmacy_id} not found")
    return DeleteResponse(deleted=True)


@router.patch("/{pharmacy_id}/duty", response_model=PharmacyResponse)
def set_pharmacy_on_duty(pharmacy_id: str, service: PharmacyService = Depends(get_pharmacy_service)):
    return _found(service.set_on_duty(pharmacy_id), pharmacy_id)


@router.patch("/{pharmacy_id}/guard", response_model=PharmacyResponse)
def set_pharmacy_on_guard(
    pharmacy_id: str,
    on_guard: bool = Query(True, alias="onGuard"),
    service: PharmacyService = Depends(get_pharmacy_service),
):
    return _found(service.set_on_guard(pharmacy_id, on_guard), pharmacy_id)
