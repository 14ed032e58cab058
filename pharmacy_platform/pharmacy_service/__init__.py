"""
pharmacy_service package

This package contains the core backend logic for the pharmacy directory service.
It includes:

- FastAPI application (`main.py`) and routers (`routes/`)
- SQLAlchemy models, database integration and stores (`models.py`, `db.py`, `repositories.py`)
- Password hashing and JWT logic (`auth.py`)
- Auth and pharmacy services (`services/`)
- Pydantic schemas (`schemas.py`)
"""
