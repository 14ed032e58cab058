from sqlalchemy import Column, String, Boolean, Float, Text
from .db import Base
import uuid


def new_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, default=new_id)
    username = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"


class Pharmacy(Base):
    __tablename__ = "pharmacies"
    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    city = Column(String, nullable=False, index=True)
    detailed_address = Column(String, nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    # Duty / guard scheduling flags
    is_on_duty = Column(Boolean, default=False, nullable=False)
    is_on_gard = Column(Boolean, default=False, nullable=False, index=True)
    description = Column(Text, nullable=True)
    image = Column(String, nullable=True)
    image_mobile = Column(String, nullable=True)

    def to_dict(self) -> dict:
        """
        Serialize the pharmacy to a plain dictionary keyed by column name.

        Geo queries extend this with a `distance` entry.
        """
        return {column.name: getattr(self, column.name) for column in self.__table__.columns}

    def __repr__(self):
        return f"<Pharmacy(id={self.id}, email={self.email}, is_on_duty={self.is_on_duty}, is_on_gard={self.is_on_gard})>"
