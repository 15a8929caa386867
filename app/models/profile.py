from sqlalchemy import Column, Integer, String, Date, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    photo_url = Column(String(500), nullable=True)
    dob = Column(Date, nullable=True)
    gender = Column(String(20), nullable=True)
    village = Column(String(100), nullable=True)
    mandal = Column(String(100), nullable=True)
    district = Column(String(100), nullable=True)
    pincode = Column(String(10), nullable=True)
    caste = Column(String(100), nullable=True)
    subcaste = Column(String(100), nullable=True)
    marital_status = Column(String(20), nullable=True)
    native_place = Column(String(100), nullable=True)

    user = relationship("User", back_populates="profile")
