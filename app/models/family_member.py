from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import Base


class FamilyMember(Base):
    __tablename__ = "family_members"
    __table_args__ = (
        UniqueConstraint("user_id", "name", "relation", name="uq_family_member_user_name_relation"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    relation = Column(String(50), nullable=False)
    education = Column(String(150), nullable=True)
    profession = Column(String(150), nullable=True)

    user = relationship("User", back_populates="family_members")
