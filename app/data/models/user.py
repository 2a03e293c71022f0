from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from app.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    nome = Column(String(100), nullable=False)
    phone = Column(String(11), nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    type = Column(String(10), nullable=False, default="CLIENT")  # CLIENT, ADMIN
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    address = relationship(
        "AddressModel",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
