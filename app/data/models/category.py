from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from app.data.database import Base


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    description = Column(String(255), nullable=False)

    # no cascade: a category with items cannot be deleted
    items = relationship("ItemModel", back_populates="category", passive_deletes="all")
