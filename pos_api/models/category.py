from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from pos_api.database.base import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")

    products = relationship("Product", back_populates="category", passive_deletes=True)


__all__ = ["Category"]
