from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, String, Text, func

from shared.database import Base


class Product(Base):
    """Catalog product. `code` is the business key, `id` the storage identifier."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    code = Column(String(100), unique=True, nullable=False, index=True)
    price = Column(Float, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    category = Column(String(255), nullable=False, index=True)
    status = Column(Boolean, nullable=False, default=True)
    thumbnails = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
