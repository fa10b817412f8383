from sqlalchemy import Column, Index, Integer, Numeric, String

from stockledger.database.base import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False, default="")

    price = Column(Numeric(12, 2), nullable=False, default=0)
    # NULL means the cost was never entered; reports treat it as 0.
    cost_price = Column(Numeric(12, 2))

    __table_args__ = (
        Index("idx_products_name", "name"),
    )


__all__ = ["Product"]
