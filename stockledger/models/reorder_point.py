from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint

from stockledger.database.base import Base


class ReorderPoint(Base):
    __tablename__ = "reorder_points"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    shop_id = Column(Integer, ForeignKey("stores.id"), nullable=False)
    minimum_stock = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("product_id", "shop_id", name="uq_reorder_points_product_shop"),
    )


__all__ = ["ReorderPoint"]
