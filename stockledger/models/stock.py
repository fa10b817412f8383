from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from stockledger.database.base import Base


class StockEntry(Base):
    """One product in one store on one calendar day."""

    __tablename__ = "stocks"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    shop_id = Column(Integer, ForeignKey("stores.id"), nullable=False)
    stock_date = Column(Date, nullable=False)

    opening_stock = Column(Integer, nullable=False, default=0)
    closing_stock = Column(Integer, nullable=False, default=0)
    stock_added = Column(Integer, nullable=False, default=0)
    actual_stock = Column(Integer)

    operator_name = Column(String)

    product = relationship("Product", lazy="joined")
    store = relationship("Store", lazy="joined")

    __table_args__ = (
        Index(
            "uq_stocks_product_shop_date",
            "product_id",
            "shop_id",
            "stock_date",
            unique=True,
        ),
        Index("idx_stocks_date", "stock_date"),
        CheckConstraint("opening_stock >= 0", name="ck_stocks_opening_non_negative"),
        CheckConstraint("closing_stock >= 0", name="ck_stocks_closing_non_negative"),
        CheckConstraint("stock_added >= 0", name="ck_stocks_added_non_negative"),
    )


__all__ = ["StockEntry"]
