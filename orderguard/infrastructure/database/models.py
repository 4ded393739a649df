"""
SQLAlchemy ORM Models.

Tables the order store reads from. Rows are never converted to domain
entities here; the source hands raw mappings to the validator.
"""
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import declarative_base, relationship


Base = declarative_base()


# =============================================================================
# ORDER MODEL
# =============================================================================

class OrderModel(Base):
    """Order database model."""

    __tablename__ = "orders"

    id = Column(String(36), primary_key=True)
    customer_id = Column(String(36), nullable=True, index=True)

    # Stored total is informational; revenue is recomputed from items
    total_amount = Column(Numeric(12, 2), nullable=True)
    status = Column(String(50), nullable=True, index=True)

    created_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, nullable=True)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.position",
    )

    __table_args__ = (
        Index("ix_orders_customer_status", "customer_id", "status"),
        Index("ix_orders_created_at", "created_at"),
    )

    def __repr__(self):
        return f"<OrderModel(id={self.id}, status={self.status})>"


# =============================================================================
# ORDER ITEM MODEL
# =============================================================================

class OrderItemModel(Base):
    """Order line item model."""

    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String(36), nullable=True)

    quantity = Column(Numeric(12, 3), nullable=True)
    price = Column(Numeric(12, 2), nullable=True)

    # Preserves original line order
    position = Column(Integer, nullable=False, default=0)

    order = relationship("OrderModel", back_populates="items")

    def __repr__(self):
        return f"<OrderItemModel(id={self.id}, product_id={self.product_id})>"
