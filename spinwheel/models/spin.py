"""
Model for storing wheel spins (one issued coupon per normalized email).
"""
from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from spinwheel.db.base import Base


class Spin(Base):
    __tablename__ = "spins"
    # The unique constraint is what admits a single spin per email under concurrent requests
    __table_args__ = (UniqueConstraint("email", name="uq_spins_email"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)  # Normalized: trimmed + lower-cased

    # Reward as claimed by the widget
    domain = Column(String, nullable=True)
    discount = Column(Integer, nullable=True)
    coupon_code = Column("couponCode", String, nullable=True)

    created_at = Column("createdAt", DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Spin(id={self.id}, email={self.email}, coupon={self.coupon_code})>"
