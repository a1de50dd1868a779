from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class AddressModel(Base):
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    line_one = Column(String, nullable=False)
    line_two = Column(String, nullable=True)
    city = Column(String, nullable=False)
    country = Column(String, nullable=False)
    pincode = Column(String(6), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    user = relationship("UserModel", back_populates="addresses")

    @property
    def formatted_address(self) -> str:
        parts = [self.line_one]
        if self.line_two:
            parts.append(self.line_two)
        parts.append(self.city)
        parts.append(f"{self.country}-{self.pincode}")
        return ", ".join(parts)
