from sqlalchemy import Column, Integer, String, Float, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base

class PayrollRecord(Base):
    """Per-period compensation row. Append-only."""
    __tablename__ = "payrolls"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    pay_period_start = Column(Date, nullable=False, index=True)
    pay_period_end = Column(Date, nullable=False)
    gross_salary = Column(Float, nullable=False)
    total_deductions = Column(Float, default=0.0, nullable=False)
    net_salary = Column(Float, nullable=False)
    payable_days = Column(Integer, nullable=False)
    payslip_url = Column(String, nullable=True)
    generated_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", foreign_keys=[user_id], back_populates="payrolls")
    generator = relationship("User", foreign_keys=[generated_by])
