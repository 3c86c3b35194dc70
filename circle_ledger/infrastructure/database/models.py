"""SQLAlchemy ORM models for members, dues, loans and expenses"""

import uuid
from sqlalchemy import Column, String, BigInteger, Boolean, Float, DateTime, Integer, ForeignKey, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class MemberRecord(Base):
    """Circle member (admin or regular member)"""

    __tablename__ = "member"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    number = Column(String(32), nullable=False, index=True)
    address = Column(Text, nullable=False, default="")
    monthly_amount_cents = Column(BigInteger, nullable=False, default=0)
    role = Column(Text, nullable=False, default="member", index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    payments = relationship(
        "PaymentRecord",
        back_populates="member",
        cascade="all, delete-orphan",
        order_by="PaymentRecord.position",
    )
    loans = relationship(
        "LoanRecord",
        back_populates="member",
        cascade="all, delete-orphan",
        order_by="LoanRecord.position",
    )


class PaymentRecord(Base):
    """Dues status for one billing period"""

    __tablename__ = "payment"
    __table_args__ = (UniqueConstraint("member_id", "period", name="uq_payment_member_period"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    member_id = Column(UUID(as_uuid=True), ForeignKey("member.id", ondelete="CASCADE"), nullable=False)
    period = Column(String(7), nullable=False)  # YYYY-MM
    position = Column(Integer, nullable=False, default=0)
    paid = Column(Boolean, nullable=False, default=False)
    paid_date = Column(DateTime(timezone=True), nullable=True)

    member = relationship("MemberRecord", back_populates="payments")


class LoanRecord(Base):
    """Loan granted to a member"""

    __tablename__ = "loan"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    member_id = Column(UUID(as_uuid=True), ForeignKey("member.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    principal_cents = Column(BigInteger, nullable=False)
    monthly_rate = Column(Float, nullable=False)
    taken_date = Column(DateTime(timezone=True), nullable=False)
    principal_paid = Column(Boolean, nullable=False, default=False)
    principal_paid_date = Column(DateTime(timezone=True), nullable=True)
    closed = Column(Boolean, nullable=False, default=False)
    closed_date = Column(DateTime(timezone=True), nullable=True)

    member = relationship("MemberRecord", back_populates="loans")
    interest_payments = relationship(
        "InterestPaymentRecord",
        back_populates="loan",
        cascade="all, delete-orphan",
        order_by="InterestPaymentRecord.sequence",
    )


class InterestPaymentRecord(Base):
    """Append-only interest settlement covering [period_start, period_end]"""

    __tablename__ = "interest_payment"
    __table_args__ = (UniqueConstraint("loan_id", "sequence", name="uq_interest_payment_loan_sequence"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    loan_id = Column(UUID(as_uuid=True), ForeignKey("loan.id", ondelete="CASCADE"), nullable=False)
    sequence = Column(Integer, nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    paid_date = Column(DateTime(timezone=True), nullable=False)
    period_start = Column(DateTime(timezone=True), nullable=False)
    period_end = Column(DateTime(timezone=True), nullable=False)

    loan = relationship("LoanRecord", back_populates="interest_payments")


class ExpenseRecord(Base):
    """Circle expense, subtracted from the collection balance"""

    __tablename__ = "expense"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    amount_cents = Column(BigInteger, nullable=False)
    description = Column(Text, nullable=False, default="No description")
    date = Column(DateTime(timezone=True), nullable=False)
    # Caller id vouched for upstream; admins need not have a member row
    created_by = Column(String(128), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
