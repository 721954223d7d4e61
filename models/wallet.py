from sqlalchemy import Column, Integer, String, Text, DateTime, BigInteger
from sqlalchemy.sql import func
from models import db, BIGINT


class MemberWallet(db.Model):
    __tablename__ = "member_wallet"
    id = Column(Integer, primary_key=True)
    member_id = Column(BIGINT, unique=True, nullable=False)
    balance = Column(BigInteger, default=0)  # paise
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())


class WalletTransaction(db.Model):
    __tablename__ = "wallet_transaction"
    id = Column(Integer, primary_key=True)
    member_id = Column(BIGINT, nullable=False, index=True)
    amount = Column(BigInteger, nullable=False)
    type = Column(String(20), nullable=False)  # e.g. debit, recharge, refund
    reference = Column(Text, nullable=True)    # contribution reference or message
    status = Column(String(20), nullable=True)  # e.g. success, failed
    source = Column(String(50), nullable=True)  # e.g. contribution, reconciliation
    created_at = Column(DateTime, default=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "member_id": self.member_id,
            "amount": int(self.amount),
            "type": self.type,
            "reference": self.reference,
            "status": self.status,
            "source": self.source,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }
