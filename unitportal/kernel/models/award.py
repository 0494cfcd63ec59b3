"""
Award models - award catalog and recipient ledger.
"""

import uuid
from datetime import datetime
from typing import List

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from unitportal.kernel.models.base import Base, TimestampMixin, UTCDateTime, generate_uuid
from unitportal.kernel.models.personnel import Personnel


class Award(Base, TimestampMixin):
    """An award definition with its ledger of recipients."""

    __tablename__ = "awards"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    # Catalog order
    sequence: Mapped[int] = mapped_column(
        Integer,
        unique=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    icon: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
    )

    ledger: Mapped[List["AwardLedgerEntry"]] = relationship(
        "AwardLedgerEntry",
        back_populates="award",
        cascade="all, delete-orphan",
        order_by="AwardLedgerEntry.granted_at",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Award {self.name}>"

    def entry_for(self, recipient_id: uuid.UUID) -> "AwardLedgerEntry | None":
        for entry in self.ledger:
            if entry.recipient_id == recipient_id:
                return entry
        return None


class AwardLedgerEntry(Base):
    """One issuance of an award to a member."""

    __tablename__ = "award_ledger"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    award_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("awards.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    recipient_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("personnel.id"),
        nullable=False,
        index=True,
    )
    granted_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
    )

    award: Mapped["Award"] = relationship(
        "Award",
        back_populates="ledger",
    )
    recipient: Mapped[Personnel] = relationship(
        Personnel,
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("award_id", "recipient_id", name="uq_award_ledger_recipient"),
    )
