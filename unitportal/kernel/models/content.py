"""
Content section model - divisions, information items and charter chapters.
"""

import uuid
from enum import Enum
from typing import Optional

from sqlalchemy import Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from unitportal.kernel.models.base import Base, TimestampMixin, generate_uuid


class SectionKind(str, Enum):
    """Page families made of editable sections."""
    DIVISION = "division"
    INFO = "info"
    CHARTER = "charter"


class ContentSection(Base, TimestampMixin):
    """An editable block on one of the informational pages."""

    __tablename__ = "content_sections"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    kind: Mapped[SectionKind] = mapped_column(
        String(20),
        nullable=False,
        index=True,
    )
    sequence: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    body: Mapped[str] = mapped_column(
        Text,
        default="",
        nullable=False,
    )
    icon: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
    )
    link: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    __table_args__ = (
        UniqueConstraint("kind", "sequence", name="uq_content_section_order"),
    )

    def __repr__(self) -> str:
        return f"<ContentSection {self.kind}:{self.title!r}>"
