import datetime as dt
from typing import Optional

import sqlalchemy as sa
from sqlalchemy import (
    DECIMAL,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketplace.db.base import Base
from marketplace.models.category_model import Category
from marketplace.utils.object_id import generate_object_id


# Line items can carry their own category tags, independent of the listing's
listing_item_categories = Table(
    "listing_item_categories",
    Base.metadata,
    Column(
        "item_id",
        String(24),
        ForeignKey("listing_items.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "category_id",
        String(24),
        ForeignKey("categories.id"),
        primary_key=True,
        index=True,
    ),
)


class Listing(Base):
    """A vendor's listing, filed under one primary category."""

    __tablename__ = "listings"
    __table_args__ = (sa.Index("idx_listing_category", "category_id"),)

    id: Mapped[str] = mapped_column(
        String(24), primary_key=True, default=generate_object_id
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    category_id: Mapped[str] = mapped_column(
        String(24), ForeignKey("categories.id"), nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: dt.datetime.now(dt.timezone.utc),
    )

    category: Mapped[Category] = relationship(back_populates="listings")
    items: Mapped[list["ListingItem"]] = relationship(
        back_populates="listing",
        cascade="all, delete-orphan",
    )


class ListingItem(Base):
    """A single service offered inside a listing."""

    __tablename__ = "listing_items"

    id: Mapped[str] = mapped_column(
        String(24), primary_key=True, default=generate_object_id
    )
    listing_id: Mapped[str] = mapped_column(
        String(24), ForeignKey("listings.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    price: Mapped[Optional[float]] = mapped_column(DECIMAL(10, 2))

    listing: Mapped[Listing] = relationship(back_populates="items")
    categories: Mapped[list[Category]] = relationship(
        secondary=listing_item_categories
    )
