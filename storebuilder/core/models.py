from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Numeric
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )


class SubscriptionPlan(Base, TimestampMixin):
    __tablename__ = "subscription_plans"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(unique=True)
    price_monthly: Mapped[float] = mapped_column(Numeric(10, 2), default=0)

    # NULL = zonas ilimitadas
    max_delivery_zones: Mapped[int | None] = mapped_column(nullable=True)

    stores: Mapped[List["Store"]] = relationship(back_populates="plan")


class Store(Base, TimestampMixin):
    __tablename__ = "stores"

    id: Mapped[int] = mapped_column(primary_key=True)

    # --- Identificação Básica ---
    name: Mapped[str] = mapped_column()
    url_slug: Mapped[str] = mapped_column(unique=True, index=True)
    phone: Mapped[str | None] = mapped_column(nullable=True)
    currency: Mapped[str] = mapped_column(default="IQD")
    is_active: Mapped[bool] = mapped_column(default=True)

    # --- Assinatura ---
    plan_id: Mapped[int | None] = mapped_column(
        ForeignKey("subscription_plans.id", ondelete="SET NULL"), nullable=True
    )
    plan: Mapped[Optional["SubscriptionPlan"]] = relationship(back_populates="stores")

    # --- Entrega ---
    # Registro único { zones: [...], isFreeDelivery: bool }. Lojas antigas ainda
    # podem ter um dos formatos legados (ver delivery_zone_migration).
    delivery_fees: Mapped[dict | None] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=True
    )

    __table_args__ = (
        Index('idx_stores_active_slug', 'is_active', 'url_slug'),
    )
