"""Shop: product catalogue and the quotation workflow.

Quotation totals are always computed here from catalogue prices; clients
never submit amounts. Status changes follow ``ALLOWED_TRANSITIONS``.
"""

from __future__ import annotations

import logging
import secrets
import time
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from loro.config import get_settings
from loro.db.base import tenant_clause
from loro.db.models import Client, Organisation, Product, Quotation, QuotationItem, Reseller
from loro.email.service import send_notification_email
from loro.errors import ConflictError, NotFoundError, ValidationError
from loro.notifications.push import publish_event
from loro.shop.schemas import ProductCreate, QuotationCreate
from loro.shop.transitions import SENDABLE_STATUSES, validate_transition

logger = logging.getLogger(__name__)


def generate_sku(category: str, name: str, reseller_id: int | None, product_id: int) -> str:
    """CAT-NAM-RRR-NNNNNN from category, name, reseller and product id."""
    category_code = (category or "XXX")[:3].upper()
    name_code = (name or "XXX")[:3].upper()
    reseller_code = str(reseller_id).zfill(3) if reseller_id else "000"
    return f"{category_code}-{name_code}-{reseller_code}-{str(product_id).zfill(6)}"


def unit_price_for(product: Product) -> Decimal:
    """Promotional price when the product is on promotion, else list price."""
    if product.is_on_promotion and product.sale_price is not None:
        return Decimal(product.sale_price)
    return Decimal(product.price)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


async def create_product(
    db: AsyncSession,
    body: ProductCreate,
    organisation_id: int,
    branch_id: int | None = None,
) -> Product:
    """Add a product. A SKU is generated from the product id when none is given."""
    if body.sku:
        existing = await db.execute(select(Product.id).where(Product.sku == body.sku))
        if existing.first() is not None:
            msg = f"A product with SKU {body.sku} already exists"
            raise ConflictError(msg)

    if body.reseller_id is not None:
        reseller = await db.get(Reseller, body.reseller_id)
        if reseller is None or reseller.organisation_id != organisation_id or reseller.is_deleted:
            msg = "Reseller not found"
            raise NotFoundError(msg)

    data = body.model_dump()
    data["sku"] = body.sku or f"TMP-{uuid.uuid4().hex}"
    product = Product(**data, organisation_id=organisation_id, branch_id=branch_id)
    db.add(product)
    await db.flush()

    if not body.sku:
        product.sku = generate_sku(product.category, product.name, product.reseller_id, product.id)
        await db.flush()

    await db.refresh(product)
    return product


async def list_products(
    db: AsyncSession,
    organisation_id: int | None,
    branch_id: int | None = None,
    *,
    category: str | None = None,
    status: str | None = None,
) -> list[Product]:
    stmt = select(Product).where(Product.is_deleted.is_(False), *tenant_clause(Product, organisation_id, branch_id))
    if category:
        stmt = stmt.where(Product.category == category)
    if status:
        stmt = stmt.where(Product.status == status)
    result = await db.execute(stmt.order_by(Product.created_at.desc(), Product.id.desc()))
    return list(result.scalars().all())


async def list_categories(db: AsyncSession, organisation_id: int | None, branch_id: int | None = None) -> list[str]:
    result = await db.execute(
        select(Product.category)
        .where(Product.is_deleted.is_(False), *tenant_clause(Product, organisation_id, branch_id))
        .distinct()
        .order_by(Product.category)
    )
    return [c for c in result.scalars().all() if c]


async def list_specials(db: AsyncSession, organisation_id: int | None, branch_id: int | None = None) -> list[Product]:
    return await list_products(db, organisation_id, branch_id, status="special")


# ---------------------------------------------------------------------------
# Quotations
# ---------------------------------------------------------------------------


async def _next_quotation_number(db: AsyncSession) -> str:
    stamp = int(time.time() * 1000)
    while True:
        number = f"QUO-{stamp}"
        taken = await db.execute(select(Quotation.id).where(Quotation.quotation_number == number))
        if taken.first() is None:
            return number
        stamp += 1


def _review_link() -> tuple[str, str]:
    token = secrets.token_urlsafe(32)
    base = get_settings().frontend_base_url.rstrip("/")
    return token, f"{base}/review-quotation?token={token}"


async def _get_scoped_quotation(
    db: AsyncSession,
    quotation_id: int,
    organisation_id: int | None,
    branch_id: int | None,
) -> Quotation:
    result = await db.execute(
        select(Quotation).where(Quotation.id == quotation_id, *tenant_clause(Quotation, organisation_id, branch_id))
    )
    quotation = result.scalar_one_or_none()
    if quotation is None:
        msg = "Quotation not found"
        raise NotFoundError(msg)
    return quotation


async def create_quotation(
    db: AsyncSession,
    body: QuotationCreate,
    placed_by_id: int,
    organisation_id: int,
    branch_id: int | None = None,
) -> Quotation:
    """
    Create a draft quotation priced from the catalogue.

    Raises:
        NotFoundError: The client or a product is not in the organisation.
    """
    client = await db.get(Client, body.client_id)
    if client is None or client.organisation_id != organisation_id or client.is_deleted:
        msg = "Client not found"
        raise NotFoundError(msg)

    product_ids = {item.product_id for item in body.items}
    result = await db.execute(
        select(Product).where(
            Product.id.in_(product_ids),
            Product.organisation_id == organisation_id,
            Product.is_deleted.is_(False),
        )
    )
    products = {p.id: p for p in result.scalars().all()}
    missing = sorted(product_ids - products.keys())
    if missing:
        msg = f"Products not found for items: {', '.join(str(m) for m in missing)}"
        raise NotFoundError(msg)

    settings = get_settings()
    organisation = await db.get(Organisation, organisation_id)
    currency = organisation.currency if organisation and organisation.currency else settings.default_currency

    items: list[QuotationItem] = []
    total_amount = Decimal("0")
    total_items = 0
    for line in body.items:
        unit_price = unit_price_for(products[line.product_id])
        line_total = unit_price * line.quantity
        items.append(QuotationItem(
            product_id=line.product_id,
            quantity=line.quantity,
            unit_price=unit_price,
            total_price=line_total,
            notes=line.notes,
        ))
        total_amount += line_total
        total_items += line.quantity

    review_token, review_url = _review_link()
    quotation = Quotation(
        quotation_number=await _next_quotation_number(db),
        title=body.title,
        description=body.description,
        notes=body.notes,
        promo_code=body.promo_code,
        total_amount=total_amount,
        total_items=total_items,
        status="draft",
        currency=currency,
        valid_until=datetime.now(timezone.utc) + timedelta(days=settings.quotation_validity_days),
        review_token=review_token,
        review_url=review_url,
        placed_by_id=placed_by_id,
        client_id=client.id,
        organisation_id=organisation_id,
        branch_id=branch_id,
        items=items,
    )
    db.add(quotation)
    await db.flush()
    await db.refresh(quotation)
    logger.info("Quotation %s created with %d items, total %s", quotation.quotation_number, total_items, total_amount)
    return quotation


async def list_quotations(
    db: AsyncSession,
    organisation_id: int | None,
    branch_id: int | None = None,
    *,
    placed_by_id: int | None = None,
    status: str | None = None,
) -> list[Quotation]:
    stmt = select(Quotation).where(*tenant_clause(Quotation, organisation_id, branch_id))
    if placed_by_id is not None:
        stmt = stmt.where(Quotation.placed_by_id == placed_by_id)
    if status:
        stmt = stmt.where(Quotation.status == status)
    result = await db.execute(stmt.order_by(Quotation.created_at.desc(), Quotation.id.desc()))
    return list(result.scalars().all())


async def get_quotation(
    db: AsyncSession,
    quotation_id: int,
    organisation_id: int | None,
    branch_id: int | None = None,
) -> Quotation:
    return await _get_scoped_quotation(db, quotation_id, organisation_id, branch_id)


async def update_quotation_status(
    db: AsyncSession,
    quotation_id: int,
    status: str,
    organisation_id: int | None,
    branch_id: int | None = None,
) -> tuple[Quotation, str]:
    """Move a quotation along its lifecycle. Returns it with the previous status."""
    quotation = await _get_scoped_quotation(db, quotation_id, organisation_id, branch_id)
    previous = quotation.status
    try:
        validate_transition(previous, status)
    except ValueError as e:
        raise ValidationError(str(e)) from e

    quotation.status = status
    await db.flush()
    await db.refresh(quotation)
    logger.info("Quotation %s status %s -> %s", quotation.quotation_number, previous, status)
    return quotation, previous


async def send_to_client(
    db: AsyncSession,
    quotation_id: int,
    organisation_id: int | None,
    branch_id: int | None = None,
) -> tuple[Quotation, str]:
    """Put a draft or internally-pending quotation in front of the client."""
    quotation = await _get_scoped_quotation(db, quotation_id, organisation_id, branch_id)
    previous = quotation.status
    if previous not in SENDABLE_STATUSES:
        msg = f"Quotation cannot be sent to client from status {previous}"
        raise ValidationError(msg)

    if not quotation.review_token:
        quotation.review_token, quotation.review_url = _review_link()
    quotation.status = "pending_client"
    await db.flush()
    await db.refresh(quotation)
    return quotation, previous


async def email_quotation_to_client(quotation: Quotation) -> bool:
    """Send the review link to the client. Best effort."""
    client = quotation.client
    if client is None or not quotation.review_url:
        return False
    sent = await send_notification_email(client.email, "quotation_sent", {
        "client_name": client.name,
        "quotation_number": quotation.quotation_number,
        "total_amount": f"{Decimal(quotation.total_amount):.2f}",
        "currency": quotation.currency,
        "review_url": quotation.review_url,
        "valid_until": quotation.valid_until.date().isoformat() if quotation.valid_until else None,
    })
    if not sent:
        logger.warning("Quotation %s email to client %s not delivered", quotation.quotation_number, client.id)
    return sent


async def publish_quotation_event(redis: object | None, event: str, quotation: Quotation, **extra: object) -> None:
    await publish_event(redis, event, {
        "quotation_id": quotation.id,
        "quotation_number": quotation.quotation_number,
        "status": quotation.status,
        "total_amount": str(quotation.total_amount),
        "organisation_id": quotation.organisation_id,
        "branch_id": quotation.branch_id,
        **extra,
    })
