"""
Catalog Service - listing, review updates and price suggestions for stored products.
"""
import logging
from typing import Optional

from sqlalchemy import case, func, literal, or_, select, update

from ..engine.errors import ProductNotFoundError
from ..engine.models import Product, ProductStatus, PriceSuggestion
from ..engine.suggestions import suggest, MARKUP_BASE
from ..store.database import Database, products

logger = logging.getLogger(__name__)

# Fields a reviewer may change on a product
UPDATABLE_FIELDS = ('new_price', 'status', 'manual_flag')


class CatalogService:
    """Service for reading and reviewing products."""

    def __init__(
        self,
        database: Database,
        markup: float = MARKUP_BASE,
        default_page_size: int = 50,
        max_page_size: int = 500,
    ):
        self.database = database
        self.markup = markup
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    def list_products(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        status: str = ProductStatus.PENDING.value,
        q: str = '',
    ) -> dict:
        """
        List products one page at a time.

        Args:
            page: 1-based page number
            limit: Page size, capped at max_page_size; default_page_size when None
            status: Status filter, or "all" for every product
            q: Whitespace-separated terms; each must match sku or name

        Returns:
            Dict with "data" (product dicts) and "meta" (total, page, limit)
        """
        page = max(int(page), 1)
        if limit is None:
            limit = self.default_page_size
        limit = min(max(int(limit), 1), self.max_page_size)
        offset = (page - 1) * limit

        conditions = []
        if status != 'all':
            conditions.append(products.c.status == ProductStatus(status).value)

        for term in (q or '').split():
            pattern = f"%{term}%"
            conditions.append(or_(
                func.lower(products.c.sku).like(func.lower(pattern)),
                func.lower(products.c.name).like(func.lower(pattern)),
            ))

        daily_loss = (
            products.c.current_price * literal(0.05) * (products.c.sales_qty / literal(365.0))
        )
        abc_rank = case(
            (products.c.abc_margin == 'A', 1),
            (products.c.abc_margin == 'B', 2),
            (products.c.abc_margin == 'C', 3),
            else_=4,
        )

        data_query = (
            select(products)
            .where(*conditions)
            .order_by(abc_rank.asc(), daily_loss.desc())
            .limit(limit)
            .offset(offset)
        )
        count_query = select(func.count()).select_from(products).where(*conditions)

        with self.database.connect() as conn:
            total = conn.execute(count_query).scalar_one()
            rows = conn.execute(data_query).mappings().all()

        logger.debug("Listed %d of %d products (status=%s, q=%r)", len(rows), total, status, q)
        return {
            'data': [Product.from_row(row).to_dict() for row in rows],
            'meta': {'total': total, 'page': page, 'limit': limit},
        }

    def get_product(self, sku: str) -> Product:
        """Get a single product by SKU."""
        with self.database.connect() as conn:
            row = conn.execute(
                select(products).where(products.c.sku == sku)
            ).mappings().first()
        if row is None:
            raise ProductNotFoundError(sku)
        return Product.from_row(row)

    def update_product(self, sku: str, updates: dict) -> Product:
        """
        Apply a partial review update.

        Only new_price, status and manual_flag are applied; other keys are ignored.
        An update with none of them leaves the product unchanged.
        """
        values = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS}
        if 'status' in values:
            values['status'] = ProductStatus(values['status']).value
        if 'manual_flag' in values:
            values['manual_flag'] = bool(values['manual_flag'])

        with self.database.begin() as conn:
            exists = conn.execute(
                select(products.c.sku).where(products.c.sku == sku)
            ).first()
            if exists is None:
                raise ProductNotFoundError(sku)
            if values:
                conn.execute(update(products).where(products.c.sku == sku).values(**values))

        if values:
            logger.info("Updated product %s: %s", sku, values)
        return self.get_product(sku)

    def approve(self, sku: str, new_price: float) -> Product:
        return self.update_product(sku, {'new_price': new_price, 'status': ProductStatus.APPROVED})

    def defer(self, sku: str) -> Product:
        return self.update_product(sku, {'status': ProductStatus.DEFERRED})

    def reset(self, sku: str) -> Product:
        return self.update_product(sku, {'status': ProductStatus.PENDING, 'new_price': None})

    def suggestions_for(self, sku: str) -> PriceSuggestion:
        """Suggested prices for a stored product's current price."""
        product = self.get_product(sku)
        return suggest(product.current_price, self.markup)

    def count_by_status(self) -> dict[str, int]:
        """Number of products in each review status."""
        query = select(products.c.status, func.count()).group_by(products.c.status)
        with self.database.connect() as conn:
            counts = {status: count for status, count in conn.execute(query)}
        return {s.value: counts.get(s.value, 0) for s in ProductStatus}

    def find_by_status(self, status: ProductStatus) -> list[Product]:
        with self.database.connect() as conn:
            rows = conn.execute(
                select(products).where(products.c.status == status.value).order_by(products.c.sku)
            ).mappings().all()
        return [Product.from_row(row) for row in rows]
