"""
Data models for the repricing engine.

Uses dataclasses and enums for structured, type-safe data representation.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class PriceBracket(Enum):
    """
    Price range of a marked-up price, each with its own rounding rules.

    The value is the inclusive lower bound of the range.
    """
    LOW = 0
    MID = 50
    HIGH = 200
    PREMIUM = 1000

    @classmethod
    def for_price(cls, raw_price: float) -> 'PriceBracket':
        """Select the bracket a marked-up price falls into."""
        if raw_price < cls.MID.value:
            return cls.LOW
        if raw_price < cls.HIGH.value:
            return cls.MID
        if raw_price < cls.PREMIUM.value:
            return cls.HIGH
        return cls.PREMIUM


class ProductStatus(str, Enum):
    """Review workflow status of a product."""
    PENDING = 'pending'
    APPROVED = 'approved'
    DEFERRED = 'deferred'
    EXPORTED = 'exported'


@dataclass
class TraceStep:
    """A single step in the suggestion trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class PriceSuggestion:
    """Candidate prices computed for one current price."""
    current_price: float
    raw_price: float
    bracket: PriceBracket
    candidates: list[int] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace for this suggestion."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "current_price": self.current_price,
            "raw_price": self.raw_price,
            "bracket": self.bracket.name,
            "suggestions": list(self.candidates),
        }


@dataclass
class Product:
    """A catalog product under price review."""
    sku: str
    name: str
    stock: int = 0
    cost_price: float = 0.0
    current_price: float = 0.0
    sales_qty: int = 0
    abc_margin: str = 'N'
    margin_total: float = 0.0
    source_status: str = ''
    new_price: Optional[float] = None
    status: ProductStatus = ProductStatus.PENDING
    batch_id: Optional[int] = None
    manual_flag: bool = False

    @property
    def daily_loss(self) -> float:
        """Estimated revenue lost per day while the price stays unrevised."""
        return self.current_price * 0.05 * (self.sales_qty / 365.0)

    def to_dict(self) -> dict:
        """Convert to the JSON shape served by the API."""
        return {
            'sku': self.sku,
            'name': self.name,
            'stock': self.stock,
            'cost_price': self.cost_price,
            'current_price': self.current_price,
            'sales_qty': self.sales_qty,
            'abc_margin': self.abc_margin,
            'margin_total': self.margin_total,
            'source_status': self.source_status,
            'new_price': self.new_price,
            'status': self.status.value,
            'batch_id': self.batch_id,
            'manual_flag': self.manual_flag,
            'daily_loss': self.daily_loss,
        }

    @classmethod
    def from_row(cls, row) -> 'Product':
        """Create Product from a database row mapping."""
        return cls(
            sku=row['sku'],
            name=row['name'],
            stock=int(row['stock'] or 0),
            cost_price=float(row['cost_price'] or 0),
            current_price=float(row['current_price'] or 0),
            sales_qty=int(row['sales_qty'] or 0),
            abc_margin=row['abc_margin'] or 'N',
            margin_total=float(row['margin_total'] or 0),
            source_status=row['source_status'] or '',
            new_price=row['new_price'],
            status=ProductStatus(row['status'] or ProductStatus.PENDING.value),
            batch_id=row['batch_id'],
            manual_flag=bool(row['manual_flag']),
        )
