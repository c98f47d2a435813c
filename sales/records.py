from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from core.records.base import pick, to_datetime, to_decimal, to_int
from core.records.user import User


class OrderStatus:
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    choices = [
        (PENDING, "Pending"),
        (PROCESSING, "Processing"),
        (SHIPPED, "Shipped"),
        (DELIVERED, "Delivered"),
        (CANCELLED, "Cancelled"),
        (REFUNDED, "Refunded"),
    ]

    # Once here, the order can no longer be cancelled from the console.
    FINAL = (DELIVERED, CANCELLED, REFUNDED)


class PaymentStatus:
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"

    choices = [
        (PENDING, "Pending"),
        (PAID, "Paid"),
        (FAILED, "Failed"),
        (REFUNDED, "Refunded"),
    ]


@dataclass(frozen=True)
class Address:
    first_name: str = ""
    last_name: str = ""
    company: str = ""
    address1: str = ""
    address2: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""
    phone: str = ""

    @classmethod
    def from_api(cls, data: dict | None) -> "Address":
        data = data or {}
        return cls(
            first_name=pick(data, "firstName", "first_name", default=""),
            last_name=pick(data, "lastName", "last_name", default=""),
            company=pick(data, "company", default=""),
            address1=pick(data, "address1", default=""),
            address2=pick(data, "address2", default=""),
            city=pick(data, "city", default=""),
            state=pick(data, "state", default=""),
            postal_code=pick(data, "postalCode", "postal_code", default=""),
            country=pick(data, "country", default=""),
            phone=pick(data, "phone", default=""),
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def lines(self) -> list[str]:
        city_line = " ".join(part for part in (self.city, self.state, self.postal_code) if part)
        return [line for line in (self.full_name, self.company, self.address1, self.address2,
                                  city_line, self.country) if line]


@dataclass(frozen=True)
class OrderItem:
    id: int
    product_id: int | None
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    product_name: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "OrderItem":
        product = pick(data, "product") or {}
        return cls(
            id=to_int(pick(data, "id")),
            product_id=to_int(pick(data, "productId", "product_id")),
            quantity=to_int(pick(data, "quantity"), 0),
            unit_price=to_decimal(pick(data, "unitPrice", "unit_price")),
            total_price=to_decimal(pick(data, "totalPrice", "total_price")),
            product_name=product.get("name", "") if isinstance(product, dict) else "",
        )


@dataclass(frozen=True)
class Order:
    id: int
    order_number: str
    status: str = OrderStatus.PENDING
    payment_status: str = PaymentStatus.PENDING
    payment_method: str = ""
    total_amount: Decimal = Decimal("0")
    shipping_amount: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    user_id: int | None = None
    user: User | None = None
    shipping_address: Address = field(default_factory=Address)
    billing_address: Address = field(default_factory=Address)
    notes: str = ""
    items: list[OrderItem] = field(default_factory=list)
    created_at: datetime | None = None

    @classmethod
    def from_api(cls, data: dict) -> "Order":
        user = pick(data, "user")
        return cls(
            id=to_int(pick(data, "id")),
            order_number=pick(data, "orderNumber", "order_number", default=""),
            status=pick(data, "status", default=OrderStatus.PENDING),
            payment_status=pick(data, "paymentStatus", "payment_status", default=PaymentStatus.PENDING),
            payment_method=pick(data, "paymentMethod", "payment_method", default=""),
            total_amount=to_decimal(pick(data, "totalAmount", "total_amount")),
            shipping_amount=to_decimal(pick(data, "shippingAmount", "shipping_amount")),
            tax_amount=to_decimal(pick(data, "taxAmount", "tax_amount")),
            discount_amount=to_decimal(pick(data, "discountAmount", "discount_amount")),
            user_id=to_int(pick(data, "userId", "user_id")),
            user=User.from_api(user) if isinstance(user, dict) else None,
            shipping_address=Address.from_api(pick(data, "shippingAddress", "shipping_address")),
            billing_address=Address.from_api(pick(data, "billingAddress", "billing_address")),
            notes=pick(data, "notes", default=""),
            items=[OrderItem.from_api(i) for i in pick(data, "items", default=[])],
            created_at=to_datetime(pick(data, "createdAt", "created_at")),
        )

    @property
    def customer_name(self) -> str:
        return self.shipping_address.full_name or (self.user.full_name if self.user else "")

    @property
    def can_cancel(self) -> bool:
        return self.status not in OrderStatus.FINAL
