# examesnamao_app/services/plan_service.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, ROUND_UP
from typing import Dict, List, Optional, Union

from ..errors import ValidationError

CENTS = Decimal("0.01")

BILLING_PIX = "PIX"
BILLING_CREDIT_CARD = "CREDIT_CARD"

Number = Union[Decimal, float, int, str]


def to_decimal(value: Number) -> Decimal:
    # str() evita herdar a representação binária do float
    return value if isinstance(value, Decimal) else Decimal(str(value))


def installment_value(price: Number, count: int) -> Decimal:
    """Valor da parcela arredondado PARA CIMA em centavos (count x parcela >= preço)."""
    if count < 1:
        raise ValidationError("Quantidade de parcelas inválida", field="installmentCount")
    return (to_decimal(price) / count).quantize(CENTS, rounding=ROUND_UP)


def split_installments(value: Number, count: int) -> Decimal:
    """Parcela enviada ao gateway: valor / parcelas com arredondamento comercial."""
    return (to_decimal(value) / count).quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Plan:
    slug: str
    name: str
    price: Decimal
    pix_price: Decimal
    max_installments: int = 1

    @property
    def installment_value(self) -> Decimal:
        return installment_value(self.price, self.max_installments)

    def price_for(self, billing_type: str) -> Decimal:
        return self.pix_price if billing_type == BILLING_PIX else self.price

    def to_dict(self) -> dict:
        return {
            "id": self.slug,
            "name": self.name,
            "price": float(self.price),
            "pixPrice": float(self.pix_price),
            "maxInstallments": self.max_installments,
            "installmentValue": float(self.installment_value),
        }


PLANS: Dict[str, Plan] = {
    p.slug: p
    for p in (
        Plan("mensal", "Plano Clínica Mensal", Decimal("99.90"), Decimal("94.90"), 1),
        Plan("semestral", "Plano Clínica Semestral", Decimal("299.00"), Decimal("284.00"), 6),
        Plan("anual", "Plano Clínica Anual", Decimal("479.00"), Decimal("449.00"), 12),
    )
}


def list_plans() -> List[Plan]:
    return sorted(PLANS.values(), key=lambda p: p.price)


def get_plan(slug: Optional[str]) -> Plan:
    plan = PLANS.get((slug or "").strip().lower())
    if not plan:
        raise ValidationError(f"Plano desconhecido: {slug}", field="plan")
    return plan
