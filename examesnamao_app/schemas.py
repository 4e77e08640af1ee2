# examesnamao_app/schemas.py
# -*- coding: utf-8 -*-
"""Payloads do endpoint de pagamentos: união fechada discriminada por `action`."""
from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .errors import ValidationError

ACTION_CREATE_PIX = "create-pix"
ACTION_CREATE_CARD = "create-credit-card"
ACTION_CHECK_STATUS = "check-status"
ACTIONS = (ACTION_CREATE_PIX, ACTION_CREATE_CARD, ACTION_CHECK_STATUS)


class _Payload(BaseModel):
    # JSON em camelCase (cpfCnpj, holderInfo...), atributos em snake_case
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class CreditCardIn(_Payload):
    number: str = Field(min_length=12)
    holder_name: str = Field(min_length=1)
    expiry_month: str = Field(min_length=1, max_length=2)
    expiry_year: str = Field(min_length=2, max_length=4)
    ccv: str = Field(min_length=3, max_length=4)

    @field_validator("number", "expiry_month", "expiry_year", "ccv", mode="before")
    @classmethod
    def _as_text(cls, v):
        # o app às vezes manda mês/ano como número
        return str(v) if isinstance(v, int) else v


class HolderInfoIn(_Payload):
    name: str = Field(min_length=1)
    cpf_cnpj: str = Field(min_length=11)
    postal_code: str = Field(min_length=8)
    address_number: str = Field(min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("address_number", mode="before")
    @classmethod
    def _number_as_text(cls, v):
        return str(v) if isinstance(v, int) else v


class _CreatePayment(_Payload):
    name: str = Field(min_length=1)
    cpf_cnpj: str = Field(min_length=1)
    cnpj: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = ""
    value: Optional[Decimal] = Field(default=None, gt=0)
    plan: Optional[str] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def _value_or_plan(self):
        if self.value is None and not self.plan:
            raise ValueError("informe value ou plan")
        return self


class CreatePixRequest(_CreatePayment):
    action: Literal["create-pix"]


class CreateCreditCardRequest(_CreatePayment):
    action: Literal["create-credit-card"]
    credit_card: CreditCardIn
    holder_info: HolderInfoIn
    installment_count: Optional[int] = Field(default=None, ge=1, le=21)


class CheckStatusRequest(_Payload):
    action: Literal["check-status"]
    payment_id: str = Field(min_length=1, pattern=r"^[A-Za-z0-9_-]+$")


PaymentRequest = Annotated[
    Union[CreatePixRequest, CreateCreditCardRequest, CheckStatusRequest],
    Field(discriminator="action"),
]

_request_adapter = TypeAdapter(PaymentRequest)


def _describe(err: dict, action: str) -> str:
    loc = [str(p) for p in err.get("loc", ()) if str(p) != action]
    return ".".join(loc)


def parse_payment_request(body) -> Union[CreatePixRequest, CreateCreditCardRequest, CheckStatusRequest]:
    """Valida o corpo da requisição; ação desconhecida vira 'Invalid action'."""
    if not isinstance(body, dict) or body.get("action") not in ACTIONS:
        raise ValidationError("Invalid action")
    try:
        return _request_adapter.validate_python(body)
    except PydanticValidationError as e:
        err = e.errors()[0]
        field = _describe(err, body["action"])
        message = f"{field}: {err.get('msg')}" if field else str(err.get("msg"))
        raise ValidationError(f"Dados inválidos - {message}", field=field or None) from e
