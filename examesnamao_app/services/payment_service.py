# examesnamao_app/services/payment_service.py
# -*- coding: utf-8 -*-
"""
Orquestração de cobranças no Asaas (PIX e cartão de crédito).

Fluxo por chamada, sempre sequencial e sem retry:
documento -> cliente -> POST /payments -> (PIX) GET /payments/{id}/pixQrCode.
O Asaas é a fonte da verdade: nada do pagamento é persistido aqui.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Callable, Optional

from flask import current_app

from ..errors import ConfigError, GatewayError, ValidationError
from .asaas_client import AsaasClient
from .cep_service import normalize_cep
from .customer_service import CustomerResolver
from .document_service import (
    CNPJ_LENGTH,
    mask_document,
    only_digits,
    select_billing_document,
    validate_document,
)
from .plan_service import BILLING_CREDIT_CARD, BILLING_PIX, Number, split_installments, to_decimal

logger = logging.getLogger(__name__)

# vocabulário do Asaas para cobrança paga
SETTLED_STATUSES = {"RECEIVED", "CONFIRMED"}

# ids do Asaas: pay_xxx (letras, dígitos, _ e -); vai direto no path da URL
PAYMENT_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass
class Payer:
    name: str
    cpf_cnpj: str
    email: Optional[str] = None
    phone: Optional[str] = None
    cnpj: Optional[str] = None  # CNPJ da clínica, preferido quando válido


@dataclass
class CreditCard:
    number: str
    holder_name: str
    expiry_month: str
    expiry_year: str
    ccv: str

    def to_asaas(self) -> dict:
        return {
            "holderName": self.holder_name,
            "number": only_digits(self.number),
            "expiryMonth": self.expiry_month,
            "expiryYear": self.expiry_year,
            "ccv": self.ccv,
        }


@dataclass
class HolderInfo:
    name: str
    cpf_cnpj: str
    postal_code: str
    address_number: str
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass
class PixQrCode:
    qr_code_image: Optional[str]
    qr_code_payload: Optional[str]
    expiration_date: Optional[str]

    def to_dict(self) -> dict:
        return {
            "qrCodeImage": self.qr_code_image,
            "qrCodePayload": self.qr_code_payload,
            "expirationDate": self.expiration_date,
        }


@dataclass
class PaymentResult:
    id: str
    value: Optional[float]
    status: Optional[str]
    billing_type: str
    invoice_url: Optional[str] = None
    due_date: Optional[str] = None
    pix: Optional[PixQrCode] = None

    def to_dict(self) -> dict:
        payment = {
            "id": self.id,
            "value": self.value,
            "status": self.status,
            "invoiceUrl": self.invoice_url,
        }
        if self.billing_type == BILLING_PIX:
            payment["dueDate"] = self.due_date
            return {
                "success": True,
                "payment": payment,
                "pix": self.pix.to_dict() if self.pix else None,
            }
        return {"success": True, "payment": payment}


@dataclass
class PaymentStatus:
    status: Optional[str]
    confirmed_date: Optional[str] = None

    @property
    def settled(self) -> bool:
        return is_settled(self.status)

    def to_dict(self) -> dict:
        return {"success": True, "status": self.status, "confirmedDate": self.confirmed_date}


def is_settled(status: Optional[str]) -> bool:
    return (status or "").upper() in SETTLED_STATUSES


class PaymentService:
    def __init__(
        self,
        client: AsaasClient,
        email_domain: str = "examesnamao.com.br",
        clock: Optional[Callable[[], date]] = None,
    ):
        self.client = client
        self.customers = CustomerResolver(client)
        self.email_domain = email_domain
        self._today = clock or date.today

    # ---------- helpers ----------
    @staticmethod
    def billing_document(payer: Payer) -> str:
        digits = only_digits(payer.cpf_cnpj)
        if len(digits) == CNPJ_LENGTH:
            return select_billing_document(digits, "")
        return select_billing_document(payer.cnpj, digits)

    def _require_document(self, payer: Payer) -> str:
        document = self.billing_document(payer)
        if not document:
            raise ValidationError("CPF/CNPJ inválido ou ausente", field="cpfCnpj")
        return document

    def due_date(self) -> str:
        return (self._today() + timedelta(days=1)).isoformat()

    def _base_payload(
        self, customer_id: str, billing_type: str, value: Decimal, description: str, external_reference: str
    ) -> dict:
        return {
            "customer": customer_id,
            "billingType": billing_type,
            "value": float(value),
            "dueDate": self.due_date(),
            "description": description,
            "externalReference": external_reference,
        }

    @staticmethod
    def _result(data: dict, billing_type: str) -> PaymentResult:
        return PaymentResult(
            id=data["id"],
            value=data.get("value"),
            status=data.get("status"),
            billing_type=billing_type,
            invoice_url=data.get("invoiceUrl"),
            due_date=data.get("dueDate"),
        )

    @staticmethod
    def _check_value(value: Number) -> Decimal:
        amount = to_decimal(value)
        if amount <= 0:
            raise ValidationError("Valor da cobrança deve ser positivo", field="value")
        return amount

    # ---------- operações ----------
    def create_pix(
        self, payer: Payer, value: Number, description: str, external_reference: str
    ) -> PaymentResult:
        document = self._require_document(payer)
        amount = self._check_value(value)
        customer_id = self.customers.resolve(payer.name, document, payer.email, payer.phone)

        payload = self._base_payload(customer_id, BILLING_PIX, amount, description, external_reference)
        data = self.client.post("/payments", payload, what="payment creation")
        result = self._result(data, BILLING_PIX)
        logger.info("Cobrança PIX %s criada para %s", result.id, mask_document(document))

        # a cobrança já existe no Asaas: falha no QR não derruba a operação
        try:
            qr = self.client.get(f"/payments/{result.id}/pixQrCode", what="pix qr code")
        except GatewayError as e:
            logger.warning("QR Code PIX indisponível para %s: %s", result.id, e)
        else:
            if not isinstance(qr, dict):
                logger.warning("QR Code PIX com resposta inesperada para %s: %r", result.id, qr)
                return result
            result.pix = PixQrCode(
                qr_code_image=qr.get("encodedImage"),
                qr_code_payload=qr.get("payload"),
                expiration_date=qr.get("expirationDate"),
            )
        return result

    def create_credit_card(
        self,
        payer: Payer,
        value: Number,
        card: CreditCard,
        holder_info: HolderInfo,
        description: str,
        external_reference: str,
        installment_count: Optional[int] = None,
        remote_ip: Optional[str] = None,
    ) -> PaymentResult:
        document = self._require_document(payer)
        amount = self._check_value(value)
        postal_code = normalize_cep(holder_info.postal_code)
        holder_doc = only_digits(holder_info.cpf_cnpj)
        if holder_doc and not validate_document(holder_doc):
            raise ValidationError("CPF/CNPJ do titular do cartão inválido", field="holderInfo.cpfCnpj")
        holder_doc = holder_doc or document
        customer_id = self.customers.resolve(payer.name, document, payer.email, payer.phone)

        payload = self._base_payload(customer_id, BILLING_CREDIT_CARD, amount, description, external_reference)
        payload["creditCard"] = card.to_asaas()
        payload["creditCardHolderInfo"] = {
            "name": holder_info.name,
            "email": holder_info.email or f"{holder_doc}@{self.email_domain}",
            "cpfCnpj": holder_doc,
            "postalCode": postal_code,
            "addressNumber": holder_info.address_number,
            "phone": only_digits(holder_info.phone),
        }
        if remote_ip:
            payload["remoteIp"] = remote_ip
        if installment_count and installment_count > 1:
            payload["installmentCount"] = installment_count
            payload["installmentValue"] = float(split_installments(amount, installment_count))

        data = self.client.post("/payments", payload, what="payment creation")
        result = self._result(data, BILLING_CREDIT_CARD)
        logger.info(
            "Cobrança cartão %s criada para %s (status=%s)",
            result.id, mask_document(document), result.status,
        )
        return result

    def check_status(self, payment_id: str) -> PaymentStatus:
        if not PAYMENT_ID_RE.match(payment_id or ""):
            raise ValidationError("paymentId inválido", field="paymentId")
        data = self.client.get(f"/payments/{payment_id}", what="status check")
        return PaymentStatus(status=data.get("status"), confirmed_date=data.get("confirmedDate"))


# ---------- integração com a app ----------
def _build_service(app) -> PaymentService:
    api_key = app.config.get("ASAAS_API_KEY")
    if not api_key:
        raise ConfigError("ASAAS_API_KEY is not configured")
    client = AsaasClient(api_key, app.config["ASAAS_BASE_URL"], app.config.get("ASAAS_TIMEOUT", 30))
    return PaymentService(client, email_domain=app.config.get("PLATFORM_EMAIL_DOMAIN", "examesnamao.com.br"))


def init_payments(app):
    """Monta o serviço na inicialização; sem chave, adia o erro para a primeira chamada."""
    try:
        app.extensions["payments"] = _build_service(app)
    except ConfigError:
        app.logger.warning("ASAAS_API_KEY ausente; endpoints de pagamento vão responder 500")
        app.extensions["payments"] = None


def get_payment_service() -> PaymentService:
    svc = current_app.extensions.get("payments")
    if svc is None:
        svc = _build_service(current_app)
        current_app.extensions["payments"] = svc
    return svc
