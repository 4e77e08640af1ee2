# examesnamao_app/errors.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Optional


class PaymentError(Exception):
    """Base dos erros do fluxo de pagamento (carrega o status HTTP de resposta)."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(PaymentError):
    """Entrada inválida detectada localmente; nunca chega ao gateway."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.field:
            data["field"] = self.field
        return data


class GatewayError(PaymentError):
    """Resposta não-2xx (ou falha de transporte) do Asaas. status=None => sem resposta."""

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class AuthError(PaymentError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)

    def to_dict(self) -> dict:
        # o motivo fica só no log
        return {"error": "Unauthorized"}


class ConfigError(PaymentError):
    """Segredo obrigatório ausente no servidor."""
