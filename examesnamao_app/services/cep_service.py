# examesnamao_app/services/cep_service.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass

import requests

from ..errors import GatewayError, ValidationError
from .document_service import only_digits


@dataclass
class Address:
    postal_code: str
    street: str = ""
    neighborhood: str = ""
    city: str = ""
    state: str = ""

    def to_dict(self) -> dict:
        return {
            "postalCode": self.postal_code,
            "street": self.street,
            "neighborhood": self.neighborhood,
            "city": self.city,
            "state": self.state,
        }


def normalize_cep(cep: str) -> str:
    digits = only_digits(cep)
    if len(digits) != 8:
        raise ValidationError("CEP inválido", field="postalCode")
    return digits


def lookup_cep(cep: str, base_url: str = "https://viacep.com.br/ws", timeout: float = 10) -> Address:
    """Resolve logradouro/bairro/cidade/UF a partir do CEP (ViaCEP)."""
    digits = normalize_cep(cep)
    url = f"{base_url.rstrip('/')}/{digits}/json/"
    try:
        resp = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise GatewayError(f"ViaCEP lookup failed: {e}") from e
    if resp.status_code != 200:
        raise GatewayError(
            f"ViaCEP lookup failed [{resp.status_code}]: {resp.text}",
            status=resp.status_code,
            body=resp.text or "",
        )
    data = resp.json() or {}
    # ViaCEP responde 200 com {"erro": true} para CEP inexistente
    if data.get("erro"):
        raise ValidationError("CEP não encontrado", field="postalCode")
    return Address(
        postal_code=digits,
        street=data.get("logradouro", ""),
        neighborhood=data.get("bairro", ""),
        city=data.get("localidade", ""),
        state=data.get("uf", ""),
    )
