# examesnamao_app/services/customer_service.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from typing import Optional

from .asaas_client import AsaasClient
from .document_service import mask_document, only_digits

logger = logging.getLogger(__name__)


class CustomerResolver:
    """
    Busca o cliente do Asaas pelo CPF/CNPJ; cria se não existir.

    Busca-e-cria não é atômico: duas chamadas simultâneas para o mesmo documento
    podem criar dois clientes no gateway.
    """

    def __init__(self, client: AsaasClient):
        self.client = client

    def find(self, cpf_cnpj: str) -> Optional[str]:
        data = self.client.get(
            "/customers", params={"cpfCnpj": only_digits(cpf_cnpj)}, what="customer search"
        )
        matches = (data or {}).get("data") or []
        return matches[0]["id"] if matches else None

    def resolve(
        self,
        name: str,
        cpf_cnpj: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> str:
        existing = self.find(cpf_cnpj)
        if existing:
            logger.info("Cliente Asaas reaproveitado %s (%s)", existing, mask_document(cpf_cnpj))
            return existing

        payload = {"name": name, "cpfCnpj": only_digits(cpf_cnpj)}
        if email:
            payload["email"] = email
        if phone:
            payload["mobilePhone"] = only_digits(phone)
        created = self.client.post("/customers", payload, what="customer creation")
        logger.info("Cliente Asaas criado %s (%s)", created["id"], mask_document(cpf_cnpj))
        return created["id"]
