# examesnamao_app/services/asaas_client.py
# -*- coding: utf-8 -*-
"""Cliente HTTP mínimo da API v3 do Asaas. Uma tentativa por chamada, sem retry."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from ..errors import GatewayError

logger = logging.getLogger(__name__)

USER_AGENT = "examesnamao-payments/1.0"


class AsaasClient:
    def __init__(self, api_key: str, base_url: str, timeout: float = 30.0):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
            "access_token": self.api_key,
        }

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _handle(self, resp, what: str) -> Any:
        if not 200 <= resp.status_code < 300:
            body = resp.text or ""
            logger.warning("Asaas %s falhou [%s]", what, resp.status_code)
            raise GatewayError(
                f"Asaas {what} failed [{resp.status_code}]: {body}",
                status=resp.status_code,
                body=body,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise GatewayError(
                f"Asaas {what} returned invalid JSON [{resp.status_code}]: {resp.text}",
                status=resp.status_code,
                body=resp.text or "",
            ) from e

    def get(self, path: str, params: Optional[Dict[str, Any]] = None, what: str = "request") -> Any:
        try:
            resp = requests.get(
                self._url(path), headers=self._headers(), params=params, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise GatewayError(f"Asaas {what} failed: {e}") from e
        return self._handle(resp, what)

    def post(self, path: str, payload: Dict[str, Any], what: str = "request") -> Any:
        try:
            resp = requests.post(
                self._url(path), headers=self._headers(), json=payload, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise GatewayError(f"Asaas {what} failed: {e}") from e
        return self._handle(resp, what)
