# tests/conftest.py
# -*- coding: utf-8 -*-
import os
import sys
import json
import time
import pathlib
from datetime import date

import pytest

# =====================================================================================
# Localização do projeto (garante que "examesnamao_app" e "config" estejam no sys.path)
# =====================================================================================
PROJECT_ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ["APP_ENV"] = "testing"

ASAAS_URL = "https://asaas.test/v3"
VIACEP_URL = "https://viacep.test/ws"
JWT_SECRET = "test-jwt-secret"

VALID_CPF = "52998224725"
VALID_CNPJ = "11444777000161"


# =====================================================================================
# Fake HTTP (Asaas + ViaCEP): substitui requests.get/post, sem rede
# =====================================================================================
class _Resp:
    def __init__(self, status_code=200, json_data=None, text=None):
        self.status_code = status_code
        self._json = json_data
        if text is None:
            text = json.dumps(json_data) if json_data is not None else ""
        self.text = text

    def json(self):
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json


class FakeHttp:
    """Asaas/ViaCEP em memória. `calls` guarda (método, caminho, params|json)."""

    def __init__(self):
        self.calls = []
        self.customers = {}   # cpfCnpj -> id
        self.payments = {}    # id -> payload enviado
        self.failures = {}    # (método, caminho) -> _Resp
        self.ceps = {
            "01001000": {
                "cep": "01001-000", "logradouro": "Praça da Sé", "bairro": "Sé",
                "localidade": "São Paulo", "uf": "SP",
            },
        }
        self.qr = {
            "encodedImage": "iVBORw0KGgoAAAANSUhEUg==",
            "payload": "00020126580014br.gov.bcb.pix",
            "expirationDate": "2026-10-20 23:59:59",
        }
        self.payment_status = "PENDING"

    # ---------- helpers ----------
    def fail(self, method, path, status=400, text='{"errors":[{"code":"invalid","description":"erro"}]}'):
        self.failures[(method, path)] = _Resp(status, None, text)

    def respond(self, method, path, json_data, status=200):
        # resposta fixa para (método, caminho), ex.: corpo 2xx fora do formato
        self.failures[(method, path)] = _Resp(status, json_data)

    def asaas_calls(self, method=None):
        return [c for c in self.calls if c[0] != "VIACEP" and (method is None or c[0] == method)]

    @staticmethod
    def _path(url):
        for base in (ASAAS_URL, VIACEP_URL):
            if url.startswith(base):
                return url[len(base):]
        raise AssertionError(f"URL inesperada: {url}")

    # ---------- requests.get / requests.post ----------
    def get(self, url, headers=None, params=None, timeout=None, **kw):
        if url.startswith(VIACEP_URL):
            cep = self._path(url).strip("/").split("/")[0]
            self.calls.append(("VIACEP", cep, None))
            if ("GET", f"/cep/{cep}") in self.failures:
                return self.failures[("GET", f"/cep/{cep}")]
            return _Resp(200, self.ceps.get(cep, {"erro": True}))

        path = self._path(url)
        self.calls.append(("GET", path, params))
        if ("GET", path) in self.failures:
            return self.failures[("GET", path)]

        if path == "/customers":
            doc = (params or {}).get("cpfCnpj")
            data = [{"id": self.customers[doc], "cpfCnpj": doc}] if doc in self.customers else []
            return _Resp(200, {"object": "list", "totalCount": len(data), "data": data})
        if path.endswith("/pixQrCode"):
            return _Resp(200, dict(self.qr, success=True))
        if path.startswith("/payments/"):
            pid = path.split("/")[2]
            if pid not in self.payments:
                return _Resp(404, None, "")
            confirmed = "2026-10-20" if self.payment_status in ("CONFIRMED", "RECEIVED") else None
            return _Resp(200, {"id": pid, "status": self.payment_status, "confirmedDate": confirmed})
        return _Resp(404, None, "")

    def post(self, url, headers=None, json=None, timeout=None, **kw):
        path = self._path(url)
        self.calls.append(("POST", path, json))
        if ("POST", path) in self.failures:
            return self.failures[("POST", path)]

        if path == "/customers":
            cid = f"cus_{len(self.customers) + 1:06d}"
            self.customers[json["cpfCnpj"]] = cid
            return _Resp(200, {"id": cid, "name": json["name"], "cpfCnpj": json["cpfCnpj"]})
        if path == "/payments":
            pid = f"pay_{len(self.payments) + 1}"
            self.payments[pid] = json
            status = "CONFIRMED" if json["billingType"] == "CREDIT_CARD" else "PENDING"
            return _Resp(200, {
                "id": pid,
                "customer": json["customer"],
                "value": json["value"],
                "status": status,
                "billingType": json["billingType"],
                "dueDate": json["dueDate"],
                "invoiceUrl": f"https://asaas.test/i/{pid}",
            })
        return _Resp(404, None, "")


@pytest.fixture(autouse=True)
def fake_http(monkeypatch):
    import requests

    fake = FakeHttp()
    monkeypatch.setattr(requests, "get", fake.get, raising=False)
    monkeypatch.setattr(requests, "post", fake.post, raising=False)
    yield fake


# =====================================================================================
# App Flask
# =====================================================================================
@pytest.fixture
def app():
    from config import TestingConfig
    from examesnamao_app import create_app

    # TestingConfig já aponta para asaas.test / viacep.test / test-jwt-secret
    app = create_app(TestingConfig)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


def make_token(sub="user-123", secret=JWT_SECRET, aud="authenticated", expires_in=3600, **extra):
    from jose import jwt

    claims = {"aud": aud, "exp": int(time.time()) + expires_in, "role": "authenticated", **extra}
    if sub is not None:
        claims["sub"] = sub
    return jwt.encode(claims, secret, algorithm="HS256")


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}


# =====================================================================================
# Serviços isolados (sem app)
# =====================================================================================
@pytest.fixture
def asaas_client():
    from examesnamao_app.services.asaas_client import AsaasClient
    return AsaasClient("test-asaas-key", ASAAS_URL, timeout=5)


@pytest.fixture
def payment_service(asaas_client):
    from examesnamao_app.services.payment_service import PaymentService
    return PaymentService(asaas_client, email_domain="examesnamao.com.br", clock=lambda: date(2026, 10, 19))


@pytest.fixture
def payer():
    from examesnamao_app.services.payment_service import Payer
    return Payer(name="Clínica Boa Saúde", cpf_cnpj=VALID_CPF, email="contato@boasaude.com.br", phone="11987654321")


@pytest.fixture
def token_factory():
    return make_token
