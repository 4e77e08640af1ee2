# config.py
# -*- coding: utf-8 -*-
import os
from dotenv import load_dotenv
load_dotenv()
BASE_DIR = os.path.abspath(os.path.dirname(__file__))

ASAAS_URLS = {
    "production": "https://api.asaas.com/v3",
    "sandbox": "https://sandbox.asaas.com/api/v3",
}


class Config:
    FLASK_ENV = os.getenv("FLASK_ENV", "development")
    FLASK_DEBUG = os.getenv("FLASK_DEBUG", "1")
    FLASK_APP = os.getenv("FLASK_APP", "examesnamao_app.wsgi")
    # Flask
    SECRET_KEY = os.getenv("SECRET_KEY", "examesnamao-dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Asaas (gateway de pagamento)
    ASAAS_API_KEY = os.getenv("ASAAS_API_KEY", "")
    ASAAS_ENVIRONMENT = os.getenv("ASAAS_ENVIRONMENT", "production").strip().lower()
    ASAAS_BASE_URL = os.getenv(
        "ASAAS_BASE_URL",
        ASAAS_URLS.get(ASAAS_ENVIRONMENT, ASAAS_URLS["production"]),
    )
    ASAAS_TIMEOUT = float(os.getenv("ASAAS_TIMEOUT", "30"))

    # JWT emitido pelo backend de autenticação (claim "sub" = id do usuário)
    AUTH_JWT_SECRET = os.getenv("AUTH_JWT_SECRET", os.getenv("SUPABASE_JWT_SECRET", ""))
    AUTH_JWT_AUDIENCE = os.getenv("AUTH_JWT_AUDIENCE", "authenticated")

    # e-mail sintético do titular do cartão quando não informado: {cpf}@<domínio>
    PLATFORM_EMAIL_DOMAIN = os.getenv("PLATFORM_EMAIL_DOMAIN", "examesnamao.com.br")
    PAYMENT_DESCRIPTION = os.getenv("PAYMENT_DESCRIPTION", "Plano Clínica - Exames na Mão")

    # ViaCEP
    VIACEP_URL = os.getenv("VIACEP_URL", "https://viacep.com.br/ws")
    CEP_TIMEOUT = float(os.getenv("CEP_TIMEOUT", "10"))

    # CORS (chamado direto do app mobile/web)
    CORS_ALLOW_ORIGIN = os.getenv("CORS_ALLOW_ORIGIN", "*")
    CORS_ALLOW_HEADERS = os.getenv(
        "CORS_ALLOW_HEADERS",
        "authorization, x-client-info, apikey, content-type",
    )

class TestingConfig(Config):
    TESTING = True
    FLASK_ENV = "testing"
    FLASK_DEBUG = "0"
    ASAAS_API_KEY = "test-asaas-key"
    ASAAS_BASE_URL = "https://asaas.test/v3"
    AUTH_JWT_SECRET = "test-jwt-secret"
    VIACEP_URL = "https://viacep.test/ws"

class StagingConfig(Config):
    FLASK_ENV = "staging"
    FLASK_DEBUG = "0"
    ASAAS_BASE_URL = os.getenv("ASAAS_BASE_URL", ASAAS_URLS["sandbox"])

class ProductionConfig(Config):
    FLASK_ENV = "production"
    FLASK_DEBUG = "0"
