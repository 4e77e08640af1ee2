# examesnamao_app/__init__.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import os

from flask import Flask
from config import Config, TestingConfig, StagingConfig, ProductionConfig
from .extensions import init_extensions, register_cli
from .services.payment_service import init_payments
from .blueprints.payments import bp as payments_bp

CONFIGS = {
    "testing": TestingConfig,
    "staging": StagingConfig,
    "production": ProductionConfig,
}


def create_app(config_object: type[Config] | None = None) -> Flask:
    app = Flask(__name__)
    if config_object is None:
        config_object = CONFIGS.get(os.getenv("APP_ENV", "").lower(), Config)
    app.config.from_object(config_object)

    # Logging + CLI
    init_extensions(app)

    # Serviço de pagamentos (Asaas) fica em app.extensions["payments"]
    init_payments(app)

    # Blueprints
    app.register_blueprint(payments_bp)

    # CLI (ex.: flask payment-status <id>)
    register_cli(app)
    return app
