# examesnamao_app/extensions.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import sys

import click

from .errors import PaymentError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def init_extensions(app):
    # Logging (app.logger + loggers dos serviços)
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(format=LOG_FORMAT, level=level)
    app.logger.setLevel(level)
    logging.getLogger("examesnamao_app").setLevel(level)
    # urllib3 loga cada requisição ao gateway em DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def register_cli(app):
    from .services.document_service import mask_document, only_digits, validate_document
    from .services.payment_service import get_payment_service
    from .services.plan_service import list_plans

    @app.cli.command("validate-document")
    @click.argument("document")
    def validate_document_cmd(document):
        """Valida um CPF/CNPJ (dígitos verificadores)."""
        ok = validate_document(document)
        kind = "CNPJ" if len(only_digits(document)) > 11 else "CPF"
        click.echo(f"{kind} {mask_document(document)}: {'válido' if ok else 'inválido'}")
        if not ok:
            sys.exit(1)

    @app.cli.command("plans")
    def plans_cmd():
        """Lista os planos e o valor das parcelas."""
        for p in list_plans():
            click.echo(
                f"{p.slug:<10} R$ {p.price:>7} | PIX R$ {p.pix_price:>7} | "
                f"até {p.max_installments}x de R$ {p.installment_value}"
            )

    @app.cli.command("payment-status")
    @click.argument("payment_id")
    def payment_status_cmd(payment_id):
        """Consulta o status de uma cobrança no Asaas."""
        try:
            st = get_payment_service().check_status(payment_id)
        except PaymentError as e:
            click.echo(f"Erro: {e.message}", err=True)
            sys.exit(1)
        click.echo(f"{payment_id}: {st.status} ({'pago' if st.settled else 'em aberto'})")
        if st.confirmed_date:
            click.echo(f"confirmado em {st.confirmed_date}")
