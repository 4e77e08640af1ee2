# examesnamao_app/blueprints/payments.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify, make_response, request
from werkzeug.exceptions import HTTPException

from ..decorators import bearer_required
from ..errors import PaymentError, ValidationError
from ..schemas import (
    ACTION_CHECK_STATUS,
    ACTION_CREATE_CARD,
    ACTION_CREATE_PIX,
    parse_payment_request,
)
from ..services.cep_service import lookup_cep
from ..services.payment_service import CreditCard, HolderInfo, Payer, get_payment_service
from ..services.plan_service import BILLING_CREDIT_CARD, BILLING_PIX, get_plan, list_plans

bp = Blueprint("payments", __name__, url_prefix="/payments")

ENTRYPOINT = "payments.asaas_payment"


@bp.before_request
def _preflight_and_config():
    # preflight responde antes de qualquer checagem
    if request.method == "OPTIONS":
        return make_response("", 200)
    if request.endpoint == ENTRYPOINT:
        get_payment_service()  # ConfigError -> 500, antes da autenticação
    return None


@bp.after_request
def _cors(resp):
    cfg = current_app.config
    resp.headers["Access-Control-Allow-Origin"] = cfg.get("CORS_ALLOW_ORIGIN", "*")
    resp.headers["Access-Control-Allow-Headers"] = cfg.get("CORS_ALLOW_HEADERS", "authorization, content-type")
    resp.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    return resp


@bp.errorhandler(PaymentError)
def _payment_error(e: PaymentError):
    if e.status_code >= 500:
        current_app.logger.error("Erro no pagamento: %s", e.message)
    else:
        current_app.logger.warning("Requisição de pagamento recusada (%s): %s", e.status_code, e.message)
    return jsonify(e.to_dict()), e.status_code


@bp.errorhandler(Exception)
def _unexpected(e: Exception):
    if isinstance(e, HTTPException):
        return e
    current_app.logger.exception("Falha inesperada no pagamento")
    return jsonify({"error": str(e) or "Unknown error"}), 500


# ---------- helpers ----------
def _remote_ip() -> str | None:
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr


def _amount_and_description(req, billing_type: str):
    plan = get_plan(req.plan) if req.plan else None
    installments = getattr(req, "installment_count", None)
    if plan and installments and installments > plan.max_installments:
        raise ValidationError(
            f"O plano {plan.slug} permite no máximo {plan.max_installments} parcelas",
            field="installmentCount",
        )
    value = req.value if req.value is not None else plan.price_for(billing_type)
    description = req.description or (plan.name if plan else current_app.config["PAYMENT_DESCRIPTION"])
    return value, description


def _payer(req) -> Payer:
    return Payer(name=req.name, cpf_cnpj=req.cpf_cnpj, email=req.email, phone=req.phone, cnpj=req.cnpj)


# ---------- rotas ----------
@bp.route("", methods=["POST", "OPTIONS"])
@bearer_required
def asaas_payment():
    """Ponto de entrada único: {action: create-pix | create-credit-card | check-status, ...}."""
    req = parse_payment_request(request.get_json(silent=True))
    svc = get_payment_service()

    if req.action == ACTION_CHECK_STATUS:
        return jsonify(svc.check_status(req.payment_id).to_dict())

    if req.action == ACTION_CREATE_PIX:
        value, description = _amount_and_description(req, BILLING_PIX)
        result = svc.create_pix(_payer(req), value, description, external_reference=g.user_id)
        return jsonify(result.to_dict())

    if req.action == ACTION_CREATE_CARD:
        value, description = _amount_and_description(req, BILLING_CREDIT_CARD)
        cc, hi = req.credit_card, req.holder_info
        result = svc.create_credit_card(
            _payer(req),
            value,
            CreditCard(cc.number, cc.holder_name, cc.expiry_month, cc.expiry_year, cc.ccv),
            HolderInfo(
                name=hi.name,
                cpf_cnpj=hi.cpf_cnpj,
                postal_code=hi.postal_code,
                address_number=hi.address_number,
                email=hi.email,
                phone=hi.phone,
            ),
            description,
            external_reference=g.user_id,
            installment_count=req.installment_count,
            remote_ip=_remote_ip(),
        )
        return jsonify(result.to_dict())

    raise ValidationError("Invalid action")


@bp.route("/plans")
def plans():
    return jsonify({"success": True, "plans": [p.to_dict() for p in list_plans()]})


@bp.route("/cep/<cep>")
def cep(cep: str):
    cfg = current_app.config
    address = lookup_cep(cep, cfg["VIACEP_URL"], cfg.get("CEP_TIMEOUT", 10))
    return jsonify({"success": True, "address": address.to_dict()})
