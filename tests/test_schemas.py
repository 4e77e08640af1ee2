# tests/test_schemas.py
from decimal import Decimal

import pytest

from examesnamao_app.errors import ValidationError
from examesnamao_app.schemas import (
    CheckStatusRequest,
    CreateCreditCardRequest,
    CreatePixRequest,
    parse_payment_request,
)


def test_each_action_maps_to_its_model():
    pix = parse_payment_request({"action": "create-pix", "name": "A", "cpfCnpj": "52998224725", "value": 10})
    assert isinstance(pix, CreatePixRequest)
    assert pix.cpf_cnpj == "52998224725"
    assert pix.value == Decimal("10")

    st = parse_payment_request({"action": "check-status", "paymentId": "pay_1"})
    assert isinstance(st, CheckStatusRequest)
    assert st.payment_id == "pay_1"


def test_card_request_nested_blocks():
    req = parse_payment_request({
        "action": "create-credit-card",
        "name": "A",
        "cpfCnpj": "52998224725",
        "value": "479.00",
        "installmentCount": 3,
        "creditCard": {"number": "4444444444444444", "holderName": "A", "expiryMonth": "01",
                       "expiryYear": "2031", "ccv": "999"},
        "holderInfo": {"name": "A", "cpfCnpj": "52998224725", "postalCode": "01001000",
                       "addressNumber": 12},
    })
    assert isinstance(req, CreateCreditCardRequest)
    assert req.installment_count == 3
    assert req.holder_info.address_number == "12"
    assert req.credit_card.holder_name == "A"


@pytest.mark.parametrize("body", [None, [], "create-pix", {}, {"action": "CREATE-PIX"}, {"action": "refund"}])
def test_unknown_or_missing_action(body):
    with pytest.raises(ValidationError) as exc:
        parse_payment_request(body)
    assert exc.value.message == "Invalid action"


def test_field_error_reports_camel_case_field():
    with pytest.raises(ValidationError) as exc:
        parse_payment_request({"action": "check-status", "paymentId": ""})
    assert exc.value.field == "paymentId"


def test_negative_value_rejected():
    with pytest.raises(ValidationError) as exc:
        parse_payment_request({"action": "create-pix", "name": "A", "cpfCnpj": "52998224725", "value": -1})
    assert exc.value.field == "value"


def test_installment_count_bounds():
    base = {
        "action": "create-credit-card", "name": "A", "cpfCnpj": "52998224725", "value": 10,
        "creditCard": {"number": "4444444444444444", "holderName": "A", "expiryMonth": "01",
                       "expiryYear": "2031", "ccv": "999"},
        "holderInfo": {"name": "A", "cpfCnpj": "52998224725", "postalCode": "01001000",
                       "addressNumber": "1"},
    }
    with pytest.raises(ValidationError) as exc:
        parse_payment_request(dict(base, installmentCount=0))
    assert exc.value.field == "installmentCount"


def test_payment_id_must_be_a_plain_gateway_id():
    with pytest.raises(ValidationError) as exc:
        parse_payment_request({"action": "check-status", "paymentId": "../customers"})
    assert exc.value.field == "paymentId"
