# examesnamao_app/services/document_service.py
# -*- coding: utf-8 -*-
"""Validação de CPF/CNPJ (dígitos verificadores módulo 11) e máscaras de exibição."""
from __future__ import annotations

import re
from typing import Optional, Sequence

CPF_LENGTH = 11
CNPJ_LENGTH = 14

CNPJ_WEIGHTS_1 = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
CNPJ_WEIGHTS_2 = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)


def only_digits(value: Optional[str]) -> str:
    if value is None:
        return ""
    return re.sub(r"\D", "", str(value))


def _check_digit(digits: str, weights: Sequence[int]) -> int:
    total = sum(int(d) * w for d, w in zip(digits, weights))
    rest = (total * 10) % 11
    return 0 if rest >= 10 else rest


def _is_repeated(digits: str) -> bool:
    return len(set(digits)) == 1


def validate_cpf(value: Optional[str]) -> bool:
    digits = only_digits(value)
    if len(digits) != CPF_LENGTH or _is_repeated(digits):
        return False
    d1 = _check_digit(digits[:9], range(10, 1, -1))
    if d1 != int(digits[9]):
        return False
    d2 = _check_digit(digits[:10], range(11, 1, -1))
    return d2 == int(digits[10])


def validate_cnpj(value: Optional[str]) -> bool:
    digits = only_digits(value)
    if len(digits) != CNPJ_LENGTH or _is_repeated(digits):
        return False
    d1 = _check_digit(digits[:12], CNPJ_WEIGHTS_1)
    if d1 != int(digits[12]):
        return False
    d2 = _check_digit(digits[:13], CNPJ_WEIGHTS_2)
    return d2 == int(digits[13])


def validate_document(value: Optional[str]) -> bool:
    """CPF ou CNPJ, conforme a quantidade de dígitos."""
    digits = only_digits(value)
    if len(digits) == CNPJ_LENGTH:
        return validate_cnpj(digits)
    return validate_cpf(digits)


def select_billing_document(business_id: Optional[str], personal_id: Optional[str]) -> str:
    """
    Escolhe o documento de cobrança: CNPJ tem preferência; se ausente ou inválido,
    cai para o CPF. Retorna "" quando nenhum dos dois é utilizável.
    """
    cnpj = only_digits(business_id)
    if cnpj and validate_cnpj(cnpj):
        return cnpj
    cpf = only_digits(personal_id)
    if cpf and validate_cpf(cpf):
        return cpf
    return ""


# ---------- máscaras (apenas exibição/log) ----------
def mask_cpf(value: Optional[str]) -> str:
    digits = only_digits(value)[:CPF_LENGTH]
    digits = re.sub(r"(\d{3})(\d)", r"\1.\2", digits, count=1)
    digits = re.sub(r"(\d{3})(\d)", r"\1.\2", digits, count=1)
    return re.sub(r"(\d{3})(\d{1,2})$", r"\1-\2", digits, count=1)


def mask_cnpj(value: Optional[str]) -> str:
    digits = only_digits(value)[:CNPJ_LENGTH]
    digits = re.sub(r"^(\d{2})(\d)", r"\1.\2", digits, count=1)
    digits = re.sub(r"^(\d{2})\.(\d{3})(\d)", r"\1.\2.\3", digits, count=1)
    digits = re.sub(r"\.(\d{3})(\d)", r".\1/\2", digits, count=1)
    return re.sub(r"(\d{4})(\d)", r"\1-\2", digits, count=1)


def mask_phone(value: Optional[str]) -> str:
    digits = only_digits(value)[:11]
    if not digits:
        return ""
    if len(digits) <= 2:
        return f"({digits}"
    if len(digits) <= 6:
        return f"({digits[:2]}) {digits[2:]}"
    if len(digits) <= 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"


def mask_document(value: Optional[str]) -> str:
    digits = only_digits(value)
    if len(digits) > CPF_LENGTH:
        return mask_cnpj(digits)
    return mask_cpf(digits)
