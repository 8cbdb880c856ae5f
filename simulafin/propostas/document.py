"""
Proposal document payload.

Builds the complete data structure an external renderer (PDF, e-mail) turns
into the downloadable proposal. No rendering happens here.
"""
import re
import unicodedata
from datetime import datetime, timedelta, timezone

from simulafin.core.config import settings
from simulafin.core.utils import format_brl, format_cpf, format_brasilia_time
from simulafin.financiamento.engine import MONTHS_PER_YEAR, sac_schedule
from simulafin.propostas.models import FinancingSubmission
from simulafin.propostas.schemas import (
    DocumentClient,
    DocumentFinancing,
    DocumentSignature,
    ProposalDocument,
)

TITLE = "PROPOSTA DE FINANCIAMENTO IMOBILIÁRIO"
SUBTITLE = "SimulaFin - Simulador de Financiamento"
AMORTIZATION_SYSTEM = "SAC (Sistema de Amortização Constante)"
FOOTER = [
    "Este documento foi gerado digitalmente pelo SimulaFin",
    "Para dúvidas, entre em contato conosco",
]


def _percent(rate: float) -> str:
    return f"{rate * 100:g}%"


def general_conditions() -> list:
    rate = _percent(settings.ANNUAL_INTEREST_RATE)
    return [
        f"Esta proposta tem validade de {settings.PROPOSAL_VALIDITY_DAYS} dias a partir da data de emissão.",
        "A aprovação está sujeita à análise de crédito e documentação.",
        "As parcelas são decrescentes conforme o Sistema SAC.",
        f"Taxa de juros fixa de {rate} ao ano durante todo o período.",
        f"Entrada mínima obrigatória de {settings.MIN_DOWN_PAYMENT_PERCENTAGE:g}% do valor do imóvel.",
        "Seguro habitacional obrigatório (valor não incluso na simulação).",
        "Documentação do imóvel deve estar regularizada.",
        "Renda comprovada mínima de 3x o valor da primeira parcela.",
    ]


def proposal_filename(name: str) -> str:
    """'José da Silva' -> 'proposta-financiamento-jose-da-silva.pdf'"""
    ascii_name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_name.lower()).strip("-")
    return f"proposta-financiamento-{slug or 'cliente'}.pdf"


def _as_utc(dt: datetime) -> datetime:
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt


def build_proposal_document(submission: FinancingSubmission) -> ProposalDocument:
    total_months = submission.term_years * MONTHS_PER_YEAR
    # Stored rows do not keep the rate; the product rate is fixed
    monthly_rate = settings.ANNUAL_INTEREST_RATE / MONTHS_PER_YEAR
    last_installment = 0.0
    for row in sac_schedule(submission.financed_amount, total_months, monthly_rate):
        last_installment = row.installment

    created_at = _as_utc(submission.created_at)
    cpf = format_cpf(submission.user_cpf)

    return ProposalDocument(
        submission_id=submission.id,
        filename=proposal_filename(submission.user_name),
        title=TITLE,
        subtitle=SUBTITLE,
        status=submission.status,
        valid_until=(created_at + timedelta(days=settings.PROPOSAL_VALIDITY_DAYS)).date(),
        client=DocumentClient(
            name=submission.user_name,
            cpf=cpf,
            email=submission.user_email,
            proposal_date=format_brasilia_time(created_at),
        ),
        financing=DocumentFinancing(
            property_value=format_brl(submission.property_value),
            down_payment_percentage=submission.down_payment_percentage,
            down_payment=format_brl(submission.down_payment),
            financed_amount=format_brl(submission.financed_amount),
            term_years=submission.term_years,
            total_months=total_months,
            interest_rate=f"{_percent(settings.ANNUAL_INTEREST_RATE)} ao ano",
            amortization_system=AMORTIZATION_SYSTEM,
            first_installment=format_brl(submission.monthly_payment),
            last_installment=format_brl(last_installment),
            total_interest=format_brl(submission.total_interest),
            total_amount=format_brl(submission.total_amount),
        ),
        conditions=general_conditions(),
        signature=DocumentSignature(
            image=submission.signature_data,
            signed_by=submission.user_name,
            cpf=cpf,
            signed_at=format_brasilia_time(_as_utc(submission.signed_at)),
        ),
        footer=FOOTER,
        generated_at=format_brasilia_time(datetime.now(timezone.utc)),
    )
