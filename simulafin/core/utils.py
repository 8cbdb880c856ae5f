"""Brazilian formatting helpers: CPF, BRL currency and Brasilia time."""
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional, Union
import numbers
import re


def only_digits(value: str) -> str:
    return re.sub(r'\D', '', value or "")


def format_cpf(cpf: str) -> str:
    """
    Formats an 11-digit CPF as 000.000.000-00.
    Values that are not 11 digits are returned unchanged.
    """
    digits = only_digits(cpf)
    if len(digits) != 11:
        return cpf
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def mask_cpf(cpf: str) -> str:
    """
    Masks a CPF for logs and listings.
    CPF: ***.123.456-**
    """
    digits = only_digits(cpf)
    if len(digits) == 11:
        return f"***.{digits[3:6]}.{digits[6:9]}-**"
    return f"{cpf[:3]}***{cpf[-2:]}" if cpf else ""


def round_money(value: float) -> float:
    return round(value, 2)


def format_brl(value: float, decimals: int = 2) -> str:
    """
    Formats a number as Brazilian Real, e.g. 1234567.8 -> 'R$ 1.234.567,80'.
    """
    sign = "-" if value < 0 else ""
    formatted = f"{abs(value):,.{decimals}f}"
    # Swap the US separators for the pt-BR ones
    formatted = formatted.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {formatted}"


def parse_brl(value: Union[str, numbers.Real, Decimal, None]) -> Optional[float]:
    """
    Parses a BRL display string ('R$ 500.000', '500.000,50') or a plain number.
    In display strings dots are thousand separators and the comma is the decimal separator.
    Returns None when no number can be extracted, including for non-numeric types.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (numbers.Real, Decimal)):
        return float(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    # Machine-formatted decimals such as '1500.5' or '-10'
    if re.fullmatch(r'-?\d+(\.\d{1,2})?', text):
        return float(text)

    cleaned = re.sub(r'[^\d,]', '', text)
    if not cleaned.strip(',') or cleaned.count(',') > 1:
        return None
    number = float(cleaned.replace(',', '.'))
    return -number if '-' in text else number


def format_brasilia_time(dt: datetime) -> str:
    """
    Converts a UTC datetime to Brasilia time (UTC-3).
    Format: DD/MM/YYYY HH:mm:ss
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    # Brasilia is UTC-3 (DST was abolished)
    brasilia_tz = timezone(timedelta(hours=-3))
    return dt.astimezone(brasilia_tz).strftime("%d/%m/%Y %H:%M:%S")
