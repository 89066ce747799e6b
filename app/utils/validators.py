# app/utils/validators.py
import re
from datetime import date
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# Brazilian mobile number, e.g. (11) 98765-4321
PHONE_PATTERN = re.compile(r"^\(\d{2}\) \d{5}-\d{4}$")

MIN_AGE = 16
MAX_AGE = 100


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def is_valid_phone(phone: str) -> bool:
    return bool(PHONE_PATTERN.match(phone))


def format_phone(value: str) -> str:
    """Format up to 11 typed digits as (XX) XXXXX-XXXX; longer input is returned unchanged"""
    digits = re.sub(r"\D", "", value)
    if len(digits) > 11:
        return value
    return re.sub(r"(\d{2})(\d{5})(\d{4})", r"(\1) \2-\3", digits)


def calculate_age(birth_date: date, today: Optional[date] = None) -> int:
    """Age in whole years, counting a birthday only once it has been reached"""
    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def add_years(value: date, years: int) -> date:
    """Same calendar day ``years`` later; 29 February falls back to 28 February"""
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        return value.replace(year=value.year + years, day=28)
