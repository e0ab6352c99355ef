"""Shared validation utilities"""

import re
from datetime import date, datetime
from typing import Optional

from fastapi import HTTPException

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


def validate_us_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize US phone number to E.164 format.

    Args:
        phone: Phone number string in various formats

    Returns:
        Normalized phone number in E.164 format (+1XXXXXXXXXX)

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    digits = re.sub(r"\D", "", phone)

    # Handle +1 prefix
    if digits.startswith("1") and len(digits) == 11:
        digits = digits[1:]

    if len(digits) != 10:
        raise ValueError("Phone number must be 10 digits for US numbers")

    return f"+1{digits}"


def parse_date(value: str) -> date:
    """Parse a strict YYYY-MM-DD string"""
    if not value or not DATE_PATTERN.match(value):
        raise ValueError("date must be in YYYY-MM-DD format")
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_month(value: str) -> tuple[int, int]:
    """Parse YYYY-MM into (year, month)"""
    if not value or not MONTH_PATTERN.match(value):
        raise ValueError("month must be in YYYY-MM format")
    year, month = (int(part) for part in value.split("-"))
    if not 1 <= month <= 12:
        raise ValueError("month must be in YYYY-MM format")
    return year, month


def validate_time(value: str) -> str:
    """Validate a 24-hour HH:MM string"""
    if not value or not TIME_PATTERN.match(value):
        raise ValueError("time must be in HH:MM format")
    return value


def validate_hex_color(value: str) -> str:
    if not HEX_COLOR_PATTERN.match(value or ""):
        raise ValueError("color must be a hex value like #3B82F6")
    return value.upper()


def require_date(value: str) -> date:
    """parse_date for query parameters: a bad value is the caller's error (400)"""
    try:
        return parse_date(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def require_time(value: str) -> str:
    try:
        return validate_time(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
