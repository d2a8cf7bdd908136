"""RSVP ticket and reference number generation"""

import re
import secrets
import string
from typing import Optional

TICKET_PREFIX = "WO"
TICKET_SEQUENCE_DIGITS = 6
MAX_TICKET_SEQUENCE = 10**TICKET_SEQUENCE_DIGITS - 1

REFERENCE_LENGTH = 13
REFERENCE_ALPHABET = string.ascii_uppercase + string.digits

_TICKET_PATTERN = re.compile(rf"^{TICKET_PREFIX}-(\d{{4}})-(\d{{{TICKET_SEQUENCE_DIGITS}}})$")
_REFERENCE_PATTERN = re.compile(rf"^#[A-Z0-9]{{{REFERENCE_LENGTH}}}$")


def ticket_prefix(year: int) -> str:
    return f"{TICKET_PREFIX}-{year}-"


def format_ticket_number(year: int, sequence: int) -> str:
    """
    Format a ticket number like WO-2025-000042.

    Raises:
        ValueError: If the sequence does not fit in six digits
    """
    if not 1 <= sequence <= MAX_TICKET_SEQUENCE:
        raise ValueError(f"Ticket sequence out of range: {sequence}")
    return f"{ticket_prefix(year)}{sequence:0{TICKET_SEQUENCE_DIGITS}d}"


def parse_ticket_sequence(ticket_number: Optional[str], year: int) -> Optional[int]:
    """Return the sequence part of a ticket issued in ``year``, else None"""
    if not ticket_number:
        return None
    match = _TICKET_PATTERN.match(ticket_number)
    if not match or int(match.group(1)) != year:
        return None
    return int(match.group(2))


def next_ticket_number(last_ticket_number: Optional[str], year: int) -> str:
    """Next ticket in the yearly sequence; starts at 000001 each year"""
    last_sequence = parse_ticket_sequence(last_ticket_number, year) or 0
    return format_ticket_number(year, last_sequence + 1)


def generate_reference_number() -> str:
    """Random booking reference: '#' followed by 13 uppercase letters/digits"""
    return "#" + "".join(secrets.choice(REFERENCE_ALPHABET) for _ in range(REFERENCE_LENGTH))


def is_valid_reference_number(value: Optional[str]) -> bool:
    return bool(value and _REFERENCE_PATTERN.match(value))
