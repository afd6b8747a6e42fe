"""
Small infrastructure helpers with no domain knowledge.

Usage:
    from core.helpers import generate_reference

    generate_reference("EXP")  # "EXP-20260114093015-3FA9C1"
"""

from __future__ import annotations

import secrets

from django.conf import settings
from django.utils import timezone


def generate_reference(prefix: str) -> str:
    """
    Build a human-readable unique reference.

    Format is PREFIX-<UTC timestamp to the second>-<random hex>. The random
    suffix length comes from LEDGER_REFERENCE_RANDOM_BYTES. Uniqueness is
    still enforced by the unique column the reference is stored in.

    Args:
        prefix: Short uppercase tag identifying the record kind

    Returns:
        Reference string
    """
    random_bytes = getattr(settings, "LEDGER_REFERENCE_RANDOM_BYTES", 3)
    stamp = timezone.now().strftime("%Y%m%d%H%M%S")
    return f"{prefix}-{stamp}-{secrets.token_hex(random_bytes).upper()}"
