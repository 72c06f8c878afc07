"""Input validation utilities for SUBENUM.

Checks candidate domains before they are handed to the enumeration engine.
The checks are purely syntactic: nothing is resolved and nothing is
normalised, the string is accepted or rejected exactly as supplied.
"""

from __future__ import annotations

from typing import List, Sequence

from subenum.core.errors import InvalidInput

_MAX_DOMAIN_LENGTH = 253
_MAX_LABEL_LENGTH = 63


# ---------------------------------------------------------------------------
# Domain validation
# ---------------------------------------------------------------------------


def is_valid_domain(candidate: str) -> bool:
    """Return ``True`` if *candidate* is syntactically acceptable as a domain.

    Rejected when the string is empty or longer than 253 characters, contains
    ``..``, starts or ends with a dot, has fewer than two labels, or has a
    label that is empty or longer than 63 characters.

    Args:
        candidate: String to validate.

    Returns:
        Boolean validation result.
    """
    if not candidate or len(candidate) > _MAX_DOMAIN_LENGTH:
        return False

    if ".." in candidate or candidate.startswith(".") or candidate.endswith("."):
        return False

    labels = candidate.split(".")
    if len(labels) < 2:
        return False

    return all(0 < len(label) <= _MAX_LABEL_LENGTH for label in labels)


# ---------------------------------------------------------------------------
# Public validators
# ---------------------------------------------------------------------------


def validate_domain(domain: str) -> str:
    """Validate a single-domain request target.

    Args:
        domain: Domain supplied by the caller.

    Returns:
        The domain, unchanged.

    Raises:
        InvalidInput: When *domain* is empty or syntactically invalid.
    """
    if not domain:
        raise InvalidInput("Domain is required")
    if not is_valid_domain(domain):
        raise InvalidInput("Invalid domain format")
    return domain


def validate_domains(domains: Sequence[str]) -> List[str]:
    """Validate every domain of a batch request before any work starts.

    Args:
        domains: Ordered domains supplied by the caller.

    Returns:
        The domains as a new list, in the order given.

    Raises:
        InvalidInput: When the sequence is empty or any entry is invalid.
            The first invalid entry is named in the message.
    """
    if not domains:
        raise InvalidInput("Domains array is required and cannot be empty")
    for domain in domains:
        if not is_valid_domain(domain):
            raise InvalidInput(f"Invalid domain format: {domain}")
    return list(domains)
