"""Localized message catalogues (Thai is the only shipped locale)."""

from gradebook.i18n.th_messages import (
    AuthMessages,
    DomainErrorMessages,
    RedemptionMessages,
    RosterMessages,
)

__all__ = [
    "AuthMessages",
    "DomainErrorMessages",
    "RedemptionMessages",
    "RosterMessages",
]
