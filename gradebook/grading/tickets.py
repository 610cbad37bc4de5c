from __future__ import annotations

from gradebook.grading.types import TicketInfo

__all__ = ["ticket_info"]


def ticket_info(rank_index: int, redeemed_count: int) -> TicketInfo:
    """Lucky-draw tickets: one per tier above the first, minus those already used."""
    earned = rank_index
    available = max(0, earned - redeemed_count)
    return TicketInfo(earned=earned, available=available, redeemed=redeemed_count)
