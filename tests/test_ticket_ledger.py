import pytest

from gradebook.grading.calculator import calculate_grade, normalize_score_record
from gradebook.grading.ranks import resolve_rank
from gradebook.grading.tickets import ticket_info


@pytest.mark.parametrize("rank_index", range(8))
@pytest.mark.parametrize("redeemed", [0, 1, 3, 7, 12])
def test_available_is_never_negative(rank_index, redeemed):
    info = ticket_info(rank_index, redeemed)
    assert info.earned == rank_index
    assert info.available == max(0, rank_index - redeemed)
    assert info.available >= 0
    assert info.redeemed == redeemed


def test_novice_earns_nothing():
    assert ticket_info(0, 0).as_dict() == {"earned": 0, "available": 0, "redeemed": 0}


def test_end_to_end_chieftain_tickets():
    record = normalize_score_record([10] * 6, 10, 10)
    result = calculate_grade(record)
    rank = resolve_rank(result.total_score, "665001")
    assert result.total_score == 80
    assert result.grade == 4
    assert rank.rank_index == 5
    for redeemed in range(0, 7):
        assert ticket_info(rank.rank_index, redeemed).available == max(0, 5 - redeemed)
