import pytest

from x_follower_report.columns import cell_address, column_letter, letter_to_index


@pytest.mark.parametrize(
    "label, index",
    [("A", 1), ("Z", 26), ("AA", 27), ("AZ", 52), ("BA", 53), ("ZZ", 702), ("AAA", 703)],
)
def test_letter_to_index(label, index):
    assert letter_to_index(label) == index
    assert column_letter(index) == label


def test_letter_to_index_accepts_lowercase_and_spaces():
    assert letter_to_index(" ab ") == 28


@pytest.mark.parametrize("bad", ["", "A1", "-", "Ä"])
def test_letter_to_index_rejects_invalid(bad):
    with pytest.raises(ValueError):
        letter_to_index(bad)


def test_round_trip():
    for n in range(1, 2000):
        assert letter_to_index(column_letter(n)) == n


def test_column_letter_rejects_zero():
    with pytest.raises(ValueError):
        column_letter(0)


def test_cell_address():
    assert cell_address(10, 4) == "D10"
