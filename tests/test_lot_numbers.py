"""Tests for natural lot-number ordering."""

from lotledger.utils.lot_numbers import lot_number_sort_key


def test_numbers_sort_numerically():
    numbers = ["10", "2", "1", "21"]
    assert sorted(numbers, key=lot_number_sort_key) == ["1", "2", "10", "21"]


def test_suffixes_and_case():
    numbers = ["3b", "3A", "3", "12a"]
    assert sorted(numbers, key=lot_number_sort_key) == ["3", "3A", "3b", "12a"]


def test_blank_sorts_last():
    numbers = ["", "5", "  ", "A"]
    assert sorted(numbers, key=lot_number_sort_key)[:2] == ["5", "A"]
