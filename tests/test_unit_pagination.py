import pytest

from app.services.pagination import compute_fetch_size, slice_page


def test_fetch_size_covers_page_plus_one():
    assert compute_fetch_size(1, 5) == 6
    assert compute_fetch_size(2, 5) == 11
    assert compute_fetch_size(3, 10) == 31


def test_fetch_size_is_capped_at_fifty():
    assert compute_fetch_size(10, 5) == 50
    assert compute_fetch_size(11, 5) == 50
    assert compute_fetch_size(1, 100) == 50


def test_fetch_size_rejects_non_positive_arguments():
    with pytest.raises(ValueError):
        compute_fetch_size(0, 5)
    with pytest.raises(ValueError):
        compute_fetch_size(1, 0)


def test_slice_first_and_last_page_of_seven():
    items = list(range(7))
    first = slice_page(items[:6], 1, 5)
    assert first.items == [0, 1, 2, 3, 4]
    assert first.has_next_page is True
    assert first.has_previous_page is False

    second = slice_page(items, 2, 5)
    assert second.items == [5, 6]
    assert second.has_next_page is False
    assert second.has_previous_page is True


def test_slice_never_exceeds_page_size():
    items = list(range(23))
    for page_size in (1, 3, 5, 8):
        for page in range(1, 8):
            window = slice_page(items[:compute_fetch_size(page, page_size)], page, page_size)
            assert len(window.items) <= page_size
            assert window.has_previous_page is (page > 1)


def test_slice_past_the_end_is_empty():
    window = slice_page([1, 2, 3], 3, 5)
    assert window.items == []
    assert window.has_next_page is False
    assert window.has_previous_page is True
