# tests/test_pagination.py
import pytest

from stocktask.pagination import Paginator, count_pages, paginate


def test_thirteen_items_in_pages_of_six():
    pager = Paginator(list(range(13)), page_size=6)

    assert pager.total_pages == 3
    assert len(pager.items_for_page(1)) == 6
    assert len(pager.items_for_page(2)) == 6
    assert pager.items_for_page(3) == [12]


def test_out_of_range_navigation_is_ignored():
    pager = Paginator(list(range(13)), page_size=6)
    assert pager.go_to_page(2) is True

    assert pager.go_to_page(4) is False
    assert pager.current_page == 2
    assert pager.go_to_page(0) is False
    assert pager.current_page == 2
    assert pager.go_to_page(-1) is False
    assert pager.current_page == 2


def test_empty_sequence_has_no_pages():
    pager = Paginator([], page_size=6)
    assert pager.total_pages == 0
    assert pager.current_page_items == []
    assert pager.visible_pages() == []
    assert pager.go_to_page(1) is False
    assert pager.current_page == 1


def test_slices_outside_the_sequence_are_empty():
    assert paginate(list(range(5)), 3, 6) == []
    assert paginate(list(range(5)), 0, 2) == []
    assert paginate(list(range(5)), 3, 2) == [4]


def test_count_pages():
    assert count_pages(0, 6) == 0
    assert count_pages(6, 6) == 1
    assert count_pages(7, 6) == 2


def test_default_page_size_is_six():
    pager = Paginator(list(range(20)))
    assert pager.page_size == 6
    assert pager.current_page_items == [0, 1, 2, 3, 4, 5]


def test_next_and_previous_stop_at_bounds():
    pager = Paginator(list(range(13)), page_size=6)
    assert pager.previous_page() is False
    assert pager.has_previous is False
    assert pager.next_page() and pager.next_page()
    assert pager.current_page == 3
    assert pager.has_next is False
    assert pager.next_page() is False
    assert pager.current_page == 3


def test_reset_returns_to_first_page():
    pager = Paginator(list(range(13)), page_size=6)
    pager.go_to_page(3)
    pager.reset(list(range(4)))
    assert pager.current_page == 1
    assert pager.total_pages == 1
    assert pager.current_page_items == [0, 1, 2, 3]


def test_invalid_page_size():
    with pytest.raises(ValueError):
        Paginator([1, 2, 3], page_size=0)


@pytest.mark.parametrize("total, current, expected", [
    (3, 1, [1, 2, 3]),
    (5, 5, [1, 2, 3, 4, 5]),
    (10, 1, [1, 2, 3, 4, 5]),
    (10, 3, [1, 2, 3, 4, 5]),
    (10, 4, [2, 3, 4, 5, 6]),
    (10, 6, [4, 5, 6, 7, 8]),
    (10, 8, [6, 7, 8, 9, 10]),
    (10, 10, [6, 7, 8, 9, 10]),
    (6, 4, [2, 3, 4, 5, 6]),
])
def test_visible_page_window(total, current, expected):
    pager = Paginator(list(range(total)), page_size=1)
    assert pager.go_to_page(current)
    assert pager.visible_pages() == expected
