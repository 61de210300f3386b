from pdf_find.navigation import PageNavigator


def test_scroll_notifies_only_on_change():
    changes = []
    navigator = PageNavigator(5, on_page_change=changes.append)
    navigator.scroll_to_page(3)
    navigator.scroll_to_page(3)
    assert navigator.current_page == 3
    assert changes == [3]


def test_out_of_range_scroll_is_ignored():
    changes = []
    navigator = PageNavigator(2, on_page_change=changes.append)
    navigator.scroll_to_page(2)
    navigator.scroll_to_page(-1)
    assert navigator.current_page == 0
    assert changes == []


def test_visibility_uses_the_buffer():
    navigator = PageNavigator(10, buffer_pages=1)
    navigator.scroll_to_page(4)
    assert navigator.is_page_visible(3)
    assert navigator.is_page_visible(5)
    assert not navigator.is_page_visible(6)


def test_new_page_count_resets_position():
    navigator = PageNavigator(10)
    navigator.scroll_to_page(7)
    navigator.set_page_count(3)
    assert navigator.current_page == 0
