from schemas.common_schemas import build_page_response, PageResponse


def test_first_block():
    page = build_page_response(["a"], page=1, size=10, total_count=35)

    assert page["page_num_list"] == [1, 2, 3, 4]
    assert page["total_page"] == 4
    assert page["prev"] is False
    assert page["next"] is False
    assert page["prev_page"] == 0
    assert page["next_page"] == 0
    assert page["current"] == 1


def test_middle_block_has_both_neighbours():
    page = build_page_response([], page=14, size=10, total_count=305)

    assert page["page_num_list"] == list(range(11, 21))
    assert page["prev"] is True
    assert page["prev_page"] == 10
    assert page["next"] is True
    assert page["next_page"] == 21
    assert page["total_page"] == 31


def test_empty_result_still_has_one_page():
    page = build_page_response([], page=1, size=10, total_count=0)

    assert page["total_page"] == 1
    assert page["page_num_list"] == [1]
    assert page["dto_list"] == []


def test_validates_as_page_response():
    page = PageResponse[int].model_validate(build_page_response([1, 2], page=1, size=2, total_count=5))

    assert page.dto_list == [1, 2]
    assert page.total_page == 3
