import pytest
from datetime import date
from sqlalchemy.exc import OperationalError
from core.exceptions import NotFoundError, StorageError
from schemas.todo_schemas import TodoRequest
from services.todo_service import TodoService


def todo_request(title="Write report", writer="kim", complete=False, due_date=date(2025, 3, 1)):
    return TodoRequest(title=title, writer=writer, complete=complete, due_date=due_date)


async def test_register_and_get(session):
    tno = await TodoService.register(session, todo_request())

    todo = await TodoService.get(session, tno)

    assert todo.tno == tno
    assert todo.title == "Write report"
    assert todo.writer == "kim"
    assert todo.complete is False
    assert todo.due_date == date(2025, 3, 1)


async def test_get_missing_todo(session):
    with pytest.raises(NotFoundError) as exc_info:
        await TodoService.get(session, 404)

    assert exc_info.value.code == "TODO_NOT_FOUND"
    assert exc_info.value.message == "Todo not found: tno=404"


async def test_modify(session):
    tno = await TodoService.register(session, todo_request())

    await TodoService.modify(session, tno, todo_request(title="Send report", complete=True, due_date=None))

    todo = await TodoService.get(session, tno)
    assert todo.title == "Send report"
    assert todo.complete is True
    assert todo.due_date is None


async def test_modify_missing_todo(session):
    with pytest.raises(NotFoundError):
        await TodoService.modify(session, 77, todo_request())


async def test_remove(session):
    tno = await TodoService.register(session, todo_request())

    await TodoService.remove(session, tno)

    with pytest.raises(NotFoundError):
        await TodoService.get(session, tno)
    with pytest.raises(NotFoundError):
        await TodoService.remove(session, tno)


async def test_list_newest_first_with_page_block(session):
    for index in range(13):
        await TodoService.register(session, todo_request(title=f"Todo {index}"))

    page = await TodoService.list_todos(session, page=2, size=10)

    assert [t.title for t in page["dto_list"]] == ["Todo 2", "Todo 1", "Todo 0"]
    assert page["total_count"] == 13
    assert page["page_num_list"] == [1, 2]
    assert page["current"] == 2


async def test_list_storage_failure(session, monkeypatch):
    async def fail_scalar(*args, **kwargs):
        raise OperationalError("SELECT count(*)", {}, Exception("connection reset"))

    monkeypatch.setattr(session, "scalar", fail_scalar)

    with pytest.raises(StorageError):
        await TodoService.list_todos(session)
