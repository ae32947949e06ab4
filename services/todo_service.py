from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from core.exceptions import NotFoundError
from models.todos import Todo
from schemas.todo_schemas import TodoRequest, TodoResponse
from schemas.common_schemas import build_page_response
from repositories.base import storage_call
from utils.logger import get_logger

logger = get_logger(__name__)


def _not_found(tno: int) -> NotFoundError:
    return NotFoundError(f"Todo not found: tno={tno}", code="TODO_NOT_FOUND")


class TodoService:

    @staticmethod
    @storage_call()
    async def register(db: AsyncSession, request: TodoRequest) -> int:
        todo = Todo(
            title=request.title,
            writer=request.writer,
            complete=request.complete,
            due_date=request.due_date,
        )
        db.add(todo)
        await db.commit()

        logger.info("Todo registered", extra={"tno": todo.tno})
        return todo.tno

    @staticmethod
    @storage_call()
    async def get(db: AsyncSession, tno: int) -> TodoResponse:
        todo = await db.get(Todo, tno)
        if todo is None:
            raise _not_found(tno)
        return TodoResponse.model_validate(todo)

    @staticmethod
    @storage_call()
    async def list_todos(db: AsyncSession, page: int = 1, size: int = 10) -> dict:
        """
        Page of todos, newest first.
        """
        page = page if page and page > 0 else 1
        size = size if size and size > 0 else 10

        total_count = await db.scalar(select(func.count()).select_from(Todo))

        result = await db.execute(
            select(Todo)
            .order_by(Todo.tno.desc())
            .offset((page - 1) * size)
            .limit(size)
        )
        dto_list = [TodoResponse.model_validate(todo) for todo in result.scalars().all()]

        return build_page_response(dto_list, page, size, total_count or 0)

    @staticmethod
    @storage_call()
    async def modify(db: AsyncSession, tno: int, request: TodoRequest) -> None:
        todo = await db.get(Todo, tno)
        if todo is None:
            raise _not_found(tno)

        todo.title = request.title
        todo.writer = request.writer
        todo.complete = request.complete
        todo.due_date = request.due_date
        await db.commit()

        logger.info("Todo modified", extra={"tno": tno, "complete": request.complete})

    @staticmethod
    @storage_call()
    async def remove(db: AsyncSession, tno: int) -> None:
        result = await db.execute(delete(Todo).where(Todo.tno == tno))
        if result.rowcount == 0:
            await db.rollback()
            raise _not_found(tno)
        await db.commit()

        logger.info("Todo removed", extra={"tno": tno})
