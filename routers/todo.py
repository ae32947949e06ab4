from fastapi import APIRouter, Request, Path, Query
from starlette import status
from utils.deps import db_dependency
from schemas.todo_schemas import TodoRequest, TodoResponse, TodoRegisterResponse
from schemas.common_schemas import PageResponse, INT32_MAX, parse_positive_int
from services.todo_service import TodoService
from middleware.rate_limiter import limiter


router = APIRouter(
    prefix="/api/todo",
    tags=["todo"]
)


@router.get("", response_model=PageResponse[TodoResponse])
async def list_todos(request: Request, db: db_dependency,
    page: str | None = Query(default=None), size: str | None = Query(default=None)):
    return await TodoService.list_todos(db, parse_positive_int(page, 1), parse_positive_int(size, 10))


@router.post("", response_model=TodoRegisterResponse, status_code=status.HTTP_201_CREATED)
@router.post("/register", response_model=TodoRegisterResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
async def register_todo(request: Request, body: TodoRequest, db: db_dependency):
    tno = await TodoService.register(db, body)
    return {"tno": tno}


@router.get("/{tno}", response_model=TodoResponse)
async def get_todo(request: Request, db: db_dependency, tno: int = Path(gt=0, le=INT32_MAX)):
    return await TodoService.get(db, tno)


@router.put("/{tno}")
@limiter.limit("30/minute")
async def modify_todo(request: Request, body: TodoRequest, db: db_dependency,
    tno: int = Path(gt=0, le=INT32_MAX)):
    await TodoService.modify(db, tno, body)
    return {"result": "SUCCESS"}


@router.delete("/{tno}")
@limiter.limit("30/minute")
async def remove_todo(request: Request, db: db_dependency, tno: int = Path(gt=0, le=INT32_MAX)):
    await TodoService.remove(db, tno)
    return {"result": "SUCCESS"}
