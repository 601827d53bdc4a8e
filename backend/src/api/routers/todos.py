"""Todo endpoints."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session
from schemas.envelope import ApiResponse
from schemas.todo import DeleteCompletedResponse, TodoCreate, TodoResponse, TodoUpdate
from services import todo_service
from services.exceptions import NotFoundError

router = APIRouter(prefix="/api/todos", tags=["todos"])


@router.get("", response_model=ApiResponse[list[TodoResponse]])
async def list_todos(
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[list[TodoResponse]]:
    """Get all todos, newest first."""
    todos = await todo_service.list_todos(db)
    return ApiResponse(data=[TodoResponse.model_validate(t) for t in todos])


@router.post("", response_model=ApiResponse[TodoResponse], status_code=201)
async def create_todo(
    data: TodoCreate,
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[TodoResponse]:
    """Create a new todo."""
    todo = await todo_service.create_todo(db, data)
    return ApiResponse(data=TodoResponse.model_validate(todo))


# Declared before /{todo_id} so "completed" is not parsed as an id
@router.delete("/completed", response_model=ApiResponse[DeleteCompletedResponse])
async def delete_completed_todos(
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[DeleteCompletedResponse]:
    """Delete every completed todo in one request."""
    deleted_count = await todo_service.delete_completed_todos(db)
    return ApiResponse(data=DeleteCompletedResponse(deleted_count=deleted_count))


@router.put("/{todo_id}", response_model=ApiResponse[TodoResponse])
async def update_todo(
    todo_id: int,
    data: TodoUpdate,
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[TodoResponse]:
    """Update a todo (text, completion flag, priority or category)."""
    try:
        todo = await todo_service.update_todo(db, todo_id, data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Todo not found") from e
    return ApiResponse(data=TodoResponse.model_validate(todo))


@router.delete("/{todo_id}", response_model=ApiResponse[None])
async def delete_todo(
    todo_id: int,
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[None]:
    """Delete a todo."""
    try:
        await todo_service.delete_todo(db, todo_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Todo not found") from e
    return ApiResponse(data=None)
