"""
Todo API Routes
===============

HTTP endpoints under ``/api/todos``. Handlers validate input, call the
service, and pick the status code; they hold no business logic.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request, Response, status

from todo_core.database import Todo
from todo_core.models import ErrorResponse, TodoPayload, TodoResponse
from todo_core.results import LookupResult
from todo_core.service import TodoService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/todos",
    tags=["todos"],
    responses={400: {"model": ErrorResponse, "description": "Invalid input"}},
)

NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse, "description": "Todo not found"}}


def get_todo_service(request: Request) -> TodoService:
    """Resolve the service held by the running application"""
    return request.app.state.todo_service


def _not_found(todo_id: int) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Todo {todo_id} not found")


def _found_or_404(result: LookupResult[Todo], todo_id: int) -> Todo:
    if not result.is_found:
        raise _not_found(todo_id)
    return result.value


@router.get("", response_model=List[TodoResponse])
def list_todos(service: TodoService = Depends(get_todo_service)):
    """List every todo"""
    logger.info("GET /api/todos")
    return service.list_all()


# Static sub-paths are declared before /{todo_id} so they are never read as ids

@router.get("/statut/{completed}", response_model=List[TodoResponse])
def list_todos_by_status(
    completed: bool = Path(..., description="true for completed todos, false for pending"),
    service: TodoService = Depends(get_todo_service),
):
    """List todos with the given completion status"""
    logger.info(f"GET /api/todos/statut/{completed}")
    return service.list_by_status(completed)


@router.get("/recherche", response_model=List[TodoResponse])
def search_todos(
    title: str = Query(..., alias="titre", description="Substring to look for in titles"),
    service: TodoService = Depends(get_todo_service),
):
    """Search todos whose title contains the substring, ignoring case"""
    logger.info(f"GET /api/todos/recherche?titre={title}")
    return service.search_by_title(title)


@router.get("/statistiques/count", response_model=int)
def count_todos_by_status(
    completed: bool = Query(..., alias="completee", description="Completion status to count"),
    service: TodoService = Depends(get_todo_service),
):
    """Count todos with the given completion status"""
    logger.info(f"GET /api/todos/statistiques/count?completee={completed}")
    return service.count_by_status(completed)


@router.get("/{todo_id}", response_model=TodoResponse, responses=NOT_FOUND_RESPONSE)
def get_todo(todo_id: int, service: TodoService = Depends(get_todo_service)):
    """Fetch a single todo"""
    logger.info(f"GET /api/todos/{todo_id}")
    return _found_or_404(service.get_by_id(todo_id), todo_id)


@router.post("", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
def create_todo(payload: TodoPayload, service: TodoService = Depends(get_todo_service)):
    """Create a todo; any id or timestamps in the body are ignored"""
    logger.info(f"POST /api/todos - {payload.title}")
    return service.create(payload.to_entity())


@router.put("/{todo_id}", response_model=TodoResponse, responses=NOT_FOUND_RESPONSE)
def update_todo(
    todo_id: int,
    payload: TodoPayload,
    service: TodoService = Depends(get_todo_service),
):
    """Replace title, description and completed of an existing todo"""
    logger.info(f"PUT /api/todos/{todo_id}")
    return _found_or_404(service.update(todo_id, payload.to_entity()), todo_id)


@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND_RESPONSE,
)
def delete_todo(todo_id: int, service: TodoService = Depends(get_todo_service)):
    """Delete a todo permanently"""
    logger.info(f"DELETE /api/todos/{todo_id}")
    if not service.delete(todo_id):
        raise _not_found(todo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{todo_id}/statut", response_model=TodoResponse, responses=NOT_FOUND_RESPONSE)
def set_todo_status(
    todo_id: int,
    completed: bool = Query(..., alias="completee", description="New completion status"),
    service: TodoService = Depends(get_todo_service),
):
    """Change only the completion status of a todo"""
    logger.info(f"PATCH /api/todos/{todo_id}/statut?completee={completed}")
    return _found_or_404(service.set_status(todo_id, completed), todo_id)
