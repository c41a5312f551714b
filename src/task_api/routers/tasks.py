from __future__ import annotations

from typing import Any, Dict, List, Type

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from ..schemas import ErrorOut, TaskCreate, TaskOut, TaskToggle
from ..service import Failed, Invalid, NotFound, Ok, Outcome, TaskService

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
)

_ERROR_STATUS: Dict[Type[Any], int] = {
    Invalid: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    Failed: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_ERROR_RESPONSES: Dict[Any, Dict[str, Any]] = {
    400: {"model": ErrorOut, "description": "Malformed id or payload"},
    404: {"model": ErrorOut, "description": "Task not found"},
    500: {"model": ErrorOut, "description": "Storage failure"},
}


def _serialize(value: Any) -> Any:
    if isinstance(value, list):
        return [_serialize(v) for v in value]
    return TaskOut(**value).model_dump(mode="json", by_alias=True)


# PUBLIC_INTERFACE
def to_response(outcome: Outcome[Any], success_status: int = status.HTTP_200_OK) -> Response:
    """
    Map a service outcome to an HTTP response.

    Ok -> success_status with the serialized task(s), or an empty body when the value is None.
    Invalid -> 400, NotFound -> 404, Failed -> 500, each with an {"error": message} body.
    """
    if isinstance(outcome, Ok):
        if outcome.value is None:
            return Response(status_code=success_status)
        return JSONResponse(status_code=success_status, content=_serialize(outcome.value))
    return JSONResponse(status_code=_ERROR_STATUS[type(outcome)], content={"error": outcome.message})


def get_task_service(request: Request) -> TaskService:
    """
    Dependency returning a service bound to the repository opened at startup.
    """
    return TaskService(request.app.state.repository)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TaskOut],
    summary="List Tasks",
    description="List every task, newest first.",
    responses={500: _ERROR_RESPONSES[500]},
)
def list_tasks(service: TaskService = Depends(get_task_service)) -> Response:
    """
    Return the full task list ordered by creation time descending.
    """
    return to_response(service.list_tasks())


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a new task from a title. Completion flag, id and timestamp are assigned by the server.",
    responses={400: _ERROR_RESPONSES[400], 500: _ERROR_RESPONSES[500]},
)
def create_task(payload: TaskCreate, service: TaskService = Depends(get_task_service)) -> Response:
    """
    Create a new task.
    """
    return to_response(service.create_task(payload), status.HTTP_201_CREATED)


# PUBLIC_INTERFACE
@router.patch(
    "/{task_id}",
    response_model=TaskOut,
    summary="Set Task Completion",
    description="Set the completion flag of a task. Other fields are immutable and ignored.",
    responses=_ERROR_RESPONSES,
)
def toggle_task(
    task_id: str, payload: TaskToggle, service: TaskService = Depends(get_task_service)
) -> Response:
    """
    Overwrite a task's completed flag with the supplied boolean.
    """
    return to_response(service.set_completed(task_id, payload))


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Task",
    description="Delete a task by id.",
    responses=_ERROR_RESPONSES,
)
def delete_task(task_id: str, service: TaskService = Depends(get_task_service)) -> Response:
    """
    Delete a task. Returns 204 on success, 404 if not found.
    """
    return to_response(service.delete_task(task_id), status.HTTP_204_NO_CONTENT)
