from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session
from typing import List
from database import get_session
from models import User
from schemas import (
    ErrorResponse,
    LogTimeRequest,
    LogTimeResponse,
    TaskCreate,
    TaskDetailResponse,
    TaskLogResponse,
    TaskResponse,
    TaskUpdate,
    ValidationErrorResponse,
)
from middleware.auth import get_current_user
from services import tasks as task_service

router = APIRouter(
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    },
)

NOT_FOUND = {404: {"model": ErrorResponse}}
BAD_REQUEST = {400: {"model": ValidationErrorResponse}}


@router.get("", response_model=List[TaskDetailResponse])
def list_tasks(
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
) -> List[TaskDetailResponse]:
    """
    Get all tasks for authenticated user

    Args:
        current_user: Authenticated user
        session: Database session

    Returns:
        Tasks with their time logs and total logged time
    """
    return task_service.list_tasks(session, current_user)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=TaskResponse,
    responses=BAD_REQUEST,
)
def create_task(
    task_data: TaskCreate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
) -> TaskResponse:
    """
    Create a new task

    Args:
        task_data: Task creation data
        current_user: Authenticated user, becomes the owner
        session: Database session

    Returns:
        The created task
    """
    task = task_service.create_task(session, current_user, task_data)
    return TaskResponse.model_validate(task)


@router.get("/{task_id}", response_model=TaskDetailResponse, responses=NOT_FOUND)
def get_task(
    task_id: int,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
) -> TaskDetailResponse:
    """
    Get task details with its time logs
    """
    return task_service.get_task(session, current_user, task_id)


@router.patch(
    "/{task_id}",
    response_model=TaskDetailResponse,
    responses={**NOT_FOUND, **BAD_REQUEST},
)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
) -> TaskDetailResponse:
    """
    Update a task

    Args:
        task_id: Task ID
        task_data: Fields to change, anything omitted keeps its value
        current_user: Authenticated user
        session: Database session

    Returns:
        The updated task
    """
    return task_service.update_task(session, current_user, task_id, task_data)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND,
)
def delete_task(
    task_id: int,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
) -> Response:
    """
    Delete a task together with its time logs
    """
    task_service.delete_task(session, current_user, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{task_id}/log-time",
    response_model=LogTimeResponse,
    responses={**NOT_FOUND, **BAD_REQUEST},
)
def log_time(
    task_id: int,
    log_data: LogTimeRequest,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
) -> LogTimeResponse:
    """
    Log time spent on a task

    Args:
        task_id: Task ID
        log_data: Duration and optional day (defaults to today)
        current_user: Authenticated user
        session: Database session

    Returns:
        Confirmation message and the resulting log entry
    """
    log = task_service.log_time(session, current_user, task_id, log_data)
    return LogTimeResponse(
        message="Time logged successfully.",
        log=TaskLogResponse.model_validate(log),
    )
