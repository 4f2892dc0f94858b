"""Task routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from nexus_flow.schemas import TaskCreate, TaskRead, TaskUpdate
from nexus_flow.services import TaskService
from nexus_flow.web.dependencies import get_task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskRead])
async def list_tasks(service: TaskService = Depends(get_task_service)) -> list[TaskRead]:
    """All tasks, newest first."""
    return await service.list_all()


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(task_id: str, service: TaskService = Depends(get_task_service)) -> TaskRead:
    return await service.get(task_id)


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(data: TaskCreate, service: TaskService = Depends(get_task_service)) -> TaskRead:
    return await service.create(data)


@router.api_route("/{task_id}", methods=["PUT", "PATCH"], response_model=TaskRead)
async def update_task(
    task_id: str,
    data: TaskUpdate,
    service: TaskService = Depends(get_task_service),
) -> TaskRead:
    return await service.update(task_id, data)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_task(task_id: str, service: TaskService = Depends(get_task_service)) -> Response:
    await service.delete(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
