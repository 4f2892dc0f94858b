"""Task CRUD service."""

from nexus_flow.schemas import TaskRead
from nexus_flow.services.base import CrudService
from nexus_flow.storage.models import Task


class TaskService(CrudService[TaskRead]):
    model = Task
    read_schema = TaskRead
    entity = "Task"
    plural = "tasks"

    def ordering(self):
        return (Task.created_at.desc(),)
