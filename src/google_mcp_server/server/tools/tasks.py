"""Google Tasks tools (9). Results are returned as JSON."""

from typing import Any

from pydantic import Field

from google_mcp_server.server.formatting import to_json
from google_mcp_server.server.google_api import GoogleClients
from google_mcp_server.server.registry import NoParams, ToolParams, ToolRegistry

DEFAULT_TASK_LIST = "@default"
TASK_LIST_DESCRIPTION = "Task list ID (default '@default')"


class ListTasksParams(ToolParams):
    task_list_id: str = Field(default=DEFAULT_TASK_LIST, description=TASK_LIST_DESCRIPTION)
    show_completed: bool = Field(default=False, description="Include completed tasks (default false)")


class CreateTaskParams(ToolParams):
    title: str = Field(description="Task title")
    notes: str | None = Field(default=None, description="Task notes/description")
    due: str | None = Field(
        default=None, description="Due date in ISO format (e.g. 2026-03-01T00:00:00.000Z)"
    )
    task_list_id: str = Field(default=DEFAULT_TASK_LIST, description=TASK_LIST_DESCRIPTION)


class TaskParams(ToolParams):
    task_id: str = Field(description="ID of the task")
    task_list_id: str = Field(default=DEFAULT_TASK_LIST, description=TASK_LIST_DESCRIPTION)


class CreateTaskListParams(ToolParams):
    title: str = Field(description="Title for the new task list")


class TaskListIdParams(ToolParams):
    task_list_id: str = Field(description="ID of the task list to delete")


class UpdateTaskParams(TaskParams):
    title: str | None = Field(default=None, description="New task title")
    notes: str | None = Field(default=None, description="New task notes")
    due: str | None = Field(default=None, description="New due date in ISO format")
    status: str | None = Field(default=None, description="needsAction or completed")


class MoveTaskParams(TaskParams):
    parent: str | None = Field(default=None, description="Parent task ID to make this a subtask")
    previous: str | None = Field(default=None, description="Task ID to insert after")


def register_tasks_tools(registry: ToolRegistry, google: GoogleClients) -> None:
    """Register the Tasks tools."""

    def _task_path(task_list_id: str, task_id: str | None = None) -> str:
        path = f"lists/{task_list_id}/tasks"
        return f"{path}/{task_id}" if task_id else path

    @registry.tool("tasks_list", "List all Google Task lists", NoParams)
    async def tasks_list(params: NoParams) -> str:
        data = await google.tasks().request("GET", "users/@me/lists")
        return to_json(data.get("items") or [])

    @registry.tool("tasks_list_tasks", "List tasks in a specific task list", ListTasksParams)
    async def tasks_list_tasks(params: ListTasksParams) -> str:
        data = await google.tasks().request(
            "GET",
            _task_path(params.task_list_id),
            params={"showCompleted": "true" if params.show_completed else "false"},
        )
        return to_json(data.get("items") or [])

    @registry.tool("tasks_create", "Create a new Google Task", CreateTaskParams)
    async def tasks_create(params: CreateTaskParams) -> str:
        body: dict[str, Any] = {"title": params.title}
        if params.notes:
            body["notes"] = params.notes
        if params.due:
            body["due"] = params.due

        data = await google.tasks().request("POST", _task_path(params.task_list_id), json_data=body)
        return to_json(data)

    @registry.tool("tasks_complete", "Mark a Google Task as completed", TaskParams)
    async def tasks_complete(params: TaskParams) -> str:
        data = await google.tasks().request(
            "PATCH",
            _task_path(params.task_list_id, params.task_id),
            json_data={"status": "completed"},
        )
        return to_json(data)

    @registry.tool("tasks_create_list", "Create a new Google Task list", CreateTaskListParams)
    async def tasks_create_list(params: CreateTaskListParams) -> str:
        data = await google.tasks().request("POST", "users/@me/lists", json_data={"title": params.title})
        return to_json(data)

    @registry.tool("tasks_delete_list", "Delete a Google Task list", TaskListIdParams)
    async def tasks_delete_list(params: TaskListIdParams) -> str:
        await google.tasks().request("DELETE", f"users/@me/lists/{params.task_list_id}")
        return to_json({"success": True, "deleted": params.task_list_id})

    @registry.tool("tasks_update", "Update a Google Task", UpdateTaskParams)
    async def tasks_update(params: UpdateTaskParams) -> str:
        # Explicit empty strings are sent so fields can be cleared
        body = {
            key: value
            for key, value in (
                ("title", params.title),
                ("notes", params.notes),
                ("due", params.due),
                ("status", params.status),
            )
            if value is not None
        }
        data = await google.tasks().request(
            "PATCH", _task_path(params.task_list_id, params.task_id), json_data=body
        )
        return to_json(data)

    @registry.tool("tasks_delete", "Delete a Google Task", TaskParams)
    async def tasks_delete(params: TaskParams) -> str:
        await google.tasks().request("DELETE", _task_path(params.task_list_id, params.task_id))
        return to_json({"success": True, "deleted": params.task_id})

    @registry.tool("tasks_move", "Move or reorder a Google Task", MoveTaskParams)
    async def tasks_move(params: MoveTaskParams) -> str:
        data = await google.tasks().request(
            "POST",
            _task_path(params.task_list_id, params.task_id) + "/move",
            params={"parent": params.parent, "previous": params.previous},
        )
        return to_json(data)
