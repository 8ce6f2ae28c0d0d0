"""Planning domain: events, tasks, todos and their time-window rules."""

from .models import Event, Status, Task, TimeSpan, Todo
from .repository import EventRepository, TaskRepository, TodoRepository
from .service import EventService, TaskService, TodoDetails, TodoService
from .validation import validate_todo_window

__all__ = [
    "Event",
    "Status",
    "Task",
    "TimeSpan",
    "Todo",
    "EventRepository",
    "TaskRepository",
    "TodoRepository",
    "EventService",
    "TaskService",
    "TodoService",
    "TodoDetails",
    "validate_todo_window",
]
