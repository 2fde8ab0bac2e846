"""todosync - sync a task list into Todoist."""
