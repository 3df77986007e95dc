"""Custom exceptions for todo-bridge."""


class TodoBridgeError(Exception):
    """Base exception for todo-bridge errors."""

    pass


class ConfigurationError(TodoBridgeError):
    """Raised when configuration is invalid or missing."""

    pass


class RemoteStoreError(TodoBridgeError):
    """Raised when a request to the remote task store fails (transport or non-2xx)."""

    pass


class TaskNotFoundError(TodoBridgeError):
    """Raised when an identifier is not present in the current task snapshot."""

    def __init__(self, task_id):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id
