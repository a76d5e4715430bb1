from __future__ import annotations

from dataclasses import dataclass


# Backend failures are explicit and separable from programming errors.
class BackendError(RuntimeError):
    def __init__(self, action: str, detail: str = "") -> None:
        self.action = action
        self.detail = detail
        super().__init__(f"Failed to {action}" + (f": {detail}" if detail else ""))

    @property
    def user_message(self) -> str:
        return f"Failed to {self.action}. Please try again."


@dataclass(frozen=True)
class Notification:
    level: str
    title: str
    message: str

    @classmethod
    def success(cls, message: str) -> "Notification":
        return cls(level="success", title="Success", message=message)

    @classmethod
    def error(cls, message: str) -> "Notification":
        return cls(level="error", title="Error", message=message)

    @property
    def is_error(self) -> bool:
        return self.level == "error"
