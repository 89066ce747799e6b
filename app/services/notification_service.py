# app/services/notification_service.py
"""
Toast-style notifications for store and wizard outcomes.

Producers call ``success``/``error``/``warning``/``info``; consumers (the
WebSocket broadcaster, a CLI, tests) subscribe with a callback.
"""
import logging
from collections import deque
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Deque, Dict, List, Optional
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class ToastType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Toast(BaseModel):
    type: ToastType
    title: str
    message: str
    timestamp: datetime = Field(default_factory=datetime.now)
    data: Dict[str, Any] = Field(default_factory=dict)


ToastCallback = Callable[[Toast], None]

DEFAULT_TITLES = {
    ToastType.SUCCESS: "Success",
    ToastType.ERROR: "Error",
    ToastType.WARNING: "Warning",
    ToastType.INFO: "Info",
}


class NotificationService:
    """Fan-out of toasts to subscribed callbacks"""

    def __init__(self, history_size: int = 100):
        self._subscribers: List[ToastCallback] = []
        self.history: Deque[Toast] = deque(maxlen=history_size)

    def subscribe(self, callback: ToastCallback) -> Callable[[], None]:
        """Register a callback; returns a function that unregisters it"""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def notify(
        self,
        toast_type: ToastType,
        message: str,
        title: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None
    ) -> Toast:
        toast = Toast(
            type=toast_type,
            title=title or DEFAULT_TITLES[toast_type],
            message=message,
            data=data or {}
        )
        self.history.append(toast)

        for callback in list(self._subscribers):
            try:
                callback(toast)
            except Exception as e:
                # A broken subscriber must not undo or fail the mutation that produced the toast
                logger.error(f"Error delivering {toast.type.value} toast to subscriber: {e}")

        return toast

    def success(self, message: str, title: Optional[str] = None, data: Optional[Dict[str, Any]] = None) -> Toast:
        return self.notify(ToastType.SUCCESS, message, title, data)

    def error(self, message: str, title: Optional[str] = None, data: Optional[Dict[str, Any]] = None) -> Toast:
        return self.notify(ToastType.ERROR, message, title, data)

    def warning(self, message: str, title: Optional[str] = None, data: Optional[Dict[str, Any]] = None) -> Toast:
        return self.notify(ToastType.WARNING, message, title, data)

    def info(self, message: str, title: Optional[str] = None, data: Optional[Dict[str, Any]] = None) -> Toast:
        return self.notify(ToastType.INFO, message, title, data)
