import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Best-effort notification channel (mail, chat, log)."""

    @abstractmethod
    def notify(self, payload: Dict[str, Any]) -> None:
        pass


class LoggingNotifier(Notifier):
    def __init__(self, channel: str = "roadsafety.notifications"):
        self._logger = logging.getLogger(channel)

    def notify(self, payload: Dict[str, Any]) -> None:
        self._logger.info(f"Notification: {payload}")
