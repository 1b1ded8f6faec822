from abc import ABC, abstractmethod
from dataclasses import dataclass

from libs.result import Result


@dataclass(frozen=True)
class ResetCodeNotification:
    """Everything a sender needs to deliver a reset code"""

    to_email: str
    masked_email: str
    code: str
    expires_in_minutes: int


class INotificationSender(ABC):
    """
    Delivers reset codes to users.

    Implementations must not raise: delivery problems are returned as an
    error Result so callers can decide to ignore them.
    """

    @abstractmethod
    async def send_reset_code(self, notification: ResetCodeNotification) -> Result[None]:
        pass
