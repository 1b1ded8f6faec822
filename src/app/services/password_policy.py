import re
from abc import ABC, abstractmethod

from libs.result import Error, Result, Return

PASSWORD_POLICY_MESSAGE = (
    "Password must be 8-128 characters with at least one uppercase letter, "
    "one lowercase letter, and one digit. HTML characters are not allowed."
)

_HTML_CHARACTERS = re.compile(r"[<>&\"']")


class IPasswordPolicy(ABC):
    """Password acceptance predicate - pass/fail plus a user-facing reason"""

    @abstractmethod
    def validate(self, password: object) -> Result[None]:
        """Return ok(None) if acceptable, or an INVALID_INPUT error with the reason"""
        pass


class DefaultPasswordPolicy(IPasswordPolicy):
    """
    Default complexity rules.

    - 8 to 128 characters
    - at least one lowercase letter, one uppercase letter and one digit
    - none of < > & " ' (the frontend rejects them too)
    """

    min_length = 8
    max_length = 128

    def validate(self, password: object) -> Result[None]:
        if not isinstance(password, str) or not self._is_acceptable(password):
            return Return.err(Error("INVALID_INPUT", PASSWORD_POLICY_MESSAGE))
        return Return.ok(None)

    def _is_acceptable(self, password: str) -> bool:
        if not self.min_length <= len(password) <= self.max_length:
            return False
        if _HTML_CHARACTERS.search(password):
            return False
        has_lower = any("a" <= ch <= "z" for ch in password)
        has_upper = any("A" <= ch <= "Z" for ch in password)
        has_digit = any("0" <= ch <= "9" for ch in password)
        return has_lower and has_upper and has_digit
