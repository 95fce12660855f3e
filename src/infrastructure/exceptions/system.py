from typing import Optional


class BaseSystemError(Exception):
    """Failure outside any single exchange: startup and wiring."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(BaseSystemError):
    """Invalid or missing configuration; setting_name points at the offending key."""

    def __init__(self, message: str, setting_name: Optional[str] = None):
        super().__init__(message)
        self.setting_name = setting_name

    def __str__(self) -> str:
        if self.setting_name:
            return f"{self.message} (setting: {self.setting_name})"
        return self.message
