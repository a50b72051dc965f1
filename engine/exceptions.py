# engine/exceptions.py

class EngineError(Exception):
    pass


class ConfigurationError(EngineError, ValueError):
    pass


class CategoryValidationError(EngineError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
