"""Base exceptions for RunPlan."""


class RunPlanException(Exception):
    """Base exception for all RunPlan errors."""
    pass


class ConfigurationError(RunPlanException):
    """Raised when there's a configuration error."""
    pass
