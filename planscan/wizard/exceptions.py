class WizardError(Exception):
    """Base exception for actions the wizard refuses to perform."""


class GuardViolationError(WizardError):
    """Raised when a user action's precondition is not met."""


class UnknownTradeError(WizardError):
    """Raised when a trade has no entry in the model-type table."""
