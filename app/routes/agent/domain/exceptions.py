class InvalidActionError(Exception):
    def __init__(self, action):
        self.action = action
        super().__init__(f"Invalid action: {action}")


class InvalidParamsError(Exception):
    """Exception raised when a decision's parameters cannot be executed for its action kind."""

    def __init__(self, action: str, reason: str):
        self.action = action
        self.reason = reason
        super().__init__(f"Invalid {action} parameters: {reason}")


class InvalidStatusTransitionError(Exception):
    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot move action from '{current}' to '{requested}'")


class ActionExecutionError(Exception):
    """Exception raised to the caller after an action has been recorded as failed."""

    def __init__(self, action_id: str, action: str | None, cause: str):
        self.action_id = action_id
        self.action = action
        self.cause = cause
        self.message = f"{action or 'action'} failed: {cause}"
        super().__init__(self.message)


class AIDecisionError(Exception):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"AI decision failed: {reason}")
