"""Exceptions raised while assembling website stacks."""


class WebsiteStackError(Exception):
    """Base class for errors raised by this package."""


class MissingSettingError(WebsiteStackError):
    """Required environment variables are unset or empty."""

    def __init__(self, names: list[str]):
        self.names = names
        super().__init__(f"Missing required settings: {', '.join(names)}")


class StackOrderError(WebsiteStackError):
    """A configuration fragment needs a resource that has not been created yet."""

    def __init__(self, resource: str, step: str):
        self.resource = resource
        self.step = step
        super().__init__(f"{resource} has not been created yet; call {step}() first")
