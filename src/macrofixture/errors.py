"""Exceptions raised by the fixture server and its handlers."""


class FixtureFault(Exception):
    """A handler failed; the connection is dropped without a response."""


class UndefinedResponseError(FixtureFault):
    """Reproduces the fixture scripts whose 404 branch wrote to an undefined response object."""

    def __init__(self, name: str = "respond"):
        super().__init__(f"{name} is not defined")
        self.name = name


class PayloadTooLarge(Exception):
    """The request body exceeded the server's ``max_body_bytes``."""
