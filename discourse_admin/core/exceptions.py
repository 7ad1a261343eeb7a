"""Discourse-specific exceptions for error handling."""


class DiscourseError(Exception):
    """Base exception for all Discourse operations."""
    pass


class DiscourseRequestError(DiscourseError):
    """A Discourse call finished with a failure result.

    Attributes:
        reason: Failure reason carried by the result (string or error mapping)
    """

    def __init__(self, reason):
        self.reason = reason
        super().__init__(str(reason))


class DiscourseTransportError(DiscourseRequestError):
    """The request never produced an HTTP response (connection refused, timeout, DNS)."""
    pass


class MissingCredentialsError(DiscourseError):
    """Privileged call attempted without admin username or API key."""
    pass


class UnexpectedFieldsError(DiscourseError):
    """Response carried fields outside the allow-list while running in strict mode.

    Attributes:
        fields: Sorted names of the unrecognized fields
    """

    def __init__(self, fields: list[str]):
        self.fields = fields
        super().__init__(f"Unexpected response fields: {', '.join(fields)}")
