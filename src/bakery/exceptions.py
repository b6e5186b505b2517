"""Error taxonomy for the bakery back office.

Every error carries a machine-readable ``reason`` code and a ``messages``
mapping of field name to a list of human-readable messages, e.g.::

    UnprocessableError(
        "discount_inactive",
        {"discount_id": ["Discount 7 ('Spring sale') is not active"]},
    )

None of these are transient: callers translate them into responses and
never retry.
"""


class BakeryError(Exception):
    """Base class for all business errors raised by the bakery domain."""

    def __init__(self, reason, messages=None):
        self.reason = reason
        self.messages = dict(messages or {})
        super().__init__(reason, self.messages)

    def __str__(self):
        details = "; ".join(f"{field}: {', '.join(msgs)}" for field, msgs in self.messages.items())
        return f"{self.reason} ({details})" if details else self.reason


class NotFoundError(BakeryError):
    """A referenced price, discount or order does not exist."""


class UnprocessableError(BakeryError):
    """The referenced entity exists but fails a business precondition."""


class InvalidInputError(BakeryError):
    """The request is malformed (empty basket, non-positive quantity, ...)."""


class ConflictError(BakeryError):
    """The request collides with existing state (e.g. a duplicate coupon code)."""
