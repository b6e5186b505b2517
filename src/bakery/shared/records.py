"""Aggregate loading with bakery reason codes."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from bakery.exceptions import NotFoundError


def load(aggregate_cls, identifier, reason, field="id"):
    """Fetch an aggregate by id, raising ``NotFoundError(reason)`` when it does not exist."""
    try:
        return current_domain.repository_for(aggregate_cls).get(identifier)
    except ObjectNotFoundError:
        raise NotFoundError(reason, {field: [f"{aggregate_cls.__name__} {identifier} not found"]}) from None


def find(aggregate_cls, identifier):
    """Fetch an aggregate by id, or ``None``."""
    try:
        return current_domain.repository_for(aggregate_cls).get(identifier)
    except ObjectNotFoundError:
        return None


def query(aggregate_cls):
    return current_domain.repository_for(aggregate_cls)._dao.query
