"""Builders for mock SQLAlchemy results."""

from unittest.mock import MagicMock


def result_with(value):
    """A mock ``Result`` whose scalar_one_or_none() returns ``value``."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def result_with_rows(rows):
    """A mock ``Result`` whose scalars().all() returns ``rows``."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    return result
