"""Shared fixtures: record factories."""

from itertools import count

import pytest

from tastelog.schema import Sake, Wine


@pytest.fixture
def make_wine():
    """Factory for Wine records with sequential ids."""
    ids = count(1)

    def _make(rating=3, name=None, **attrs):
        number = next(ids)
        return Wine(
            id=attrs.pop("id", f"w{number}"),
            name=name or f"Wine {number}",
            rating=rating,
            **attrs
        )

    return _make


@pytest.fixture
def make_sake():
    """Factory for Sake records with sequential ids."""
    ids = count(1)

    def _make(rating=3, name=None, **attrs):
        number = next(ids)
        return Sake(
            id=attrs.pop("id", f"s{number}"),
            name=name or f"Sake {number}",
            rating=rating,
            **attrs
        )

    return _make
