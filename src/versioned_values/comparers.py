"""
Equality strategies for version payloads.

A `Version` delegates value equality and value hashing to the comparer bound on
its class, so a kind can refine "equal" without re-implementing the identity
and hashing rules of the record itself.
"""
from typing import Any
import math


class ValueComparer:
    """Natural equality of the payload type; two absent values are equal."""

    def equals(self, left: Any, right: Any) -> bool:
        if left is None or right is None:
            return left is right
        return left == right

    def hash(self, value: Any) -> int:
        return hash(value)


class FloatComparer(ValueComparer):
    """Treats NaN as equal to itself so a reloaded NaN version still equals the original."""

    def equals(self, left: Any, right: Any) -> bool:
        if isinstance(left, float) and isinstance(right, float) and math.isnan(left) and math.isnan(right):
            return True
        return super().equals(left, right)

    def hash(self, value: Any) -> int:
        if isinstance(value, float) and math.isnan(value):
            return 0
        return hash(value)


class CaseFoldComparer(ValueComparer):
    def equals(self, left: Any, right: Any) -> bool:
        if left is None or right is None:
            return left is right
        return left.casefold() == right.casefold()

    def hash(self, value: Any) -> int:
        return hash(value.casefold())
