# -*- coding: utf-8 -*-
"""
hushh.stdlib.uint
=================

Checked U256 arithmetic. Any result outside ``[0, U256_MAX]`` raises
``ArithmeticOverflow``; there are no saturating variants.
"""

from __future__ import annotations

from typing import Final

from ..errors import ArithmeticOverflow, InvalidArgument

U256_MAX: Final[int] = (1 << 256) - 1


def require_u256(x: object, what: str = "value") -> int:
    if isinstance(x, bool) or not isinstance(x, int):
        raise InvalidArgument(f"{what} must be an integer", details={"py_type": type(x).__name__})
    if x < 0 or x > U256_MAX:
        raise ArithmeticOverflow(f"{what} out of u256 range")
    return x


def u256_add(a: int, b: int) -> int:
    r = a + b
    if r > U256_MAX:
        raise ArithmeticOverflow("u256 addition overflow")
    return r


def u256_sub(a: int, b: int) -> int:
    if b > a:
        raise ArithmeticOverflow("u256 subtraction underflow")
    return a - b


def u256_mul(a: int, b: int) -> int:
    r = a * b
    if r > U256_MAX:
        raise ArithmeticOverflow("u256 multiplication overflow")
    return r


__all__ = ["U256_MAX", "require_u256", "u256_add", "u256_sub", "u256_mul"]
