"""Fixed-width unsigned integer used for on-chain quantities.

`Uint256` is a plain `int` restricted to `[0, 2**256)`. Arithmetic between a
`Uint256` and any int returns a new `Uint256` and raises `OverflowError` when
the result leaves the range, mirroring checked EVM math.
"""

from __future__ import annotations

from typing import SupportsIndex

from fluidstate.constants import UINT256_MAX


class Uint256(int):
    __slots__ = ()

    def __new__(cls, value: SupportsIndex | str = 0) -> Uint256:
        v = int(value, 0) if isinstance(value, str) else int(value)
        if v < 0 or v > UINT256_MAX:
            raise OverflowError(f"{v} out of uint256 range")
        return super().__new__(cls, v)

    def __repr__(self) -> str:
        return f"Uint256({int(self)})"

    def __str__(self) -> str:
        return int.__repr__(self)

    # ---- checked arithmetic ----

    def __add__(self, other: int) -> Uint256:
        if not isinstance(other, int):
            return NotImplemented
        return Uint256(int(self) + int(other))

    __radd__ = __add__

    def __sub__(self, other: int) -> Uint256:
        if not isinstance(other, int):
            return NotImplemented
        return Uint256(int(self) - int(other))

    def __rsub__(self, other: int) -> Uint256:
        if not isinstance(other, int):
            return NotImplemented
        return Uint256(int(other) - int(self))

    def __mul__(self, other: int) -> Uint256:
        if not isinstance(other, int):
            return NotImplemented
        return Uint256(int(self) * int(other))

    __rmul__ = __mul__

    def __floordiv__(self, other: int) -> Uint256:
        if not isinstance(other, int):
            return NotImplemented
        return Uint256(int(self) // int(other))

    def __mod__(self, other: int) -> Uint256:
        if not isinstance(other, int):
            return NotImplemented
        return Uint256(int(self) % int(other))

    def __rfloordiv__(self, other: int) -> Uint256:
        if not isinstance(other, int):
            return NotImplemented
        return Uint256(int(other) // int(self))

    def __rmod__(self, other: int) -> Uint256:
        if not isinstance(other, int):
            return NotImplemented
        return Uint256(int(other) % int(self))

    def __pow__(self, other: int, modulo: int | None = None) -> Uint256:
        if not isinstance(other, int):
            return NotImplemented
        if other < 0:
            raise OverflowError("negative exponent")
        if modulo is not None:
            return Uint256(pow(int(self), int(other), int(modulo)))
        # bound the exponent before materializing the result
        if int(self) > 1 and other >= 256:
            raise OverflowError(f"{int(self)} ** {other} out of uint256 range")
        return Uint256(int(self) ** int(other))

    def __rpow__(self, other: int) -> Uint256:
        if not isinstance(other, int):
            return NotImplemented
        return Uint256(other).__pow__(self)

    def __lshift__(self, other: int) -> Uint256:
        if not isinstance(other, int):
            return NotImplemented
        if other < 0:
            raise ValueError("negative shift count")
        if int(self) and other >= 256:
            raise OverflowError(f"{int(self)} << {other} out of uint256 range")
        return Uint256(int(self) << int(other))

    def __rshift__(self, other: int) -> Uint256:
        if not isinstance(other, int):
            return NotImplemented
        return Uint256(int(self) >> int(other))

    def __neg__(self) -> Uint256:
        return Uint256(-int(self))

    def __pos__(self) -> Uint256:
        return self
