from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Sequence, Union

import numpy as np

class BinaryKind(Enum):
    AND = "AND"
    OR = "OR"
    XOR = "XOR"
    NAND = "NAND"
    NOR = "NOR"

    @property
    def precedence(self) -> int:
        return _PRECEDENCE[self]

    def apply(self, left: bool, right: bool) -> bool:
        if self is BinaryKind.AND:
            return left and right
        if self is BinaryKind.OR:
            return left or right
        if self is BinaryKind.XOR:
            return left != right
        if self is BinaryKind.NAND:
            return not (left and right)
        return not (left or right)

    def apply_columns(self, left: np.ndarray, right: np.ndarray) -> np.ndarray:
        if self is BinaryKind.AND:
            return left & right
        if self is BinaryKind.OR:
            return left | right
        if self is BinaryKind.XOR:
            return left ^ right
        if self is BinaryKind.NAND:
            return ~(left & right)
        return ~(left | right)

# binding strength, higher binds tighter; NOT and atoms sit above all of these
_PRECEDENCE = {
    BinaryKind.AND: 3,
    BinaryKind.NAND: 3,
    BinaryKind.XOR: 2,
    BinaryKind.OR: 1,
    BinaryKind.NOR: 1,
}
_UNARY_PRECEDENCE = 4
_ATOM_PRECEDENCE = 5

@dataclass(frozen=True)
class Literal:
    value: bool

    def evaluate(self, state: int) -> bool:
        return self.value

    def evaluate_columns(self, bits: np.ndarray) -> np.ndarray:
        return np.full(bits.shape[0], self.value, dtype=bool)

    def variables(self) -> FrozenSet[int]:
        return frozenset()

    def to_text(self, names: Sequence[str]) -> str:
        return "true" if self.value else "false"

@dataclass(frozen=True)
class Variable:
    index: int

    def evaluate(self, state: int) -> bool:
        return bool((state >> self.index) & 1)

    def evaluate_columns(self, bits: np.ndarray) -> np.ndarray:
        return bits[:, self.index]

    def variables(self) -> FrozenSet[int]:
        return frozenset((self.index,))

    def to_text(self, names: Sequence[str]) -> str:
        return names[self.index]

@dataclass(frozen=True)
class Not:
    operand: "Expression"

    def evaluate(self, state: int) -> bool:
        return not self.operand.evaluate(state)

    def evaluate_columns(self, bits: np.ndarray) -> np.ndarray:
        return ~self.operand.evaluate_columns(bits)

    def variables(self) -> FrozenSet[int]:
        return self.operand.variables()

    def to_text(self, names: Sequence[str]) -> str:
        inner = self.operand.to_text(names)
        if _precedence_of(self.operand) < _UNARY_PRECEDENCE:
            inner = f"({inner})"
        return f"!{inner}"

@dataclass(frozen=True)
class BinaryOp:
    kind: BinaryKind
    left: "Expression"
    right: "Expression"

    def evaluate(self, state: int) -> bool:
        return self.kind.apply(self.left.evaluate(state), self.right.evaluate(state))

    def evaluate_columns(self, bits: np.ndarray) -> np.ndarray:
        return self.kind.apply_columns(self.left.evaluate_columns(bits), self.right.evaluate_columns(bits))

    def variables(self) -> FrozenSet[int]:
        return self.left.variables() | self.right.variables()

    def to_text(self, names: Sequence[str]) -> str:
        prec = self.kind.precedence
        left = self.left.to_text(names)
        right = self.right.to_text(names)
        # operators are left-associative, so an equal-precedence right child needs parentheses
        if _precedence_of(self.left) < prec:
            left = f"({left})"
        if _precedence_of(self.right) <= prec:
            right = f"({right})"
        return f"{left} {self.kind.value} {right}"

Expression = Union[Literal, Variable, Not, BinaryOp]

def _precedence_of(expr: Expression) -> int:
    if isinstance(expr, BinaryOp):
        return expr.kind.precedence
    if isinstance(expr, Not):
        return _UNARY_PRECEDENCE
    return _ATOM_PRECEDENCE
