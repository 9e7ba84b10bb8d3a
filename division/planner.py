"""
Expands a Problem into the ordered steps of written long division.

Each quotient digit produces a group of steps:
  DIVIDE    how many times the divisor goes into the working value
  MULTIPLY  quotient digit times divisor (omitted in the two-step variant)
  SUBTRACT  working value minus that product

The leading group keeps bringing down digits until the working value
reaches the divisor. After that every remaining digit is brought down onto
the previous remainder and yields exactly one quotient digit, which may
be 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from division.generator import Problem


class StepKind(str, Enum):
    DIVIDE = "DIVIDE"
    MULTIPLY = "MULTIPLY"
    SUBTRACT = "SUBTRACT"


@dataclass(frozen=True)
class Step:
    kind: StepKind
    instruction: str
    hint: str
    current_value: int
    expected_answer: int
    quotient_digit: int
    product: int
    remainder: int
    quotient_so_far: str
    position_index: int
    digit_index: int


@dataclass(frozen=True)
class DigitGroup:
    position_index: int
    digit_index: int
    value: int
    quotient_digit: int
    product: int
    remainder: int


def digit_groups(problem: Problem) -> List[DigitGroup]:
    digits = str(problem.dividend)
    divisor = problem.divisor
    groups: List[DigitGroup] = []

    i = 0
    working = ""
    while i < len(digits):
        working += digits[i]
        # bring-down: only the leading group may swallow extra digits
        if not groups:
            while int(working) < divisor and i < len(digits) - 1:
                i += 1
                working += digits[i]

        value = int(working)
        q = value // divisor
        product = q * divisor
        remainder = value - product
        groups.append(
            DigitGroup(
                position_index=len(groups),
                digit_index=i,
                value=value,
                quotient_digit=q,
                product=product,
                remainder=remainder,
            )
        )
        working = str(remainder)
        i += 1

    return groups


def _group_steps(
    g: DigitGroup, divisor: int, before: str, include_multiply: bool
) -> List[Step]:
    after = before + str(g.quotient_digit)
    v, q, p, r = g.value, g.quotient_digit, g.product, g.remainder

    def step(kind: StepKind, instruction: str, hint: str, expected: int, so_far: str) -> Step:
        return Step(
            kind=kind,
            instruction=instruction,
            hint=hint,
            current_value=v,
            expected_answer=expected,
            quotient_digit=q,
            product=p,
            remainder=r,
            quotient_so_far=so_far,
            position_index=g.position_index,
            digit_index=g.digit_index,
        )

    out = [
        step(
            StepKind.DIVIDE,
            f"How many times does {divisor} go into {v}?",
            f"{v} ÷ {divisor} = {q}",
            q,
            before,
        )
    ]
    if include_multiply:
        out.append(
            step(
                StepKind.MULTIPLY,
                f"What is {divisor} × {q}?",
                f"{divisor} × {q} = {p}",
                p,
                after,
            )
        )
        subtract_text = f"What is {v} - {p}?"
    else:
        subtract_text = f"Multiply {divisor} × {q} and subtract from {v}"
    out.append(step(StepKind.SUBTRACT, subtract_text, f"{v} - {p} = {r}", r, after))
    return out


def plan(problem: Problem, include_multiply: bool = True) -> Tuple[Step, ...]:
    steps: List[Step] = []
    so_far = ""
    for g in digit_groups(problem):
        steps.extend(_group_steps(g, problem.divisor, so_far, include_multiply))
        so_far += str(g.quotient_digit)
    return tuple(steps)


def quotient_from_steps(steps: Tuple[Step, ...]) -> Optional[int]:
    digits = "".join(str(s.expected_answer) for s in steps if s.kind is StepKind.DIVIDE)
    return int(digits) if digits else None
