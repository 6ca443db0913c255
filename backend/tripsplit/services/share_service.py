"""
Share resolution: turns one expense's split rows into exact owed amounts.

Rows are applied in a fixed order: fixed amounts, then percentages of the
whole expense, then the remainder divided among equal-share members. The
resulting amounts always sum exactly to the expense total.
"""
import logging
from typing import Any, Dict, Iterable, List

from tripsplit.core.exceptions import (
    InvalidSplit,
    OverAllocated,
    UnallocatedRemainder,
)
from tripsplit.core.money import Amount, percentage_of, split_evenly, to_amount
from tripsplit.core.enums import ShareType

logger = logging.getLogger(__name__)


def _share_type(split, expense_id) -> ShareType:
    try:
        return ShareType(split.share_type)
    except ValueError:
        raise InvalidSplit(
            f"Unknown share type {split.share_type!r}",
            expense_id=expense_id,
            member_id=split.member_id,
        )


def _share_value(split, expense_id) -> int:
    """Return the split's value, requiring a non-negative integer."""
    value = split.share_value
    if value is None:
        raise InvalidSplit(
            f"shareValue is required for '{ShareType(split.share_type).value}' splits",
            expense_id=expense_id,
            member_id=split.member_id,
        )
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidSplit(
            f"shareValue must be an integer, got {value!r}",
            expense_id=expense_id,
            member_id=split.member_id,
        )
    if value < 0:
        raise InvalidSplit(
            f"shareValue must not be negative, got {value}",
            expense_id=expense_id,
            member_id=split.member_id,
        )
    return value


def resolve_expense(expense, splits: Iterable[Any]) -> Dict[Any, Amount]:
    """
    Resolve one expense into a mapping of member id -> owed amount.

    ``expense`` needs an ``amount`` (and optionally ``id``); each split needs
    ``member_id``, ``share_type`` and ``share_value``. Only members with a
    split row take part. The mapping preserves split order and its values sum
    to the expense amount. An expense with no split rows resolves to an empty
    mapping: the payer covers it alone.

    Raises InvalidSplit, OverAllocated or UnallocatedRemainder.
    """
    expense_id = getattr(expense, "id", None)
    total = to_amount(expense.amount)
    splits = list(splits)

    if not splits:
        logger.debug(f"Expense {expense_id} has no splits; payer covers {total} alone")
        return {}

    owed: Dict[Any, Amount] = {}
    amount_splits: List[Any] = []
    percentage_splits: List[Any] = []
    equal_splits: List[Any] = []

    for split in splits:
        if split.member_id in owed:
            raise InvalidSplit(
                "Member appears more than once in the same expense",
                expense_id=expense_id,
                member_id=split.member_id,
            )
        owed[split.member_id] = 0
        share_type = _share_type(split, expense_id)
        if share_type == ShareType.AMOUNT:
            amount_splits.append(split)
        elif share_type == ShareType.PERCENTAGE:
            percentage_splits.append(split)
        else:
            equal_splits.append(split)

    # 1. Fixed amounts
    amount_sum = 0
    for split in amount_splits:
        value = _share_value(split, expense_id)
        owed[split.member_id] = value
        amount_sum += value
    if amount_sum > total:
        raise InvalidSplit(
            f"Amount shares ({amount_sum}) exceed the expense total ({total})",
            expense_id=expense_id,
        )

    # 2. Percentages, always of the whole expense
    percent_sum = 0
    percentage_amount_sum = 0
    for split in percentage_splits:
        percent = _share_value(split, expense_id)
        percent_sum += percent
        if percent_sum > 100:
            raise InvalidSplit(
                "Percentage shares add up to more than 100%",
                expense_id=expense_id,
                member_id=split.member_id,
            )
        share = percentage_of(total, percent)
        owed[split.member_id] = share
        percentage_amount_sum += share

    # 3. What is left for equal shares
    remaining = total - amount_sum - percentage_amount_sum
    if remaining < 0:
        raise OverAllocated(
            f"Amount and percentage shares ({amount_sum + percentage_amount_sum}) "
            f"exceed the expense total ({total})",
            expense_id=expense_id,
        )

    # 4. Equal shares; leftover units go to the earliest rows
    if equal_splits:
        for split, share in zip(equal_splits, split_evenly(remaining, len(equal_splits))):
            owed[split.member_id] = share
    elif remaining > 0:
        raise UnallocatedRemainder(
            f"{remaining} of {total} is not assigned to anyone; "
            f"add an equal share or adjust the amounts",
            expense_id=expense_id,
        )

    logger.debug(f"Resolved expense {expense_id} ({total}): {owed}")
    return owed
