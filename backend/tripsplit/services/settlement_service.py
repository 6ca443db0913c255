"""
Settlement service: balances and debt minimization for a trip.

Everything is recomputed from a full snapshot of members, expenses and splits
on each call. Nothing is cached or stored.
"""
import heapq
import logging
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from sqlalchemy.orm import Session

from tripsplit.core.exceptions import InternalInconsistency, InvalidSplit
from tripsplit.core.money import to_amount
from tripsplit.core.utils import format_amount, format_signed_amount
from tripsplit.models.expense import Expense, ExpenseSplit
from tripsplit.models.member import TripMember
from tripsplit.services.ledger import MemberBalance, SettlementSummary, Transfer
from tripsplit.services.share_service import resolve_expense

logger = logging.getLogger(__name__)


def aggregate_balances(
    members: Sequence[Any],
    expenses: Iterable[Any],
    owed_by_expense: Mapping[Any, Mapping[Any, int]],
) -> List[MemberBalance]:
    """
    Fold every expense into one balance per member, in member order.

    ``owed_by_expense`` maps expense id -> resolved owed amounts. Expenses
    that resolved to nothing (no splits) are left out of both paid and owed,
    since the payer covers them alone. Expenses whose payer is not a member
    must already be filtered out by the caller.
    """
    balances: Dict[Any, MemberBalance] = {
        member.id: MemberBalance(member_id=member.id, member_name=member.name)
        for member in members
    }

    for expense in expenses:
        owed = owed_by_expense.get(expense.id) or {}
        if not owed:
            continue
        balances[expense.payer_id].total_paid += to_amount(expense.amount)
        for member_id, share in owed.items():
            if member_id not in balances:
                raise InvalidSplit(
                    "Split references a member who is not part of this trip",
                    expense_id=expense.id,
                    member_id=member_id,
                )
            balances[member_id].total_owed += share

    result = list(balances.values())
    net = sum(b.balance for b in result)
    if net != 0:
        logger.error(f"Balances do not sum to zero (net {net}): {result}")
        raise InternalInconsistency(f"Balances do not sum to zero (net {net})")
    return result


def minimize_transfers(balances: Sequence[Tuple[Any, int]]) -> List[Transfer]:
    """
    Minimize the number of transfers needed to settle debts.

    Greedy: repeatedly match the largest creditor with the largest debtor and
    move the smaller of the two amounts. Ties go to the member listed first.
    Produces at most (members with non-zero balance - 1) transfers.
    """
    net = sum(balance for _, balance in balances)
    if net != 0:
        logger.error(f"Cannot settle balances that do not sum to zero (net {net})")
        raise InternalInconsistency(f"Balances do not sum to zero (net {net})")

    # Heap entries: (-outstanding, position, member_id)
    creditors = [(-bal, pos, uid) for pos, (uid, bal) in enumerate(balances) if bal > 0]
    debtors = [(bal, pos, uid) for pos, (uid, bal) in enumerate(balances) if bal < 0]
    heapq.heapify(creditors)
    heapq.heapify(debtors)

    transfers = []
    while creditors and debtors:
        neg_credit, cred_pos, creditor_id = heapq.heappop(creditors)
        neg_debt, debt_pos, debtor_id = heapq.heappop(debtors)
        cred_amount = -neg_credit
        debt_amount = -neg_debt

        # Transfer the minimum of what's owed and what's needed
        transfer_amount = min(cred_amount, debt_amount)
        transfers.append(Transfer(debtor_id, creditor_id, transfer_amount))
        logger.debug(f"Transfer {transfer_amount} from {debtor_id} to {creditor_id}")

        if cred_amount > transfer_amount:
            heapq.heappush(creditors, (-(cred_amount - transfer_amount), cred_pos, creditor_id))
        if debt_amount > transfer_amount:
            heapq.heappush(debtors, (-(debt_amount - transfer_amount), debt_pos, debtor_id))

    return transfers


def compute_settlement_summary(
    members: Sequence[Any],
    expenses: Iterable[Any],
    splits_by_expense: Mapping[Any, Iterable[Any]],
) -> SettlementSummary:
    """
    Resolve every expense, aggregate balances and plan transfers.

    Any invalid expense fails the whole computation; there is no partial
    summary.
    """
    member_ids = {member.id for member in members}
    included = []
    for expense in expenses:
        if expense.payer_id not in member_ids:
            logger.warning(
                f"Skipping expense {expense.id}: payer {expense.payer_id} is not a trip member"
            )
            continue
        included.append(expense)

    if not included:
        return SettlementSummary(members=list(members))

    owed_by_expense = {
        expense.id: resolve_expense(expense, splits_by_expense.get(expense.id, ()))
        for expense in included
    }
    balances = aggregate_balances(members, included, owed_by_expense)
    transfers = minimize_transfers([(b.member_id, b.balance) for b in balances])

    summary = SettlementSummary(
        members=list(members),
        balances=balances,
        settlements=transfers,
        total_expenses=sum(to_amount(expense.amount) for expense in included),
    )
    logger.info(
        f"Settlement computed: {len(summary.members)} members, {len(included)} expenses, "
        f"{len(transfers)} transfers"
    )
    return summary


def build_summary_text(summary: SettlementSummary, currency: str) -> str:
    """Human-readable summary of balances and transfers."""
    names = summary.member_names()
    summary_lines = []
    summary_lines.append(f"Total expenses: {format_amount(summary.total_expenses, currency)}")
    summary_lines.append(f"Members: {len(summary.members)}")
    summary_lines.append("\nBalances:")
    for balance in summary.balances:
        summary_lines.append(
            f"  {balance.member_name}: {format_signed_amount(balance.balance, currency)}"
        )
    summary_lines.append("\nTransfers:")
    if not summary.settlements:
        summary_lines.append("  (none)")
    for transfer in summary.settlements:
        summary_lines.append(
            f"  {names.get(transfer.from_member_id, '')} -> {names.get(transfer.to_member_id, '')}: "
            f"{format_amount(transfer.amount, currency)}"
        )
    return "\n".join(summary_lines)


def calculate_settlement(trip_id: int, db: Session) -> SettlementSummary:
    """
    Load a consistent snapshot of a trip's expense data and settle it.
    """
    members = db.query(TripMember).filter(
        TripMember.trip_id == trip_id
    ).order_by(TripMember.id).all()

    expenses = db.query(Expense).filter(
        Expense.trip_id == trip_id
    ).order_by(Expense.id).all()

    splits_by_expense: Dict[int, List[ExpenseSplit]] = {}
    if expenses:
        splits = db.query(ExpenseSplit).filter(
            ExpenseSplit.expense_id.in_([expense.id for expense in expenses])
        ).order_by(ExpenseSplit.id).all()
        for split in splits:
            splits_by_expense.setdefault(split.expense_id, []).append(split)

    return compute_settlement_summary(members, expenses, splits_by_expense)
