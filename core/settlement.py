"""
Settlement between the two partners.

The difference in net positions gives a provisional direction and a base
amount (half the difference). Prior balances are payments already made
between the partners; they adjust the base amount and, when large enough,
reverse who pays whom.
"""
from decimal import Decimal
from typing import Dict, Optional, Tuple

from core.logger import setup_logger
from core.schema import (
    ZERO,
    CategorySummary,
    Party,
    PriorBalances,
    Settlement,
    SettlementDirection,
)

logger = setup_logger(__name__)

DEFAULT_EPSILON = Decimal("0.01")

# (provisional direction, sign of signed amount) -> final direction
_TRANSITIONS: Dict[Tuple[SettlementDirection, int], SettlementDirection] = {
    (SettlementDirection.B_OWES_A, 1): SettlementDirection.B_OWES_A,
    (SettlementDirection.B_OWES_A, -1): SettlementDirection.A_OWES_B,
    (SettlementDirection.A_OWES_B, 1): SettlementDirection.A_OWES_B,
    (SettlementDirection.A_OWES_B, -1): SettlementDirection.B_OWES_A,
    (SettlementDirection.NONE, 1): SettlementDirection.A_OWES_B,
    (SettlementDirection.NONE, -1): SettlementDirection.B_OWES_A,
}

_PARTIES: Dict[SettlementDirection, Tuple[Optional[Party], Optional[Party]]] = {
    SettlementDirection.B_OWES_A: (Party.PARTY_B, Party.PARTY_A),
    SettlementDirection.A_OWES_B: (Party.PARTY_A, Party.PARTY_B),
    SettlementDirection.NONE: (None, None),
}


def provisional_direction(difference: Decimal) -> SettlementDirection:
    """Direction implied by the nets alone (difference = PartyB net - PartyA net)."""
    if difference > 0:
        return SettlementDirection.B_OWES_A
    if difference < 0:
        return SettlementDirection.A_OWES_B
    return SettlementDirection.NONE


def apply_prior_balances(
    direction: SettlementDirection,
    base_amount: Decimal,
    prior_a: Decimal,
    prior_b: Decimal,
) -> Decimal:
    """
    Signed settlement after carry-forward.

    Positive keeps the provisional direction, negative reverses it.
    """
    if direction == SettlementDirection.B_OWES_A:
        return base_amount - prior_a + prior_b
    if direction == SettlementDirection.A_OWES_B:
        return base_amount - prior_b + prior_a
    return -prior_a - prior_b


def resolve_direction(
    provisional: SettlementDirection,
    signed_amount: Decimal,
    epsilon: Decimal = DEFAULT_EPSILON,
) -> Tuple[SettlementDirection, Decimal]:
    """
    Final direction and payable amount from the signed settlement.

    Returns:
        (final direction, non-negative amount); amounts within epsilon of
        zero resolve to (NONE, 0)
    """
    if abs(signed_amount) <= epsilon:
        return SettlementDirection.NONE, ZERO
    sign = 1 if signed_amount > 0 else -1
    return _TRANSITIONS[(provisional, sign)], abs(signed_amount)


def calculate_settlement(
    party_a: CategorySummary,
    party_b: CategorySummary,
    prior_balances: Optional[PriorBalances] = None,
    epsilon: Decimal = DEFAULT_EPSILON,
) -> Settlement:
    """
    Work out who owes whom after this batch and any earlier payments.

    Args:
        party_a: Final PartyA summary
        party_b: Final PartyB summary
        prior_balances: Carry-forward amounts; the shared value is ignored
        epsilon: Amounts at or below this are treated as settled

    Returns:
        Settlement with owing/receiving party and amount
    """
    prior_balances = prior_balances or PriorBalances()

    difference = party_b.net - party_a.net
    base_amount = abs(difference) / 2
    provisional = provisional_direction(difference)

    signed_amount = apply_prior_balances(
        provisional, base_amount, prior_balances.party_a, prior_balances.party_b
    )
    final, amount = resolve_direction(provisional, signed_amount, epsilon)
    owing, receiving = _PARTIES[final]

    logger.info(
        f"Settlement: difference={difference}, base={base_amount}, "
        f"signed={signed_amount}, direction={final.value}, amount={amount}"
    )

    return Settlement(
        owing_party=owing,
        receiving_party=receiving,
        amount=amount,
        base_amount=base_amount,
        difference=difference,
        signed_amount=signed_amount,
        provisional_direction=provisional,
        final_direction=final,
    )
