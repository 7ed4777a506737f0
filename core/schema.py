"""
Pydantic models for transactions, category summaries and settlement results.
"""
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field

ZERO = Decimal("0")


class Party(str, Enum):
    """Fixed set of categories a transaction can be assigned to."""
    PARTY_A = "party_a"
    PARTY_B = "party_b"
    SHARED = "shared"
    UNSPECIFIED = "unspecified"


class PartyCodes(BaseModel):
    """
    Short codes used in the "Who" column, and the labels shown in reports.
    The engine only ever compares against these values, so a caller can
    swap them without touching the classification rules.
    """
    model_config = ConfigDict(frozen=True)

    party_a: str = "NB"
    party_b: str = "NS"
    shared: str = "C"
    unspecified: str = "Unspecified"

    def code_for(self, party: Party) -> str:
        return getattr(self, party.value)

    def party_for_code(self, code: str) -> Optional[Party]:
        """Return the named party whose code equals `code` (uppercased), if any."""
        for party in (Party.PARTY_A, Party.PARTY_B, Party.SHARED):
            if self.code_for(party).strip().upper() == code:
                return party
        return None

    def as_dict(self) -> Dict[str, str]:
        return {party.value: self.code_for(party) for party in Party}


DEFAULT_PARTY_CODES = PartyCodes()


class Transaction(BaseModel):
    """A single classified transaction row. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    date: str = ""
    remarks: str = ""
    withdrawal: Decimal = ZERO
    deposit: Decimal = ZERO
    balance: Decimal = ZERO
    party: Party = Party.UNSPECIFIED


class CategorySummary(BaseModel):
    """Running totals for one category."""
    total_deposits: Decimal = ZERO
    total_withdrawals: Decimal = ZERO
    count: int = 0
    prior_balance: Decimal = ZERO

    @computed_field
    @property
    def net(self) -> Decimal:
        """Withdrawals minus deposits; positive means more was taken out."""
        return self.total_withdrawals - self.total_deposits

    def add(self, deposit: Decimal, withdrawal: Decimal) -> None:
        self.total_deposits += deposit
        self.total_withdrawals += withdrawal


class CategorySummaries(BaseModel):
    """Exactly one summary per Party, indexable by Party."""
    party_a: CategorySummary = Field(default_factory=CategorySummary)
    party_b: CategorySummary = Field(default_factory=CategorySummary)
    shared: CategorySummary = Field(default_factory=CategorySummary)
    unspecified: CategorySummary = Field(default_factory=CategorySummary)

    def __getitem__(self, party: Party) -> CategorySummary:
        return getattr(self, Party(party).value)

    def items(self) -> Iterator[Tuple[Party, CategorySummary]]:
        for party in Party:
            yield party, self[party]

    @property
    def total_deposits(self) -> Decimal:
        return sum((summary.total_deposits for _, summary in self.items()), ZERO)

    @property
    def total_withdrawals(self) -> Decimal:
        return sum((summary.total_withdrawals for _, summary in self.items()), ZERO)


class PriorBalances(BaseModel):
    """
    Carry-forward amounts supplied by the caller.

    party_a: amount PartyB already paid PartyA before this batch
    party_b: amount PartyA already paid PartyB before this batch
    shared: display only, never used in settlement
    """
    party_a: Decimal = ZERO
    party_b: Decimal = ZERO
    shared: Decimal = ZERO

    def for_party(self, party: Party) -> Decimal:
        if party == Party.UNSPECIFIED:
            return ZERO
        return getattr(self, party.value)


class SettlementDirection(str, Enum):
    B_OWES_A = "b_owes_a"
    A_OWES_B = "a_owes_b"
    NONE = "none"


class Settlement(BaseModel):
    """Who pays whom, and how much, to even out the two partners."""
    owing_party: Optional[Party] = None
    receiving_party: Optional[Party] = None
    amount: Decimal = ZERO
    base_amount: Decimal = ZERO
    difference: Decimal = ZERO
    signed_amount: Decimal = ZERO
    provisional_direction: SettlementDirection = SettlementDirection.NONE
    final_direction: SettlementDirection = SettlementDirection.NONE

    @computed_field
    @property
    def is_settled(self) -> bool:
        return self.final_direction == SettlementDirection.NONE


class AnalysisResult(BaseModel):
    """Everything one run over a file produces."""
    transactions: List[Transaction] = Field(default_factory=list)
    summaries: CategorySummaries = Field(default_factory=CategorySummaries)
    latest_transaction: Optional[Transaction] = None
    settlement: Settlement = Field(default_factory=Settlement)
    prior_balances: PriorBalances = Field(default_factory=PriorBalances)
    rows_skipped: int = 0

    def transactions_for(self, party: Party) -> List[Transaction]:
        return [txn for txn in self.transactions if txn.party == party]
