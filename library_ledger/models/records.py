"""Plain value types handed out by the ledger.

These are detached from the SQLAlchemy session so callers can keep them
after the unit of work that produced them has been committed or rolled
back.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime


@dataclass(frozen=True)
class LoanRecord:
    loan_id: int
    book_id: int
    borrower_id: int
    loan_date: datetime
    due_date: datetime
    return_date: datetime | None = None

    @classmethod
    def from_model(cls, loan) -> "LoanRecord":
        return cls(
            loan_id=loan.id,
            book_id=loan.book_id,
            borrower_id=loan.borrower_id,
            loan_date=loan.loan_date,
            due_date=loan.due_date,
            return_date=loan.return_date,
        )


@dataclass(frozen=True)
class IssuedLoan:
    loan_id: int
    due_date: datetime


@dataclass(frozen=True)
class ReturnedLoan:
    book_id: int
    borrower_id: int


@dataclass(frozen=True)
class LoanView:
    """An open loan joined with the book title and borrower name."""

    loan_id: int
    book_id: int
    book_title: str
    borrower_id: int
    borrower_name: str
    loan_date: datetime
    due_date: datetime

    def to_dict(self) -> dict:
        data = asdict(self)
        data["loan_date"] = self.loan_date.isoformat()
        data["due_date"] = self.due_date.isoformat()
        return data
