from datetime import datetime

from sqlalchemy import func, select, update

from library_ledger.extensions import db
from library_ledger.models.book import Book
from library_ledger.models.borrower import Borrower
from library_ledger.models.loan import Loan
from library_ledger.models.records import LoanRecord, LoanView
from library_ledger.utils.result import ErrorKind, Result


class OpenLoans:
    """
    Lazy view over open loans, optionally only those due before a moment.
    Each iteration runs the query again.
    """

    def __init__(self, due_before: datetime | None = None):
        self.due_before = due_before

    def statement(self):
        stmt = select(Loan).where(Loan.return_date.is_(None))
        if self.due_before is not None:
            stmt = stmt.where(Loan.due_date < self.due_before)
        return stmt.order_by(Loan.due_date, Loan.id)

    def __iter__(self):
        return iter(db.session.scalars(self.statement()))


class LoanRegistry:
    @staticmethod
    def get(loan_id: int):
        return db.session.get(Loan, loan_id)

    @staticmethod
    def create(book_id: int, borrower_id: int, loan_date: datetime, due_date: datetime) -> int:
        loan = Loan(
            book_id=book_id,
            borrower_id=borrower_id,
            loan_date=loan_date,
            due_date=due_date,
            return_date=None,
        )
        db.session.add(loan)
        # id is needed before the unit of work commits
        db.session.flush()
        return loan.id

    @staticmethod
    def close(loan_id: int, return_date: datetime) -> Result:
        res = db.session.execute(
            update(Loan)
            .where(Loan.id == loan_id, Loan.return_date.is_(None))
            .values(return_date=return_date)
            .execution_options(synchronize_session=False)
        )
        loan = db.session.execute(
            select(Loan).where(Loan.id == loan_id).execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if loan is None:
            return Result.fail(ErrorKind.NOT_FOUND, f"Loan {loan_id} not found")
        if res.rowcount == 0:
            return Result.fail(ErrorKind.ALREADY_RETURNED, "Book already returned")
        return Result.success(LoanRecord.from_model(loan))

    @staticmethod
    def list_open(due_before: datetime | None = None) -> OpenLoans:
        return OpenLoans(due_before)

    @staticmethod
    def _views(open_loans: OpenLoans):
        loans = list(open_loans)
        if not loans:
            return []
        # titles and names are looked up, loans hold no references to them
        titles = dict(db.session.execute(
            select(Book.id, Book.title).where(Book.id.in_(sorted({x.book_id for x in loans})))
        ).all())
        names = dict(db.session.execute(
            select(Borrower.id, Borrower.name).where(Borrower.id.in_(sorted({x.borrower_id for x in loans})))
        ).all())

        return [
            LoanView(
                loan_id=x.id,
                book_id=x.book_id,
                book_title=titles.get(x.book_id),
                borrower_id=x.borrower_id,
                borrower_name=names.get(x.borrower_id),
                loan_date=x.loan_date,
                due_date=x.due_date,
            )
            for x in loans
        ]

    @staticmethod
    def list_open_views():
        return LoanRegistry._views(LoanRegistry.list_open())

    @staticmethod
    def list_overdue(now: datetime):
        return LoanRegistry._views(LoanRegistry.list_open(due_before=now))

    @staticmethod
    def count_open_for_book(book_id: int) -> int:
        return db.session.scalar(
            select(func.count(Loan.id)).where(Loan.book_id == book_id, Loan.return_date.is_(None))
        )

    @staticmethod
    def count_open_for_borrower(borrower_id: int) -> int:
        return db.session.scalar(
            select(func.count(Loan.id)).where(Loan.borrower_id == borrower_id, Loan.return_date.is_(None))
        )

    @staticmethod
    def has_history_for_book(book_id: int) -> bool:
        return db.session.scalar(select(func.count(Loan.id)).where(Loan.book_id == book_id)) > 0

    @staticmethod
    def has_history_for_borrower(borrower_id: int) -> bool:
        return db.session.scalar(select(func.count(Loan.id)).where(Loan.borrower_id == borrower_id)) > 0
