"""
Issue / return orchestration over InventoryLedger and LoanRegistry.

A loan moves ``none -> open`` on issue and ``open -> closed`` on return,
nothing else. Both moves run in one UnitOfWork so the copy counter and
the loan table commit together or not at all.
"""
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy.exc import OperationalError

from library_ledger.models.records import IssuedLoan, ReturnedLoan
from library_ledger.repositories.book_repo import BookRepo
from library_ledger.repositories.borrower_repo import BorrowerRepo
from library_ledger.repositories.inventory_ledger import InventoryLedger
from library_ledger.repositories.loan_registry import LoanRegistry
from library_ledger.repositories.unit_of_work import UnitOfWork, storage_failure
from library_ledger.utils.clock import utcnow
from library_ledger.utils.result import ErrorKind, Result

LOAN_PERIOD_DAYS = 14


class LendingService:
    @staticmethod
    def due_date_for(loan_date: datetime) -> datetime:
        return loan_date + timedelta(days=LOAN_PERIOD_DAYS)

    @staticmethod
    def issue_loan(book_id: int, borrower_id: int, now: datetime | None = None) -> Result:
        now = now or utcnow()
        try:
            return LendingService._issue(book_id, borrower_id, now)
        except OperationalError as e:
            return storage_failure("lending", "issue", e)

    @staticmethod
    def _issue(book_id: int, borrower_id: int, now: datetime) -> Result:
        due_date = LendingService.due_date_for(now)

        with UnitOfWork() as uow:
            if not BookRepo.exists(book_id):
                uow.rollback_only()
                return Result.fail(ErrorKind.NOT_FOUND, f"Book {book_id} not found")
            if not BorrowerRepo.exists(borrower_id):
                uow.rollback_only()
                return Result.fail(ErrorKind.NOT_FOUND, f"Borrower {borrower_id} not found")

            reserved = InventoryLedger.try_reserve(book_id)
            if not reserved.ok:
                uow.rollback_only()
                current_app.logger.info(
                    f"[lending] issue rejected book={book_id} borrower={borrower_id}: {reserved.error.kind.value}"
                )
                return reserved

            loan_id = LoanRegistry.create(book_id, borrower_id, loan_date=now, due_date=due_date)

        current_app.logger.info(
            f"[lending] issued loan={loan_id} book={book_id} borrower={borrower_id} "
            f"available={reserved.value} due={due_date.isoformat()}"
        )
        return Result.success(IssuedLoan(loan_id=loan_id, due_date=due_date))

    @staticmethod
    def return_loan(loan_id: int, now: datetime | None = None) -> Result:
        now = now or utcnow()
        try:
            return LendingService._return(loan_id, now)
        except OperationalError as e:
            return storage_failure("lending", "return", e)

    @staticmethod
    def _return(loan_id: int, now: datetime) -> Result:
        with UnitOfWork() as uow:
            closed = LoanRegistry.close(loan_id, return_date=now)
            if not closed.ok:
                uow.rollback_only()
                current_app.logger.info(f"[lending] return rejected loan={loan_id}: {closed.error.kind.value}")
                return closed

            record = closed.value
            released = InventoryLedger.release(record.book_id)
            if not released.ok:
                # the loan must not stay closed while the copy is still counted as out
                uow.rollback_only()
                return released

        current_app.logger.info(
            f"[lending] returned loan={loan_id} book={record.book_id} available={released.value}"
        )
        return Result.success(ReturnedLoan(book_id=record.book_id, borrower_id=record.borrower_id))

    @staticmethod
    def list_overdue(now: datetime | None = None) -> Result:
        now = now or utcnow()
        try:
            return Result.success(LoanRegistry.list_overdue(now))
        except OperationalError as e:
            return storage_failure("lending", "overdue query", e)

    @staticmethod
    def list_current() -> Result:
        try:
            return Result.success(LoanRegistry.list_open_views())
        except OperationalError as e:
            return storage_failure("lending", "current loans query", e)
