from datetime import datetime, timedelta

from library_ledger.repositories.loan_registry import LoanRegistry
from library_ledger.repositories.unit_of_work import UnitOfWork
from library_ledger.utils.result import ErrorKind

T0 = datetime(2024, 3, 1, 12, 0, 0)


def _create(book_id, borrower_id, loan_date=T0):
    with UnitOfWork():
        return LoanRegistry.create(book_id, borrower_id, loan_date, loan_date + timedelta(days=14))


def test_create_allows_many_loans_per_borrower(ctx, make_book, make_borrower):
    book_a, book_b = make_book(total=2), make_book(total=2)
    borrower_id = make_borrower()

    ids = {_create(book_a, borrower_id), _create(book_a, borrower_id), _create(book_b, borrower_id)}

    assert len(ids) == 3
    assert LoanRegistry.count_open_for_borrower(borrower_id) == 3
    assert LoanRegistry.count_open_for_book(book_a) == 2


def test_close_sets_return_date_once(ctx, make_book, make_borrower):
    book_id, borrower_id = make_book(), make_borrower()
    loan_id = _create(book_id, borrower_id)

    returned_at = T0 + timedelta(days=3)
    with UnitOfWork():
        first = LoanRegistry.close(loan_id, returned_at)
    assert first.ok
    assert first.value.book_id == book_id
    assert first.value.borrower_id == borrower_id
    assert first.value.return_date == returned_at

    with UnitOfWork() as uow:
        second = LoanRegistry.close(loan_id, returned_at + timedelta(days=1))
        uow.rollback_only()
    assert second.error.kind == ErrorKind.ALREADY_RETURNED
    assert LoanRegistry.get(loan_id).return_date == returned_at


def test_close_unknown_loan(ctx):
    with UnitOfWork() as uow:
        result = LoanRegistry.close(12345, T0)
        uow.rollback_only()
    assert result.error.kind == ErrorKind.NOT_FOUND


def test_list_open_is_lazy_and_restartable(ctx, make_book, make_borrower):
    book_id, borrower_id = make_book(total=3), make_borrower()
    first = _create(book_id, borrower_id)
    second = _create(book_id, borrower_id)

    open_loans = LoanRegistry.list_open()
    assert [loan.id for loan in open_loans] == [first, second]

    with UnitOfWork():
        LoanRegistry.close(first, T0 + timedelta(days=1))

    # the same view reflects the close on the next pass
    assert [loan.id for loan in open_loans] == [second]


def test_list_overdue_uses_strict_due_date_comparison(ctx, make_book, make_borrower):
    book_id = make_book(total=2, title="Dune")
    borrower_id = make_borrower(name="Paul")
    loan_id = _create(book_id, borrower_id)
    due = T0 + timedelta(days=14)

    assert LoanRegistry.list_overdue(due) == []

    views = LoanRegistry.list_overdue(due + timedelta(seconds=1))
    assert [v.loan_id for v in views] == [loan_id]
    assert views[0].book_title == "Dune"
    assert views[0].borrower_name == "Paul"
    assert views[0].due_date == due


def test_history_checks(ctx, make_book, make_borrower):
    book_id, borrower_id = make_book(), make_borrower()
    assert not LoanRegistry.has_history_for_book(book_id)

    loan_id = _create(book_id, borrower_id)
    with UnitOfWork():
        LoanRegistry.close(loan_id, T0 + timedelta(days=1))

    assert LoanRegistry.count_open_for_book(book_id) == 0
    assert LoanRegistry.has_history_for_book(book_id)
    assert LoanRegistry.has_history_for_borrower(borrower_id)


def test_list_open_filters_by_due_date(ctx, make_book, make_borrower):
    book_id, borrower_id = make_book(total=2), make_borrower()
    early = _create(book_id, borrower_id, loan_date=T0)
    late = _create(book_id, borrower_id, loan_date=T0 + timedelta(days=5))
    cutoff = T0 + timedelta(days=16)

    assert [loan.id for loan in LoanRegistry.list_open(due_before=cutoff)] == [early]
    assert [loan.id for loan in LoanRegistry.list_open()] == [early, late]
    assert [v.loan_id for v in LoanRegistry.list_open_views()] == [early, late]
