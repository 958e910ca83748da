from library_ledger.extensions import db
from library_ledger.repositories.inventory_ledger import InventoryLedger
from library_ledger.repositories.unit_of_work import UnitOfWork
from library_ledger.utils.result import ErrorKind


def test_try_reserve_decrements_available(ctx, make_book, counters):
    book_id = make_book(total=2)

    with UnitOfWork():
        result = InventoryLedger.try_reserve(book_id)

    assert result.ok
    assert result.value == 1
    assert counters(book_id) == (2, 1)


def test_try_reserve_out_of_stock(ctx, make_book, counters):
    book_id = make_book(total=1, available=0)

    with UnitOfWork() as uow:
        result = InventoryLedger.try_reserve(book_id)
        uow.rollback_only()

    assert not result.ok
    assert result.error.kind == ErrorKind.OUT_OF_STOCK
    assert counters(book_id) == (1, 0)


def test_try_reserve_unknown_book(ctx):
    with UnitOfWork() as uow:
        result = InventoryLedger.try_reserve(999)
        uow.rollback_only()

    assert result.error.kind == ErrorKind.NOT_FOUND


def test_release_increments_available(ctx, make_book, counters):
    book_id = make_book(total=3, available=1)

    with UnitOfWork():
        result = InventoryLedger.release(book_id)

    assert result.ok
    assert result.value == 2
    assert counters(book_id) == (3, 2)


def test_release_past_total_is_a_consistency_violation(ctx, make_book, counters):
    book_id = make_book(total=2)

    with UnitOfWork() as uow:
        result = InventoryLedger.release(book_id)
        uow.rollback_only()

    assert result.error.kind == ErrorKind.CONSISTENCY_VIOLATION
    # never clamped, never written
    assert counters(book_id) == (2, 2)


def test_release_unknown_book(ctx):
    with UnitOfWork() as uow:
        result = InventoryLedger.release(404)
        uow.rollback_only()

    assert result.error.kind == ErrorKind.NOT_FOUND


def test_adjust_total_moves_available_by_same_delta(ctx, make_book, counters):
    book_id = make_book(total=3, available=1)

    with UnitOfWork():
        grown = InventoryLedger.adjust_total(book_id, 5)
    assert grown.value == (5, 3)

    with UnitOfWork():
        shrunk = InventoryLedger.adjust_total(book_id, 2)
    assert shrunk.value == (2, 0)
    assert counters(book_id) == (2, 0)


def test_adjust_total_below_copies_on_loan_is_refused(ctx, make_book, counters):
    book_id = make_book(total=3, available=1)

    with UnitOfWork() as uow:
        result = InventoryLedger.adjust_total(book_id, 1)
        uow.rollback_only()

    assert result.error.kind == ErrorKind.INVALID_ARGUMENT
    assert counters(book_id) == (3, 1)


def test_adjust_total_rejects_negative(ctx, make_book):
    book_id = make_book(total=1)
    assert InventoryLedger.adjust_total(book_id, -1).error.kind == ErrorKind.INVALID_ARGUMENT
    db.session.rollback()


def test_unit_of_work_rolls_back_on_exception(ctx, make_book, counters):
    book_id = make_book(total=2)

    try:
        with UnitOfWork():
            InventoryLedger.try_reserve(book_id)
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    assert counters(book_id) == (2, 2)
