from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from library_ledger.services.lending_service import LendingService
from library_ledger.repositories.loan_registry import LoanRegistry
from library_ledger.utils.auth import role_required
from library_ledger.utils.responses import json_body, json_error, json_failure
from library_ledger.utils.validation import parse_id

loan_bp = Blueprint("loans", __name__)


@loan_bp.post("/")
@jwt_required()
@role_required("admin", "librarian")
def issue_loan():
    data = json_body()
    if "book_id" not in data or "borrower_id" not in data:
        return json_error("book_id and borrower_id are required", 400)
    try:
        book_id = parse_id(data["book_id"], "book_id")
        borrower_id = parse_id(data["borrower_id"], "borrower_id")
    except ValueError as e:
        return json_error(str(e), 400, "invalid_argument")

    result = LendingService.issue_loan(book_id, borrower_id)
    if not result.ok:
        return json_failure(result.error)
    issued = result.value
    return jsonify({
        "success": True,
        "loan_id": issued.loan_id,
        "due_date": issued.due_date.isoformat(),
    }), 201


@loan_bp.post("/<id:loan_id>/return")
@jwt_required()
@role_required("admin", "librarian")
def return_loan(loan_id: int):
    result = LendingService.return_loan(loan_id)
    if not result.ok:
        return json_failure(result.error)
    returned = result.value
    return jsonify({
        "success": True,
        "book_id": returned.book_id,
        "borrower_id": returned.borrower_id,
    })


@loan_bp.get("/<id:loan_id>")
@jwt_required()
@role_required("admin", "librarian")
def get_loan(loan_id: int):
    x = LoanRegistry.get(loan_id)
    if not x:
        return json_error(f"Loan {loan_id} not found", 404, "not_found")
    return jsonify({"success": True, "data": {
        "id": x.id,
        "book_id": x.book_id,
        "borrower_id": x.borrower_id,
        "loan_date": x.loan_date.isoformat(),
        "due_date": x.due_date.isoformat(),
        "return_date": x.return_date.isoformat() if x.return_date else None,
        "status": "open" if x.is_open else "returned",
    }})


@loan_bp.get("/overdue")
@jwt_required()
@role_required("admin", "librarian")
def overdue_loans():
    result = LendingService.list_overdue()
    if not result.ok:
        return json_failure(result.error)
    return jsonify({"success": True, "data": [v.to_dict() for v in result.value]})


@loan_bp.get("/current")
@jwt_required()
@role_required("admin", "librarian")
def current_loans():
    result = LendingService.list_current()
    if not result.ok:
        return json_failure(result.error)
    return jsonify({"success": True, "data": [v.to_dict() for v in result.value]})
