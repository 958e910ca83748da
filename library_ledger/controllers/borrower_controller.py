from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from library_ledger.services.borrower_service import BorrowerService
from library_ledger.repositories.loan_registry import LoanRegistry
from library_ledger.utils.auth import role_required
from library_ledger.utils.responses import json_body, json_failure

borrower_bp = Blueprint("borrowers", __name__)


def _borrower_dict(b):
    return {
        "id": b.id,
        "name": b.name,
        "email": b.email,
        "phone": b.phone,
    }


@borrower_bp.get("/")
@jwt_required()
@role_required("admin", "librarian")
def list_borrowers():
    borrowers = BorrowerService.list_borrowers().value
    return jsonify({"success": True, "data": [_borrower_dict(b) for b in borrowers]})


@borrower_bp.get("/<id:borrower_id>")
@jwt_required()
@role_required("admin", "librarian")
def get_borrower(borrower_id: int):
    result = BorrowerService.get_borrower(borrower_id)
    if not result.ok:
        return json_failure(result.error)
    data = _borrower_dict(result.value)
    data["open_loans"] = LoanRegistry.count_open_for_borrower(borrower_id)
    return jsonify({"success": True, "data": data})


@borrower_bp.post("/")
@jwt_required()
@role_required("admin")
def create_borrower():
    data = json_body()
    result = BorrowerService.create_borrower(data)
    if not result.ok:
        return json_failure(result.error)
    return jsonify({"success": True, "id": result.value.id}), 201


@borrower_bp.put("/<id:borrower_id>")
@jwt_required()
@role_required("admin")
def update_borrower(borrower_id: int):
    data = json_body()
    result = BorrowerService.update_borrower(borrower_id, data)
    if not result.ok:
        return json_failure(result.error)
    return jsonify({"success": True, "data": _borrower_dict(result.value)})


@borrower_bp.delete("/<id:borrower_id>")
@jwt_required()
@role_required("admin")
def delete_borrower(borrower_id: int):
    result = BorrowerService.delete_borrower(borrower_id)
    if not result.ok:
        return json_failure(result.error)
    return jsonify({"success": True})
