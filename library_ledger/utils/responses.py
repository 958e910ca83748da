from flask import jsonify, request

from library_ledger.utils.result import ErrorKind, Failure

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.OUT_OF_STOCK: 409,
    ErrorKind.ALREADY_RETURNED: 409,
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.CONSISTENCY_VIOLATION: 500,
    ErrorKind.STORAGE_UNAVAILABLE: 503,
}


def json_error(message, code=400, kind=None):
    body = {"success": False, "message": message}
    if kind is not None:
        body["error"] = kind
    return jsonify(body), code


def json_failure(failure: Failure):
    return json_error(failure.message, STATUS_BY_KIND.get(failure.kind, 500), failure.kind.value)


def json_body() -> dict:
    """Request JSON object, or an empty dict for a missing/non-object body."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
