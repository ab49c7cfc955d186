"""HTTP routes for the Flask API."""

from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from millennium.core.projection import compute_projection
from millennium.schemas.health import HealthResponse
from millennium.schemas.projection import ProjectionInput

api_bp = Blueprint("api", __name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return (
        jsonify({"detail": exc.errors(include_url=False, include_context=False)}),
        HTTPStatus.UNPROCESSABLE_ENTITY,
    )


def _read_projection_input() -> ProjectionInput:
    raw_payload = request.get_json(force=True, silent=False)
    payload: Dict[str, Any] = raw_payload if isinstance(raw_payload, dict) else {}
    return ProjectionInput.model_validate(payload)


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = HealthResponse(status="ok", service="millennium")
    return jsonify(response.model_dump())


@api_bp.post("/projection")
def projection() -> Any:
    """Month-by-month and yearly projection for the submitted parameters."""
    inputs = _read_projection_input()
    result = compute_projection(inputs)
    return jsonify(result.model_dump(mode="json", by_alias=True))


@api_bp.post("/projection/advice")
def projection_advice() -> Any:
    """Projection plus a short piece of generated advice about it."""
    inputs = _read_projection_input()
    result = compute_projection(inputs)
    advice = current_app.extensions["advisor"].advise(inputs, result)
    return jsonify(
        {
            "projection": result.model_dump(mode="json", by_alias=True),
            "advice": advice,
        }
    )
