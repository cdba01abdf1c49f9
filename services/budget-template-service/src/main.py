"""
Budget Template Service stores budget documents and evaluates them on demand.

It is the reference Persistence Gateway for the template editor: CRUD over saved
templates plus stateless endpoints that return the evaluated view of a document.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

SRC_DIR = Path(__file__).resolve().parent
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

SERVICES_ROOT = SRC_DIR.parents[1]
if str(SERVICES_ROOT) not in sys.path:
    sys.path.insert(0, str(SERVICES_ROOT))

from defaults import default_document
from document_view import build_text_summary, evaluate_document
from errors import DocumentFormatError
from persistence.database import get_session, init_db
from persistence.repository import BudgetTemplateRepository
from serialization import document_from_wire, document_to_wire
from shared.observability.privacy import describe_document
from shared.observability.telemetry import ensure_request_id, install_request_context, setup_telemetry
from shared.settings import load_service_settings

logger = logging.getLogger(__name__)

app = FastAPI(title="Budget Template Service")
setup_telemetry(app, service_name="budget-template-service")
install_request_context(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(load_service_settings().cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)


class TemplatePayload(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


def error_response(status_code: int, error_code: str, details: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error_code, "details": details},
    )


def _validated_document(data: Dict[str, Any]) -> Dict[str, Any]:
    """Parse and re-serialize so only well-formed documents are stored."""
    return document_to_wire(document_from_wire(data))


@app.on_event("startup")
def on_startup() -> None:
    """Initialize persistence before serving requests."""
    init_db()


@app.get("/health")
def health_check() -> dict:
    return {"status": "ok", "service": "budget-template-service"}


@app.get("/budget-templates", response_model=None)
def list_templates(request: Request, db: Session = Depends(get_session)) -> Dict[str, Any] | JSONResponse:
    """Lightweight listing: ids, names, descriptions and timestamps, newest first."""
    request_id = ensure_request_id(request)
    try:
        templates = BudgetTemplateRepository(db).list_templates()
    except SQLAlchemyError as exc:
        logger.error({"event": "list_templates_failed", "request_id": request_id, "error": str(exc)})
        return error_response(500, "storage_error", "Failed to list templates.")

    summaries: List[Dict[str, Any]] = [template.summary() for template in templates]
    return {"success": True, "data": summaries}


@app.get("/budget-templates/{template_id}", response_model=None)
def get_template(
    template_id: str,
    request: Request,
    db: Session = Depends(get_session),
) -> Dict[str, Any] | JSONResponse:
    request_id = ensure_request_id(request)
    try:
        template = BudgetTemplateRepository(db).get_template(template_id)
    except SQLAlchemyError as exc:
        logger.error(
            {"event": "get_template_failed", "request_id": request_id, "template_id": template_id, "error": str(exc)}
        )
        return error_response(500, "storage_error", "Failed to fetch template.")

    if template is None:
        return error_response(404, "template_not_found", "Template not found.")
    return {"success": True, "data": template.to_dict()}


@app.post("/budget-templates", status_code=201, response_model=None)
def create_template(
    payload: TemplatePayload,
    request: Request,
    db: Session = Depends(get_session),
) -> Dict[str, Any] | JSONResponse:
    request_id = ensure_request_id(request)
    if not payload.name or payload.data is None:
        return error_response(400, "name_and_data_required", "name and data are required.")

    try:
        document = _validated_document(payload.data)
    except DocumentFormatError as exc:
        return error_response(400, "invalid_document", str(exc))

    try:
        template = BudgetTemplateRepository(db).create_template(
            payload.name,
            document,
            description=payload.description or "",
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error({"event": "create_template_failed", "request_id": request_id, "error": str(exc)})
        return error_response(500, "storage_error", "Failed to create template.")

    logger.info(
        {
            "event": "template_created",
            "request_id": request_id,
            "template_id": template.id,
            **describe_document(document),
        }
    )
    return {"success": True, "data": template.to_dict(), "message": "Template saved successfully"}


@app.put("/budget-templates/{template_id}", response_model=None)
def update_template(
    template_id: str,
    payload: TemplatePayload,
    request: Request,
    db: Session = Depends(get_session),
) -> Dict[str, Any] | JSONResponse:
    """Partial update; omitted fields keep their stored values. No version check is made."""
    request_id = ensure_request_id(request)
    repo = BudgetTemplateRepository(db)
    template = repo.get_template(template_id)
    if template is None:
        return error_response(404, "template_not_found", "Template not found.")

    document: Optional[Dict[str, Any]] = None
    if payload.data is not None:
        try:
            document = _validated_document(payload.data)
        except DocumentFormatError as exc:
            return error_response(400, "invalid_document", str(exc))

    try:
        template = repo.update_template(
            template,
            name=payload.name or None,
            description=payload.description,
            data=document,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(
            {"event": "update_template_failed", "request_id": request_id, "template_id": template_id, "error": str(exc)}
        )
        return error_response(500, "storage_error", "Failed to update template.")

    logger.info(
        {
            "event": "template_updated",
            "request_id": request_id,
            "template_id": template_id,
            "document_changed": document is not None,
        }
    )
    return {"success": True, "data": template.to_dict(), "message": "Template updated successfully"}


@app.delete("/budget-templates/{template_id}", response_model=None)
def delete_template(
    template_id: str,
    request: Request,
    db: Session = Depends(get_session),
) -> Dict[str, Any] | JSONResponse:
    request_id = ensure_request_id(request)
    repo = BudgetTemplateRepository(db)
    template = repo.get_template(template_id)
    if template is None:
        return error_response(404, "template_not_found", "Template not found.")

    try:
        repo.delete_template(template)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(
            {"event": "delete_template_failed", "request_id": request_id, "template_id": template_id, "error": str(exc)}
        )
        return error_response(500, "storage_error", "Failed to delete template.")

    logger.info({"event": "template_deleted", "request_id": request_id, "template_id": template_id})
    return {"success": True, "message": "Template deleted successfully"}


@app.post("/evaluate", response_model=None)
def evaluate(payload: Dict[str, Any]) -> Dict[str, Any] | JSONResponse:
    """Resolve computed cells, subtotals and the grand total for a posted document."""
    try:
        document = document_from_wire(payload)
    except DocumentFormatError as exc:
        return error_response(400, "invalid_document", str(exc))

    view = evaluate_document(document)
    return {**view.to_dict(), "text_summary": build_text_summary(document)}


@app.get("/default-template")
def get_default_template() -> Dict[str, Any]:
    return document_to_wire(default_document())
