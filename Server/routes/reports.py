"""
OilDesk Server - Shipment Report Endpoints

Oil, diesel and waste reports. Administrators and accountants can view
reports; only administrators can create or edit them.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError

from auth import RequireAdmin, RequireReportViewer
from exceptions import StoreUnavailableError
from models.api import OilReportFields, DieselReportFields, WasteReportFields
from models.infrastructure import AdminSession
from routes.serializers import ReportToDict

# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()


class ReportKind(str, Enum):
    OIL = "oil"
    DIESEL = "diesel"
    WASTE = "waste"


# Newest reports listed on the dashboard summary
RECENT_REPORT_COUNT = 5

# Report kind -> (collection, editable fields model)
REPORT_KINDS = {
    ReportKind.OIL: ("oil_reports", OilReportFields),
    ReportKind.DIESEL: ("diesel_reports", DieselReportFields),
    ReportKind.WASTE: ("waste_reports", WasteReportFields),
}


def _ValidateFields(kind: ReportKind, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a report body and return only the fields it actually sets"""
    _, fields_model = REPORT_KINDS[kind]
    try:
        fields = fields_model.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    return fields.model_dump(exclude_unset=True)


def _CountBy(reports, field: str) -> Dict[str, int]:
    """Count reports per value of a field; reports without a value are left out"""
    counts: Dict[str, int] = {}
    for report in reports:
        value = getattr(report, field)
        if value:
            counts[value] = counts.get(value, 0) + 1
    return counts


def _Total(reports, field: str) -> float:
    return sum(getattr(report, field) or 0 for report in reports)


# ==================== Reports ====================

@router.get("/api/reports/summary", tags=["Reports"])
async def reports_summary(session: AdminSession = Depends(RequireReportViewer)):
    """
    Dashboard totals for oil and waste reports

    Args:
        session: Session from dependency

    Returns:
        Oil and waste totals, counts per operation and supply type, and the
        most recent reports of either kind
    """
    from database import document_store

    try:
        oil_reports = document_store.List("oil_reports")
        waste_reports = document_store.List("waste_reports")
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    recent = sorted(
        [(ReportKind.OIL, report, report.operation_chosen) for report in oil_reports]
        + [(ReportKind.WASTE, report, report.supply_type) for report in waste_reports],
        key=lambda entry: entry[1].created_at,
        reverse=True
    )[:RECENT_REPORT_COUNT]

    return {
        "success": True,
        "oil": {
            "report_count": len(oil_reports),
            "total_quantity_liters": _Total(oil_reports, "total_quantity_liters"),
            "total_net_production": _Total(oil_reports, "total_net_production"),
            "operations": _CountBy(oil_reports, "operation_chosen")
        },
        "waste": {
            "report_count": len(waste_reports),
            "total_quantity_liters": _Total(waste_reports, "total_quantity_liters"),
            "barrels_delivered": _Total(waste_reports, "barrels_delivered"),
            "supply_types": _CountBy(waste_reports, "supply_type")
        },
        "recent": [
            {
                "kind": kind.value,
                "report_id": report.report_id,
                "user_name": report.user_name,
                "detail": detail or "N/A",
                "created_at": report.created_at.isoformat()
            }
            for kind, report, detail in recent
        ]
    }


@router.get("/api/reports/{kind}", tags=["Reports"])
async def list_reports(
    kind: ReportKind,
    session: AdminSession = Depends(RequireReportViewer)
):
    """
    List reports of one kind, newest first

    Args:
        kind: oil, diesel or waste
        session: Session from dependency

    Returns:
        List of reports
    """
    from database import document_store
    collection, _ = REPORT_KINDS[kind]

    try:
        reports = document_store.List(collection)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return {
        "success": True,
        "reports": [ReportToDict(report) for report in reports]
    }


@router.get("/api/reports/{kind}/{report_id}", tags=["Reports"])
async def get_report(
    kind: ReportKind,
    report_id: str,
    session: AdminSession = Depends(RequireReportViewer)
):
    """
    Get one report

    Args:
        kind: oil, diesel or waste
        report_id: Report identifier
        session: Session from dependency

    Returns:
        Report details
    """
    from database import document_store
    collection, _ = REPORT_KINDS[kind]

    try:
        report = document_store.Get(collection, report_id)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    if not report:
        raise HTTPException(status_code=404, detail=f"Report '{report_id}' not found")

    return {
        "success": True,
        "report": ReportToDict(report)
    }


@router.post("/api/reports/{kind}", tags=["Reports"])
async def create_report(
    kind: ReportKind,
    payload: Dict[str, Any] = Body(...),
    session: AdminSession = Depends(RequireAdmin)
):
    """
    Create a report attributed to the signed-in administrator

    Args:
        kind: oil, diesel or waste
        payload: Report fields
        session: Admin session from dependency

    Returns:
        Id of the new report
    """
    from database import document_store
    collection, _ = REPORT_KINDS[kind]

    fields = _ValidateFields(kind, payload)
    fields["user_id"] = session.user.user_id
    fields["user_name"] = session.user.name
    fields["created_at"] = datetime.now(timezone.utc)

    try:
        report_id = document_store.Insert(collection, fields)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    logger.info(f"Admin '{session.user.email}' created {kind.value} report '{report_id}'")

    return {
        "success": True,
        "report_id": report_id
    }


@router.patch("/api/reports/{kind}/{report_id}", tags=["Reports"])
async def update_report(
    kind: ReportKind,
    report_id: str,
    payload: Dict[str, Any] = Body(...),
    session: AdminSession = Depends(RequireAdmin)
):
    """
    Edit a report; fields not sent are left unchanged

    Args:
        kind: oil, diesel or waste
        report_id: Report identifier
        payload: Fields to change
        session: Admin session from dependency

    Returns:
        Success message
    """
    from database import document_store
    collection, _ = REPORT_KINDS[kind]

    fields = _ValidateFields(kind, payload)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        updated = document_store.Update(collection, report_id, fields)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    if not updated:
        raise HTTPException(status_code=404, detail=f"Report '{report_id}' not found")

    logger.info(f"Admin '{session.user.email}' updated {kind.value} report '{report_id}'")

    return {
        "success": True,
        "message": "Report updated successfully"
    }
