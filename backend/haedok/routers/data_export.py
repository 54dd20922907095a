import io
import json

from fastapi import APIRouter, Depends, Form, HTTPException, Query, UploadFile
from fastapi.responses import StreamingResponse
from pydantic import TypeAdapter, ValidationError

from haedok.schemas.analysis import AnalysisRequest
from haedok.schemas.catalog import Catalog
from haedok.schemas.data_export import ExportFormat, UsageImportResult
from haedok.schemas.subscription import Subscription
from haedok.services.catalog import get_catalog
from haedok.services.csv_excel import export_savings_csv, export_savings_xlsx, import_usage_csv
from haedok.services.savings import run_analysis

router = APIRouter(prefix="/data", tags=["data-export"])

_subscriptions_adapter = TypeAdapter(list[Subscription])


@router.post("/export/savings-report")
async def export_savings_report(
    body: AnalysisRequest,
    format: ExportFormat = Query(default="csv"),
    catalog: Catalog = Depends(get_catalog),
):
    report = run_analysis(body.subscriptions, body.usage, catalog).report

    if format == "xlsx":
        content = export_savings_xlsx(report)
        return StreamingResponse(
            io.BytesIO(content),
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={"Content-Disposition": "attachment; filename=savings-report.xlsx"},
        )
    else:
        content = export_savings_csv(report)
        return StreamingResponse(
            io.BytesIO(content.encode("utf-8-sig")),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": "attachment; filename=savings-report.csv"},
        )


@router.post("/import/usage", response_model=UsageImportResult)
async def import_usage(
    file: UploadFile,
    subscriptions: str = Form(...),
):
    try:
        subs = _subscriptions_adapter.validate_python(json.loads(subscriptions))
    except (ValueError, ValidationError) as e:
        raise HTTPException(status_code=422, detail=f"Invalid subscriptions: {e}")
    content = await file.read()
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=422, detail="File must be UTF-8 encoded CSV")
    return import_usage_csv(text, subs)
