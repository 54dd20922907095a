import csv
import io

from openpyxl import Workbook

from haedok.schemas.data_export import UsageImportResult
from haedok.schemas.savings import SavingsReport
from haedok.schemas.subscription import Subscription, UsageMetricType, UsageObservation

EXPORT_COLUMNS = ["subscription_name", "action", "current_monthly_price", "savings_per_month", "description", "source"]


def export_savings_csv(report: SavingsReport) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(EXPORT_COLUMNS)
    for item in report.savings_breakdown:
        writer.writerow([
            item.subscription_name,
            item.action.value,
            item.current_monthly_price,
            item.savings_per_month,
            item.description,
            item.source,
        ])
    return output.getvalue()


def export_savings_xlsx(report: SavingsReport) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "절약 항목"
    ws.append(EXPORT_COLUMNS)
    for item in report.savings_breakdown:
        ws.append([
            item.subscription_name,
            item.action.value,
            item.current_monthly_price,
            item.savings_per_month,
            item.description,
            item.source,
        ])

    summary = wb.create_sheet("요약")
    summary.append(["월간 절약", report.monthly_savings])
    summary.append(["연간 절약", report.yearly_savings])
    summary.append(["요약", report.report_summary])

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


def import_usage_csv(text: str, subscriptions: list[Subscription]) -> UsageImportResult:
    """Parse usage rows keyed by subscription_id or name.

    Columns: subscription_id | name, usage_value, metric_type (optional).
    """
    by_id = {s.id: s for s in subscriptions}
    by_name = {s.name.strip().lower(): s for s in subscriptions}

    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    total = 0
    observations: list[UsageObservation] = []
    errors: list[str] = []
    for row in reader:
        total += 1
        sub_id = (row.get("subscription_id") or "").strip()
        name = (row.get("name") or "").strip()
        sub = by_id.get(sub_id) if sub_id else by_name.get(name.lower())
        if sub is None:
            errors.append(f"행 {total}: 구독을 찾을 수 없습니다 ({sub_id or name or '빈 값'})")
            continue

        raw_value = (row.get("usage_value") or "").strip()
        try:
            float(raw_value)
        except ValueError:
            errors.append(f"행 {total}: 사용량이 숫자가 아닙니다 ({raw_value or '빈 값'})")
            continue

        raw_metric = (row.get("metric_type") or "").strip().lower()
        if raw_metric and raw_metric not in {m.value for m in UsageMetricType}:
            errors.append(f"행 {total}: 알 수 없는 측정 방식입니다 ({raw_metric})")
            continue

        observations.append(
            UsageObservation(
                subscription_id=sub.id,
                metric_type=UsageMetricType(raw_metric) if raw_metric else None,
                usage_value=raw_value,
            )
        )

    return UsageImportResult(
        total_rows=total,
        imported=len(observations),
        skipped=total - len(observations),
        errors=errors,
        observations=observations,
    )
