"""
analytics.py
------------
WFH analytics behind GET /api/reports/analytics and the /reports/ page.

Pipeline:
1) resolve_date_range   -> closed [start, end] window (default: trailing 3 months)
2) aggregate_*          -> per staff / reason / weekday / month + totals
3) calculate_risk_score -> 0..100 heuristic per staff member
4) find_consecutive_days -> longest run of calendar-adjacent WFH days per staff
5) build_insights       -> ordered natural-language flags

Notes for developers:
- Missing hours count as a standard 8h day in every per-group sum/average.
  The global totals use raw hours (nulls ignored).
- All reads happen inside one transaction.atomic() block so they share a
  single read transaction; consistency across aggregates is as strong as the
  database's isolation for one transaction.
- The streak detector looks at the 100 most recently *created* entries, not
  the report window. Changing that changes the reported insights.
"""

import calendar
import logging
import math
from collections import defaultdict
from datetime import date

from django.db import transaction
from django.db.models import Avg, Count, FloatField, Sum, Value
from django.db.models.functions import Coalesce, ExtractWeekDay, TruncMonth
from django.utils import timezone
from django.utils.dateparse import parse_date

from tracker.models import Reason, Staff, WfhEntry

logger = logging.getLogger(__name__)

DEFAULT_HOURS = 8.0
DEFAULT_RANGE_MONTHS = 3
MONTHLY_TREND_LIMIT = 12
STREAK_WINDOW = 100
STREAK_DETAIL_THRESHOLD = 3
EXTENDED_STREAK_THRESHOLD = 5
LONG_STREAK_THRESHOLD = 10

RISK_MEDIUM = 40
RISK_HIGH = 70

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
WEEKEND_DAYS = (0, 6)
FREE_TEXT_REASON = {"id": "freetext", "name": "Free Text Reasons"}
UNKNOWN_STAFF_NAME = "Unknown"


class InvalidDateRange(ValueError):
    """Raised when startDate / endDate cannot be parsed."""

    def __init__(self, field, value):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field} '{value}'. Use YYYY-MM-DD.")


# -------------------- Date range --------------------
def months_before(day, months):
    """
    Same day-of-month `months` calendar months earlier, clamped to the
    target month's length (e.g. May 31 - 3 months -> Feb 28/29).
    """
    index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def _parse_date_value(field, raw):
    raw = (raw or "").strip()
    if not raw:
        return None
    # Accept full ISO datetimes too; only the date part matters
    date_part = raw.split("T", 1)[0].split(" ", 1)[0]
    try:
        value = parse_date(date_part)
    except ValueError:
        value = None
    if value is None:
        raise InvalidDateRange(field, raw)
    return value


def resolve_date_range(start_raw=None, end_raw=None, today=None):
    """
    Normalize optional startDate / endDate strings to a closed (start, end) pair.

    Args:
        start_raw, end_raw: ISO date strings or None/"" for the default.
        today: override for "today" (tests); defaults to the local date.

    Raises:
        InvalidDateRange: if either value is present but malformed.
    """
    today = today or timezone.localdate()
    start = _parse_date_value("startDate", start_raw) or months_before(today, DEFAULT_RANGE_MONTHS)
    end = _parse_date_value("endDate", end_raw) or today
    return start, end


# -------------------- Scoring --------------------
def percent(part, whole):
    """Whole-number percentage, rounding halves up. 0 when whole is 0."""
    if not whole:
        return 0
    return int(math.floor(part * 100.0 / whole + 0.5))


def calculate_risk_score(entries, avg_hours_per_day, total_entries):
    """
    Heuristic 0..100 score for potential WFH misuse by one staff member.

    - share of all entries:   >20% +30, >15% +20, >10% +10
    - unusual average hours:  >10h or <4h +25, >9h or <6h +15
    - absolute volume:        >30 +20, >20 +10
    """
    risk = 0

    share = entries / total_entries if total_entries else 0
    if share > 0.20:
        risk += 30
    elif share > 0.15:
        risk += 20
    elif share > 0.10:
        risk += 10

    if avg_hours_per_day > 10 or avg_hours_per_day < 4:
        risk += 25
    elif avg_hours_per_day > 9 or avg_hours_per_day < 6:
        risk += 15

    if entries > 30:
        risk += 20
    elif entries > 20:
        risk += 10

    return min(risk, 100)


def risk_level(score):
    if score >= RISK_HIGH:
        return "high"
    if score >= RISK_MEDIUM:
        return "medium"
    return "low"


# -------------------- Streaks --------------------
def _as_date(value):
    if isinstance(value, str):
        return parse_date(value.split("T", 1)[0])
    if hasattr(value, "date") and callable(value.date):
        return value.date()
    return value


def find_consecutive_days(entries):
    """
    Longest run of calendar-adjacent WFH dates per staff member.

    Args:
        entries: iterable of objects with staff_id, date and (optionally)
                 staff.full_name. Dates may be date objects or ISO strings.

    Returns:
        {"maxConsecutive": int,
         "details": [{"staffId", "staff", "consecutiveDays"}]}  # streaks > 3 only
    """
    staff_days = defaultdict(list)
    staff_names = {}

    for entry in entries:
        staff_days[entry.staff_id].append(_as_date(entry.date))
        staff = getattr(entry, "staff", None)
        staff_names.setdefault(entry.staff_id, getattr(staff, "full_name", None) or UNKNOWN_STAFF_NAME)

    max_consecutive = 0
    details = []

    for staff_id, dates in staff_days.items():
        dates = sorted(dates)
        longest = current = 1
        for prev, curr in zip(dates, dates[1:]):
            if (curr - prev).days == 1:
                current += 1
                longest = max(longest, current)
            else:
                current = 1

        max_consecutive = max(max_consecutive, longest)
        if longest > STREAK_DETAIL_THRESHOLD:
            details.append({
                "staffId": staff_id,
                "staff": staff_names[staff_id],
                "consecutiveDays": longest,
            })

    details.sort(key=lambda d: (-d["consecutiveDays"], d["staff"]))
    return {"maxConsecutive": max_consecutive, "details": details}


# -------------------- Insights --------------------
def build_insights(staff_trends, reason_trends, day_trends, streaks, total_entries):
    """
    Ordered list of {type, title, message, severity} derived from the
    aggregates already computed (no queries):
      1. most active user, 2. weekend activity, 3. dominant reason, 4. long streaks
    """
    insights = []

    if staff_trends:
        top = staff_trends[0]
        pct = percent(top["entries"], total_entries)
        if pct > 25:
            severity = "high"
        elif pct > 15:
            severity = "medium"
        else:
            severity = "low"
        insights.append({
            "type": "info",
            "title": "Most Active WFH User",
            "message": f"{top['staff']['fullName']} accounts for {pct}% of all WFH entries",
            "severity": severity,
        })

    weekend_count = sum(d["count"] for d in day_trends if d["dayOfWeek"] in WEEKEND_DAYS)
    if weekend_count > 0:
        insights.append({
            "type": "warning",
            "title": "Weekend WFH Activity",
            "message": f"{weekend_count} WFH entries logged on weekends - verify if legitimate",
            "severity": "medium",
        })

    if reason_trends:
        top_reason = reason_trends[0]
        pct = percent(top_reason["entries"], total_entries)
        insights.append({
            "type": "info",
            "title": "Most Common WFH Reason",
            "message": f"'{top_reason['reason']['name']}' accounts for {pct}% of all WFH requests",
            "severity": "medium" if pct > 40 else "low",
        })

    max_streak = streaks["maxConsecutive"]
    if max_streak > EXTENDED_STREAK_THRESHOLD:
        insights.append({
            "type": "warning",
            "title": "Extended WFH Periods",
            "message": f"Found {max_streak} consecutive WFH days - review for legitimacy",
            "severity": "high" if max_streak > LONG_STREAK_THRESHOLD else "medium",
        })

    return insights


# -------------------- Aggregation --------------------
def _hours_or_default():
    return Coalesce("hours", Value(DEFAULT_HOURS), output_field=FloatField())


def entries_in_range(start, end):
    # order_by() clears Meta.ordering so GROUP BY only sees the grouped columns
    return WfhEntry.objects.filter(date__gte=start, date__lte=end).order_by()


def aggregate_by_staff(qs):
    return list(
        qs.values("staff_id")
        .annotate(entries=Count("id"), total_hours=Sum(_hours_or_default()))
        .order_by("-entries", "staff_id")
    )


def aggregate_by_reason(qs):
    return list(
        qs.values("reason_id")
        .annotate(entries=Count("id"), total_hours=Sum(_hours_or_default()))
        .order_by("-entries", "reason_id")
    )


def aggregate_by_weekday(qs):
    # ExtractWeekDay is 1=Sunday..7=Saturday; shifted to 0..6 by the caller
    return list(
        qs.annotate(weekday=ExtractWeekDay("date"))
        .values("weekday")
        .annotate(
            count=Count("id"),
            total_hours=Sum(_hours_or_default()),
            avg_hours=Avg(_hours_or_default()),
        )
        .order_by("weekday")
    )


def aggregate_by_month(qs, limit=MONTHLY_TREND_LIMIT):
    rows = list(
        qs.annotate(month=TruncMonth("date"))
        .values("month")
        .annotate(
            count=Count("id"),
            total_hours=Sum(_hours_or_default()),
            unique_staff=Count("staff", distinct=True),
        )
        .order_by("-month")[:limit]
    )
    rows.reverse()
    return rows


def aggregate_totals(qs):
    return qs.aggregate(
        total_entries=Count("id"),
        total_hours=Sum("hours"),
        average_hours=Avg("hours"),
    )


def recent_entries_for_streaks(limit=STREAK_WINDOW):
    return list(WfhEntry.objects.select_related("staff").order_by("-created_at", "-id")[:limit])


# -------------------- Shaping --------------------
def _staff_payload(staff, staff_id):
    if staff is None:
        return {"id": staff_id, "fullName": UNKNOWN_STAFF_NAME, "email": None, "active": False}
    return {"id": staff.id, "fullName": staff.full_name, "email": staff.email, "active": staff.active}


def shape_staff_trends(rows, staff_by_id, total_entries):
    trends = []
    for row in rows:
        count = row["entries"]
        total_hours = row["total_hours"]
        if total_hours is None:
            total_hours = count * DEFAULT_HOURS
        avg_hours = total_hours / count
        score = calculate_risk_score(count, avg_hours, total_entries)
        trends.append({
            "staff": _staff_payload(staff_by_id.get(row["staff_id"]), row["staff_id"]),
            "entries": count,
            "totalHours": round(total_hours, 2),
            "averageHoursPerDay": round(avg_hours, 1),
            "riskScore": score,
            "riskLevel": risk_level(score),
        })
    return trends


def shape_reason_trends(rows, reasons_by_id, total_entries):
    trends = []
    for row in rows:
        reason = reasons_by_id.get(row["reason_id"])
        payload = {"id": reason.id, "name": reason.name} if reason else dict(FREE_TEXT_REASON)
        trends.append({
            "reason": payload,
            "entries": row["entries"],
            "totalHours": round(row["total_hours"] if row["total_hours"] is not None else row["entries"] * DEFAULT_HOURS, 2),
            "percentage": percent(row["entries"], total_entries),
        })
    return trends


def shape_weekday_trends(rows):
    trends = []
    for row in rows:
        day = int(row["weekday"]) - 1
        trends.append({
            "dayOfWeek": day,
            "dayName": DAY_NAMES[day],
            "count": row["count"],
            "totalHours": round(row["total_hours"] or 0, 2),
            "averageHours": round(row["avg_hours"] or 0, 1),
        })
    return trends


def shape_monthly_trends(rows):
    return [
        {
            "month": row["month"].strftime("%Y-%m"),
            "count": row["count"],
            "totalHours": round(row["total_hours"] or 0, 2),
            "uniqueStaff": row["unique_staff"],
        }
        for row in rows
    ]


def build_analytics(start, end):
    """
    Full analytics payload for the closed window [start, end].
    """
    logger.info("Building WFH analytics for %s..%s", start, end)

    with transaction.atomic():
        qs = entries_in_range(start, end)
        staff_rows = aggregate_by_staff(qs)
        reason_rows = aggregate_by_reason(qs)
        weekday_rows = aggregate_by_weekday(qs)
        month_rows = aggregate_by_month(qs)
        totals = aggregate_totals(qs)
        recent = recent_entries_for_streaks()

        staff_by_id = Staff.objects.in_bulk([row["staff_id"] for row in staff_rows])
        reasons_by_id = Reason.objects.in_bulk([row["reason_id"] for row in reason_rows if row["reason_id"]])

    total_entries = totals["total_entries"] or 0

    staff_trends = shape_staff_trends(staff_rows, staff_by_id, total_entries)
    reason_trends = shape_reason_trends(reason_rows, reasons_by_id, total_entries)
    day_trends = shape_weekday_trends(weekday_rows)
    streaks = find_consecutive_days(recent)

    return {
        "dateRange": {"start": start.isoformat(), "end": end.isoformat()},
        "summary": {
            "totalEntries": total_entries,
            "totalHours": round(totals["total_hours"] or 0, 2),
            "averageHours": round(totals["average_hours"] or 0, 1),
            "uniqueStaff": len(staff_rows),
            "uniqueReasons": len(reason_rows),
        },
        "staffTrends": staff_trends,
        "reasonTrends": reason_trends,
        "dayOfWeekTrends": day_trends,
        "monthlyTrends": shape_monthly_trends(month_rows),
        "consecutiveStreaks": streaks["details"],
        "insights": build_insights(staff_trends, reason_trends, day_trends, streaks, total_entries),
    }
