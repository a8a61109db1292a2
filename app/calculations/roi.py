"""
Automation ROI Calculations

Compares the monthly cost of processing invoices by hand against an
automated workflow and projects the cumulative savings month by month.
Every function here is pure: malformed inputs degrade to zero instead of
raising, so a result is always produced.
"""

import math
import re
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple, Union

MINUTES_PER_HOUR = 60
MONTHS_PER_YEAR = 12
DEFAULT_HORIZON_MONTHS = 12

# Longest leading decimal literal, e.g. "12.5 mins" -> "12.5"
_LEADING_FLOAT = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class CoercedNumber(NamedTuple):
    """A finite number plus how it was read."""

    value: float
    used_fallback: bool
    partial: bool = False  # text followed the leading number, e.g. "12 mins"


def coerce_number(value: Any, fallback: float = 0.0) -> CoercedNumber:
    """
    Turn an arbitrary value into a finite float.

    Numbers pass through, strings are parsed from their leading numeric
    literal, and everything else (None, booleans, NaN, infinities,
    containers) becomes the fallback.

    Args:
        value: Raw value, typically straight from a form or JSON body
        fallback: Value returned when no finite number can be read

    Returns:
        CoercedNumber with the finite value, a flag telling whether the
        fallback was substituted and a flag telling whether trailing text
        was ignored
    """
    if isinstance(value, bool):
        return CoercedNumber(fallback, True)

    partial = False
    if isinstance(value, str):
        text = value.strip()
        match = _LEADING_FLOAT.match(text)
        if match is None:
            return CoercedNumber(fallback, True)
        partial = match.end() < len(text)
        value = match.group(0)
    elif not isinstance(value, (int, float)):
        return CoercedNumber(fallback, True)

    try:
        number = float(value)
    except (OverflowError, ValueError):
        return CoercedNumber(fallback, True)

    if not math.isfinite(number):
        return CoercedNumber(fallback, True)

    return CoercedNumber(number, False, partial)


def to_number(value: Any, fallback: float = 0.0) -> float:
    """Coerce a value to a finite float, discarding the diagnostic flag."""
    return coerce_number(value, fallback).value


@dataclass(frozen=True)
class RoiInput:
    """Economic inputs for one automation scenario."""

    invoices_per_month: float = 0.0
    manual_mins_per_invoice: float = 0.0
    automation_mins_per_invoice: float = 0.0
    hourly_wage: float = 0.0
    software_cost_per_month: float = 0.0
    implementation_cost_one_time: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


INPUT_FIELDS = tuple(f.name for f in fields(RoiInput))
OPTIONAL_INPUT_FIELDS = ("implementation_cost_one_time",)


class CoercedInput(NamedTuple):
    """Clean inputs plus the names of fields that were not read cleanly."""

    inputs: RoiInput
    fallback_fields: Tuple[str, ...]
    partial_fields: Tuple[str, ...] = ()

    @property
    def flagged_fields(self) -> Tuple[str, ...]:
        """Fallback and partially parsed fields, in input order."""
        flagged = set(self.fallback_fields) | set(self.partial_fields)
        return tuple(name for name in INPUT_FIELDS if name in flagged)


@dataclass(frozen=True)
class ProjectionPoint:
    """One month of the savings projection."""

    month: int
    manual: float
    automated: float
    cumulative_savings: float


@dataclass(frozen=True)
class RoiResult:
    """Monthly and annual cost comparison with its projection series."""

    monthly_manual_labor_cost: float
    monthly_automated_labor_cost: float
    monthly_software_cost: float
    monthly_total_manual: float
    monthly_total_automated: float
    monthly_savings: float
    annual_savings: float
    annual_software_cost: float
    roi_ratio: float  # 2.5 means 250%
    roi_percent: float
    payback_months: Optional[float]  # None when there is nothing to pay back
    series: Tuple[ProjectionPoint, ...]

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["series"] = [asdict(point) for point in self.series]
        return data


def _raw_field(raw: Union[RoiInput, Mapping[str, Any], Any], name: str) -> Any:
    if isinstance(raw, Mapping):
        return raw.get(name)
    return getattr(raw, name, None)


def coerce_roi_input(raw: Union[RoiInput, Mapping[str, Any], Any]) -> CoercedInput:
    """
    Coerce every input field to a finite float.

    Args:
        raw: RoiInput, mapping keyed by snake_case field names, or any
            object exposing those attributes

    Returns:
        CoercedInput with the clean RoiInput, the names of fields whose
        values were missing or malformed, and the names of string fields
        whose trailing text was ignored. Leaving out an optional field is
        not reported.
    """
    values = {}
    fallback_fields = []
    partial_fields = []

    for name in INPUT_FIELDS:
        value = _raw_field(raw, name)
        coerced = coerce_number(value)
        values[name] = coerced.value
        if coerced.used_fallback and not (
            name in OPTIONAL_INPUT_FIELDS and value is None
        ):
            fallback_fields.append(name)
        if coerced.partial:
            partial_fields.append(name)

    return CoercedInput(
        RoiInput(**values), tuple(fallback_fields), tuple(partial_fields)
    )


def generate_projection(
    monthly_manual_labor_cost: float,
    monthly_automated_labor_cost: float,
    monthly_software_cost: float,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
    volume_growth: float = 0.0,
) -> List[ProjectionPoint]:
    """
    Build the month-by-month cost and cumulative savings series.

    Labor costs scale with invoice volume, compounded by volume_growth
    each month after the first; software cost stays flat. With zero growth
    every month repeats the first, so cumulative savings is the running
    sum of a single monthly savings value.

    Args:
        monthly_manual_labor_cost: Month 1 labor cost of the manual path
        monthly_automated_labor_cost: Month 1 labor cost of the automated path
        monthly_software_cost: Recurring software cost
        horizon_months: Number of months to project (>= 1)
        volume_growth: Monthly growth rate of invoice volume (0.02 = 2%)

    Returns:
        List of ProjectionPoint for months 1..horizon_months
    """
    if horizon_months < 1:
        raise ValueError("Projection horizon must be at least 1 month")

    series = []
    cumulative = 0.0

    for month in range(1, horizon_months + 1):
        volume_factor = (1 + volume_growth) ** (month - 1)
        manual = to_number(monthly_manual_labor_cost * volume_factor)
        automated = to_number(
            monthly_automated_labor_cost * volume_factor + monthly_software_cost
        )
        cumulative = to_number(cumulative + (manual - automated))
        series.append(
            ProjectionPoint(
                month=month,
                manual=manual,
                automated=automated,
                cumulative_savings=cumulative,
            )
        )

    return series


def calculate_payback_months(
    implementation_cost: float, monthly_savings: float
) -> Optional[float]:
    """Months to recover the one-time cost, or None if it never pays back."""
    if monthly_savings > 0 and implementation_cost > 0:
        months = implementation_cost / monthly_savings
        if math.isfinite(months):
            return months
    return None


def calculate_roi(
    inputs: Union[RoiInput, Mapping[str, Any], Any],
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
    volume_growth: float = 0.0,
) -> RoiResult:
    """
    Calculate the ROI of automating invoice processing.

    ROI is annual savings over annual software cost; the one-time
    implementation cost only drives the payback period.

    Args:
        inputs: RoiInput or mapping of raw field values (coerced here)
        horizon_months: Length of the projection series
        volume_growth: Monthly invoice volume growth for the projection

    Returns:
        RoiResult for month 1 with a horizon_months long series
    """
    clean = coerce_roi_input(inputs).inputs

    # Every aggregate goes back through to_number: overflow to inf/nan becomes 0
    manual_cost_per_invoice = to_number(
        (clean.manual_mins_per_invoice / MINUTES_PER_HOUR) * clean.hourly_wage
    )
    automated_cost_per_invoice = to_number(
        (clean.automation_mins_per_invoice / MINUTES_PER_HOUR) * clean.hourly_wage
    )

    monthly_manual_labor_cost = to_number(
        clean.invoices_per_month * manual_cost_per_invoice
    )
    monthly_automated_labor_cost = to_number(
        clean.invoices_per_month * automated_cost_per_invoice
    )
    monthly_software_cost = clean.software_cost_per_month

    # Software cost only applies once automation is adopted
    monthly_total_manual = monthly_manual_labor_cost
    monthly_total_automated = to_number(
        monthly_automated_labor_cost + monthly_software_cost
    )

    monthly_savings = to_number(monthly_total_manual - monthly_total_automated)
    annual_savings = to_number(monthly_savings * MONTHS_PER_YEAR)
    annual_software_cost = to_number(monthly_software_cost * MONTHS_PER_YEAR)

    roi_ratio = (
        to_number(annual_savings / annual_software_cost)
        if annual_software_cost > 0
        else 0.0
    )
    roi_percent = to_number(roi_ratio * 100)

    series = generate_projection(
        monthly_manual_labor_cost,
        monthly_automated_labor_cost,
        monthly_software_cost,
        horizon_months=horizon_months,
        volume_growth=volume_growth,
    )

    return RoiResult(
        monthly_manual_labor_cost=monthly_manual_labor_cost,
        monthly_automated_labor_cost=monthly_automated_labor_cost,
        monthly_software_cost=monthly_software_cost,
        monthly_total_manual=monthly_total_manual,
        monthly_total_automated=monthly_total_automated,
        monthly_savings=monthly_savings,
        annual_savings=annual_savings,
        annual_software_cost=annual_software_cost,
        roi_ratio=roi_ratio,
        roi_percent=roi_percent,
        payback_months=calculate_payback_months(
            clean.implementation_cost_one_time, monthly_savings
        ),
        series=tuple(series),
    )
