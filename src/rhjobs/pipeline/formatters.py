# src/rhjobs/pipeline/formatters.py
"""
Turn salary and location fields into display strings.

The same posting can show up in three shapes:
- flat API fields (payrate_min, city, stateprovince, ...)
- schema.org JSON-LD (baseSalary, jobLocation.address, ...)
- a free-text string someone already formatted for us
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from rhjobs.pipeline.text import collapse_ws, to_number

DEFAULT_CURRENCY = "$"

CURRENCY_SYMBOLS = {
    "USD": "$",
    "CAD": "CA$",
    "GBP": "£",
    "EUR": "€",
    "AUD": "A$",
}


def _fmt_amount(value: float) -> str:
    # 50000 -> "50,000", 52.5 -> "52.5", 52.456 -> "52.46"
    text = f"{value:,.2f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def currency_symbol(currency: Optional[str]) -> str:
    if not currency:
        return DEFAULT_CURRENCY
    code = str(currency).strip()
    if not code:
        return DEFAULT_CURRENCY
    if code.upper() in CURRENCY_SYMBOLS:
        return CURRENCY_SYMBOLS[code.upper()]
    if code.isalpha():
        return f"{code.upper()} "
    return code


def build_salary_string(
    min_value: Optional[float],
    max_value: Optional[float],
    currency: Optional[str] = DEFAULT_CURRENCY,
    period: Optional[str] = "",
) -> Optional[str]:
    """
    "$50,000 - $70,000 / year", "$50,000 / year" or "$50,000" (no period).
    None when there is no bound at all.
    """
    if min_value is None and max_value is None:
        return None
    cur = currency if currency is not None else DEFAULT_CURRENCY
    suffix = f" / {period}" if period else ""

    if min_value is not None and max_value is not None and min_value != max_value:
        return f"{cur}{_fmt_amount(min_value)} - {cur}{_fmt_amount(max_value)}{suffix}"
    single = min_value if min_value is not None else max_value
    return f"{cur}{_fmt_amount(single)}{suffix}"


def _period(value: Any) -> str:
    return (collapse_ws(value) or "").lower() if isinstance(value, str) else ""


def _from_flat(job: Dict, prefix: str) -> Optional[str]:
    return build_salary_string(
        to_number(job.get(f"{prefix}_min")),
        to_number(job.get(f"{prefix}_max")),
        currency_symbol(job.get(f"{prefix}_currency")),
        _period(job.get(f"{prefix}_period")),
    )


def _from_base_salary(base: Any) -> Optional[str]:
    if not isinstance(base, dict):
        return None
    value = base.get("value")
    currency = currency_symbol(base.get("currency"))
    period = _period(base.get("unitText"))
    if isinstance(value, dict):
        period = _period(value.get("unitText")) or period
        lo = to_number(value.get("minValue"))
        hi = to_number(value.get("maxValue"))
        if lo is None and hi is None:
            lo = to_number(value.get("value"))
        return build_salary_string(lo, hi, currency, period)
    return build_salary_string(to_number(value), None, currency, period)


def format_salary(job: Dict) -> Optional[str]:
    """
    First source that produces something wins:
    payrate_* -> salary_* -> baseSalary -> plain "salary" string.
    """
    for candidate in (
        _from_flat(job, "payrate"),
        _from_flat(job, "salary"),
        _from_base_salary(job.get("baseSalary")),
    ):
        if candidate:
            return candidate
    salary = job.get("salary")
    if isinstance(salary, str):
        return collapse_ws(salary)
    return None


def _join(*parts: Any) -> Optional[str]:
    kept = [collapse_ws(p) for p in parts if isinstance(p, str)]
    kept = [p for p in kept if p]
    return ", ".join(kept) or None


def _with_country(location: Optional[str], country: Any) -> Optional[str]:
    if isinstance(country, dict):
        country = country.get("name") or country.get("identifier")
    country = collapse_ws(country) if isinstance(country, str) else None
    if not country:
        return location
    if len(country) <= 3:
        country = country.upper()
    if not location:
        return country
    if country.lower() in location.lower():
        return location
    return f"{location}, {country}"


def format_location_from_job(job: Dict) -> Optional[str]:
    """Flat API shape: city + stateprovince, else `location`, plus country."""
    location = _join(job.get("city"), job.get("stateprovince") or job.get("state"))
    if not location:
        location = _join(job.get("location"))
    return _with_country(location, job.get("country"))


def format_location_from_posting(posting: Dict) -> Optional[str]:
    """JSON-LD shape: jobLocation (object or list) -> address -> locality/region."""
    place = posting.get("jobLocation")
    if isinstance(place, list):
        place = next((p for p in place if isinstance(p, (dict, str))), None)

    location = None
    country = None
    if isinstance(place, dict):
        address = place.get("address")
        if isinstance(address, dict):
            location = _join(address.get("addressLocality"), address.get("addressRegion"))
            country = address.get("addressCountry")
        elif isinstance(address, str):
            location = _join(address)
        if not location:
            location = _join(place.get("name"))
    elif isinstance(place, str):
        location = _join(place)

    if not location:
        location = _join(posting.get("location"))
    return _with_country(location, country)
