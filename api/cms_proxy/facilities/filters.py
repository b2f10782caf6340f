"""
Builders for the CMS row-filter mini-language.

Examples:
    Facility Name contains 'SUNRISE' AND State = 'OH'
    Provider ID = 365001

Expressions are plain text; the HTTP client URL-encodes them as the `filter`
query parameter. Values are not escaped beyond that.
"""

from __future__ import annotations

NAME_FIELD = "Facility Name"
CITY_FIELD = "City"
STATE_FIELD = "State"
PROVIDER_ID_FIELD = "Provider ID"


def contains(field: str, value: str) -> str:
    return f"{field} contains '{value}'"


def equals(field: str, value: str, *, quoted: bool = True) -> str:
    if quoted:
        return f"{field} = '{value}'"
    return f"{field} = {value}"


def join_all(clauses: list[str]) -> str:
    return " AND ".join(clause for clause in clauses if clause)


def search_clauses(*, name: str | None, city: str | None, state: str | None) -> list[str]:
    clauses: list[str] = []
    if name:
        clauses.append(contains(NAME_FIELD, name))
    if city:
        clauses.append(contains(CITY_FIELD, city))
    if state:
        clauses.append(equals(STATE_FIELD, state))
    return clauses


def search_filter(*, name: str | None, city: str | None, state: str | None) -> str:
    """
    Conjunction of whichever search predicates are present ("" when none are).
    """
    return join_all(search_clauses(name=name, city=city, state=state))


def state_filter(state: str) -> str:
    return equals(STATE_FIELD, state)


def provider_filter(ccn: str) -> str:
    return equals(PROVIDER_ID_FIELD, ccn, quoted=False)
