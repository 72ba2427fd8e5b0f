"""
Database Models and Type Definitions

Row shapes for the users, properties and reservations tables, plus the
search input and query output types used by the data-access functions.
Row types are TypedDicts for type hints only; they are not ORM models.
"""

import math
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional, Tuple, TypedDict, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import InvalidCriteriaError


# =============================================================================
# ROW TYPES
# =============================================================================

class User(TypedDict, total=False):
    """A row of the users table."""
    id: int
    name: str
    email: str
    password: str


class NewUser(TypedDict):
    """Fields required to insert a user."""
    name: str
    email: str
    password: str


class Property(TypedDict, total=False):
    """A row of the properties table, optionally with its average rating."""
    id: int
    owner_id: int
    title: str
    description: Optional[str]
    thumbnail_photo_url: Optional[str]
    cover_photo_url: Optional[str]
    cost_per_night: int
    parking_spaces: int
    number_of_bathrooms: int
    number_of_bedrooms: int
    country: str
    street: str
    city: str
    province: str
    post_code: str
    active: bool
    average_rating: Optional[Decimal]


class Reservation(TypedDict, total=False):
    """A row of the reservations table joined to its property."""
    id: int
    start_date: date
    end_date: date
    property_id: int
    guest_id: int


# =============================================================================
# SEARCH CRITERIA
# =============================================================================

Number = Union[int, float]


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_number(value: Any) -> Number:
    """Accept ints, floats, Decimals and numeric text; reject everything else."""
    if isinstance(value, bool):
        raise ValueError("must be a number, not a boolean")
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            value = float(text)
        except ValueError:
            raise ValueError(f"must be a number, got {value!r}") from None
    elif isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError("must be a finite number")
        value = int(value) if value == value.to_integral_value() else float(value)
    elif not isinstance(value, (int, float)):
        raise ValueError(f"must be a number, got {type(value).__name__}")

    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("must be a finite number")
    return value


class SearchCriteria(BaseModel):
    """
    Optional property search constraints.

    Accepts camelCase (``minimumRating``) or snake_case (``minimum_rating``)
    keys. Unknown keys are ignored. A missing, ``None`` or blank value means
    no constraint on that dimension.

    A mapping that spells one field both ways with different values is
    rejected by ``from_input``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    city: Optional[str] = None
    minimum_rating: Optional[Number] = Field(
        default=None,
        validation_alias=AliasChoices("minimumRating", "minimum_rating"),
    )
    minimum_price_per_night: Optional[Number] = Field(
        default=None,
        validation_alias=AliasChoices("minimumPricePerNight", "minimum_price_per_night"),
    )
    maximum_price_per_night: Optional[Number] = Field(
        default=None,
        validation_alias=AliasChoices("maximumPricePerNight", "maximum_price_per_night"),
    )
    owner_id: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("ownerId", "owner_id"),
    )

    @field_validator("city", mode="before")
    @classmethod
    def check_city(cls, v):
        if _blank(v):
            return None
        if not isinstance(v, str):
            raise ValueError(f"must be text, got {type(v).__name__}")
        return v

    @field_validator(
        "minimum_rating",
        "minimum_price_per_night",
        "maximum_price_per_night",
        mode="before",
    )
    @classmethod
    def check_number(cls, v):
        if _blank(v):
            return None
        return _to_number(v)

    @field_validator("owner_id", mode="before")
    @classmethod
    def check_owner_id(cls, v):
        if _blank(v):
            return None
        if isinstance(v, bool):
            raise ValueError("must be an integer id, not a boolean")
        if isinstance(v, str):
            try:
                return int(v.strip())
            except ValueError:
                raise ValueError(f"must be an integer id, got {v!r}") from None
        if not isinstance(v, int):
            raise ValueError(f"must be an integer id, got {v!r}")
        return v

    @classmethod
    def from_input(cls, criteria: Any) -> "SearchCriteria":
        """
        Normalize caller input into a SearchCriteria.

        Raises:
            InvalidCriteriaError: if a recognized field holds a malformed value
                or the input is not a mapping, or one field is given
                under both spellings with different values.
        """
        if criteria is None:
            return cls()
        if isinstance(criteria, cls):
            return criteria
        if not isinstance(criteria, Mapping):
            raise InvalidCriteriaError(
                "criteria",
                criteria,
                message="Search criteria must be a mapping",
            )
        data = dict(criteria)
        _reject_conflicting_spellings(data)
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            error = e.errors()[0]
            field = _criteria_field_name(error["loc"][0]) if error["loc"] else "criteria"
            raise InvalidCriteriaError(
                field,
                error.get("input"),
                details=error["msg"],
            ) from e


def _reject_conflicting_spellings(data: Mapping[str, Any]) -> None:
    """Raise if a field is given under two spellings with different values."""
    for name, info in SearchCriteria.model_fields.items():
        alias = info.validation_alias
        if not isinstance(alias, AliasChoices):
            continue
        given = [data[key] for key in alias.choices if key in data]
        if any(value != given[0] for value in given[1:]):
            raise InvalidCriteriaError(
                name,
                given,
                message="Search criterion given twice with different values",
            )


def _criteria_field_name(key: Any) -> str:
    """Map an input key (camelCase or snake_case) to its SearchCriteria field name."""
    for name, info in SearchCriteria.model_fields.items():
        alias = info.validation_alias
        choices = alias.choices if isinstance(alias, AliasChoices) else [alias]
        if key == name or key in choices:
            return name
    return str(key)


# =============================================================================
# QUERY PLAN
# =============================================================================

@dataclass(frozen=True)
class QueryPlan:
    """
    A SQL template with positional ``$n`` placeholders and its parameters.

    Placeholder ``$i`` refers to ``params[i - 1]``.
    """
    template: str
    params: Tuple[Any, ...] = ()


__all__ = [
    "User",
    "NewUser",
    "Property",
    "Reservation",
    "SearchCriteria",
    "QueryPlan",
]
