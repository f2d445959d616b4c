from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Tuple, Union

class EntityKind(str, Enum):
    PRACTITIONER = "practitioner"
    CLINIC = "clinic"

class LocationArity(str, Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"

DAYS_OF_WEEK: Tuple[str, ...] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)
WEEKDAYS: Tuple[str, ...] = DAYS_OF_WEEK[:5]

DEFAULT_OPENS = "09:00"
DEFAULT_CLOSES = "18:00"

# Choices offered by the form; free text is accepted as well.
CLINIC_TYPE_OPTIONS: Tuple[str, ...] = (
    "Private Healthcare",
    "Dentistry",
    "Primary Care ( GP / Dental Practice)",
    "Mental Health",
    "Aesthetic Healthcare",
    "Allied Healthcare",
)
CLINIC_NAME_OPTIONS: Tuple[str, ...] = (
    "BUPA Healthcare",
    "Spire Health Care",
    "HCA Healthcare",
    "BMI Healthcare",
    "Circle Health Group",
    "Practice Plus Group",
    "Cromwell Hospital",
    "The Harley Street Clinic",
)
SUB_ORGANIZATION_TYPE_OPTIONS: Tuple[str, ...] = (
    "Physician",
    "MedicalClinic",
    "Dentist",
    "MedicalBusiness",
    "HealthAndBeautyBusiness",
)
DEFAULT_CLINIC_TYPES: Tuple[str, ...] = ("Private Healthcare",)
DEFAULT_SUB_ORGANIZATION_TYPES: Tuple[str, ...] = ("Physician", "MedicalClinic")

MAX_DESCRIPTION_LENGTH = 500


def canonical_days(days: Iterable[str]) -> Tuple[str, ...]:
    """Deduplicate and order day names Monday first. Unknown names raise ValueError."""
    wanted = set()
    for d in days:
        if d not in DAYS_OF_WEEK:
            raise ValueError(f"Unknown day of week: {d!r}")
        wanted.add(d)
    return tuple(d for d in DAYS_OF_WEEK if d in wanted)

def dedupe_tags(tags: Iterable[str]) -> Tuple[str, ...]:
    out = []
    for t in tags:
        if t not in out:
            out.append(t)
    return tuple(out)


@dataclass(frozen=True)
class OpeningHours:
    days: Tuple[str, ...] = WEEKDAYS
    opens: str = DEFAULT_OPENS
    closes: str = DEFAULT_CLOSES

    def __post_init__(self):
        # the day set is always held in display order
        object.__setattr__(self, "days", canonical_days(self.days))

def _default_hours() -> Tuple[OpeningHours, ...]:
    return (OpeningHours(),)


@dataclass(frozen=True)
class Address:
    street_address: str = ""
    city: str = ""
    region: str = ""
    postal_code: str = ""
    country: str = ""
    latitude: str = ""
    longitude: str = ""

@dataclass(frozen=True)
class Workplace(Address):
    """A practitioner's place of work."""
    name: str = ""
    url: str = ""
    telephone: str = ""
    opening_hours: Tuple[OpeningHours, ...] = field(default_factory=_default_hours)

@dataclass(frozen=True)
class ServicedWorkplace(Workplace):
    """Single-location workplace; services live with the location."""
    services: Tuple[str, ...] = ("",)

@dataclass(frozen=True)
class Review:
    rating_value: str = ""
    author: str = ""

@dataclass(frozen=True)
class SubOrganization(Address):
    name: str = ""
    types: Tuple[str, ...] = DEFAULT_SUB_ORGANIZATION_TYPES
    has_map: str = ""
    opening_hours: Tuple[OpeningHours, ...] = field(default_factory=_default_hours)

    def __post_init__(self):
        object.__setattr__(self, "types", dedupe_tags(self.types))


def _default_reviews() -> Tuple[Review, ...]:
    return (Review(),)


@dataclass(frozen=True)
class PractitionerSingle:
    entity = EntityKind.PRACTITIONER
    arity = LocationArity.SINGLE

    name: str = ""
    honorific_suffix: str = ""
    job_title: str = ""
    url: str = ""
    telephone: str = ""
    same_as: Tuple[str, ...] = ("",)
    works_for: ServicedWorkplace = field(default_factory=ServicedWorkplace)
    reviews: Tuple[Review, ...] = field(default_factory=_default_reviews)

@dataclass(frozen=True)
class PractitionerMultiple:
    entity = EntityKind.PRACTITIONER
    arity = LocationArity.MULTIPLE

    name: str = ""
    honorific_suffix: str = ""
    job_title: str = ""
    url: str = ""
    telephone: str = ""
    same_as: Tuple[str, ...] = ("",)
    works_for: Tuple[Workplace, ...] = field(default_factory=lambda: (Workplace(),))
    # one list for every location
    services: Tuple[str, ...] = ("",)
    reviews: Tuple[Review, ...] = field(default_factory=_default_reviews)

@dataclass(frozen=True)
class ClinicSingle(Address):
    """Clinic with its location held in the root-level address fields."""
    entity = EntityKind.CLINIC
    arity = LocationArity.SINGLE

    name: str = ""
    is_custom_clinic_name: bool = False
    clinic_types: Tuple[str, ...] = DEFAULT_CLINIC_TYPES
    description: str = ""
    url: str = ""
    telephone: str = ""
    email: str = ""
    price_range: str = ""
    logo: str = ""
    image: str = ""
    has_map: str = ""
    medical_specialty: str = ""
    same_as: Tuple[str, ...] = ("",)
    opening_hours: Tuple[OpeningHours, ...] = field(default_factory=_default_hours)
    services: Tuple[str, ...] = ("",)
    rating_value: str = ""
    review_count: str = ""

    def __post_init__(self):
        object.__setattr__(self, "clinic_types", dedupe_tags(self.clinic_types))

@dataclass(frozen=True)
class ClinicMultiple(ClinicSingle):
    arity = LocationArity.MULTIPLE

    sub_organizations: Tuple[SubOrganization, ...] = field(default_factory=lambda: (SubOrganization(),))
    reviews: Tuple[Review, ...] = field(default_factory=_default_reviews)


FormState = Union[PractitionerSingle, PractitionerMultiple, ClinicSingle, ClinicMultiple]
