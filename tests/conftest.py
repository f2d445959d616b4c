# tests/conftest.py
import os
import tempfile

import pytest

# Point the app at a throwaway SQLite file before clinic_schema.db is imported.
_DB_DIR = tempfile.mkdtemp(prefix="clinic-schema-tests-")
os.environ["CLINICSCHEMA_DB_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"

from clinic_schema.services.form_state import state_from_dict  # noqa: E402


@pytest.fixture(scope="session")
def client():
    from fastapi.testclient import TestClient
    from clinic_schema.main import app
    with TestClient(app) as c:
        yield c


HOURS = [{"days": ["Monday", "Tuesday"], "opens": "08:30", "closes": "17:00"}]

FILLED_FORMS = {
    ("practitioner", "single"): {
        "name": "Dr. Jane Smith",
        "honorific_suffix": "MBBS, MRCP",
        "job_title": "Consultant Cardiologist",
        "url": "https://example.com/jane",
        "telephone": "+442012345678",
        "same_as": ["https://linkedin.com/in/jane"],
        "works_for": {
            "name": "Heart Clinic - Harley Street",
            "url": "https://example.com/harley",
            "telephone": "+442011112222",
            "street_address": "10 Harley Street",
            "city": "London",
            "region": "England",
            "postal_code": "W1G 9PF",
            "country": "GB",
            "latitude": "51.5237",
            "longitude": "-0.1444",
            "opening_hours": HOURS,
            "services": ["Cardiac Consultation", "ECG"],
        },
    },
    ("practitioner", "multiple"): {
        "name": "Dr. Jane Smith",
        "job_title": "Consultant Cardiologist",
        "works_for": [
            {"name": "Harley Street", "street_address": "10 Harley Street", "city": "London",
             "latitude": "51.5237", "longitude": "-0.1444", "opening_hours": HOURS},
            {"name": "Leeds", "street_address": "1 Park Row", "city": "Leeds", "country": "GB"},
        ],
        "services": ["Cardiac Consultation"],
    },
    ("clinic", "single"): {
        "name": "Heart Clinic",
        "description": "Private cardiology clinic in central London.",
        "url": "https://heart.example",
        "telephone": "+442012345678",
        "email": "info@heart.example",
        "price_range": "££",
        "street_address": "10 Harley Street",
        "city": "London",
        "region": "England",
        "postal_code": "W1G 9PF",
        "country": "GB",
        "latitude": "51.5237",
        "longitude": "-0.1444",
        "services": ["Cardiac Consultation", ""],
        "rating_value": "4.8",
        "review_count": "187",
    },
    ("clinic", "multiple"): {
        "name": "Heart Clinic",
        "url": "https://heart.example",
        "street_address": "10 Harley Street",
        "city": "London",
        "country": "GB",
        "latitude": "51.5237",
        "longitude": "-0.1444",
        "services": ["Cardiac Consultation"],
        "rating_value": "4.5",
        "review_count": "12",
        "sub_organizations": [
            {"name": "Heart Clinic Leeds", "street_address": "1 Park Row", "city": "Leeds",
             "latitude": "53.7996", "longitude": "-1.5491", "has_map": "https://maps.example/leeds"},
            {"name": "Heart Clinic York", "street_address": "2 Stonegate", "city": "York"},
        ],
    },
}


@pytest.fixture(params=sorted(FILLED_FORMS), ids=lambda p: f"{p[0]}-{p[1]}")
def filled_state(request):
    entity, arity = request.param
    return state_from_dict(entity, arity, FILLED_FORMS[request.param])


@pytest.fixture
def filled_forms():
    return FILLED_FORMS
