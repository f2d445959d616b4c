# tests/test_pipeline.py
import json

from clinic_schema.form_models import ClinicMultiple, ClinicSingle
from clinic_schema.services.form_state import set_field, set_telephone, state_from_dict
from clinic_schema.services.friendly_errors import to_friendly_messages
from clinic_schema.services.pipeline import build_document, check_document
from clinic_schema.services.schemas import load_schema
from clinic_schema.services.validate import validate_document


def test_filled_forms_validate(filled_state):
    result = check_document(filled_state)
    assert result["valid"], result["errors"]
    assert result["errors"] == [] and result["messages"] == []
    assert result["document"]["@context"] == "https://schema.org"


def test_document_is_rebuilt_from_current_state():
    s = ClinicSingle()
    assert "name" not in build_document(s)
    s = set_field(s, "name", "Heart Clinic")
    assert build_document(s)["name"] == "Heart Clinic"
    s = set_field(s, "name", "")
    assert "name" not in build_document(s)


def test_form_only_fields_are_not_emitted(filled_forms):
    state = state_from_dict("clinic", "multiple", dict(
        filled_forms[("clinic", "multiple")],
        clinic_types=["Dentistry"],
        reviews=[{"rating_value": "5", "author": "Ann"}],
    ))
    text = json.dumps(build_document(state))
    for needle in ("Dentistry", "Ann", "reviews", "clinic_types", "is_custom_clinic_name"):
        assert needle not in text


def test_no_key_leakage_between_variants(filled_forms):
    multiple = build_document(state_from_dict("clinic", "multiple", filled_forms[("clinic", "multiple")]))
    assert "subOrganization" in multiple
    valid, errors = validate_document(multiple, load_schema("clinic", "single"))
    assert not valid
    assert any("Additional properties are not allowed" in e for e in errors)

    practitioner = build_document(state_from_dict("practitioner", "single", filled_forms[("practitioner", "single")]))
    valid, _ = validate_document(practitioner, load_schema("clinic", "single"))
    assert not valid
    valid, _ = validate_document(practitioner, load_schema("practitioner", "multiple"))
    assert not valid


def test_telephone_with_spaces_gets_friendly_message():
    s = set_field(ClinicSingle(name="Heart Clinic"), "telephone", "+44 20 1234 5678")
    result = check_document(s)
    assert not result["valid"]
    assert any("must not contain spaces" in m for m in result["messages"])

    # the form helper strips the spaces before they reach the document
    s = set_telephone(s, "telephone", "+44 20 1234 5678")
    assert check_document(s)["valid"]


def test_out_of_range_coordinates_are_reported():
    s = ClinicMultiple(latitude="95", longitude="-0.1")
    result = check_document(s)
    assert not result["valid"]
    assert any("Latitude must be between" in m for m in result["messages"])


def test_long_description_written_directly_is_reported():
    s = set_field(ClinicSingle(), "description", "x" * 501)
    result = check_document(s)
    assert any("limited to 500" in m for m in result["messages"])


def test_advice_lists_missing_recommended_fields():
    advice = check_document(ClinicSingle(name="Heart Clinic"))["advice"]
    assert "Consider adding: url" in advice
    assert "Consider adding: name" not in advice


def test_friendly_messages_are_capped():
    errors = [f"x.{i}: something odd" for i in range(30)]
    msgs = to_friendly_messages(errors, "Medical Clinic - Single Location")
    assert len(msgs) == 12
    leak = to_friendly_messages(["$: Additional properties are not allowed ('worksFor' was unexpected)"],
                                "Medical Clinic - Single Location")
    assert "Medical Clinic - Single Location" in leak[0]
