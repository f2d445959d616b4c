# tests/test_form_state.py
import pytest

from clinic_schema.form_models import (
    ClinicMultiple, ClinicSingle, OpeningHours, PractitionerMultiple, PractitionerSingle, Workplace,
)
from clinic_schema.services.form_state import (
    UnknownFieldError, add_type_tag, append_item, apply_operation, choose_clinic_name, get_value,
    normalize_telephone, remove_item, remove_type_tag, replace_item, set_description, set_field,
    set_item_field, set_nested_field, set_telephone, state_from_dict, state_to_dict, toggle_day,
)


def test_mutations_leave_input_untouched():
    s0 = ClinicSingle()
    s1 = set_field(s0, "name", "Heart Clinic")
    assert s0.name == ""
    assert s1.name == "Heart Clinic"
    s2 = append_item(s1, "services", "ECG")
    assert s1.services == ("",)
    assert s2.services == ("", "ECG")


def test_set_nested_field_preserves_siblings():
    s = set_nested_field(PractitionerSingle(), "works_for", "street_address", "10 Harley Street")
    s = set_nested_field(s, "works_for", "city", "London")
    assert s.works_for.street_address == "10 Harley Street"
    assert s.works_for.city == "London"
    assert s.works_for.services == ("",)


def test_collection_operations():
    s = PractitionerMultiple()
    s = append_item(s, "works_for", {"name": "Leeds"})
    assert [w.name for w in s.works_for] == ["", "Leeds"]
    # new elements get the record defaults, including one hours slot
    assert s.works_for[1].opening_hours == (OpeningHours(),)

    s = set_item_field(s, "works_for", 0, "name", "London")
    assert [w.name for w in s.works_for] == ["London", "Leeds"]

    s = replace_item(s, "works_for", 1, Workplace(name="York"))
    assert [w.name for w in s.works_for] == ["London", "York"]

    s = remove_item(s, "works_for", 0)
    assert [w.name for w in s.works_for] == ["York"]

    # the store itself allows an empty collection
    s = remove_item(s, "works_for", 0)
    assert s.works_for == ()


def test_append_never_reorders():
    s = ClinicSingle(services=("b", "a"))
    s = append_item(s, "services", "c")
    assert s.services == ("b", "a", "c")


def test_nested_paths_reach_collection_elements():
    s = ClinicMultiple()
    s = set_field(s, "sub_organizations.0.opening_hours.0.opens", "10:00")
    assert get_value(s, "sub_organizations.0.opening_hours.0.opens") == "10:00"
    s = set_item_field(s, ["sub_organizations", 0, "opening_hours"], 0, "closes", "16:00")
    assert s.sub_organizations[0].opening_hours[0].closes == "16:00"


def test_unknown_fields_are_rejected():
    with pytest.raises(UnknownFieldError):
        set_field(ClinicSingle(), "sub_organizations", [])
    with pytest.raises(UnknownFieldError):
        set_field(PractitionerMultiple(), "works_for.0.services", ["x"])
    with pytest.raises(UnknownFieldError):
        set_item_field(ClinicSingle(), "services", 0, "name", "x")
    with pytest.raises(UnknownFieldError):
        append_item(ClinicSingle(), "name", "x")


def test_bad_index_and_type():
    with pytest.raises(IndexError):
        remove_item(ClinicSingle(), "services", 3)
    with pytest.raises(IndexError):
        set_item_field(PractitionerMultiple(), "works_for", -1, "name", "x")
    with pytest.raises(TypeError):
        set_field(ClinicSingle(), "services", "not a list")
    with pytest.raises(TypeError):
        set_field(ClinicSingle(), "is_custom_clinic_name", "yes")


def test_numbers_written_into_text_fields_become_text():
    s = set_field(ClinicSingle(), "latitude", 51.5237)
    assert s.latitude == "51.5237"


def test_toggle_day_keeps_canonical_order():
    s = set_field(ClinicSingle(), "opening_hours.0.days", [])
    for day in ("Friday", "Monday", "Wednesday"):
        s = toggle_day(s, "opening_hours", 0, day)
    assert s.opening_hours[0].days == ("Monday", "Wednesday", "Friday")
    s = toggle_day(s, "opening_hours", 0, "Monday")
    assert s.opening_hours[0].days == ("Wednesday", "Friday")


def test_day_sets_are_canonical_on_any_write():
    s = set_item_field(ClinicSingle(), "opening_hours", 0, "days", ["Sunday", "Monday", "Sunday"])
    assert s.opening_hours[0].days == ("Monday", "Sunday")
    with pytest.raises(ValueError):
        OpeningHours(days=("Funday",))
    with pytest.raises(ValueError):
        toggle_day(ClinicSingle(), "opening_hours", 0, "Funday")


def test_type_tags_have_set_semantics():
    s = ClinicSingle()
    s = add_type_tag(s, "clinic_types", "Dentistry")
    s = add_type_tag(s, "clinic_types", "Dentistry")
    s = add_type_tag(s, "clinic_types", "   ")
    assert s.clinic_types == ("Private Healthcare", "Dentistry")
    s = remove_type_tag(s, "clinic_types", "Private Healthcare")
    assert s.clinic_types == ("Dentistry",)

    m = add_type_tag(ClinicMultiple(), "sub_organizations.0.types", " Dentist ")
    assert m.sub_organizations[0].types == ("Physician", "MedicalClinic", "Dentist")
    # writes of whole lists are deduplicated too
    m = set_field(m, "sub_organizations.0.types", ["Dentist", "Dentist"])
    assert m.sub_organizations[0].types == ("Dentist",)


def test_telephone_and_description_helpers():
    assert normalize_telephone(" +44 20 1234\t5678 ") == "+442012345678"
    s = set_telephone(PractitionerSingle(), "works_for.telephone", "+44 20 1234 5678")
    assert s.works_for.telephone == "+442012345678"

    s = set_description(ClinicSingle(), "Short text")
    assert s.description == "Short text"
    assert set_description(s, "x" * 501).description == "Short text"


def test_choose_clinic_name():
    s = choose_clinic_name(ClinicSingle(), "BUPA Healthcare")
    assert (s.name, s.is_custom_clinic_name) == ("BUPA Healthcare", False)
    s = choose_clinic_name(s, "custom")
    assert (s.name, s.is_custom_clinic_name) == ("", True)


def test_dict_round_trip(filled_state):
    data = state_to_dict(filled_state)
    assert state_from_dict(filled_state.entity, filled_state.arity, data) == filled_state


def test_from_dict_rejects_foreign_keys():
    with pytest.raises(UnknownFieldError):
        state_from_dict("practitioner", "single", {"sub_organizations": []})
    assert state_from_dict("clinic", "single", {}) == ClinicSingle()


def test_apply_operation_dispatch():
    s = apply_operation(ClinicSingle(), "set_field", {"path": "name", "value": "X"})
    assert s.name == "X"
    s = apply_operation(s, "toggle_day", {"path": "opening_hours", "index": 0, "day": "Saturday"})
    assert "Saturday" in s.opening_hours[0].days
    with pytest.raises(ValueError):
        apply_operation(s, "explode", {})
    with pytest.raises(ValueError):
        apply_operation(s, "remove_item", {"path": "services"})
