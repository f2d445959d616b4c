# tests/test_variants.py
import pytest

from clinic_schema.form_models import (
    ClinicMultiple, ClinicSingle, EntityKind, LocationArity, PractitionerMultiple, PractitionerSingle, WEEKDAYS,
)
from clinic_schema.services.form_state import set_field
from clinic_schema.services.variants import (
    UnknownVariantError, available_variants, initial_state, variant_class, variant_label,
)


@pytest.mark.parametrize("entity,arity,cls", [
    ("practitioner", "single", PractitionerSingle),
    ("practitioner", "multiple", PractitionerMultiple),
    ("clinic", "single", ClinicSingle),
    ("clinic", "multiple", ClinicMultiple),
])
def test_variant_class_and_tags(entity, arity, cls):
    assert variant_class(entity, arity) is cls
    state = initial_state(EntityKind(entity), LocationArity(arity))
    assert type(state) is cls
    assert (state.entity.value, state.arity.value) == (entity, arity)


def test_initial_state_is_deterministic():
    a = initial_state("clinic", "multiple")
    b = initial_state("clinic", "multiple")
    assert a == b
    # a fresh template does not see edits made to an earlier one
    set_field(a, "name", "Edited")
    assert initial_state("clinic", "multiple").name == ""


def test_template_shapes():
    ps = initial_state("practitioner", "single")
    assert ps.works_for.services == ("",)
    assert ps.works_for.opening_hours[0].days == WEEKDAYS
    assert (ps.works_for.opening_hours[0].opens, ps.works_for.opening_hours[0].closes) == ("09:00", "18:00")
    assert len(ps.reviews) == 1

    pm = initial_state("practitioner", "multiple")
    assert len(pm.works_for) == 1
    assert pm.services == ("",)
    assert not hasattr(pm.works_for[0], "services")

    cs = initial_state("clinic", "single")
    assert cs.clinic_types == ("Private Healthcare",)
    assert cs.same_as == ("",)
    assert not hasattr(cs, "reviews")

    cm = initial_state("clinic", "multiple")
    assert len(cm.sub_organizations) == 1
    assert cm.sub_organizations[0].types == ("Physician", "MedicalClinic")
    assert len(cm.reviews) == 1


def test_unknown_variant():
    with pytest.raises(UnknownVariantError):
        initial_state("hospital", "single")
    with pytest.raises(UnknownVariantError):
        variant_class("clinic", "several")


def test_labels():
    assert variant_label("practitioner", "single") == "Practitioner - Single Location"
    assert variant_label("clinic", "multiple") == "Medical Clinic - Multiple Locations"
    assert len(available_variants()) == 4
