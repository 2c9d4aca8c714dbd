"""
Pytest fixtures and configuration for form builder tests.
Provides common form definitions and a fixed evaluation clock.
"""

from datetime import datetime

import pytest

from form_builder.config.settings import reset_settings_cache
from form_builder.startup import reset_initialization

from form_factories import make_derived, make_field, make_form, rule

FIXED_NOW = datetime(2024, 6, 1)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def sum_fields():
    """Two numbers and a derived field adding them."""
    return [
        make_field("f1", type="number", label="Field One", order=0),
        make_field("f2", type="number", label="Field Two", order=1),
        make_derived("d1", "sum(field_one, field_two)", ["f1", "f2"], label="Total", order=2),
    ]


@pytest.fixture
def age_fields():
    return [
        make_field("birthDate", type="date", label="BirthDate", order=0),
        make_derived("age", "age(birthdate)", ["birthDate"], label="Age", order=1),
    ]


@pytest.fixture
def signup_form():
    """A small form with required, email and derived fields."""
    return make_form(
        [
            make_field(
                "name",
                label="Full Name",
                required=True,
                validations=[rule("minLength", 2, "Name is too short")],
                order=0,
            ),
            make_field(
                "email",
                label="Email",
                required=True,
                validations=[rule("email", message="Enter a valid email")],
                order=1,
            ),
            make_field("birth", type="date", label="Birth Date", order=2),
            make_derived("age", "age(birth_date)", ["birth"], label="Age", order=3),
        ],
        name="Signup",
    )


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Keep settings and .env loading from leaking between tests."""
    monkeypatch.delenv("FORM_BUILDER_STORAGE_DIR", raising=False)
    monkeypatch.delenv("FORM_BUILDER_STORAGE_KEY", raising=False)
    reset_settings_cache()
    reset_initialization()
    yield
    reset_settings_cache()
    reset_initialization()
