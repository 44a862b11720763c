"""Tests for the in-process enumeration registry."""

import pytest

from src.searchmatic.core.exceptions import InvalidEnumValue, ValidationError
from src.searchmatic.models import EnumField
from src.searchmatic.services.enum_registry import EnumRegistry, get_enum_registry

pytestmark = pytest.mark.unit


@pytest.fixture
def registry() -> EnumRegistry:
    return EnumRegistry()


class TestBuiltinValues:
    def test_defaults(self, registry: EnumRegistry) -> None:
        assert registry.default(EnumField.PROJECT_TYPE) == "systematic_review"
        assert registry.default(EnumField.PROJECT_STATUS) == "draft"
        assert registry.default(EnumField.STUDY_TYPE) == "article"
        assert registry.default(EnumField.STUDY_STATUS) == "pending"

    def test_seed_values_are_valid(self, registry: EnumRegistry) -> None:
        assert registry.is_valid("project_type", "meta_analysis")
        assert registry.is_valid("project_status", "archived")
        assert registry.is_valid("study_type", "conference_paper")
        assert registry.is_valid("study_status", "extracted")

    def test_legacy_project_types_stay_valid(self, registry: EnumRegistry) -> None:
        assert registry.is_valid("project_type", "guided")
        assert registry.is_valid("project_type", "bring_your_own")

    def test_unregistered_value_is_invalid(self, registry: EnumRegistry) -> None:
        assert not registry.is_valid("project_type", "weird")
        assert not registry.is_valid("study_status", "PENDING")
        assert not registry.is_valid("study_status", None)

    def test_values_are_in_registration_order(self, registry: EnumRegistry) -> None:
        assert registry.values("project_status") == [
            "draft",
            "active",
            "review",
            "completed",
            "archived",
        ]

    def test_initial_version_is_zero(self, registry: EnumRegistry) -> None:
        assert registry.version == 0

    def test_unknown_field_is_validation_error(self, registry: EnumRegistry) -> None:
        with pytest.raises(ValidationError):
            registry.is_valid("colour", "red")
        with pytest.raises(ValidationError):
            registry.values("colour")


class TestRegister:
    def test_register_appends_and_bumps_version(self, registry: EnumRegistry) -> None:
        before = registry.values("project_type")

        assert registry.register("project_type", "custom_type") is True

        assert registry.is_valid("project_type", "custom_type")
        assert registry.values("project_type") == [*before, "custom_type"]
        assert registry.version == 1

    def test_register_existing_value_is_noop(self, registry: EnumRegistry) -> None:
        registry.register("study_type", "preprint")

        assert registry.register("study_type", "preprint") is False
        assert registry.register("study_type", "article") is False
        assert registry.values("study_type").count("preprint") == 1
        assert registry.version == 1

    def test_register_only_grows(self, registry: EnumRegistry) -> None:
        before = registry.snapshot()

        registry.register("study_status", "awaiting_full_text")
        after = registry.snapshot()

        for field, values in before.items():
            assert after[field][: len(values)] == values

    def test_register_strips_whitespace(self, registry: EnumRegistry) -> None:
        registry.register("study_type", "  dataset ")
        assert registry.is_valid("study_type", "dataset")

    @pytest.mark.parametrize(
        "value", ["", "   ", "Has Space", "UPPER", "_leading", "a-b", "x" * 51]
    )
    def test_register_rejects_malformed_values(self, registry: EnumRegistry, value: str) -> None:
        with pytest.raises(InvalidEnumValue) as exc_info:
            registry.register("project_type", value)

        assert exc_info.value.field == "project_type"
        assert registry.version == 0

    def test_register_unknown_field(self, registry: EnumRegistry) -> None:
        with pytest.raises(ValidationError) as exc_info:
            registry.register("colour", "red")
        assert not isinstance(exc_info.value, InvalidEnumValue)

    def test_persisted_version_is_kept(self, registry: EnumRegistry) -> None:
        registry.register("project_type", "rapid_review", version=7)
        assert registry.version == 7

        registry.register("project_type", "living_review")
        assert registry.version == 8

    def test_older_persisted_version_does_not_lower_version(self, registry: EnumRegistry) -> None:
        registry.register("project_type", "rapid_review", version=5)
        registry.register("study_type", "preprint", version=3)
        assert registry.version == 5


def test_invalid_enum_value_is_a_validation_error() -> None:
    error = InvalidEnumValue("study_status", "weird", ["pending", "included"])

    assert isinstance(error, ValidationError)
    assert error.status_code == 422
    assert error.to_detail() == {
        "message": "Invalid value 'weird' for study_status",
        "field": "study_status",
        "allowed": ["pending", "included"],
    }


def test_get_enum_registry_is_a_singleton() -> None:
    assert get_enum_registry() is get_enum_registry()
