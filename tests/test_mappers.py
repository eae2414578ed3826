# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for row decoding and record conversion.
"""

import pytest
from pydantic import ValidationError

from carebridge.domain.mappers import (
    parse_enum, to_activity, to_category, to_donation, to_need, to_orphanage,
    to_user_account, to_verification_item
)
from carebridge.models.dtos import (
    ActivityLogDto, CategoryDto, DonationDto, NeedDto, OrphanageDto, ProfileDto
)
from carebridge.models.enums import (
    DonationStatus, DonationType, NeedPriority, NeedStatus, RecurringFrequency,
    UserRole, UserStatus, VerificationStatus
)
from carebridge.models.outcome import Error, Success, error_message


class TestDtoDecoding:
    """Test decoding of table rows."""

    def test_unknown_columns_are_ignored(self, sample_donation_row):
        row = dict(sample_donation_row, payment_reference="abc", updated_at="2024-02-01T00:00:00Z")

        dto = DonationDto.model_validate(row)

        assert dto.id == "don-1"
        assert not hasattr(dto, "payment_reference")

    def test_missing_optional_columns_use_defaults(self):
        dto = OrphanageDto.model_validate({"id": "orph-9", "orphanage_name": "New Home"})

        assert dto.city == ""
        assert dto.rating == 0.0
        assert dto.verification_status == "pending"

    def test_missing_required_column_fails(self):
        with pytest.raises(ValidationError):
            NeedDto.model_validate({"id": "need-1", "orphanage_id": "orph-1"})


class TestParseEnum:

    def test_known_value(self):
        assert parse_enum(DonationStatus, "confirmed", DonationStatus.PENDING) == DonationStatus.CONFIRMED

    def test_unknown_value_falls_back(self):
        assert parse_enum(DonationStatus, "refunded", DonationStatus.PENDING) == DonationStatus.PENDING

    def test_missing_value_falls_back(self):
        assert parse_enum(RecurringFrequency, None, None) is None


class TestUserAccountMapping:
    """Test profile to account conversion."""

    def test_maps_profile_fields(self, sample_profile_row):
        account = to_user_account(ProfileDto.model_validate(sample_profile_row))

        assert account.id == "user-1"
        assert account.role == UserRole.DONOR
        assert account.display_name == "Test Donor"
        assert account.status == UserStatus.ACTIVE
        assert account.verified is False

    def test_unknown_role_defaults_to_donor(self, sample_profile_row):
        dto = ProfileDto.model_validate(dict(sample_profile_row, user_type="volunteer"))

        assert to_user_account(dto).role == UserRole.DONOR

    def test_unknown_role_rejected_when_strict(self, sample_profile_row):
        dto = ProfileDto.model_validate(dict(sample_profile_row, user_type="volunteer"))

        with pytest.raises(ValueError, match="Invalid user type"):
            to_user_account(dto, strict=True)

    def test_accounts_are_immutable(self, sample_profile_row):
        account = to_user_account(ProfileDto.model_validate(sample_profile_row))

        with pytest.raises(ValidationError):
            account.display_name = "Someone Else"


class TestDonationMapping:

    def test_maps_type_and_status(self, sample_donation_row):
        row = dict(
            sample_donation_row,
            donation_type="in_kind",
            status="completed",
            item_description="Blankets",
            quantity=5,
            is_recurring=True,
            recurring_frequency="monthly",
        )

        record = to_donation(DonationDto.model_validate(row), orphanage_name="Hope", category_name="Clothing")

        assert record.type == DonationType.IN_KIND
        assert record.status == DonationStatus.COMPLETED
        assert record.recurring_frequency == RecurringFrequency.MONTHLY
        assert record.orphanage_name == "Hope"
        assert record.category_name == "Clothing"
        assert record.quantity == 5

    def test_unknown_status_defaults_to_pending(self, sample_donation_row):
        record = to_donation(DonationDto.model_validate(dict(sample_donation_row, status="lost")))

        assert record.status == DonationStatus.PENDING


class TestNeedMapping:

    def test_priority_is_case_insensitive(self, sample_need_row):
        need = to_need(NeedDto.model_validate(dict(sample_need_row, priority="urgent")))

        assert need.priority == NeedPriority.URGENT
        assert need.status == NeedStatus.ACTIVE

    def test_unknown_priority_raises(self, sample_need_row):
        with pytest.raises(ValueError):
            to_need(NeedDto.model_validate(dict(sample_need_row, priority="SOMEDAY")))

    def test_missing_description_becomes_empty(self, sample_need_row):
        need = to_need(NeedDto.model_validate(dict(sample_need_row, description=None)))

        assert need.description == ""


class TestOrphanageMapping:

    def test_contact_fields_are_grouped(self, sample_orphanage_row):
        orphanage = to_orphanage(OrphanageDto.model_validate(sample_orphanage_row))

        assert orphanage.name == "Hope Children's Home"
        assert orphanage.contact.phone == "0881234567"
        assert orphanage.contact.email == "info@hope.example.org"
        assert orphanage.contact.website == ""
        assert orphanage.verification_status == VerificationStatus.VERIFIED

    def test_verification_item_takes_owner_email(self, sample_orphanage_row, sample_profile_row):
        orphanage = OrphanageDto.model_validate(dict(sample_orphanage_row, verification_status="pending"))
        owner = ProfileDto.model_validate(dict(sample_profile_row, email="owner@hope.example.org"))

        item = to_verification_item(orphanage, owner)

        assert item.email == "owner@hope.example.org"
        assert item.city == "Lilongwe"
        assert item.verification_status == VerificationStatus.PENDING


class TestOtherMappings:

    def test_activity_actor_is_admin(self):
        entry = to_activity(ActivityLogDto.model_validate({
            "id": "log-1", "admin_id": "admin-1", "action_type": "USER_DELETED", "target_id": "user-2"
        }))

        assert entry.actor_id == "admin-1"
        assert entry.target_type is None

    def test_category_blank_optionals(self, sample_category_row):
        category = to_category(CategoryDto.model_validate(dict(sample_category_row, color=None)))

        assert category.name == "Clothing"
        assert category.color == ""
        assert category.description == ""


class TestOutcome:

    def test_success_and_error_flags(self):
        assert Success(1).is_success is True
        assert Error("nope").is_success is False

    def test_error_message_prefers_exception_text(self):
        assert error_message(Exception("Invalid login credentials"), "Sign in failed") == "Invalid login credentials"

    def test_error_message_falls_back(self):
        assert error_message(Exception(), "Sign in failed") == "Sign in failed"

    def test_error_message_uses_message_attribute(self):
        class ApiError(Exception):
            def __init__(self, message):
                super().__init__({"message": message})
                self.message = message

        assert error_message(ApiError("duplicate key"), "Failed") == "duplicate key"
