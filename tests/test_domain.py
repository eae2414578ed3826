# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for pure domain logic: donations, needs, admin, filters and validation.
"""

from datetime import datetime, timezone

import pytest

from carebridge.domain.admin import (
    build_activity_insert, build_verification_update, is_awaiting_verification, summarize_dashboard
)
from carebridge.domain.donations import (
    allowed_transitions, build_donation_insert, build_status_update, compute_statistics,
    deletion_error, is_forward_transition, is_terminal, rank_top_donors
)
from carebridge.domain.filters import apply_filters, field_equals, is_active, text_contains, updated_selections
from carebridge.domain.mappers import to_donation
from carebridge.domain.needs import build_need_insert, build_need_update, compute_needs_statistics, sort_by_priority
from carebridge.domain.validation import (
    is_amount_input, is_quantity_input, parse_amount, parse_quantity, validate_email,
    validate_password, validate_password_confirmation, validate_phone, validate_required
)
from carebridge.models.dtos import DonationDto, NeedDto, OrphanageDto, ProfileDto
from carebridge.models.entities import Need
from carebridge.models.enums import (
    ActivityTarget, ActivityType, DonationStatus, DonationType, NeedPriority, RecurringFrequency,
    VerificationStatus
)


def donation_dto(**overrides):
    row = {
        "id": "don-1", "donor_id": "donor-1", "orphanage_id": "orph-1", "category_id": "cat-1",
        "amount": 10.0, "donation_type": "monetary", "status": "pending",
    }
    row.update(overrides)
    return DonationDto.model_validate(row)


def need(need_id, priority):
    return Need(
        id=need_id, orphanage_id="orph-1", category_id="cat-1",
        item_name=f"Item {need_id}", quantity=1, priority=priority,
    )


class TestDonationTransitions:
    """Test the donation workflow table."""

    def test_pending_moves_to_confirmed_or_cancelled(self):
        assert allowed_transitions(DonationStatus.PENDING) == {DonationStatus.CONFIRMED, DonationStatus.CANCELLED}

    def test_confirmed_moves_to_completed(self):
        assert is_forward_transition(DonationStatus.CONFIRMED, DonationStatus.COMPLETED)

    def test_pending_to_completed_skips_a_step(self):
        assert not is_forward_transition(DonationStatus.PENDING, DonationStatus.COMPLETED)

    def test_terminal_statuses(self):
        assert is_terminal(DonationStatus.COMPLETED)
        assert is_terminal(DonationStatus.CANCELLED)
        assert not is_terminal(DonationStatus.CONFIRMED)


class TestDonationRules:

    def test_only_pending_donations_can_be_deleted(self):
        assert deletion_error(to_donation(donation_dto(status="pending"))) is None

    @pytest.mark.parametrize("status", ["confirmed", "completed", "cancelled"])
    def test_non_pending_donation_cannot_be_deleted(self, status):
        assert deletion_error(to_donation(donation_dto(status=status))) == "Can only delete pending donations"

    def test_insert_payload_omits_absent_optionals(self):
        payload = build_donation_insert("donor-1", "orph-1", "cat-1", 25.0)

        assert payload == {
            "donor_id": "donor-1",
            "orphanage_id": "orph-1",
            "category_id": "cat-1",
            "amount": 25.0,
            "donation_type": "monetary",
            "status": "pending",
            "is_anonymous": False,
            "is_recurring": False,
        }

    def test_insert_payload_includes_given_optionals(self):
        payload = build_donation_insert(
            "donor-1", "orph-1", "cat-1", 0.0,
            donation_type=DonationType.IN_KIND,
            item_description="Shoes",
            quantity=4,
            is_recurring=True,
            recurring_frequency=RecurringFrequency.WEEKLY,
        )

        assert payload["donation_type"] == "in_kind"
        assert payload["item_description"] == "Shoes"
        assert payload["quantity"] == 4
        assert payload["recurring_frequency"] == "weekly"
        assert "note" not in payload
        assert "need_id" not in payload

    def test_completed_status_update_stamps_completion(self):
        now = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

        updates = build_status_update(DonationStatus.COMPLETED, now=now)

        assert updates == {"status": "completed", "completed_at": now.isoformat()}

    def test_other_status_update_has_no_stamp(self):
        assert build_status_update(DonationStatus.CONFIRMED) == {"status": "confirmed"}


class TestDonationStatistics:

    def test_only_completed_donations_count_toward_amount(self):
        stats = compute_statistics([
            donation_dto(id="a", amount=10.0, status="completed"),
            donation_dto(id="b", amount=20.0, status="pending"),
            donation_dto(id="c", amount=30.0, status="completed", donation_type="in_kind"),
        ])

        assert stats.total_donations == 3
        assert stats.total_amount == 40.0
        assert stats.pending_donations == 1
        assert stats.completed_donations == 2
        assert stats.monetary_donations == 2
        assert stats.in_kind_donations == 1

    def test_empty_statistics(self):
        stats = compute_statistics([])

        assert stats.total_donations == 0
        assert stats.total_amount == 0.0

    def test_top_donors_ranked_by_total(self):
        ranking = rank_top_donors([
            donation_dto(id="a", donor_id="d1", amount=10.0),
            donation_dto(id="b", donor_id="d2", amount=50.0),
            donation_dto(id="c", donor_id="d1", amount=15.0),
            donation_dto(id="d", donor_id="d3", amount=5.0),
        ], limit=2)

        assert [s.donor_id for s in ranking] == ["d2", "d1"]
        assert ranking[1].total_amount == 25.0
        assert ranking[1].donation_count == 2


class TestNeedRules:

    def test_sort_by_priority_most_pressing_first(self):
        needs = [need("n1", NeedPriority.LOW), need("n2", NeedPriority.URGENT), need("n3", NeedPriority.HIGH)]

        ordered = sort_by_priority(needs)

        assert [n.priority for n in ordered] == [NeedPriority.URGENT, NeedPriority.HIGH, NeedPriority.LOW]

    def test_sort_is_stable_within_a_priority(self):
        needs = [need("n1", NeedPriority.MEDIUM), need("n2", NeedPriority.MEDIUM), need("n3", NeedPriority.URGENT)]

        assert [n.id for n in sort_by_priority(needs)] == ["n3", "n1", "n2"]

    def test_insert_payload_is_active(self):
        payload = build_need_insert("orph-1", "cat-1", "Rice", 10, NeedPriority.HIGH, "50kg bags")

        assert payload["status"] == "active"
        assert payload["priority"] == "HIGH"

    def test_update_payload_only_has_given_fields(self):
        assert build_need_update(quantity=5) == {"quantity": 5}
        assert build_need_update() == {}

    def test_statistics_count_active_priorities(self):
        rows = [
            NeedDto.model_validate({
                "id": f"n{i}", "orphanage_id": "orph-1", "category_id": "cat-1",
                "item_name": "x", "quantity": 1, "priority": priority, "status": status,
            })
            for i, (priority, status) in enumerate([
                ("URGENT", "active"), ("HIGH", "active"), ("URGENT", "fulfilled"), ("LOW", "cancelled"),
            ])
        ]

        stats = compute_needs_statistics(rows)

        assert stats.total_needs == 4
        assert stats.active_needs == 2
        assert stats.fulfilled_needs == 1
        assert stats.cancelled_needs == 1
        assert stats.urgent_needs == 1
        assert stats.high_priority_needs == 1


class TestAdminRules:

    def test_dashboard_summary(self):
        profiles = [
            ProfileDto.model_validate({"id": "1", "user_type": "donor", "full_name": "A", "email": "a@x.io"}),
            ProfileDto.model_validate({"id": "2", "user_type": "orphanage", "full_name": "B", "email": "b@x.io"}),
            ProfileDto.model_validate({
                "id": "3", "user_type": "admin", "full_name": "C", "email": "c@x.io", "status": "suspended"
            }),
        ]
        donations = [donation_dto(id="a", amount=12.5, status="completed"), donation_dto(id="b")]
        orphanages = [
            OrphanageDto.model_validate({"id": "o1", "orphanage_name": "A", "verification_status": "verified"}),
            OrphanageDto.model_validate({"id": "o2", "orphanage_name": "B", "verification_status": None}),
            OrphanageDto.model_validate({"id": "o3", "orphanage_name": "C"}),
        ]

        stats = summarize_dashboard(profiles, donations, [], orphanages)

        assert stats.total_users == 3
        assert stats.total_donors == 1
        assert stats.total_orphanages == 1
        assert stats.total_admins == 1
        assert stats.active_users == 2
        assert stats.suspended_users == 1
        assert stats.total_donations_amount == 12.5
        assert stats.pending_donations == 1
        assert stats.verified_orphanages == 1
        assert stats.pending_orphanages == 1

    def test_verification_update_marks_verified(self):
        updates = build_verification_update("admin-1", VerificationStatus.VERIFIED, notes="Documents checked")

        assert updates["verification_status"] == "verified"
        assert updates["verified_by"] == "admin-1"
        assert updates["verified"] is True
        assert updates["verification_notes"] == "Documents checked"
        assert "verified_at" in updates

    def test_rejection_does_not_set_verified(self):
        updates = build_verification_update("admin-1", VerificationStatus.REJECTED)

        assert "verified" not in updates
        assert "verification_notes" not in updates

    @pytest.mark.parametrize("status,expected", [("pending", True), (None, False), ("verified", False)])
    def test_awaiting_verification(self, status, expected):
        orphanage = OrphanageDto.model_validate({"id": "o1", "orphanage_name": "A", "verification_status": status})

        assert is_awaiting_verification(orphanage) is expected

    def test_activity_insert_stores_enum_values(self):
        payload = build_activity_insert(
            "admin-1", ActivityType.USER_DELETED, ActivityTarget.USER, "user-9", "User deleted"
        )

        assert payload == {
            "admin_id": "admin-1",
            "action_type": "USER_DELETED",
            "target_type": "USER",
            "target_id": "user-9",
            "description": "User deleted",
        }


class TestFilters:
    """Test in-memory list filtering."""

    def setup_method(self):
        self.records = [
            need("n1", NeedPriority.HIGH),
            need("n2", NeedPriority.LOW),
            need("n3", NeedPriority.HIGH),
        ]
        self.matchers = {"priority": field_equals("priority"), "search": text_contains("item_name")}

    def test_blank_and_none_selections_are_inactive(self):
        assert not is_active(None)
        assert not is_active("   ")
        assert is_active(False)

    def test_dimensions_combine_with_and(self):
        result = apply_filters(self.records, {"priority": NeedPriority.HIGH, "search": "n3"}, self.matchers)

        assert [r.id for r in result] == ["n3"]

    def test_no_active_selection_keeps_everything(self):
        assert apply_filters(self.records, {"priority": None}, self.matchers) == self.records

    def test_search_is_case_insensitive(self):
        result = apply_filters(self.records, {"search": "ITEM N2"}, self.matchers)

        assert [r.id for r in result] == ["n2"]

    def test_unknown_dimension_raises(self):
        with pytest.raises(KeyError):
            apply_filters(self.records, {"colour": "red"}, self.matchers)

    def test_updated_selections_copies(self):
        original = {"priority": NeedPriority.LOW}

        updated = updated_selections(original, "search", "rice")

        assert original == {"priority": NeedPriority.LOW}
        assert updated == {"priority": NeedPriority.LOW, "search": "rice"}


class TestValidation:

    @pytest.mark.parametrize("email,expected", [
        ("", "Email is required"),
        ("not-an-email", "Invalid email format"),
        ("donor@example.com", None),
    ])
    def test_validate_email(self, email, expected):
        assert validate_email(email) == expected

    def test_validate_password(self):
        assert validate_password("") == "Password is required"
        assert validate_password("12345") == "Password must be at least 6 characters"
        assert validate_password("123456") is None

    def test_validate_confirmation(self):
        assert validate_password_confirmation("secret1", "secret2") == "Passwords do not match"
        assert validate_password_confirmation("secret1", "secret1") is None

    def test_validate_required_and_phone(self):
        assert validate_required("  ", "Name") == "Name is required"
        assert validate_phone("") is None
        assert validate_phone("12345") == "Invalid phone number"
        assert validate_phone("0991234567") is None

    def test_parse_amount(self):
        assert parse_amount("12.50") == 12.5
        assert parse_amount("0") is None
        assert parse_amount("") is None
        assert parse_amount("abc") is None

    def test_parse_quantity(self):
        assert parse_quantity("3") == 3
        assert parse_quantity("0") is None
        assert parse_quantity("2.5") is None

    def test_partial_input(self):
        assert is_amount_input("12.")
        assert not is_amount_input("12a")
        assert is_quantity_input("")
        assert not is_quantity_input("1.5")
