"""Unit tests for Capaz Pydantic models.

Tests the capability vector bounds, certification coercion and catalog inputs.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from capaz.assessments.snapshots import parse_submission
from capaz.core.errors import ValidationError
from capaz.models import CapabilityResponseIn, SkillCreate, SkillUpdate, coerce_certifications


class TestCapabilityResponseIn:
    """Test bounds on every numeric dimension."""

    def test_minimal_response(self):
        response = CapabilityResponseIn.model_validate({"skillId": "sk-1", "level": 0})

        assert response.skill_id == "sk-1"
        assert response.level == 0
        assert response.interest_level is None
        assert response.future_willingness is None
        assert response.mobility_for_skill is None
        assert response.certifications == []

    def test_full_response_accepts_upper_bounds(self):
        response = CapabilityResponseIn.model_validate({
            "skillId": "sk-1",
            "level": 5,
            "interestLevel": 5,
            "growthDesire": 5,
            "useFrequency": 5,
            "mentorLevel": 3,
            "leadLevel": 3,
            "yearsExperience": 50,
            "futureWillingness": 4,
            "mobilityForSkill": True,
        })

        assert response.years_experience == 50
        assert response.mobility_for_skill is True

    @pytest.mark.parametrize(
        "field, value",
        [
            ("level", 6),
            ("level", -1),
            ("interestLevel", 0),
            ("growthDesire", 6),
            ("useFrequency", 0),
            ("mentorLevel", 4),
            ("leadLevel", -1),
            ("yearsExperience", 51),
            ("futureWillingness", 0),
            ("futureWillingness", 5),
        ],
    )
    def test_out_of_bounds_is_rejected_not_clamped(self, field, value):
        payload = {"skillId": "sk-1", "level": 3, field: value}

        with pytest.raises(PydanticValidationError):
            CapabilityResponseIn.model_validate(payload)

    def test_level_is_required(self):
        with pytest.raises(PydanticValidationError):
            CapabilityResponseIn.model_validate({"skillId": "sk-1"})

    def test_snake_case_names_are_accepted(self):
        response = CapabilityResponseIn(skill_id="sk-1", level=2, interest_level=4)

        assert response.interest_level == 4


class TestCertifications:
    def test_plain_string_becomes_single_certification(self):
        response = CapabilityResponseIn.model_validate({"skillId": "s", "level": 1, "certifications": "CCNA"})

        assert [c.name for c in response.certifications] == ["CCNA"]
        assert response.certifications[0].obtained == ""
        assert response.certifications[0].needs_renewal is False

    def test_json_array_string(self):
        raw = '[{"name": "AZ-104", "obtained": "2023-05", "needsRenewal": true}]'

        response = CapabilityResponseIn.model_validate({"skillId": "s", "level": 1, "certifications": raw})

        assert response.certifications[0].name == "AZ-104"
        assert response.certifications[0].obtained == "2023-05"
        assert response.certifications[0].needs_renewal is True

    def test_bare_names_in_list_are_promoted(self):
        assert coerce_certifications(["CCNA", {"name": "CCNP"}]) == [{"name": "CCNA"}, {"name": "CCNP"}]

    def test_empty_values(self):
        assert coerce_certifications(None) == []
        assert coerce_certifications("   ") == []

    def test_unparseable_json_is_kept_as_a_name(self):
        assert coerce_certifications("[broken") == [{"name": "[broken"}]

    def test_certification_name_is_required(self):
        with pytest.raises(PydanticValidationError):
            CapabilityResponseIn.model_validate({"skillId": "s", "level": 1, "certifications": [{"obtained": "2020"}]})


class TestParseSubmission:
    def test_error_names_the_offending_field(self):
        payload = {"responses": [{"skillId": "sk-1", "level": 6}]}

        with pytest.raises(ValidationError) as exc_info:
            parse_submission(payload)

        paths = [e["path"] for e in exc_info.value.errors]
        assert paths == ["responses[0].level"]

    def test_every_bad_field_is_reported(self):
        payload = {
            "responses": [
                {"skillId": "sk-1", "level": 2},
                {"skillId": "sk-2", "level": 2, "mentorLevel": 9, "futureWillingness": 0},
            ]
        }

        with pytest.raises(ValidationError) as exc_info:
            parse_submission(payload)

        paths = sorted(e["path"] for e in exc_info.value.errors)
        assert paths == ["responses[1].futureWillingness", "responses[1].mentorLevel"]

    def test_empty_submission_is_valid(self):
        submission = parse_submission({"responses": [], "notes": "nothing yet"})

        assert submission.responses == []
        assert submission.notes == "nothing yet"


class TestSkillInputs:
    def test_level_description_keys_must_be_levels(self):
        with pytest.raises(PydanticValidationError):
            SkillCreate.model_validate({"name": "VLANs", "categoryId": "c", "levelDescriptions": {"6": "x"}})

    def test_valid_level_descriptions(self):
        skill = SkillCreate.model_validate(
            {"name": "VLANs", "categoryId": "c", "levelDescriptions": {"0": "none", "5": "expert"}}
        )

        assert skill.level_descriptions == {"0": "none", "5": "expert"}

    def test_partial_update_tracks_set_fields(self):
        update = SkillUpdate.model_validate({"tooltip": "Trunks and access ports"})

        assert update.model_dump(exclude_unset=True) == {"tooltip": "Trunks and access ports"}
