"""Tests for request body validation."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from knight_service.config import get_settings
from knight_service.models.knights import KnightCreate, KnightOut, NicknameUpdate


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    for name in ("CREATE_NICKNAME_MAX_LENGTH", "UPDATE_NICKNAME_MAX_LENGTH", "NAME_MAX_LENGTH"):
        monkeypatch.delenv(f"KNIGHTS_{name}", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _error_fields(exc: ValidationError) -> set:
    return {".".join(str(part) for part in err["loc"]) for err in exc.errors()}


class TestKnightCreate:
    """Test the create-knight body."""

    def test_valid_body(self, knight_body):
        knight = KnightCreate.model_validate(knight_body)
        assert knight.name == "Lancelot"
        assert knight.key_attribute == "strength"
        assert knight.birthday.year == 1990
        assert knight.weapons[0].equipped is True
        assert knight.attributes.charisma == 10

    def test_caller_cannot_set_hero_or_id(self, knight_body):
        knight_body["isHero"] = True
        knight_body["id"] = "forged"
        dumped = KnightCreate.model_validate(knight_body).model_dump()
        assert "is_hero" not in dumped
        assert "id" not in dumped

    def test_empty_name_rejected(self, knight_body):
        knight_body["name"] = ""
        with pytest.raises(ValidationError) as exc_info:
            KnightCreate.model_validate(knight_body)
        assert "cannot be empty" in str(exc_info.value)

    def test_name_too_long(self, knight_body):
        knight_body["name"] = "x" * 51
        with pytest.raises(ValidationError):
            KnightCreate.model_validate(knight_body)

    def test_nickname_bound_is_fifteen_by_default(self, knight_body):
        knight_body["nickname"] = "n" * 15
        KnightCreate.model_validate(knight_body)

        knight_body["nickname"] = "n" * 16
        with pytest.raises(ValidationError) as exc_info:
            KnightCreate.model_validate(knight_body)
        assert "too long" in str(exc_info.value)

    def test_nickname_bound_is_configurable(self, knight_body, monkeypatch):
        monkeypatch.setenv("KNIGHTS_CREATE_NICKNAME_MAX_LENGTH", "50")
        get_settings.cache_clear()
        knight_body["nickname"] = "n" * 40
        KnightCreate.model_validate(knight_body)

    def test_invalid_birthday(self, knight_body):
        knight_body["birthday"] = "not-a-date"
        with pytest.raises(ValidationError) as exc_info:
            KnightCreate.model_validate(knight_body)
        assert _error_fields(exc_info.value) == {"birthday"}

    def test_reports_every_field_violation(self, knight_body):
        knight_body["name"] = ""
        knight_body["attributes"]["wisdom"] = "wise"
        knight_body["weapons"][0].pop("equipped")
        del knight_body["keyAttribute"]
        with pytest.raises(ValidationError) as exc_info:
            KnightCreate.model_validate(knight_body)

        fields = _error_fields(exc_info.value)
        assert "name" in fields
        assert "keyAttribute" in fields
        assert "weapons.0.equipped" in fields
        assert any(field.startswith("attributes.wisdom") for field in fields)

    @pytest.mark.parametrize(
        "path, value",
        [
            (("attributes", "strength"), "10"),
            (("weapons", 0, "mod"), "3"),
            (("weapons", 0, "equipped"), "yes"),
            (("weapons", 0, "equipped"), 1),
            (("birthday",), 0),
            (("name",), 42),
        ],
    )
    def test_mistyped_values_are_not_coerced(self, knight_body, path, value):
        target = knight_body
        for key in path[:-1]:
            target = target[key]
        target[path[-1]] = value

        with pytest.raises(ValidationError) as exc_info:
            KnightCreate.model_validate(knight_body)

        expected = ".".join(str(part) for part in path)
        assert any(field.startswith(expected) for field in _error_fields(exc_info.value))

    def test_birthday_converted_to_utc(self, knight_body):
        knight_body["birthday"] = "1990-01-01T23:30:00+05:00"
        birthday = KnightCreate.model_validate(knight_body).birthday
        assert birthday == datetime(1990, 1, 1, 18, 30, tzinfo=timezone.utc)
        assert birthday.utcoffset() == timedelta(0)

    def test_weapons_may_repeat(self, knight_body):
        knight_body["weapons"] = knight_body["weapons"] * 2
        knight = KnightCreate.model_validate(knight_body)
        assert len(knight.weapons) == 2


class TestNicknameUpdate:
    """Test the update-nickname body."""

    def test_valid(self):
        assert NicknameUpdate.model_validate({"nickname": "Sir_Lancelot"}).nickname == "Sir_Lancelot"

    def test_empty_rejected(self):
        with pytest.raises(ValidationError):
            NicknameUpdate.model_validate({"nickname": ""})

    def test_missing_rejected(self):
        with pytest.raises(ValidationError):
            NicknameUpdate.model_validate({})

    def test_allows_up_to_fifty(self):
        NicknameUpdate.model_validate({"nickname": "n" * 50})
        with pytest.raises(ValidationError):
            NicknameUpdate.model_validate({"nickname": "n" * 51})


class TestKnightOut:
    def test_serializes_camel_case(self, knight_body):
        row = KnightCreate.model_validate(knight_body).model_dump()
        row.update(id="abc", is_hero=False)
        data = KnightOut.model_validate(row).model_dump(by_alias=True)
        assert data["isHero"] is False
        assert data["keyAttribute"] == "strength"
        assert "is_hero" not in data

    def test_naive_birthday_read_back_as_utc(self, knight_body):
        row = KnightCreate.model_validate(knight_body).model_dump()
        row.update(id="abc", is_hero=True, birthday=datetime(1990, 1, 1, 18, 30))
        knight = KnightOut.model_validate(row)
        assert knight.birthday == datetime(1990, 1, 1, 18, 30, tzinfo=timezone.utc)
