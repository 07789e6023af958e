import pytest
from pydantic import ValidationError
from app.domain.users.schemas import UserCreateDTO, AdminUserUpdateDTO, AdminUserCreateDTO
from app.domain.users.models import UserRole


test_user_payload = {
    "username": "alice",
    "email": "alice@example.com",
    "full_name": "Alice Smith",
    "phone": "+447400123456",
}


def create_payload(**override):
    data = dict(test_user_payload)
    data.setdefault("password", "secret123")
    data.update(override)
    return data


def test_valid_payload_passes():
    dto = UserCreateDTO(**create_payload())
    assert dto.password.get_secret_value() == "secret123"
    assert dto.address is None


@pytest.mark.parametrize("password", ["12345", "x" * 65])
def test_password_length_out_of_range_raises_validation_error(password):
    with pytest.raises(ValidationError):
        UserCreateDTO(**create_payload(password=password))


def test_email_is_normalized():
    dto = UserCreateDTO(**create_payload(email="  Alice@Example.COM "))
    assert dto.email == "alice@example.com"


def test_invalid_email_raises_validation_error():
    with pytest.raises(ValidationError):
        UserCreateDTO(**create_payload(email="not-an-email"))


@pytest.mark.parametrize("phone, expected", [
    ("+447400123456", "+447400123456"),
    ("07400 123456", "+447400123456"),
    ("+48 501 234 567", "+48501234567"),
])
def test_phone_is_normalized_to_e164(phone, expected):
    dto = UserCreateDTO(**create_payload(phone=phone))
    assert dto.phone == expected


@pytest.mark.parametrize("bad_phone", ["123", "+44ABCDEF", "+" + "1" * 16])
def test_phone_invalid_formats_raise_validation_error(bad_phone):
    with pytest.raises(ValidationError) as e:
        UserCreateDTO(**create_payload(phone=bad_phone))
    assert "Invalid phone number" in str(e.value)


def test_blank_phone_reports_phone_is_required():
    with pytest.raises(ValidationError) as e:
        UserCreateDTO(**create_payload(phone="   "))
    assert "Phone is required" in str(e.value)


@pytest.mark.parametrize("username", ["ali ce", "bob!", "x@y"])
def test_username_rejects_special_characters(username):
    with pytest.raises(ValidationError):
        UserCreateDTO(**create_payload(username=username))


def test_username_and_names_are_stripped():
    dto = UserCreateDTO(**create_payload(username="  alice.s ", full_name="  Alice Smith  ", address="  "))
    assert dto.username == "alice.s"
    assert dto.full_name == "Alice Smith"
    assert dto.address is None


def test_admin_create_defaults_to_user_role():
    assert AdminUserCreateDTO(**create_payload()).role == UserRole.USER


def test_admin_create_forbids_unknown_fields():
    with pytest.raises(ValidationError):
        AdminUserCreateDTO(**create_payload(is_superuser=True))


def test_admin_update_tracks_only_sent_fields():
    dto = AdminUserUpdateDTO(full_name="Alice Jones")
    assert dto.model_fields_set == {"full_name"}
    assert dto.model_dump(exclude_unset=True) == {"full_name": "Alice Jones"}


def test_admin_update_rejects_unknown_role():
    with pytest.raises(ValidationError):
        AdminUserUpdateDTO(role="superuser")
