import pytest

from access.errors import ValidationError


@pytest.mark.parametrize("current, target, expected", [
    ("developer", "developer", False),
    ("developer", "owner", True),
    ("developer", "admin", True),
    ("developer", "visitor", True),
    ("developer", "betaTester", True),
    ("owner", "developer", False),
    ("owner", "owner", False),
    ("owner", "admin", True),
    ("owner", "visitor", False),
    ("owner", "partner", True),
    ("admin", "owner", False),
    ("admin", "admin", False),
    ("admin", "betaTester", True),
    ("visitor", "admin", False),
    ("visitor", "betaTester", False),
    ("betaTester", "betaTester", False),
    ("betaTester", "partner", False),
    ("ghost", "partner", False),
])
def test_policy_table(store, authority, current, target, expected):
    store.set_current_role_unchecked(current)
    assert authority.can_manage_role(target) is expected


@pytest.mark.parametrize("current, expected", [
    ("developer", True), ("owner", True), ("admin", False), ("visitor", False),
])
def test_who_can_manage_admin(store, authority, current, expected):
    store.set_current_role_unchecked(current)
    assert authority.can_manage_role("admin") is expected


def test_manageable_codes_per_role(store, authority):
    seed = {"betaTester": "123456", "partner": "654321"}

    store.set_current_role_unchecked("developer")
    assert authority.manageable_codes() == {"owner": "445566", "admin": "778899", **seed}

    store.set_current_role_unchecked("owner")
    assert authority.manageable_codes() == {"admin": "778899", **seed}

    store.set_current_role_unchecked("admin")
    assert authority.manageable_codes() == seed

    store.set_current_role_unchecked("visitor")
    assert authority.manageable_codes() == {}


# --- Rotation -------------------------------------------------------------------
def test_owner_rotates_admin_code(store, authority):
    store.set_current_role_unchecked("owner")
    authority.rotate_code("admin", "135791")
    assert store.get_admin_code() == "135791"


def test_admin_cannot_rotate_owner_code(store, authority):
    store.set_current_role_unchecked("admin")
    with pytest.raises(PermissionError):
        authority.rotate_code("owner", "135791")
    assert store.get_owner_code() == "445566"


def test_nobody_rotates_developer(store, authority):
    store.set_current_role_unchecked("developer")
    with pytest.raises(PermissionError):
        authority.rotate_code("developer", "135791")


def test_visitor_has_no_code_to_rotate(store, authority):
    store.set_current_role_unchecked("developer")
    with pytest.raises(ValidationError):
        authority.rotate_code("visitor", "135791")


def test_rotate_rejects_bad_code(store, authority):
    store.set_current_role_unchecked("developer")
    with pytest.raises(ValidationError):
        authority.rotate_code("owner", "12a456")
    assert store.get_owner_code() == "445566"


def test_rotate_custom_role_code(store, authority):
    store.set_current_role_unchecked("admin")
    authority.rotate_code("partner", "000111")
    assert store.get_custom_roles() == {"betaTester": "123456", "partner": "000111"}


# --- Custom roles ---------------------------------------------------------------
def test_add_custom_role_merges(store, authority):
    store.set_current_role_unchecked("admin")
    assert authority.add_custom_role("  qa  ", "000000") == "qa"
    assert store.get_custom_roles() == {"betaTester": "123456", "partner": "654321", "qa": "000000"}


@pytest.mark.parametrize("current", ["visitor", "betaTester"])
def test_add_custom_role_needs_privilege(store, authority, backend, current):
    store.set_current_role_unchecked(current)
    with pytest.raises(PermissionError):
        authority.add_custom_role("qa", "000000")
    assert "pageCustomRoles" not in backend.data


@pytest.mark.parametrize("name, code", [("", "000000"), ("   ", "000000"), ("qa", "0000"), ("owner", "000000")])
def test_add_custom_role_validation(store, authority, backend, name, code):
    store.set_current_role_unchecked("developer")
    with pytest.raises(ValidationError):
        authority.add_custom_role(name, code)
    assert "pageCustomRoles" not in backend.data


def test_update_custom_role(store, authority):
    store.set_current_role_unchecked("owner")
    authority.update_custom_role("betaTester", "777777")
    assert store.get_custom_roles()["betaTester"] == "777777"


def test_update_custom_role_needs_privilege(store, authority):
    store.set_current_role_unchecked("betaTester")
    with pytest.raises(PermissionError):
        authority.update_custom_role("betaTester", "777777")


def test_delete_custom_role(store, authority):
    store.set_current_role_unchecked("admin")
    assert authority.delete_custom_role("partner") is True
    assert store.get_custom_roles() == {"betaTester": "123456"}


def test_delete_missing_role_is_noop(store, authority, backend):
    store.set_current_role_unchecked("admin")
    store.save_custom_roles({"qa": "000000"})
    before = backend.get("pageCustomRoles")

    assert authority.delete_custom_role("doesNotExist") is False
    assert backend.get("pageCustomRoles") == before
    assert store.get_custom_roles() == {"qa": "000000"}


def test_delete_missing_role_on_fresh_storage_writes_nothing(store, authority, backend):
    store.set_current_role_unchecked("owner")
    authority.delete_custom_role("doesNotExist")
    assert "pageCustomRoles" not in backend.data


def test_delete_needs_privilege(store, authority):
    with pytest.raises(PermissionError):
        authority.delete_custom_role("partner")



def test_delete_strips_name_like_add(store, authority):
    store.set_current_role_unchecked("admin")
    authority.add_custom_role(" qa ", "000000")
    assert authority.delete_custom_role(" qa ") is True
    assert "qa" not in store.get_custom_roles()
