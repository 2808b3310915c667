"""Tests for the permission catalog, canonical roles and resolver."""

import pytest

from contentplatform.core.rbac.permissions import (
    Permission, Resource, Action,
    PERMISSION_DEFINITIONS, is_valid_permission, permission_name,
    get_permissions_for_resource, get_all_permissions, split_permission_name,
)
from contentplatform.core.rbac.checker import (
    PermissionChecker, has_permission, is_super_admin,
    get_effective_permissions, get_resource_permissions,
    get_permissions_by_resource, has_any_permission_for_resource,
)
from contentplatform.core.rbac.roles import (
    DEFAULT_ROLES, get_default_role_permissions,
    build_admin_permissions, build_editor_permissions,
    SUPER_ADMIN, ADMIN, EDITOR, VIEWER,
)

from tests.fakes import FakePermission, FakeRole, FakeUser


class TestPermissionCatalog:
    """Test permission definitions."""

    def test_catalog_is_full_cross_product(self):
        assert len(PERMISSION_DEFINITIONS) == len(Resource) * len(Action) == 52
        for resource in Resource:
            for action in Action:
                assert permission_name(resource, action) in PERMISSION_DEFINITIONS

    def test_canonical_name_format(self):
        assert permission_name(Resource.APP_CONFIG, Action.READ) == "APP_CONFIG_READ"
        assert permission_name("error_codes", "Delete") == "ERROR_CODES_DELETE"
        assert str(Permission(Resource.TEMPLATES, Action.CREATE)) == "TEMPLATES_CREATE"

    def test_names_outside_catalog(self):
        assert permission_name("spaceships", "launch") == "SPACESHIPS_LAUNCH"
        assert not is_valid_permission("SPACESHIPS_LAUNCH")
        assert not is_valid_permission("templates_create")  # case matters for names

    def test_permission_description(self):
        perm = PERMISSION_DEFINITIONS["TRANSLATIONS_CREATE"]
        assert perm.description == "Create new records Translation Management"
        assert PERMISSION_DEFINITIONS["DASHBOARD_READ"].description == "View/inquiry records Dashboard Access"

    def test_permission_from_string(self):
        perm = Permission.from_string("API_KEYS_DELETE")
        assert perm.resource == Resource.API_KEYS
        assert perm.action == Action.DELETE

    def test_invalid_permission_format(self):
        with pytest.raises(ValueError):
            Permission.from_string("invalid")

        with pytest.raises(ValueError):
            Permission.from_string("TEMPLATES_FLY")

        with pytest.raises(ValueError):
            split_permission_name("_READ")

    def test_permissions_for_resource(self):
        perms = get_permissions_for_resource(Resource.MEDIA)
        assert perms == ["MEDIA_CREATE", "MEDIA_READ", "MEDIA_UPDATE", "MEDIA_DELETE"]
        assert "TEMPLATES_READ" not in perms

    def test_all_permissions(self):
        all_perms = get_all_permissions()
        assert len(all_perms) == len(set(all_perms))
        assert "ORGANIZATION_UPDATE" in all_perms


class TestCanonicalRoles:
    """Regression fixtures for the built-in role contents."""

    def test_super_admin_has_everything(self):
        assert set(get_default_role_permissions(SUPER_ADMIN)) == set(PERMISSION_DEFINITIONS)

    def test_admin_manages_users_but_cannot_create_them(self):
        perms = set(get_default_role_permissions(ADMIN))
        assert {"USERS_READ", "USERS_UPDATE", "USERS_DELETE"} <= perms
        assert "USERS_CREATE" not in perms
        non_user = {n for n, p in PERMISSION_DEFINITIONS.items() if p.resource != Resource.USERS}
        assert non_user <= perms
        assert len(perms) == 51

    def test_editor(self):
        perms = set(get_default_role_permissions(EDITOR))
        assert "MEDIA_CREATE" in perms
        assert "TRANSLATIONS_DELETE" in perms
        assert "APP_CONFIG_READ" in perms
        assert "DASHBOARD_READ" in perms
        assert "APP_CONFIG_CREATE" not in perms
        assert "USERS_READ" not in perms
        assert len(perms) == 22

    def test_viewer(self):
        perms = set(get_default_role_permissions(VIEWER))
        assert "USERS_READ" in perms
        assert "USERS_UPDATE" not in perms
        assert perms == {permission_name(r, Action.READ) for r in Resource}

    def test_builders_only_use_available_names(self):
        available = ["TEMPLATES_READ", "USERS_CREATE", "USERS_READ"]
        assert build_admin_permissions(available) == {"TEMPLATES_READ", "USERS_READ"}
        assert build_editor_permissions(available) == {"TEMPLATES_READ"}

    def test_four_roles_in_order(self):
        assert list(DEFAULT_ROLES) == [SUPER_ADMIN, ADMIN, EDITOR, VIEWER]

    def test_unknown_role(self):
        with pytest.raises(ValueError):
            get_default_role_permissions("OWNER")


class TestPermissionChecker:
    """Test PermissionChecker class."""

    def test_exact_match(self):
        checker = PermissionChecker(["TEMPLATES_READ", "TEMPLATES_CREATE"])
        assert checker.has_permission("TEMPLATES_READ")
        assert checker.can_access_resource(Resource.TEMPLATES, Action.CREATE)
        assert not checker.has_permission("TEMPLATES_DELETE")

    def test_accepts_catalog_permission(self):
        checker = PermissionChecker(["LOV_UPDATE"])
        assert checker.has_permission(Permission(Resource.LOV, Action.UPDATE))

    def test_has_any_permission(self):
        checker = PermissionChecker(["MEDIA_READ"])
        assert checker.has_any_permission(["LOV_READ", "MEDIA_READ"])
        assert not checker.has_any_permission(["LOV_READ"])

    def test_accessible_resources(self):
        checker = PermissionChecker(["MEDIA_READ", "LOV_READ", "LOV_DELETE"])
        assert checker.get_accessible_resources(Action.READ) == [Resource.LOV, Resource.MEDIA]

    def test_super_admin_role_name(self):
        checker = PermissionChecker([], role_names=[SUPER_ADMIN])
        assert checker.is_super_admin
        assert checker.has_permission("ANYTHING_AT_ALL")


class TestResolver:
    """Test has_permission and the supporting queries."""

    def test_no_actor(self):
        assert has_permission(None, Resource.TEMPLATES, Action.READ) is False
        assert get_effective_permissions(None) == set()
        assert is_super_admin(None) is False

    def test_actor_without_roles_or_grants(self):
        user = FakeUser()
        for name, perm in PERMISSION_DEFINITIONS.items():
            assert not has_permission(user, perm.resource, perm.action)

    def test_single_role(self):
        viewer = FakeRole(VIEWER, *get_default_role_permissions(VIEWER))
        user = FakeUser(roles=[viewer])
        for name, perm in PERMISSION_DEFINITIONS.items():
            expected = perm.action == Action.READ
            assert has_permission(user, perm.resource, perm.action) is expected, name

    def test_direct_grant_without_role(self):
        user = FakeUser(permissions=["TEMPLATES_CREATE"])
        assert has_permission(user, Resource.TEMPLATES, Action.CREATE)
        assert not has_permission(user, Resource.TEMPLATES, Action.READ)

    def test_union_of_roles_and_grants(self):
        role_a = FakeRole("A", "LOV_READ")
        role_b = FakeRole("B", "MEDIA_DELETE")
        user = FakeUser(roles=[role_a, role_b], permissions=["APPS_CREATE"])
        assert get_effective_permissions(user) == {"LOV_READ", "MEDIA_DELETE", "APPS_CREATE"}
        assert has_permission(user, Resource.LOV, Action.READ)
        assert has_permission(user, Resource.MEDIA, Action.DELETE)
        assert has_permission(user, Resource.APPS, Action.CREATE)
        assert not has_permission(user, Resource.APPS, Action.DELETE)

    def test_string_arguments_any_case(self):
        user = FakeUser(permissions=["APP_CONFIG_UPDATE"])
        assert has_permission(user, "app_config", "update")
        assert has_permission(user, "APP_CONFIG", "Update")

    def test_super_admin_bypasses_every_pair(self):
        # Role carries no permissions at all; the name alone grants access
        user = FakeUser(roles=[FakeRole(SUPER_ADMIN)])
        assert is_super_admin(user)
        for perm in PERMISSION_DEFINITIONS.values():
            assert has_permission(user, perm.resource, perm.action)
        assert has_permission(user, "spaceships", "launch")

    def test_super_admin_name_is_exact(self):
        user = FakeUser(roles=[FakeRole("super_admin", "LOV_READ")])
        assert not is_super_admin(user)
        assert not has_permission(user, Resource.LOV, Action.DELETE)

    def test_resolution_does_not_mutate_actor(self):
        role = FakeRole("A", "LOV_READ")
        user = FakeUser(roles=[role], permissions=["MEDIA_READ"])
        has_permission(user, Resource.LOV, Action.READ)
        get_effective_permissions(user)
        assert role.permissions == {FakePermission("LOV_READ")}
        assert user.permissions == {FakePermission("MEDIA_READ")}

    def test_resource_permissions_are_lower_case_actions(self):
        user = FakeUser(
            roles=[FakeRole("A", "TEMPLATES_READ", "TEMPLATES_UPDATE")],
            permissions=["APP_CONFIG_READ"],
        )
        assert get_resource_permissions(user, Resource.TEMPLATES) == {"read", "update"}
        assert get_resource_permissions(user, "app_config") == {"read"}
        assert get_resource_permissions(user, Resource.MEDIA) == set()
        assert has_any_permission_for_resource(user, Resource.TEMPLATES)
        assert not has_any_permission_for_resource(user, Resource.MEDIA)

    def test_resource_key_does_not_match_prefix(self):
        # APP_CONFIG_READ must not count as an "APP" permission
        user = FakeUser(permissions=["APP_CONFIG_READ"])
        assert get_resource_permissions(user, "app") == set()

    def test_permissions_by_resource(self):
        user = FakeUser(permissions=["LOV_READ", "LOV_CREATE", "ERROR_CODES_DELETE"])
        assert get_permissions_by_resource(user) == {
            "lov": ["create", "read"],
            "error_codes": ["delete"],
        }
