"""Tests for the catalog and canonical role bootstrap."""

import logging

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from contentplatform.core.rbac.permissions import PERMISSION_DEFINITIONS
from contentplatform.core.rbac.roles import ADMIN, EDITOR, SUPER_ADMIN, VIEWER
from contentplatform.db import seed
from contentplatform.db.models import Permission, Role
from contentplatform.db.session import build_engine


def _counts(db):
    return db.query(Permission).count(), db.query(Role).count()


def _role_permissions(db, name):
    return set(seed.get_role_by_name(db, name).permission_names)


class TestEnsureCatalog:

    def test_creates_every_permission(self, db_session):
        assert seed.ensure_catalog(db_session) == 52
        stored = {p.name: p for p in db_session.query(Permission).all()}
        assert set(stored) == set(PERMISSION_DEFINITIONS)

        perm = stored["APP_CONFIG_UPDATE"]
        assert perm.resource == "app_config"
        assert perm.action == "update"
        assert perm.description == "Modify existing records App Configuration Management"

    def test_fills_gaps_only(self, db_session):
        db_session.add(Permission(name="LOV_READ", resource="lov", action="read"))
        db_session.commit()
        assert seed.ensure_catalog(db_session) == 51
        assert db_session.query(Permission).filter(Permission.name == "LOV_READ").count() == 1

    def test_infrastructure_errors_propagate(self):
        # No tables were created on this engine
        engine = build_engine("sqlite://")
        db = sessionmaker(bind=engine)()
        try:
            with pytest.raises(OperationalError):
                seed.ensure_catalog(db)
        finally:
            db.close()
            engine.dispose()


class TestBootstrap:

    def test_fresh_bootstrap(self, db_session):
        summary = seed.bootstrap(db_session)
        assert summary == {
            "permissions_created": 52,
            "roles_created": 4,
            "permissions_total": 52,
            "roles_total": 4,
        }
        for name in (SUPER_ADMIN, ADMIN, EDITOR, VIEWER):
            role = seed.get_role_by_name(db_session, name)
            assert role.is_system_role is True
            assert role.corporate_id is None

    def test_idempotent(self, db_session):
        seed.bootstrap(db_session)
        once = _counts(db_session)
        for _ in range(3):
            summary = seed.bootstrap(db_session)
            assert summary["permissions_created"] == 0
            assert summary["roles_created"] == 0
        assert _counts(db_session) == once == (52, 4)

    def test_canonical_role_contents(self, db_session):
        seed.bootstrap(db_session)

        assert _role_permissions(db_session, SUPER_ADMIN) == set(PERMISSION_DEFINITIONS)

        admin = _role_permissions(db_session, ADMIN)
        assert {"USERS_READ", "USERS_UPDATE", "USERS_DELETE"} <= admin
        assert "USERS_CREATE" not in admin
        assert len(admin) == 51

        editor = _role_permissions(db_session, EDITOR)
        assert "MEDIA_CREATE" in editor
        assert "APP_CONFIG_READ" in editor
        assert "APP_CONFIG_CREATE" not in editor

        viewer = _role_permissions(db_session, VIEWER)
        assert "USERS_READ" in viewer
        assert "USERS_UPDATE" not in viewer

    def test_edited_role_not_overwritten(self, db_session):
        seed.bootstrap(db_session)
        editor = seed.get_editor_role(db_session)
        editor.permissions = {p for p in editor.permissions if p.name != "MEDIA_DELETE"}
        db_session.commit()

        seed.bootstrap(db_session)
        assert "MEDIA_DELETE" not in _role_permissions(db_session, EDITOR)

    def test_roles_link_only_stored_permissions(self, db_session):
        db_session.add(Permission(name="TEMPLATES_READ", resource="templates", action="read"))
        db_session.commit()
        seed.ensure_canonical_roles(db_session)
        assert _role_permissions(db_session, VIEWER) == {"TEMPLATES_READ"}
        assert _role_permissions(db_session, ADMIN) == {"TEMPLATES_READ"}

    def test_concurrent_writer_loses_gracefully(self, db_session, monkeypatch):
        seed.bootstrap(db_session)
        before = _counts(db_session)

        # A second process that checked before the first one committed
        monkeypatch.setattr(seed, "_permission_exists", lambda db, name: False)
        monkeypatch.setattr(seed, "_role_exists", lambda db, name: False)

        summary = seed.bootstrap(db_session)
        assert summary["permissions_created"] == 0
        assert summary["roles_created"] == 0
        assert _counts(db_session) == before


class TestStartupBootstrap:

    def test_success(self, session_factory):
        summary = seed.run_startup_bootstrap(session_factory)
        assert summary["permissions_total"] == 52
        assert summary["roles_total"] == 4

    def test_failure_is_not_fatal(self, caplog):
        engine = build_engine("sqlite://")
        try:
            with caplog.at_level(logging.WARNING, logger="contentplatform.db.seed"):
                assert seed.run_startup_bootstrap(sessionmaker(bind=engine)) is None
        finally:
            engine.dispose()
        assert "initialization may be incomplete" in caplog.text
