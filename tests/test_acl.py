import pytest
from fastapi import HTTPException

from app.models.user import User
from app.services import acl


def _make_user(user_id=1, **privileges):
    return User(
        id=user_id,
        username=f"user{user_id}",
        name="Test User",
        email="",
        password_hash="",
        privileges={f"panopticon.{key}": value for key, value in privileges.items()},
        parameters={},
    )


class TestCheckAccess:
    def test_view_privilege_allows_site_browse(self):
        assert acl.check_access(_make_user(view=True), "sites", "browse") is True

    def test_missing_privilege_is_denied(self):
        assert acl.check_access(_make_user(run=True), "sites", "browse") is False

    def test_any_listed_privilege_is_enough(self):
        assert acl.check_access(_make_user(editown=True), "sites", "edit") is True
        assert acl.check_access(_make_user(addown=True), "sites", "save") is True
        assert acl.check_access(_make_user(addown=True), "sites", "edit") is False

    def test_false_privilege_does_not_count(self):
        assert acl.check_access(_make_user(view=False), "sites", "read") is False

    def test_super_allows_every_known_task(self):
        actor = _make_user(super=True)
        for view, tasks in acl.ACL_MAP.items():
            for task in tasks:
                assert acl.check_access(actor, view, task) is True

    def test_unknown_task_is_denied_even_for_super(self):
        assert acl.check_access(_make_user(super=True), "sites", "explode") is False
        assert acl.check_access(_make_user(super=True), "reports", "browse") is False

    def test_actor_without_id_is_denied(self):
        assert acl.check_access(None, "sites", "cancel") is False
        assert acl.check_access(_make_user(user_id=None, view=True), "sites", "browse") is False

    def test_user_list_needs_super(self):
        assert acl.check_access(_make_user(admin=True), "users", "browse") is False
        assert acl.check_access(_make_user(admin=True), "users", "add") is False

    def test_own_account_tasks_need_no_privilege(self):
        actor = _make_user()
        for task in ("read", "edit", "save", "apply", "cancel"):
            assert acl.check_access(actor, "users", task) is True

    def test_group_privileges_count(self):
        actor = _make_user()
        actor.group_privileges = frozenset({"panopticon.view"})
        assert acl.check_access(actor, "sites", "browse") is True


class TestAclCheck:
    def test_raises_forbidden(self):
        with pytest.raises(HTTPException) as exc:
            acl.acl_check(_make_user(), "sites", "remove")
        assert exc.value.status_code == 403

    def test_passes_silently_when_allowed(self):
        assert acl.acl_check(_make_user(admin=True), "sites", "remove") is None


class TestUserRecordGate:
    def test_own_record_is_allowed(self):
        assert acl.can_access_user(_make_user(user_id=4), 4) is True

    def test_other_record_is_denied(self):
        assert acl.can_access_user(_make_user(user_id=4, admin=True), 5) is False

    def test_missing_target_means_self(self):
        assert acl.can_access_user(_make_user(user_id=4), 0) is True
        assert acl.can_access_user(_make_user(user_id=4), None) is True

    def test_super_reaches_any_record(self):
        assert acl.can_access_user(_make_user(user_id=1, super=True), 99) is True

    def test_require_user_access_raises_forbidden(self):
        with pytest.raises(HTTPException) as exc:
            acl.require_user_access(_make_user(user_id=4), 5)
        assert exc.value.status_code == 403
