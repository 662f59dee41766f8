import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from app.schemas.site import SiteCreate, SiteUpdate
from app.services.sites import sites


def _make_site(db_session, name="Main site", url="https://www.acme.io", **extra):
    return sites.create(db_session, SiteCreate(name=name, url=url, **extra))


class TestSiteSchemas:
    def test_url_must_be_http_or_https(self):
        with pytest.raises(ValidationError):
            SiteCreate(name="FTP", url="ftp://files.acme.io")
        with pytest.raises(ValidationError):
            SiteCreate(name="Relative", url="/just/a/path")

    def test_url_is_trimmed(self):
        assert SiteCreate(name="Main", url="  https://www.acme.io/panel ").url == "https://www.acme.io/panel"

    def test_name_is_required(self):
        with pytest.raises(ValidationError):
            SiteCreate(name="", url="https://www.acme.io")


class TestSites:
    def test_create_and_get(self, db_session, super_user):
        site = _make_site(db_session, created_by=super_user.id)

        fetched = sites.get(db_session, site.id)

        assert fetched.name == "Main site"
        assert fetched.enabled is True
        assert fetched.config == {}
        assert fetched.created_by == super_user.id

    def test_get_missing_site_is_404(self, db_session):
        with pytest.raises(HTTPException) as exc:
            sites.get(db_session, 12345)
        assert exc.value.status_code == 404

    def test_find_returns_none_for_missing(self, db_session):
        assert sites.find(db_session, 12345) is None
        assert sites.find(db_session, "junk") is None

    def test_update_only_touches_given_fields(self, db_session, super_user):
        site = _make_site(db_session)

        updated = sites.update(db_session, site.id, SiteUpdate(enabled=False, modified_by=super_user.id))

        assert updated.enabled is False
        assert updated.name == "Main site"
        assert updated.modified_by == super_user.id

    def test_copy_is_disabled_and_renamed(self, db_session):
        site = _make_site(db_session, config={"token": "abc"})

        clone = sites.copy(db_session, site.id)

        assert clone.id != site.id
        assert clone.name == "Main site (copy)"
        assert clone.enabled is False
        assert clone.config == {"token": "abc"}

    def test_delete(self, db_session):
        site = _make_site(db_session)

        sites.delete(db_session, site.id)

        assert sites.find(db_session, site.id) is None

    def test_list_filters(self, db_session):
        _make_site(db_session, name="Beta", url="https://beta.acme.io")
        _make_site(db_session, name="Alpha", url="https://alpha.example.net", enabled=False)

        assert [site.name for site in sites.list(db_session)] == ["Alpha", "Beta"]
        assert [site.name for site in sites.list(db_session, enabled=True)] == ["Beta"]
        assert [site.name for site in sites.list(db_session, search="example")] == ["Alpha"]

    def test_list_rejects_unknown_order_column(self, db_session):
        with pytest.raises(HTTPException) as exc:
            sites.list(db_session, order_by="password")
        assert exc.value.status_code == 400
