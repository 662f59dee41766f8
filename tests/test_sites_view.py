import pytest
from fastapi import HTTPException

from app.schemas.site import SiteCreate
from app.services.flash import FlashStore, form_cache_key
from app.services.sites import CONNECTION_ERROR_FLASH, CURL_ERROR_FLASH, HTTP_CODE_FLASH, sites
from app.services.web_admin_sites import SitesHtmlView


def _make_site(db_session, name="Main site"):
    return sites.create(db_session, SiteCreate(name=name, url="https://www.acme.io"))


def _button_titles(view):
    return [button.title for button in view.toolbar.buttons]


class TestBrowse:
    def test_toolbar_and_items(self, db_session):
        _make_site(db_session, "Second")
        _make_site(db_session, "First")
        view = SitesHtmlView(db_session, FlashStore({}))

        assert view.on_before_browse() is True

        assert view.toolbar.title == "Sites"
        assert _button_titles(view) == ["Add", "Edit", "Copy", "Delete"]
        assert view.toolbar.buttons[3].css_class == "btn btn-danger"
        assert view.toolbar.buttons[3].on_click == "akeeba.System.submitForm('remove');"
        assert [site.name for site in view.items] == ["First", "Second"]


class TestAddEdit:
    def test_add_uses_blank_site(self, db_session):
        view = SitesHtmlView(db_session, FlashStore({}))

        view.on_before_add()

        assert view.toolbar.title == "Add Site"
        assert _button_titles(view) == ["Save & Close", "Save", "Cancel"]
        assert view.item.id is None
        assert view.form == {"id": 0, "name": "", "url": "", "enabled": True}
        assert view.connection_error is None

    def test_edit_loads_site(self, db_session):
        site = _make_site(db_session)
        view = SitesHtmlView(db_session, FlashStore({}))

        view.on_before_edit(site.id)

        assert view.toolbar.title == "Edit Site"
        assert view.item.id == site.id
        assert view.form["name"] == "Main site"

    def test_edit_missing_site_is_404(self, db_session):
        view = SitesHtmlView(db_session, FlashStore({}))
        with pytest.raises(HTTPException) as exc:
            view.on_before_edit(4242)
        assert exc.value.status_code == 404

    def test_connection_diagnostics_are_read_once(self, db_session):
        flash = FlashStore({})
        flash.set_flash(CONNECTION_ERROR_FLASH, "The site did not answer.")
        flash.set_flash(HTTP_CODE_FLASH, "500")
        flash.set_flash(CURL_ERROR_FLASH, "Connection timed out")

        view = SitesHtmlView(db_session, flash)
        view.on_before_add()

        assert view.connection_error == "The site did not answer."
        assert view.http_code == 500
        assert view.curl_error == "Connection timed out"
        assert flash.has_flash(CONNECTION_ERROR_FLASH) is False

        again = SitesHtmlView(db_session, flash)
        again.on_before_add()
        assert again.connection_error is None
        assert again.http_code is None
        assert again.curl_error is None

    def test_unusable_http_code_is_dropped(self, db_session):
        flash = FlashStore({})
        flash.set_flash(HTTP_CODE_FLASH, "n/a")
        view = SitesHtmlView(db_session, flash)
        view.on_before_add()
        assert view.http_code is None

    def test_cached_form_overrides_record(self, db_session):
        site = _make_site(db_session)
        flash = FlashStore({})
        flash.set_flash(form_cache_key("sites"), {"id": site.id, "name": "Renamed", "url": "bad", "extra": 1})

        view = SitesHtmlView(db_session, flash)
        view.on_before_edit(site.id)

        assert view.form == {"id": site.id, "name": "Renamed", "url": "bad", "enabled": True}
        assert view.context()["form"] is view.form

    def test_cached_form_of_another_site_is_ignored(self, db_session):
        first = _make_site(db_session, "First")
        second = _make_site(db_session, "Second")
        flash = FlashStore({})
        flash.set_flash(form_cache_key("sites"), {"id": first.id, "name": "Leaked", "url": "bad", "enabled": False})

        view = SitesHtmlView(db_session, flash)
        view.on_before_edit(second.id)

        assert view.form == {"id": second.id, "name": "Second", "url": "https://www.acme.io", "enabled": True}
        assert flash.has_flash(form_cache_key("sites")) is False
