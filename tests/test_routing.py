import pytest

from app.services.routing import route


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("index.php?view=sites", "/admin/sites"),
        ("index.php?view=sites&task=browse", "/admin/sites"),
        ("index.php?view=users&task=add", "/admin/users/add"),
        ("index.php?view=users&task=edit&id=5", "/admin/users/5/edit"),
        ("index.php?view=users&task=read&id=3", "/admin/users/3"),
        ("index.php?view=sites&task=remove&id=4", "/admin/sites?task=remove&id=4"),
        ("index.php?view=sites&limit=10", "/admin/sites?limit=10"),
        ("index.php", "/admin"),
    ],
)
def test_legacy_paths_map_to_admin_urls(path, expected):
    assert route(path) == expected


def test_edit_without_id_falls_back_to_list():
    assert route("index.php?view=users&task=edit") == "/admin/users?task=edit"


def test_other_paths_are_left_alone():
    assert route("/admin/sites/2/edit") == "/admin/sites/2/edit"
    assert route("https://example.com/index.php?view=users") == "https://example.com/index.php?view=users"
