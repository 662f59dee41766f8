"""Map legacy ``index.php?view=...`` paths onto the admin URLs."""

from urllib.parse import parse_qsl, urlencode, urlparse

ADMIN_PREFIX = "/admin"


def route(path: str) -> str:
    parsed = urlparse(path)
    if parsed.scheme or parsed.netloc or not parsed.path.endswith("index.php"):
        return path

    params = dict(parse_qsl(parsed.query, keep_blank_values=True))
    view = params.pop("view", "")
    task = params.pop("task", "")
    record_id = params.pop("id", "")

    if not view:
        url = ADMIN_PREFIX
    elif task == "add":
        url = f"{ADMIN_PREFIX}/{view}/add"
    elif task == "edit" and record_id:
        url = f"{ADMIN_PREFIX}/{view}/{record_id}/edit"
    elif task == "read" and record_id:
        url = f"{ADMIN_PREFIX}/{view}/{record_id}"
    else:
        url = f"{ADMIN_PREFIX}/{view}"
        if task and task != "browse":
            params["task"] = task
        if record_id:
            params["id"] = record_id

    if params:
        url = f"{url}?{urlencode(params)}"
    return url
