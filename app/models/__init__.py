from app.models.site import Site  # noqa: F401
from app.models.user import Group, User  # noqa: F401
