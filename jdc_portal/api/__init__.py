from flask import Blueprint

sync_bp = Blueprint("sync", __name__, url_prefix="/api")
installations_bp = Blueprint("installations", __name__, url_prefix="/api/installations")

# Import modules so routes attach
from . import sync  # noqa
from . import installations  # noqa

__all__ = [
    "sync_bp",
    "installations_bp",
]
