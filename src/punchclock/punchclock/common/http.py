from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify

from ..core.exceptions import NoEventsForDateError, ValidationError

logger = logging.getLogger(__name__)


def api_errors(view):
    """Map domain errors to JSON responses: 404 for an empty day, 400 for bad input, 500 otherwise."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except NoEventsForDateError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        except ValidationError as e:
            logger.warning("rejected %s: %s", view.__name__, e)
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("unexpected failure in %s", view.__name__)
            return jsonify({"success": False, "message": "Internal error"}), 500

    return wrapper
