"""
Error Handlers

This module contains the domain error type and the JSON error handlers
registered on the Flask app.
"""

from flask import jsonify, current_app


class ActionError(ValueError):
    """A household operation that cannot be carried out.

    `status_code` follows HTTP: 400 invalid input, 401 bad credentials,
    403 not allowed, 404 missing record, 409 conflicting state.
    """

    def __init__(self, message, status_code=400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @classmethod
    def forbidden(cls, message):
        return cls(message, 403)

    @classmethod
    def not_found(cls, message):
        return cls(message, 404)

    @classmethod
    def conflict(cls, message):
        return cls(message, 409)


def render_error(message, status_code):
    """Render a JSON error body"""
    return jsonify({'error': message}), status_code

def register_error_handlers(app):
    """Register error handlers with the Flask app"""

    @app.errorhandler(ActionError)
    def action_error(error):
        from ..models import db
        db.session.rollback()
        return render_error(error.message, error.status_code)

    @app.errorhandler(404)
    def not_found(error):
        return render_error('The resource you are looking for does not exist.', 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return render_error('Method not allowed for this resource.', 405)

    @app.errorhandler(500)
    def internal_error(error):
        from ..models import db
        db.session.rollback()
        current_app.logger.error(f"Unhandled server error: {error}", exc_info=True)
        return render_error('Something went wrong on our end. Please try again later.', 500)
