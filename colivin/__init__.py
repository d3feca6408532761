"""
Colivin Application Package

FLOW OVERVIEW
- create_app(test_config=None)
  • Build Flask app, apply config (test or env-based), init extensions (DB, Mail).
  • Register blueprints: auth (/auth), main (/), house features (/api/houses).
  • Register global error handlers and the request metrics hook.
"""

import time
from flask import Flask, g, request
from flask_mail import Mail
from .models import db
from .routes import auth_bp, main_bp, HOUSE_BLUEPRINTS
from .config import Config
from .utils.prom_metrics import observe_request

def create_app(test_config=None):
    """Application factory pattern for production deployment"""
    app = Flask(__name__)

    # Configuration
    if test_config:
        # Use test configuration if provided
        app.config.update(test_config)
    else:
        # Use environment-based configuration
        app.config.from_object(Config())

    # Initialize extensions
    db.init_app(app)
    Mail(app)

    # Register blueprints
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(main_bp)
    for blueprint in HOUSE_BLUEPRINTS:
        app.register_blueprint(blueprint, url_prefix='/api/houses')

    # Register error handlers
    from .utils.error_handlers import register_error_handlers
    register_error_handlers(app)

    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def record_request(response):
        started = g.pop('request_started', None)
        if started is not None:
            endpoint = request.url_rule.rule if request.url_rule else 'unmatched'
            observe_request(endpoint, response.status_code, time.perf_counter() - started)
        return response

    return app
