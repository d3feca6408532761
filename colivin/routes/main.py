"""
Main Routes

FLOW OVERVIEW
- / [GET]
  • Service banner.
- /health [GET]
  • JSON health check.
- /api/status [GET]
  • Version and environment.
- /api/metrics [GET]
  • Prometheus text exposition.
"""

import os
from flask import Blueprint, jsonify, Response
from datetime import datetime
from ..utils.prom_metrics import metrics_latest, CONTENT_TYPE_LATEST

main_bp = Blueprint('main', __name__)

VERSION = '1.0.0'

@main_bp.route('/')
def home():
    """Service banner"""
    return jsonify({'service': 'colivin', 'version': VERSION})

@main_bp.route('/health')
def health():
    """Health check endpoint"""
    return jsonify({'status': 'healthy', 'timestamp': datetime.utcnow().isoformat()})

@main_bp.route('/api/status')
def api_status():
    """API status endpoint"""
    return jsonify({
        'status': 'operational',
        'version': VERSION,
        'environment': os.getenv('FLASK_ENV', 'development')
    })

@main_bp.route('/api/metrics')
def metrics():
    """Prometheus metrics endpoint."""
    output = metrics_latest()
    return Response(output, content_type=CONTENT_TYPE_LATEST)
