"""
Health check endpoints

/health        every check
/health/ready  checks tagged "ready" (database, Graph configuration)
/health/live   process liveness only

No authentication; exempt from rate limiting.
"""

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Tuple

import psutil
from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from app import db
from app.logger import get_logger

bp = Blueprint('health', __name__)
logger = get_logger("inventory.routes.health")

HEALTHY = 'Healthy'
DEGRADED = 'Degraded'
UNHEALTHY = 'Unhealthy'
STATUS_ORDER = {HEALTHY: 0, DEGRADED: 1, UNHEALTHY: 2}

MEMORY_DEGRADED_BYTES = 800 * 1024 * 1024
MEMORY_UNHEALTHY_BYTES = 1024 * 1024 * 1024


@dataclass
class HealthCheck:
    name: str
    check: Callable[[], Tuple[str, str]]
    tags: Tuple[str, ...]


def check_database():
    db.session.execute(text("SELECT 1"))
    return HEALTHY, "Database connection is healthy"


def check_graph_config():
    missing = [key for key in ('AZURE_AD_CLIENT_ID', 'AZURE_AD_TENANT_ID') if not current_app.config.get(key)]
    if missing:
        return DEGRADED, f"Microsoft Graph configuration incomplete: {', '.join(missing)} not set"
    return HEALTHY, "Microsoft Graph configuration is present"


def check_memory():
    rss = psutil.Process().memory_info().rss
    mib = rss / (1024 * 1024)
    if rss >= MEMORY_UNHEALTHY_BYTES:
        return UNHEALTHY, f"Memory usage is critical: {mib:.0f} MB"
    if rss >= MEMORY_DEGRADED_BYTES:
        return DEGRADED, f"Memory usage is high: {mib:.0f} MB"
    return HEALTHY, f"Memory usage is normal: {mib:.0f} MB"


HEALTH_CHECKS = [
    HealthCheck('database', check_database, ('db', 'ready')),
    HealthCheck('graph-api-config', check_graph_config, ('config', 'ready')),
    HealthCheck('memory', check_memory, ('memory',)),
]


def _format_duration(seconds: float) -> str:
    return f"{seconds:.4f}s"


def run_checks(tag: str = None):
    """
    Run the registered checks (optionally only those carrying `tag`).

    Returns:
        (report dict, HTTP status code)
    """
    started = time.perf_counter()
    entries = {}
    overall = HEALTHY
    for health_check in HEALTH_CHECKS:
        if tag and tag not in health_check.tags:
            continue
        check_started = time.perf_counter()
        try:
            status, description = health_check.check()
        except Exception as e:
            logger.error(f"Health check {health_check.name} failed: {e}")
            db.session.rollback()
            status, description = UNHEALTHY, f"{health_check.name} check failed: {e}"
        entries[health_check.name] = {
            'status': status,
            'description': description,
            'duration': _format_duration(time.perf_counter() - check_started),
            'tags': list(health_check.tags),
        }
        if STATUS_ORDER[status] > STATUS_ORDER[overall]:
            overall = status

    report = {
        'status': overall,
        'total_duration': _format_duration(time.perf_counter() - started),
        'entries': entries,
    }
    if overall != HEALTHY:
        logger.warning(f"Health status {overall}: {', '.join(n for n, e in entries.items() if e['status'] != HEALTHY)}")
    return report, 503 if overall == UNHEALTHY else 200


@bp.route('/health', methods=['GET'])
def health():
    report, status_code = run_checks()
    return jsonify(report), status_code


@bp.route('/health/ready', methods=['GET'])
def ready():
    report, status_code = run_checks(tag='ready')
    return jsonify(report), status_code


@bp.route('/health/live', methods=['GET'])
def live():
    return jsonify({'status': HEALTHY, 'timestamp': datetime.now(timezone.utc).isoformat()})
