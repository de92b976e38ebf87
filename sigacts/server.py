"""
HTTP API (Flask)
================

Thin JSON wrapper around a `SigactsEngine`:

    GET /                          service status + endpoint list
    GET /api/dates                 {"dates": [...]}
    GET /api/metadata              {"types": [...], "categories": [...], "provinces": [...]}
    GET /api/incidents/<date>      ?type=&category=&province=  ("all" = no filter)
    GET /api/dashboard/treemap     {"series": [{"name", "data": [{"x", "y"}]}]}
    GET /api/dashboard/radar       {"enemy": {...}, "explosive": {...}}
    GET /api/dashboard/heatmap     {"dates": [...], "counts": [...]}
    GET /api/boundary              GeoJSON, or 404

While the engine is not READY every /api route answers 503.
"""

from __future__ import annotations

import math
from typing import Any, Dict

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .engine import IncidentFilters, SigactsEngine
from .errors import NotReadyError, SigactsError
from .logging_config import get_logger
from .models import Incident

log = get_logger(__name__)

ENDPOINTS = [
    "GET /api/dates",
    "GET /api/metadata",
    "GET /api/incidents/:date",
    "GET /api/dashboard/treemap",
    "GET /api/dashboard/radar",
    "GET /api/dashboard/heatmap",
    "GET /api/boundary",
]

NOT_READY_MESSAGE = "Server is still loading data. Please try again in a moment."


def _finite_or_none(x: float):
    return x if math.isfinite(x) else None


def incident_to_dict(e: Incident) -> Dict[str, Any]:
    """JSON shape of one incident (camelCase keys, NaN coordinates -> null)."""
    return {
        "lat": _finite_or_none(e.lat),
        "lng": _finite_or_none(e.lng),
        "date": e.date,
        "type": e.type,
        "category": e.category,
        "targetCategory": e.target_category,
        "target": e.target,
        "forceType": e.force_type,
        "city": e.city,
        "province": e.province,
        "time": e.time,
    }


def create_app(engine: SigactsEngine) -> Flask:
    """Build the Flask app serving `engine`."""
    app = Flask(__name__)
    # keep treemap/boundary key order as produced
    app.json.sort_keys = False

    CORS(app)

    @app.errorhandler(NotReadyError)
    def _not_ready(e):
        return jsonify({"error": NOT_READY_MESSAGE}), 503

    @app.errorhandler(SigactsError)
    def _engine_error(e):
        log.error("request_failed", path=request.path, error=str(e))
        return jsonify({"error": "Internal server error"}), 500

    @app.errorhandler(404)
    def _not_found(e):
        return jsonify({"error": "Endpoint not found"}), 404

    @app.errorhandler(405)
    def _method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(Exception)
    def _unexpected(e):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        log.error("request_failed", path=request.path, error=repr(e))
        return jsonify({"error": "Internal server error"}), 500

    @app.route("/")
    def index():
        return jsonify({
            "message": "SIGACTS API server is running",
            "status": engine.state.value,
            "endpoints": ENDPOINTS,
        })

    @app.route("/api/dates")
    def dates():
        return jsonify({"dates": engine.list_dates()})

    @app.route("/api/metadata")
    def metadata():
        m = engine.list_metadata()
        return jsonify({"types": m.types, "categories": m.categories, "provinces": m.provinces})

    @app.route("/api/incidents/<date>")
    def incidents(date):
        filters = IncidentFilters(
            type=request.args.get("type"),
            category=request.args.get("category"),
            province=request.args.get("province"),
        )
        rows = engine.lookup_incidents(date, filters)
        log.info("incidents_served", date=date, count=len(rows))
        return jsonify({
            "date": date,
            "count": len(rows),
            "incidents": [incident_to_dict(e) for e in rows],
        })

    @app.route("/api/dashboard/treemap")
    def treemap():
        series = [
            {"name": g.name, "data": [{"x": cat, "y": n} for cat, n in g.data]}
            for g in engine.treemap_aggregate()
        ]
        return jsonify({"series": series})

    @app.route("/api/dashboard/radar")
    def radar():
        r = engine.radar_aggregate()
        return jsonify({
            "enemy": {"categories": r.enemy.categories, "values": r.enemy.values},
            "explosive": {"categories": r.explosive.categories, "values": r.explosive.values},
        })

    @app.route("/api/dashboard/heatmap")
    def heatmap():
        h = engine.heatmap_aggregate()
        return jsonify({"dates": h.dates, "counts": h.counts})

    @app.route("/api/boundary")
    def boundary():
        doc = engine.get_boundary()
        if doc is None:
            return jsonify({"error": "Boundary data not found"}), 404
        return jsonify(doc)

    return app
