"""
Flask JSON API for the configuration screens.

API endpoints:
  GET  /api/settings                  Current global settings (camelCase)
  POST /api/settings/<key>/toggle     Optimistic toggle; returns ToggleResult
  POST /api/codec/condition           {"text"} → fields, or {metric, operator, value} → {"text"}
  POST /api/codec/duration            {"text"} → fields, or {value, unit} → {"text"}
  POST /api/codec/schedule            {"text"} → fields, or {day, hour, minute} → {"text"}

Started via: python main.py web [--port 5000] [--host 127.0.0.1]
"""
import asyncio
import logging
import threading
from dataclasses import asdict

from flask import Flask, jsonify, request

from codec.condition import decode_condition, encode_condition
from codec.duration import decode_duration, encode_duration
from codec.forms import clamp_condition_value
from codec.schedule import decode_schedule, encode_schedule, is_weekly_schedule
from models.enums import DurationUnit
from models.settings import resolve_key

logger = logging.getLogger("nocconfig.web.app")


def create_app(config: dict, engines: dict) -> Flask:
    """
    Factory function. Receives initialized engines from main.py CLI.

    Args:
        config: Application config dict
        engines: dict with the loaded SettingsController under "settings"
                 and optionally the ConfigAPIClient under "api"
    """
    app = Flask(__name__)
    app.config["APP_CONFIG"] = config
    controller = engines["settings"]
    # The controller assumes one writer; threaded requests take turns
    toggle_lock = threading.Lock()

    def _bad_request(message):
        return jsonify({"error": message}), 400

    def _body():
        return request.get_json(silent=True) or {}

    # ─── Global Settings ─────────────────────────────────

    @app.route("/api/settings")
    def api_settings():
        return jsonify({
            "settings": controller.current.to_cache(),
            "pending": controller.pending,
        })

    @app.route("/api/settings/<key>/toggle", methods=["POST"])
    def api_toggle_setting(key):
        if resolve_key(key) is None:
            return jsonify({"error": f"Unknown setting: {key}"}), 404
        with toggle_lock:
            result = asyncio.run(controller.toggle(key))
        if not result.ok:
            logger.warning(result.error)
        payload = result.to_dict()
        payload["settings"] = controller.current.to_cache()
        return jsonify(payload)

    # ─── Codec ───────────────────────────────────────────

    @app.route("/api/codec/condition", methods=["POST"])
    def api_condition():
        body = _body()
        if "text" in body:
            return jsonify(asdict(decode_condition(str(body["text"]))))
        try:
            metric, operator = body["metric"], body["operator"]
            value = int(body["value"])
        except (KeyError, TypeError, ValueError):
            return _bad_request("Provide 'text', or 'metric', 'operator' and integer 'value'")
        value = clamp_condition_value(metric, value)
        return jsonify({"text": encode_condition(metric, operator, value)})

    @app.route("/api/codec/duration", methods=["POST"])
    def api_duration():
        body = _body()
        if "text" in body:
            return jsonify(asdict(decode_duration(str(body["text"]))))
        try:
            value, unit = int(body["value"]), DurationUnit(body["unit"])
        except (KeyError, TypeError, ValueError):
            return _bad_request("Provide 'text', or integer 'value' and a unit of seconds, minutes, hours or days")
        if value < 1:
            return _bad_request("'value' must be >= 1")
        return jsonify({"text": encode_duration(value, unit)})

    @app.route("/api/codec/schedule", methods=["POST"])
    def api_schedule():
        body = _body()
        if "text" in body:
            text = str(body["text"])
            data = asdict(decode_schedule(text))
            data["weekly"] = is_weekly_schedule(text)
            return jsonify(data)
        try:
            day, hour, minute = str(body["day"]), int(body["hour"]), int(body["minute"])
        except (KeyError, TypeError, ValueError):
            return _bad_request("Provide 'text', or 'day', integer 'hour' and 'minute'")
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            return _bad_request("'hour' must be 0-23 and 'minute' 0-59")
        return jsonify({"text": encode_schedule(day, hour, minute)})

    return app
