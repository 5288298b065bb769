"""Flask app factory for WrestleSim."""

import logging
from typing import Optional

from flask import Flask, current_app, jsonify, request

from api import services
from simulation.live_dual import LiveDualStateMachine
from simulation.seed import seed_season

logger = logging.getLogger(__name__)


def _ctx():
    return current_app.config["SEASON"]


def _live() -> LiveDualStateMachine:
    return current_app.config["LIVE"]


def _sessions():
    return current_app.config["SESSION_FACTORY"]


def _reply(result):
    if isinstance(result, dict) and "error" in result:
        return jsonify(result), 400
    return jsonify(result)


def create_app(db_url: str = "sqlite:///wrestlesim.db", seed: Optional[int] = None) -> Flask:
    app = Flask(__name__)

    session_factory = services.init_db(db_url)
    ctx = seed_season(seed=seed)
    errors = services.restore_context(ctx, session_factory)
    for err in errors:
        logger.warning(err)

    app.config["SESSION_FACTORY"] = session_factory
    app.config["SEASON"] = ctx
    app.config["LIVE"] = LiveDualStateMachine(ctx)

    # ------------------------------------------------------------------
    # Roster / lineup
    # ------------------------------------------------------------------

    @app.route("/api/roster")
    def get_roster():
        return jsonify(services.get_roster(_ctx()))

    @app.route("/api/roster/generate", methods=["POST"])
    def generate_roster():
        return jsonify(services.regenerate_roster(_ctx(), _sessions()))

    @app.route("/api/weight-classes")
    def weight_classes():
        return jsonify(services.weight_classes())

    @app.route("/api/lineup")
    def get_lineup():
        return jsonify(services.get_lineup(_ctx()))

    @app.route("/api/lineup/auto-fill", methods=["POST"])
    def auto_fill():
        return jsonify(services.auto_fill(_ctx()))

    # ------------------------------------------------------------------
    # Duals / tournament
    # ------------------------------------------------------------------

    @app.route("/api/duals/simulate", methods=["POST"])
    def simulate_dual():
        data = request.get_json(silent=True) or {}
        return _reply(services.simulate_dual_vs_opponent(
            _ctx(), _sessions(), data.get("opponent")
        ))

    @app.route("/api/duals/intra-squad", methods=["POST"])
    def intra_squad():
        return _reply(services.intra_squad(_ctx()))

    @app.route("/api/tournament", methods=["POST"])
    def tournament():
        return _reply(services.run_tournament(_ctx()))

    # ------------------------------------------------------------------
    # League
    # ------------------------------------------------------------------

    @app.route("/api/league")
    def league():
        return jsonify(services.get_standings(_ctx()))

    @app.route("/api/season")
    def season():
        return jsonify(services.get_season(_ctx()))

    @app.route("/api/league/postseason", methods=["POST"])
    def postseason():
        return _reply(services.start_postseason(_ctx(), _sessions()))

    @app.route("/api/league/reset", methods=["POST"])
    def reset():
        return jsonify(services.rollover_season(_ctx(), _sessions()))

    # ------------------------------------------------------------------
    # Live dual
    # ------------------------------------------------------------------

    @app.route("/api/live")
    def live_state():
        return jsonify(services.get_live(_live()))

    @app.route("/api/live/start", methods=["POST"])
    def live_start():
        data = request.get_json(silent=True) or {}
        return _reply(services.start_live(
            _ctx(), _live(),
            opponent_name=data.get("opponent"),
            strategy=data.get("strategy", "balanced"),
        ))

    @app.route("/api/live/advance", methods=["POST"])
    def live_advance():
        return _reply(services.advance_live(_live(), _sessions()))

    @app.route("/api/live/modifier", methods=["POST"])
    def live_modifier():
        data = request.get_json(silent=True) or {}
        if not data.get("type"):
            return jsonify({"error": "type required"}), 400
        return _reply(services.apply_live_modifier(_live(), data["type"]))

    @app.route("/api/live/strategy", methods=["POST"])
    def live_strategy():
        data = request.get_json(silent=True) or {}
        if not data.get("strategy"):
            return jsonify({"error": "strategy required"}), 400
        return _reply(services.set_live_strategy(_live(), data["strategy"]))

    @app.route("/api/live/quick-finish", methods=["POST"])
    def live_quick_finish():
        return _reply(services.quick_finish_live(_live(), _sessions()))

    return app
