"""
Reflector - Local journaling with private AI insights
Privacy-first design: entries stay in memory and sentiment/embedding models
run on-device. Narrative insights go to Groq only when GROQ_API_KEY is set.
"""

import logging
from functools import wraps
from typing import Any, Dict, Optional, Tuple

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS

from reflector import config
from reflector.fixtures import load_sample_entries
from reflector.gateway import GatewayError, LocalModelGateway, ModelGateway
from reflector.models import Period
from reflector.pipeline import InsightPipeline
from reflector.prompts import writing_prompt
from reflector.store import AnalysisCache, JournalStore, insight_window

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# =============================================================================
# Request Validation
# =============================================================================

def validate_entry_data(data: Any) -> Tuple[bool, str]:
    """Validate a new entry payload."""
    if not isinstance(data, dict):
        return False, "Invalid data format"

    text = data.get("text")
    if not isinstance(text, str):
        return False, "Text must be a string"

    if not text.strip():
        return False, "Text cannot be empty"

    if len(text) > config.MAX_ENTRY_LENGTH:
        return False, f"Text exceeds maximum length of {config.MAX_ENTRY_LENGTH} characters"

    return True, ""


def parse_period(value: Optional[str]) -> Optional[Period]:
    try:
        return Period.parse(value or Period.WEEKLY.value)
    except ValueError:
        return None


def privacy_message() -> str:
    if config.GROQ_API_KEY:
        return (
            "Entries stay in this session and are analyzed locally. "
            "Narrative insights send recent entry text to Groq's API."
        )
    return "Your journal is private. Entries stay in this session; analysis runs locally."


def handle_errors(f):
    """Decorator for consistent error handling."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except Exception as e:
            logger.error(f"Error in {f.__name__}: {e}")
            return jsonify({"error": "An unexpected error occurred"}), 500
    return wrapper


def _state() -> Dict[str, Any]:
    return current_app.extensions["reflector"]


# =============================================================================
# App Factory
# =============================================================================

def create_app(gateway: Optional[ModelGateway] = None, seed: Optional[bool] = None) -> Flask:
    """Build the Flask app around a model gateway and a fresh entry store."""
    app = Flask(__name__)
    CORS(app)

    seed = config.SEED_SAMPLE_ENTRIES if seed is None else seed
    entries = load_sample_entries() if seed else []

    app.extensions["reflector"] = {
        "pipeline": InsightPipeline(gateway or LocalModelGateway()),
        "store": JournalStore(entries),
        "analysis": AnalysisCache(),
    }
    logger.info(f"Journal ready with {len(entries)} seeded entries")

    register_routes(app)
    return app


def register_routes(app: Flask) -> None:

    # -------------------------------------------------------------------------
    # Entries
    # -------------------------------------------------------------------------

    @app.route("/api/entries", methods=["GET"])
    @handle_errors
    def get_entries():
        """Get all entries, newest first."""
        _, entries = _state()["store"].snapshot()
        return jsonify({"entries": [entry.to_dict() for entry in entries]})

    @app.route("/api/entries", methods=["POST"])
    @handle_errors
    def create_entry():
        """Add a new entry to the front of the journal."""
        body = request.get_json(silent=True)
        if not body:
            return jsonify({"error": "No data provided"}), 400

        valid, error_msg = validate_entry_data(body)
        if not valid:
            return jsonify({"error": error_msg}), 400

        entry = _state()["store"].add(body["text"].strip())
        return jsonify({"saved": True, "entry": entry.to_dict()}), 201

    @app.route("/api/entries/analyzed", methods=["GET"])
    @handle_errors
    def get_analyzed_entries():
        """Get entries with sentiment, tags and embeddings, newest first."""
        state = _state()
        try:
            analyzed = state["analysis"].analyzed(state["store"], state["pipeline"])
        except GatewayError as e:
            logger.error(f"Analysis failed: {e}")
            return jsonify({"error": f"Analysis failed: {e}"}), 503

        ordered = insight_window(analyzed, [], size=len(analyzed))
        return jsonify({"entries": [entry.to_dict() for entry in ordered]})

    @app.route("/api/prompt", methods=["GET"])
    @handle_errors
    def get_prompt():
        """Suggest a writing prompt based on the latest entry."""
        state = _state()
        try:
            entries = state["analysis"].analyzed(state["store"], state["pipeline"])
        except GatewayError as e:
            logger.warning(f"Prompt using unanalyzed entries: {e}")
            _, entries = state["store"].snapshot()
        return jsonify({"prompt": writing_prompt(entries)})

    # -------------------------------------------------------------------------
    # Insights
    # -------------------------------------------------------------------------

    def _insight_entries():
        state = _state()
        _, raw = state["store"].snapshot()
        try:
            analyzed = state["analysis"].analyzed(state["store"], state["pipeline"])
        except GatewayError as e:
            logger.warning(f"Insights using unanalyzed entries: {e}")
            analyzed = []
        return insight_window(analyzed, raw)

    @app.route("/api/insights", methods=["GET"])
    @handle_errors
    def get_insights():
        """Rule-based insight summary over the most recent entries."""
        period = parse_period(request.args.get("period"))
        if period is None:
            return jsonify({"error": "Invalid period. Use 'weekly' or 'monthly'"}), 400

        summary = _state()["pipeline"].summarize(period, _insight_entries())
        return jsonify(summary.to_dict())

    @app.route("/api/insights/narrative", methods=["GET"])
    @handle_errors
    def get_narrative_insights():
        """Generated insight summary, with offline fallback lines."""
        period = parse_period(request.args.get("period"))
        if period is None:
            return jsonify({"error": "Invalid period. Use 'weekly' or 'monthly'"}), 400

        summary = _state()["pipeline"].narrate(period, _insight_entries())
        return jsonify(summary.to_dict())

    # -------------------------------------------------------------------------
    # Privacy Info
    # -------------------------------------------------------------------------

    @app.route("/api/privacy", methods=["GET"])
    def privacy_info():
        """Return privacy information."""
        return jsonify({
            "data_location": "memory",
            "cloud_sync": False,
            "sentiment_model": "on-device",
            "embedding_model": "on-device",
            "text_generation": "groq" if config.GROQ_API_KEY else "offline fallback",
            "message": privacy_message(),
        })


# =============================================================================
# Main
# =============================================================================

if __name__ == "__main__":
    logger.info("Starting Reflector server...")
    logger.info(privacy_message())
    create_app().run(debug=True, port=config.PORT)
