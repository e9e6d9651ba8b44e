"""
VIBE-RA Flask server: setup form, decks and mixer controls.

/                      → single-page UI
/api/session           → GET snapshot, POST start a set, DELETE stop it
/api/session/toggle    → POST play/pause
/api/session/volume    → POST {"volume": 0..1}
"""

import logging
from typing import Optional

from flask import Flask, request, jsonify, render_template

from ..config import Config
from ..generate.source import SetlistSource
from ..models import InvalidParamsError, SetlistParams
from ..playback.session import DJSession, NoActiveSessionError

logger = logging.getLogger(__name__)


def create_app(config: Optional[Config] = None, session: Optional[DJSession] = None) -> Flask:
    """
    Build the Flask app around one DJ session.

    Args:
        config: Loaded config (defaults if None)
        session: Pre-built session (built from config if None)
    """
    config = config or Config.defaults()
    if session is None:
        session = DJSession.from_config(SetlistSource.from_config(config), config)

    app = Flask(__name__)
    app.config['VIBERA_CONFIG'] = config
    app.config['DJ_SESSION'] = session

    @app.errorhandler(NoActiveSessionError)
    def no_session(e):
        return jsonify({'error': str(e)}), 409

    @app.errorhandler(InvalidParamsError)
    def invalid_params(e):
        logger.warning(f"Rejected setup params: {e}")
        return jsonify({'error': str(e)}), 400

    @app.route('/')
    def index():
        return render_template('index.html', setup=config['setup'])

    @app.route('/api/session', methods=['GET'])
    def session_status():
        return jsonify(session.snapshot())

    @app.route('/api/session', methods=['POST'])
    def start_session():
        data = request.get_json(silent=True)
        params = SetlistParams.from_dict(data, defaults=config['setup'])
        return jsonify(session.start(params))

    @app.route('/api/session', methods=['DELETE'])
    def stop_session():
        session.stop()
        return jsonify(session.snapshot())

    @app.route('/api/session/toggle', methods=['POST'])
    def toggle():
        session.toggle()
        return jsonify(session.snapshot())

    @app.route('/api/session/volume', methods=['POST'])
    def volume():
        data = request.get_json(silent=True) or {}
        value = data.get('volume')
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return jsonify({'error': 'volume must be a number between 0 and 1'}), 400
        session.set_volume(value)
        return jsonify(session.snapshot())

    return app
