import logging

from flask import Flask, jsonify, request

from passguess.config import load_config, options_from_config
from passguess.errors import InvalidInput
from passguess.evaluator import estimate
from passguess.serialization import result_to_dict

logger = logging.getLogger(__name__)


def create_app(options=None):
    app = Flask(__name__)
    app.config["ESTIMATOR_OPTIONS"] = options or options_from_config(load_config())

    @app.route('/')
    def home():
        return jsonify({
            "message": "PassGuess API is running"
        })

    @app.route('/score', methods=['POST'])
    def score_route():
        data = request.get_json(silent=True) or {}
        password = data.get('password', '')
        user_inputs = data.get('user_inputs') or []
        if not isinstance(user_inputs, list):
            return jsonify({'error': 'user_inputs must be a list'}), 400
        try:
            result = estimate(password, user_inputs=user_inputs, options=app.config["ESTIMATOR_OPTIONS"])
        except InvalidInput as e:
            logger.info("rejected /score request: %s", e)
            return jsonify({'error': str(e)}), 400
        return jsonify(result_to_dict(result))

    return app


app = create_app()

if __name__ == "__main__":
    app.run(debug=True)
