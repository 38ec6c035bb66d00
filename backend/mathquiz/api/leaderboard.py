from flask import Blueprint, current_app, jsonify


leaderboard = Blueprint('leaderboard', __name__)


@leaderboard.route('/leaderboard', methods=['GET'])
def get_leaderboard():
    """Current ranking, same shape as the updateLeaderboard event."""
    engine = current_app.extensions['quiz_engine']
    return jsonify([entry.to_dict() for entry in engine.leaderboard()])


@leaderboard.route('/winners', methods=['GET'])
def get_winners():
    engine = current_app.extensions['quiz_engine']
    return jsonify([winner.to_dict() for winner in engine.winners()])
