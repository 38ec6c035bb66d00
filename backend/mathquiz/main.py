from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    engine = current_app.extensions['quiz_engine']
    return jsonify({
        'message': 'Welcome to the Equation Race quiz server!',
        'players': len(engine.registry),
        'questions': engine.settings.question_count,
        'time_limit_sec': engine.settings.question_time_limit_sec,
    })
