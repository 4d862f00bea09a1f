from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    controller = current_app.extensions['typefight']
    return jsonify({'message': 'TypeFight game server', 'sessions': len(controller.store)})
