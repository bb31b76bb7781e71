from flask import Blueprint, current_app, jsonify, url_for

main = Blueprint('main', __name__)

@main.route('/')
def index():
    settings = current_app.extensions['scorebook']
    return jsonify({
        'message': 'Game score trackers',
        'default_variant': settings['default_variant'].value,
        'variants': [
            {
                'name': variant.value,
                'title': f"{variant.display_name} Tracker",
                'games_url': url_for('games.variant_games', variant_name=variant.value),
            }
            for variant in settings['variants']
        ],
    })
