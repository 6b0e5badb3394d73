import os

from flask import Blueprint, abort, current_app, send_from_directory

main = Blueprint('main', __name__)


@main.route('/health')
def health():
    return 'ok', 200, {'Content-Type': 'text/plain; charset=utf-8'}


@main.route('/', defaults={'filename': 'index.html'})
@main.route('/<path:filename>')
def client_bundle(filename):
    static_dir = os.path.abspath(current_app.config.get('STATIC_DIR', 'public'))
    if not os.path.isdir(static_dir):
        abort(404)
    return send_from_directory(static_dir, filename)
