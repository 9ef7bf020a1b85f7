from flask import Blueprint, jsonify
from cocina import rooms

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return 'Cocina game server running'

@main.route('/health')
def health():
    return jsonify({'status': 'ok', 'rooms': len(rooms)})
