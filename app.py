from flask import Flask, jsonify, session
import asyncio
import logging
import uuid
from typing import Optional

from werkzeug.exceptions import HTTPException

from config import Settings, configure_logging
from core.bag_registry import BagRegistry
from core.bag_screen import BagScreen
from payments.capability import load_payment_capability
from payments.errors import CheckoutInProgressError

logger = logging.getLogger(__name__)

_UNSET = object()


def create_app(settings: Optional[Settings] = None,
               payment_capability=_UNSET) -> Flask:
    """Build the bag API. The payment capability is resolved once, here."""
    settings = settings or Settings.from_env()
    if payment_capability is _UNSET:
        payment_capability = load_payment_capability(settings)

    app = Flask(__name__)
    app.secret_key = settings.secret_key

    bags = BagRegistry(
        lambda: BagScreen(settings, payment_capability),
        max_bags=settings.bag_max_sessions,
        idle_seconds=settings.bag_idle_seconds
    )
    app.extensions['bag_registry'] = bags

    def current_bag() -> BagScreen:
        # One in-memory bag per browser session
        if 'session_id' not in session:
            session['session_id'] = str(uuid.uuid4())
        return bags.get(session['session_id'])

    @app.route('/api/bag', methods=['GET'])
    def get_bag():
        """Current bag contents and totals"""
        return jsonify(current_bag().get_bag_details())

    @app.route('/api/bag/items/<int:item_id>/increment', methods=['POST'])
    def increment_item(item_id):
        """Increase an item's quantity by one"""
        return jsonify(current_bag().increment(item_id))

    @app.route('/api/bag/items/<int:item_id>/decrement', methods=['POST'])
    def decrement_item(item_id):
        """Decrease an item's quantity by one (minimum 1)"""
        return jsonify(current_bag().decrement(item_id))

    @app.route('/api/bag/checkout', methods=['POST'])
    def checkout():
        """Pay with PayPal"""
        bag = current_bag()
        try:
            outcome = asyncio.run(bag.checkout())
        except CheckoutInProgressError:
            return jsonify({'success': False,
                            'error': 'A payment is already being processed.'}), 409

        outcome['bag'] = bag.get_bag_details()
        return jsonify(outcome)

    @app.route('/api/clear-session', methods=['POST'])
    def clear_session():
        """Drop this session's bag and start over"""
        session_id = session.get('session_id')
        if session_id:
            bags.discard(session_id)
        session.clear()
        return jsonify({'message': 'Session cleared.'})

    @app.route('/health')
    def health():
        """Health check endpoint"""
        return jsonify({'status': 'ok', 'platform': settings.platform,
                        'paypal_loaded': payment_capability is not None})

    @app.errorhandler(Exception)
    def handle_error(e):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error in bag API")
        return jsonify({'error': f'An error occurred: {e}'}), 500

    return app


if __name__ == '__main__':
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    app = create_app(settings)

    print("=== Extreme Fit Bag Server ===")
    print(f"Starting server on http://localhost:{settings.port}")
    print("Press Ctrl+C to stop")

    app.run(
        host='0.0.0.0',
        port=settings.port,
        debug=settings.debug
    )
