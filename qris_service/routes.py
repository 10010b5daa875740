"""HTTP endpoints of the QRIS service."""
from flask import Blueprint, current_app, jsonify, request

from .auth import is_authorized
from .crc import compute_checksum, verify_checksum
from .errors import Unauthorized
from .payload import compose_dynamic_payload, normalize_amount
from .transaction import create_payment

bp = Blueprint('qris', __name__)


def _service(name):
    return current_app.extensions['qris'][name]


def _require_api_key():
    settings = _service('settings')
    if not is_authorized(request.args.get('apikey'), settings.api_keys):
        raise Unauthorized('Invalid API key')


@bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    return jsonify({'status': 'ok', 'service': 'qris-calculator'})


@bp.route('/generate-qris', methods=['POST'])
def generate_qris():
    """
    Generate dynamic QRIS string with CRC16 calculation

    Request body:
    {
        "base_string": "00020101021126570011...",
        "amount": 50000
    }

    Response:
    {
        "qris_string": "complete QRIS string with CRC",
        "amount": 50000,
        "crc": "ABCD"
    }
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not data:
        return jsonify({'error': 'No data provided', 'success': False}), 400

    base_string = data.get('base_string')
    amount = data.get('amount')

    if not base_string:
        return jsonify({'error': 'base_string is required', 'success': False}), 400

    amount = normalize_amount(amount)
    qris_string = compose_dynamic_payload(base_string, amount, fee=data.get('fee'))

    return jsonify({
        'qris_string': qris_string,
        'amount': int(amount),
        'crc': qris_string[-4:],
        'success': True
    })


@bp.route('/validate-qris', methods=['POST'])
def validate_qris():
    """Validate QRIS string CRC"""
    data = request.get_json(silent=True)
    qris_string = data.get('qris_string') if isinstance(data, dict) else None

    if not isinstance(qris_string, str) or len(qris_string) < 4:
        return jsonify({'error': 'Invalid QRIS string'}), 400

    return jsonify({
        'valid': verify_checksum(qris_string),
        'provided_crc': qris_string[-4:],
        'calculated_crc': compute_checksum(qris_string[:-4])
    })


@bp.route('/orderkuota/createpayment', methods=['GET'])
def create_payment_route():
    _require_api_key()
    settings = _service('settings')

    amount = request.args.get('amount')
    if not amount:
        return jsonify({'status': False, 'error': 'Bad Request: Amount is required'}), 400

    template = request.args.get('codeqr') or settings.static_code
    if not template:
        return jsonify({'status': False, 'error': 'Bad Request: Base QRIS code (codeqr) is required'}), 400

    transaction = create_payment(
        template,
        amount,
        renderer=_service('renderer'),
        uploader=_service('uploader'),
        expiry_minutes=settings.expiry_minutes,
        prefix=settings.transaction_prefix,
        fee=request.args.get('fee') or None,
    )
    return jsonify({
        'status': True,
        'message': 'QRIS payment created successfully.',
        'result': transaction.as_dict()
    })


@bp.route('/orderkuota/cekstatus', methods=['GET'])
def check_status():
    _require_api_key()

    merchant = request.args.get('merchant')
    keyorkut = request.args.get('keyorkut')
    if not merchant:
        return jsonify({'status': False, 'error': 'Bad Request: Merchant ID is required'}), 400
    if not keyorkut:
        return jsonify({'status': False, 'error': 'Bad Request: Gateway API key (keyorkut) is required'}), 400

    mutation = _service('gateway').latest_mutation(merchant, keyorkut)
    if mutation is None:
        return jsonify({'status': False, 'message': 'No transactions found.'}), 404

    return jsonify({
        'status': True,
        'message': 'Latest transaction retrieved successfully.',
        'result': mutation.as_dict()
    })
