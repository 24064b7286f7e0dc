"""Payment routes"""
from datetime import datetime
from flask import jsonify, request, current_app, abort
from flask_login import login_required, current_user
from debttracker import db
from debttracker.payments import payments_bp
from debttracker.payments.forms import PaymentForm
from debttracker.models import Debt, Payment
from debttracker.utils.helpers import json_formdata, form_errors, log_activity, commit_or_rollback

@payments_bp.route('/', methods=['GET'])
@login_required
def list_payments():
    """List the current user's payments, newest first"""
    page = request.args.get('page', 1, type=int)
    per_page = request.args.get('per_page', current_app.config['ITEMS_PER_PAGE'], type=int)
    debt_id = request.args.get('debt_id', type=int)

    query = Payment.query.filter_by(user_id=current_user.id)
    if debt_id:
        query = query.filter_by(debt_id=debt_id)

    payments = query.order_by(Payment.date.desc(), Payment.created_at.desc(), Payment.id.desc()).paginate(
        page=page, per_page=per_page, error_out=False
    )

    return jsonify({
        'success': True,
        'payments': [payment.to_dict() for payment in payments.items],
        'page': payments.page,
        'pages': payments.pages,
        'total': payments.total,
        'has_more': payments.has_next
    })

@payments_bp.route('/', methods=['POST'])
@login_required
def add_payment():
    """Record a payment and recompute the debt's totals"""
    form = PaymentForm(formdata=json_formdata())
    if not form.validate():
        return jsonify(form_errors(form)), 400

    debt = Debt.query.filter_by(id=form.debt_id.data, user_id=current_user.id).first()
    if debt is None:
        abort(404, description='Debt not found')

    payment = Payment(
        user_id=current_user.id,
        debt_id=debt.id,
        amount=form.amount.data,
        method=(form.method.data or '').strip() or 'Other',
        date=form.date.data or datetime.utcnow().date(),
        note=(form.note.data or '').strip()
    )
    db.session.add(payment)

    # Fresh SUM over all payments in the same transaction as the insert
    debt.refresh_payment_totals(latest_payment=payment)

    log_activity('create_payment', 'payment', payment.id,
                 f'Payment of {payment.amount} recorded for debt: {debt.name}')

    error = commit_or_rollback('Error creating payment')
    if error:
        return jsonify(error), 500

    return jsonify({
        'success': True,
        'message': 'Payment recorded successfully',
        'payment': payment.to_dict(),
        'debt': debt.to_dict()
    }), 201
