"""Debt management routes"""
from flask import jsonify, request, current_app
from flask_login import login_required, current_user
from debttracker import db, analytics
from debttracker.debts import debts_bp
from debttracker.debts.forms import DebtForm
from debttracker.models import Debt, Payment
from debttracker.utils.decorators import owned_debt_required
from debttracker.utils.helpers import json_formdata, form_errors, log_activity, get_user_debts, commit_or_rollback

def _ranked_to_dict(entries):
    result = []
    for rank, entry in enumerate(entries, start=1):
        item = entry['debt'].to_dict()
        item.update({
            'rank': rank,
            'priority_score': round(entry['priority_score'], 4),
            'priority_reasons': entry['reasons'],
        })
        result.append(item)
    return result

@debts_bp.route('/', methods=['GET'])
@login_required
def list_debts():
    """List the current user's debts, unpaid first then by name"""
    search = request.args.get('search', '').strip()
    status = request.args.get('status', 'all')

    debts = analytics.filter_debts(get_user_debts(), search)

    if status == 'active':
        debts = [d for d in debts if not analytics.is_paid(d)]
    elif status == 'paid':
        debts = [d for d in debts if analytics.is_paid(d)]

    debts = analytics.sort_for_display(debts)

    return jsonify({
        'success': True,
        'debts': [debt.to_dict() for debt in debts],
        'count': len(debts),
        'search': search,
        'status': status
    })

@debts_bp.route('/', methods=['POST'])
@login_required
def add_debt():
    """Add new debt"""
    form = DebtForm(formdata=json_formdata())
    if not form.validate():
        return jsonify(form_errors(form)), 400

    debt = form.populate_debt(Debt(user_id=current_user.id, total_paid=0))
    db.session.add(debt)
    db.session.flush()

    log_activity('create_debt', 'debt', debt.id, f'Created debt: {debt.name}')

    error = commit_or_rollback('Error creating debt')
    if error:
        return jsonify(error), 500

    return jsonify({'success': True, 'message': f'Debt {debt.name} created successfully!', 'debt': debt.to_dict()}), 201

@debts_bp.route('/priority')
@login_required
def priority_debts():
    """Top priority debts plus the full ranking"""
    debts = get_user_debts()
    ranked = analytics.rank_by_priority(debts)
    limit = current_app.config.get('PRIORITY_DEBTS_LIMIT', analytics.DEFAULT_PRIORITY_LIMIT)

    return jsonify({
        'success': True,
        'priority_debts': _ranked_to_dict(ranked[:limit]),
        'ranking': _ranked_to_dict(ranked),
        'hidden_count': max(len(ranked) - limit, 0),
        'has_unspecified_payments': any(not analytics.debt_payoff_months(d) for d in debts)
    })

@debts_bp.route('/paid')
@login_required
def paid_debts():
    """Fully paid debts with payoff statistics"""
    sort_by = request.args.get('sort', 'paid_date')
    order = request.args.get('order', 'desc')
    if sort_by not in analytics.PAID_SORT_KEYS:
        sort_by = 'paid_date'
    if order not in ('asc', 'desc'):
        order = 'desc'

    debts = get_user_debts()
    paid = analytics.sort_paid_debts([d for d in debts if analytics.is_paid(d)], sort_by, order)
    stats = analytics.paid_debt_stats(debts)

    paid_list = []
    for debt in paid:
        item = debt.to_dict()
        item['time_to_pay'] = analytics.format_time_to_pay(analytics.days_to_pay(debt))
        paid_list.append(item)

    return jsonify({
        'success': True,
        'debts': paid_list,
        'sort': sort_by,
        'order': order,
        'stats': {
            'count': stats['count'],
            'total_cleared': round(stats['total_cleared'], 2),
            'total_paid': round(stats['total_paid'], 2),
            'total_overpaid': round(stats['total_overpaid'], 2),
            'average_debt_size': round(stats['average_debt_size'], 2),
            'average_days_to_pay': round(stats['average_days_to_pay'], 1),
            'average_time_to_pay': analytics.format_average_time_to_pay(stats['average_days_to_pay']) if stats['count'] else 'N/A'
        }
    })

@debts_bp.route('/<int:id>', methods=['GET'])
@owned_debt_required
def view_debt(debt):
    """View debt details with its payments"""
    payments = debt.payments.order_by(Payment.date.desc(), Payment.id.desc()).all()

    return jsonify({
        'success': True,
        'debt': debt.to_dict(),
        'payments': [payment.to_dict() for payment in payments]
    })

@debts_bp.route('/<int:id>', methods=['PUT'])
@owned_debt_required
def edit_debt(debt):
    """Edit debt - remaining amount follows the new total"""
    form = DebtForm(formdata=json_formdata())
    if not form.validate():
        return jsonify(form_errors(form)), 400

    form.populate_debt(debt)
    log_activity('update_debt', 'debt', debt.id, f'Updated debt: {debt.name}')

    error = commit_or_rollback('Error updating debt')
    if error:
        return jsonify(error), 500

    return jsonify({'success': True, 'message': f'Debt {debt.name} updated successfully!', 'debt': debt.to_dict()})

@debts_bp.route('/<int:id>', methods=['DELETE'])
@owned_debt_required
def delete_debt(debt):
    """Delete debt and all of its payments"""
    payment_count = debt.payments.count()
    data = debt.to_dict()

    log_activity('delete_debt', 'debt', debt.id,
                 f'Deleted debt: {debt.name} ({payment_count} payments removed)')
    db.session.delete(debt)

    error = commit_or_rollback('Error deleting debt')
    if error:
        return jsonify(error), 500

    return jsonify({
        'success': True,
        'message': 'Debt deleted successfully',
        'debt': data,
        'deleted_payments': payment_count
    })
