"""Main routes"""
from flask import jsonify, current_app
from flask_login import login_required
from sqlalchemy import text
from debttracker import db, analytics
from debttracker.main import main_bp
from debttracker.utils.helpers import get_user_debts, format_currency

@main_bp.route('/')
def index():
    """API information"""
    return jsonify({
        'message': f"{current_app.config['DEFAULT_APP_NAME']} API",
        'endpoints': {
            'health': 'GET /health',
            'dashboard': 'GET /dashboard',
            'debts': 'GET, POST /debts/',
            'debt': 'GET, PUT, DELETE /debts/<id>',
            'priority_debts': 'GET /debts/priority',
            'paid_debts': 'GET /debts/paid',
            'payments': 'GET, POST /payments/',
            'reports': 'POST /reports/ (GET, PATCH, DELETE for admins)',
            'register': 'POST /auth/register',
            'login': 'POST /auth/login',
            'logout': 'POST /auth/logout'
        }
    })

@main_bp.route('/health')
def health():
    """Liveness and database status"""
    try:
        db.session.execute(text('SELECT 1'))
        database = 'connected'
    except Exception as e:
        current_app.logger.warning('Database health check failed: %s', e)
        database = 'disconnected'

    return jsonify({'status': 'OK', 'message': 'Server is running', 'database': database})

@main_bp.route('/dashboard')
@login_required
def dashboard():
    """Portfolio statistics for the current user"""
    summary = analytics.dashboard_summary(get_user_debts())

    highest = summary['highest_debt']
    debt_free_date = summary['estimated_debt_free_date']
    months = summary['months_until_debt_free']

    stats = {
        'debt_count': summary['debt_count'],
        'total_debt': round(summary['total_debt'], 2),
        'total_paid': round(summary['total_paid'], 2),
        'remaining_debt': round(summary['remaining_debt'], 2),
        'active_count': summary['active_count'],
        'completed_count': summary['completed_count'],
        'average_progress': round(summary['average_progress'], 2),
        'highest_debt': highest.to_dict() if highest is not None else None,
        'overdue_count': summary['overdue_count'],
        'total_interest_accrued': round(summary['total_interest_accrued'], 2),
        'monthly_interest': round(summary['monthly_interest'], 2),
        'annual_interest': round(summary['annual_interest'], 2),
        'total_monthly_payment': round(summary['total_monthly_payment'], 2),
        'estimated_debt_free_date': debt_free_date.isoformat() if debt_free_date else None,
        'months_until_debt_free': months,
        'time_until_debt_free': analytics.format_duration(months),
    }

    return jsonify({
        'success': True,
        'stats': stats,
        'formatted': {
            'total_debt': format_currency(stats['total_debt']),
            'remaining_debt': format_currency(stats['remaining_debt']),
            'total_monthly_payment': format_currency(stats['total_monthly_payment']),
        }
    })
