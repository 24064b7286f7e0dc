"""Helper functions"""
from flask import current_app, request
from flask_login import current_user
from werkzeug.datastructures import MultiDict
from debttracker import db
from debttracker.models import ActivityLog, Debt

def json_formdata():
    """Request JSON body as form data for WTForms validation

    Values are stringified the way an HTML form would post them; missing
    and null values are left out so Optional() validators see them as empty.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    formdata = MultiDict()
    for key, value in payload.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = 'y' if value else ''
        formdata[key] = value if isinstance(value, str) else str(value)
    return formdata

def form_errors(form):
    """Standard 400 body for a failed form"""
    return {'success': False, 'errors': form.errors}

def log_activity(action, entity_type=None, entity_id=None, description=None, user_id=None):
    """Add an activity log row to the session and mirror it to the app logger"""
    if user_id is None and current_user.is_authenticated:
        user_id = current_user.id

    log = ActivityLog(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        description=description,
        ip_address=request.remote_addr,
        user_agent=request.user_agent.string[:255] if request.user_agent else None
    )
    db.session.add(log)
    current_app.logger.info('%s: %s', action, description)
    return log

def get_user_debts(user_id=None):
    """All debts of a user in insertion order"""
    if user_id is None:
        user_id = current_user.id
    return Debt.query.filter_by(user_id=user_id).order_by(Debt.id).all()

def format_currency(amount, currency=None):
    """Format an amount with the configured currency code"""
    currency = currency or current_app.config.get('DEFAULT_CURRENCY', 'PHP')
    return f'{currency} {float(amount or 0):,.2f}'

def commit_or_rollback(error_message):
    """Commit the session; on failure roll back, log and return an error body"""
    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error('%s: %s', error_message, e)
        return {'success': False, 'error': error_message}
    return None
