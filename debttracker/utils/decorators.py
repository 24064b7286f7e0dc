"""Utility decorators"""
from functools import wraps
from flask import abort
from flask_login import current_user, login_required
from debttracker.models import Debt

def owned_debt_required(f):
    """Load the debt named by the ``id`` URL argument for the current user

    Debts of other users answer 404 exactly like missing ones, so ids of
    other accounts are never revealed.
    """
    @wraps(f)
    @login_required
    def decorated_function(id, *args, **kwargs):
        debt = Debt.query.filter_by(id=id, user_id=current_user.id).first()
        if debt is None:
            abort(404, description='Debt not found')
        return f(debt, *args, **kwargs)
    return decorated_function

def admin_required(f):
    """Require a logged-in user with the admin role"""
    @wraps(f)
    @login_required
    def decorated_function(*args, **kwargs):
        if not current_user.is_admin:
            abort(403, description='Admin access required')
        return f(*args, **kwargs)
    return decorated_function
