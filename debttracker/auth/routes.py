"""Authentication routes"""
from datetime import datetime
from flask import jsonify
from flask_login import login_user, logout_user, current_user, login_required
from debttracker import db
from debttracker.auth import auth_bp
from debttracker.models import User
from debttracker.auth.forms import RegisterForm, LoginForm, ChangePasswordForm
from debttracker.utils.helpers import json_formdata, form_errors, log_activity, commit_or_rollback

@auth_bp.route('/register', methods=['POST'])
def register():
    """Create a new user account"""
    form = RegisterForm(formdata=json_formdata())
    if not form.validate():
        return jsonify(form_errors(form)), 400

    user = User(username=form.username.data.strip(), gender=form.gender.data)
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.flush()

    log_activity('register', 'user', user.id, f'User {user.username} registered', user_id=user.id)

    error = commit_or_rollback('Error creating user')
    if error:
        return jsonify(error), 500

    return jsonify({'success': True, 'message': 'User registered successfully', 'user': user.to_dict()}), 201

@auth_bp.route('/login', methods=['POST'])
def login():
    """User login"""
    form = LoginForm(formdata=json_formdata())
    if not form.validate():
        return jsonify(form_errors(form)), 400

    user = User.query.filter_by(username=form.username.data.strip()).first()

    if user is None or not user.check_password(form.password.data):
        return jsonify({'success': False, 'error': 'Invalid username or password'}), 401

    if not user.is_active:
        return jsonify({'success': False, 'error': 'Your account has been deactivated.'}), 403

    login_user(user, remember=form.remember_me.data)
    user.last_login = datetime.utcnow()

    log_activity('login', 'user', user.id, f'User {user.username} logged in')
    db.session.commit()

    return jsonify({'success': True, 'message': f'Welcome back, {user.username}!', 'user': user.to_dict()})

@auth_bp.route('/logout', methods=['POST'])
def logout():
    """User logout"""
    if current_user.is_authenticated:
        log_activity('logout', 'user', current_user.id, f'User {current_user.username} logged out')
        db.session.commit()

    logout_user()
    return jsonify({'success': True, 'message': 'You have been logged out successfully.'})

@auth_bp.route('/me')
@login_required
def me():
    """Current user"""
    return jsonify({'success': True, 'user': current_user.to_dict()})

@auth_bp.route('/change-password', methods=['POST'])
@login_required
def change_password():
    """Change user password"""
    form = ChangePasswordForm(formdata=json_formdata())
    if not form.validate():
        return jsonify(form_errors(form)), 400

    if not current_user.check_password(form.current_password.data):
        return jsonify({'success': False, 'errors': {'current_password': ['Current password is incorrect']}}), 400

    current_user.set_password(form.new_password.data)
    log_activity('change_password', 'user', current_user.id, f'User {current_user.username} changed password')
    db.session.commit()

    return jsonify({'success': True, 'message': 'Your password has been changed successfully!'})
