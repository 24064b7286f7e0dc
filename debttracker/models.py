"""Database models for Debt Tracker"""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import func
from debttracker import db, login_manager
from debttracker import analytics
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))

def _money(value):
    return round(float(value or 0), 2)

def _iso(value):
    return value.isoformat() if value else None

def _today():
    return datetime.utcnow().date()

# User and Authentication Models
class User(UserMixin, db.Model):
    """Account owning a set of debts and payments"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    gender = db.Column(db.String(10), nullable=False)  # Male, Female, Other
    role = db.Column(db.String(20), nullable=False, default='user')  # user, admin
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = db.Column(db.DateTime)

    # Relationships
    debts = db.relationship('Debt', backref='owner', lazy='dynamic')
    payments = db.relationship('Payment', backref='owner', lazy='dynamic')
    reports = db.relationship('Report', backref='reporter', lazy='dynamic')

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == 'admin'

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'gender': self.gender,
            'role': self.role,
            'created_at': _iso(self.created_at),
            'last_login': _iso(self.last_login),
        }

    def __repr__(self):
        return f'<User {self.username}>'

# Debt Models
class Debt(db.Model):
    """A tracked liability and its running payment totals"""
    __tablename__ = 'debts'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    name = db.Column(db.String(200), nullable=False)
    total_amount = db.Column(db.Numeric(15, 2), nullable=False)
    interest_rate = db.Column(db.Numeric(5, 2), default=0)  # Annual percentage rate
    monthly_payment = db.Column(db.Numeric(15, 2), default=0)  # 0 = not specified
    date_of_loan = db.Column(db.Date, nullable=False)
    creditor = db.Column(db.String(200), default='')
    description = db.Column(db.Text, default='')

    # Maintained from payments
    total_paid = db.Column(db.Numeric(15, 2), default=0)
    remaining_amount = db.Column(db.Numeric(15, 2), default=0)
    last_payment_amount = db.Column(db.Numeric(15, 2))
    last_payment_date = db.Column(db.Date)

    # Metadata
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    payments = db.relationship('Payment', backref='debt', lazy='dynamic', cascade='all, delete-orphan')

    def sync_remaining_amount(self):
        """Keep remaining_amount equal to max(total_amount - total_paid, 0)"""
        total_amount = Decimal(str(self.total_amount or 0))
        total_paid = Decimal(str(self.total_paid or 0))
        self.remaining_amount = max(total_amount - total_paid, Decimal('0'))

    def refresh_payment_totals(self, latest_payment=None):
        """Recompute total_paid as a fresh sum over this debt's payments

        Never adds to the stored counter, so retried or out-of-order payment
        submissions still end with the right total.
        """
        total = db.session.query(func.coalesce(func.sum(Payment.amount), 0)).filter(
            Payment.debt_id == self.id,
            Payment.user_id == self.user_id
        ).scalar()

        self.total_paid = Decimal(str(total or 0))
        self.sync_remaining_amount()

        if latest_payment is not None:
            self.last_payment_amount = latest_payment.amount
            self.last_payment_date = latest_payment.date

    def payoff_months(self):
        return analytics.debt_payoff_months(self)

    def calculate_interest_accrued(self, today=None):
        return analytics.compute_interest_accrued(self, today)

    def to_dict(self, today=None):
        """Stored fields plus the derived metrics shown for every debt"""
        remaining = analytics.compute_remaining(self)
        projection = analytics.compute_current_interest_projection(self)
        payoff_months = self.payoff_months()

        return {
            'id': self.id,
            'name': self.name,
            'total_amount': _money(self.total_amount),
            'interest_rate': float(self.interest_rate or 0),
            'monthly_payment': _money(self.monthly_payment),
            'date_of_loan': _iso(self.date_of_loan),
            'creditor': self.creditor or '',
            'description': self.description or '',
            'total_paid': _money(self.total_paid),
            'remaining_amount': _money(remaining['remaining']),
            'last_payment_amount': _money(self.last_payment_amount) if self.last_payment_amount is not None else None,
            'last_payment_date': _iso(self.last_payment_date),
            'progress_percent': round(remaining['progress_percent'], 2),
            'is_paid': remaining['is_paid'],
            'overpaid': _money(remaining['overpaid']),
            'payoff_months': payoff_months,
            'payoff_duration': analytics.format_duration(payoff_months),
            'interest_accrued': _money(self.calculate_interest_accrued(today)),
            'monthly_interest': _money(projection['monthly_interest']),
            'annual_interest': _money(projection['annual_interest']),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }

    def __repr__(self):
        return f'<Debt {self.name}>'

class Payment(db.Model):
    """Payment recorded against a debt - immutable once created"""
    __tablename__ = 'payments'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    debt_id = db.Column(db.Integer, db.ForeignKey('debts.id'), nullable=False, index=True)

    amount = db.Column(db.Numeric(15, 2), nullable=False)
    method = db.Column(db.String(50), default='Other')
    date = db.Column(db.Date, nullable=False, default=_today, index=True)
    note = db.Column(db.Text, default='')

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'debt_id': self.debt_id,
            'debt_name': self.debt.name if self.debt else 'Unknown Debt',
            'amount': _money(self.amount),
            'method': self.method or 'Other',
            'date': _iso(self.date),
            'note': self.note or '',
            'created_at': _iso(self.created_at),
        }

    def __repr__(self):
        return f'<Payment {self.id}>'

# Feedback Models
REPORT_TYPES = ['bug', 'feature', 'improvement', 'issue', 'feedback']
REPORT_PRIORITIES = ['low', 'medium', 'high', 'critical']
REPORT_CATEGORIES = ['general', 'dashboard', 'payments', 'debts', 'ui', 'performance', 'security']
REPORT_STATUSES = ['open', 'in-progress', 'resolved', 'closed']

class Report(db.Model):
    """Bug report or feedback sent by a visitor or a logged-in user"""
    __tablename__ = 'reports'
    __table_args__ = (
        db.Index('ix_reports_type_status', 'type', 'status'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), index=True)  # None for anonymous reports

    type = db.Column(db.String(20), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    priority = db.Column(db.String(20), nullable=False, default='medium', index=True)
    category = db.Column(db.String(20), nullable=False, default='general')
    suggestions = db.Column(db.Text, default='')
    email = db.Column(db.String(120), default='')
    status = db.Column(db.String(20), nullable=False, default='open')

    user_agent = db.Column(db.String(255))
    ip_address = db.Column(db.String(50))

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_summary(self):
        return {
            'id': self.id,
            'type': self.type,
            'title': self.title,
            'priority': self.priority,
            'category': self.category,
            'status': self.status,
            'created_at': _iso(self.created_at),
        }

    def to_dict(self):
        data = self.to_summary()
        data.update({
            'description': self.description,
            'suggestions': self.suggestions or '',
            'email': self.email or '',
            'user': {'id': self.reporter.id, 'username': self.reporter.username} if self.reporter else None,
            'user_agent': self.user_agent,
            'ip_address': self.ip_address,
            'updated_at': _iso(self.updated_at),
        })
        return data

    def __repr__(self):
        return f'<Report {self.type}: {self.title}>'

# Activity Log Model
class ActivityLog(db.Model):
    """Activity log for audit trail"""
    __tablename__ = 'activity_logs'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), index=True)
    action = db.Column(db.String(100), nullable=False)
    entity_type = db.Column(db.String(50))  # debt, payment, user
    entity_id = db.Column(db.Integer)
    description = db.Column(db.Text)
    ip_address = db.Column(db.String(50))
    user_agent = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f'<ActivityLog {self.action}>'
