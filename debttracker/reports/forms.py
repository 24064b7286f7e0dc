"""Feedback report forms"""
from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SelectField
from wtforms.validators import DataRequired, Optional, Email, Length, ValidationError
from debttracker.models import REPORT_TYPES, REPORT_PRIORITIES, REPORT_CATEGORIES, REPORT_STATUSES

def _choices(values):
    return [(value, value.replace('-', ' ').title()) for value in values]

class ReportForm(FlaskForm):
    """Report submission form

    Accepts either a ``title`` and ``description`` pair or a single
    free-text ``message``.
    """
    type = SelectField('Type', choices=_choices(REPORT_TYPES), validators=[DataRequired()])
    title = StringField('Title', validators=[Optional(), Length(max=200)])
    description = TextAreaField('Description', validators=[Optional()])
    message = TextAreaField('Message')
    priority = SelectField('Priority', choices=_choices(REPORT_PRIORITIES), default='medium')
    category = SelectField('Category', choices=_choices(REPORT_CATEGORIES), default='general')
    suggestions = TextAreaField('Suggestions', validators=[Optional()])
    email = StringField('Email', validators=[Optional(), Email(), Length(max=120)])

    def validate_message(self, field):
        has_message = bool((field.data or '').strip())
        has_title = bool((self.title.data or '').strip()) and bool((self.description.data or '').strip())
        if not has_message and not has_title:
            raise ValidationError('Please provide your feedback message')

    def report_values(self):
        """Column values for a new Report"""
        message = (self.message.data or '').strip()
        return {
            'type': self.type.data,
            'title': (self.title.data or '').strip() or f'{self.type.data.capitalize()} Feedback',
            'description': (self.description.data or '').strip() or message,
            'priority': self.priority.data or 'medium',
            'category': self.category.data or 'general',
            'suggestions': (self.suggestions.data or '').strip(),
            'email': (self.email.data or '').strip().lower(),
        }

class ReportStatusForm(FlaskForm):
    """Report status update form"""
    status = SelectField('Status', choices=_choices(REPORT_STATUSES), validators=[DataRequired()])
