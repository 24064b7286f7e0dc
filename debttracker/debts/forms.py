"""Debt forms"""
from flask_wtf import FlaskForm
from wtforms import StringField, DateField, TextAreaField
from wtforms.validators import DataRequired, InputRequired, Optional, NumberRange, Length, ValidationError
from debttracker.utils.fields import CentsField

class DebtForm(FlaskForm):
    """Debt create/update form"""
    name = StringField('Debt Name', validators=[DataRequired(), Length(max=200)])
    total_amount = CentsField('Total Amount', validators=[InputRequired()])
    interest_rate = CentsField('Interest Rate (%)', validators=[
        Optional(),
        NumberRange(min=0, max=100, message='Interest rate must be between 0 and 100')
    ])
    monthly_payment = CentsField('Monthly Payment', validators=[Optional()])
    date_of_loan = DateField('Date of Loan', validators=[DataRequired()])
    creditor = StringField('Creditor', validators=[Optional(), Length(max=200)])
    description = TextAreaField('Description', validators=[Optional()])

    def validate_name(self, field):
        if not field.data or not field.data.strip():
            raise ValidationError('Debt name is required')

    def validate_total_amount(self, field):
        if field.data is None or field.data <= 0:
            raise ValidationError('Total amount must be a positive number')

    def validate_monthly_payment(self, field):
        if field.data is None:
            return
        if field.data <= 0:
            raise ValidationError('Monthly payment must be a positive number')
        total_amount = self.total_amount.data
        if total_amount is not None and field.data >= total_amount:
            raise ValidationError('Monthly payment must be less than total amount')

    def populate_debt(self, debt):
        """Copy validated values onto a Debt"""
        debt.name = self.name.data.strip()
        debt.total_amount = self.total_amount.data
        debt.interest_rate = self.interest_rate.data or 0
        debt.monthly_payment = self.monthly_payment.data or 0
        debt.date_of_loan = self.date_of_loan.data
        debt.creditor = (self.creditor.data or '').strip()
        debt.description = (self.description.data or '').strip()
        debt.sync_remaining_amount()
        return debt
