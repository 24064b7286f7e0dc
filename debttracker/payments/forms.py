"""Payment forms"""
from flask_wtf import FlaskForm
from wtforms import StringField, IntegerField, DateField, TextAreaField
from wtforms.validators import InputRequired, Optional, Length, ValidationError
from debttracker.utils.fields import CentsField

PAYMENT_DATE_FORMATS = ['%Y-%m-%d', '%Y-%m-%dT%H:%M:%S', '%Y-%m-%dT%H:%M:%S.%fZ', '%Y-%m-%dT%H:%M:%SZ']

class PaymentForm(FlaskForm):
    """Payment form"""
    debt_id = IntegerField('Debt', validators=[InputRequired()])
    amount = CentsField('Payment Amount', validators=[InputRequired()])
    method = StringField('Payment Method', validators=[Optional(), Length(max=50)], default='Other')
    date = DateField('Payment Date', validators=[Optional()], format=PAYMENT_DATE_FORMATS)
    note = TextAreaField('Note', validators=[Optional()])

    def validate_amount(self, field):
        if field.data is None or field.data <= 0:
            raise ValidationError('Payment amount must be a positive number')
