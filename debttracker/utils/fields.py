"""Custom form fields"""
from decimal import Decimal, ROUND_HALF_UP
from wtforms import DecimalField

CENT = Decimal('0.01')
MAX_AMOUNT = Decimal('9999999999999.99')  # Numeric(15, 2)

class CentsField(DecimalField):
    """DecimalField whose value is rounded half up to whole cents as it is parsed

    Validators see exactly the value that a Numeric(..., 2) column will store.
    Infinite, NaN and out-of-range input is a parse error with ``data = None``.
    """

    def __init__(self, label=None, validators=None, max_amount=MAX_AMOUNT, **kwargs):
        kwargs.setdefault('places', 2)
        super().__init__(label, validators, **kwargs)
        self.max_amount = max_amount

    def process_formdata(self, valuelist):
        super().process_formdata(valuelist)
        if self.data is None:
            return
        if not self.data.is_finite() or abs(self.data) > self.max_amount:
            self.data = None
            raise ValueError(self.gettext('Not a valid amount.'))
        self.data = self.data.quantize(CENT, rounding=ROUND_HALF_UP)
