"""Debts blueprint"""
from flask import Blueprint

debts_bp = Blueprint('debts', __name__)

from debttracker.debts import routes  # noqa: E402,F401
