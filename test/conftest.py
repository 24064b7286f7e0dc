"""Shared fixtures: an application on the testing configuration and API clients"""
from datetime import datetime, timedelta
import pytest
from debttracker import create_app, db
from debttracker.models import User


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(username='juan', password='secret123', gender='Male', role='user'):
    user = User(username=username, gender=gender, role=role)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user


def login(client, username='juan', password='secret123'):
    return client.post('/auth/login', json={'username': username, 'password': password})


@pytest.fixture
def user(app):
    return make_user()


@pytest.fixture
def auth_client(client, user):
    response = login(client)
    assert response.status_code == 200
    return client


def days_ago(days):
    return (datetime.utcnow().date() - timedelta(days=days)).isoformat()


def create_debt(client, **overrides):
    payload = {
        'name': 'Credit Card',
        'total_amount': 12000,
        'interest_rate': 12,
        'monthly_payment': 1000,
        'date_of_loan': days_ago(10),
        'creditor': 'BDO',
        'description': ''
    }
    payload.update(overrides)
    response = client.post('/debts/', json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()['debt']
