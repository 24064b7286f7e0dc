#!/usr/bin/env python3
"""Application entry point"""
import os
import sys

def init_database():
    """Initialize the database"""
    from debttracker import create_app, db
    from debttracker import models  # noqa: F401
    app = create_app(os.getenv('FLASK_ENV') or 'development')
    with app.app_context():
        db.create_all()
        print("Database initialized!")

def create_user(username, password, gender='Other', role='user'):
    """Create a user from the command line"""
    from debttracker import create_app, db
    from debttracker.models import User

    app = create_app(os.getenv('FLASK_ENV') or 'development')

    with app.app_context():
        # Create tables if they don't exist
        db.create_all()

        if User.query.filter_by(username=username).first():
            print("User {} already exists!".format(username))
            return

        user = User(username=username, gender=gender, role=role, is_active=True)
        user.set_password(password)
        db.session.add(user)

        try:
            db.session.commit()
            print("User {} ({}) created successfully!".format(username, role))
        except Exception as e:
            db.session.rollback()
            print("Error: {}".format(e))

if __name__ == '__main__':
    # Handle command-line arguments
    if len(sys.argv) > 1:
        command = sys.argv[1]
        if command == 'init-db':
            init_database()
        elif command == 'create-user':
            if len(sys.argv) < 4:
                print("Usage: run.py create-user <username> <password> [gender] [user|admin]")
                sys.exit(1)
            create_user(*sys.argv[2:6])
        else:
            print("Unknown command: {}".format(command))
            print("Available commands: init-db, create-user")
            sys.exit(1)
    else:
        # Run the Flask development server
        from debttracker import create_app, db
        from debttracker import models  # noqa: F401
        app = create_app(os.getenv('FLASK_ENV') or 'development')
        with app.app_context():
            db.create_all()
        app.run(host='0.0.0.0', port=int(os.getenv('PORT', 5000)), debug=app.config.get('DEBUG', False))
