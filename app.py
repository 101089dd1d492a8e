# app.py
# Flask application for the judging portal, built with the Application Factory pattern

import logging
import os

import click
from flask import Flask, jsonify, request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

from config import Config
from errors import PortalError, ConflictError, StorageError
from extensions import db, migrate

# Imported so that create_all and Alembic (Migrate) see every table
from models import Evaluator, User, ProblemStatement, Team, Round, Parameter, Evaluation

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    db.init_app(app)
    migrate.init_app(app, db)

    from routes.auth import auth_bp
    from routes.main import main_bp
    from routes.admin import admin_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(main_bp)
    app.register_blueprint(admin_bp)

    @app.before_request
    def log_request():
        app.logger.info('%s %s', request.method, request.full_path.rstrip('?'))

    @app.errorhandler(PortalError)
    def handle_portal_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error):
        db.session.rollback()
        app.logger.warning('Integrity error: %s', error.orig)
        conflict = ConflictError('The request conflicts with existing data')
        return jsonify(conflict.to_dict()), conflict.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(error):
        db.session.rollback()
        app.logger.exception('Unhandled storage error')
        failure = StorageError()
        return jsonify(failure.to_dict()), failure.status_code

    @app.errorhandler(404)
    def handle_unknown_route(error):
        return jsonify({'success': False, 'message': 'Not found'}), 404

    @app.errorhandler(405)
    def handle_wrong_method(error):
        return jsonify({'success': False, 'message': 'Method not allowed'}), 405

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        if isinstance(error, HTTPException):
            return jsonify({'success': False, 'message': error.description}), error.code
        db.session.rollback()
        app.logger.exception('Unhandled error on %s %s', request.method, request.path)
        failure = StorageError()
        return jsonify(failure.to_dict()), failure.status_code

    @app.cli.command('seed')
    @click.option('--no-history', is_flag=True, help='Skip the historical evaluations.')
    def seed_command(no_history):
        """Populate an empty database with the reference data."""
        from seed_data import seed_database
        if seed_database(include_history=not no_history):
            click.echo('Seed data added.')
        else:
            click.echo('Database already contains teams, nothing to do.')

    uri = app.config['SQLALCHEMY_DATABASE_URI']
    if uri.startswith('sqlite:///'):
        os.makedirs(os.path.dirname(uri[len('sqlite:///'):]) or '.', exist_ok=True)

    with app.app_context():
        db.create_all()

    return app
