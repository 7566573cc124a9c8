"""
Student Records admin dashboard
Main Flask application entry point
"""

from flask import Flask
from flask_wtf.csrf import CSRFProtect
from config import Config
from database import db, init_db
from services.document_setup import ReportAssets, SYSTEM_THAI_FONTS
from services.report_dispatch import ReportDispatcher
from utils.logger import LoggerSetup

csrf = CSRFProtect()

def load_report_assets(app):
    """Read the report font and logo into config unless already provided"""
    if app.config.get('REPORT_FONT_BASE64') and app.config.get('REPORT_LOGO_DATA_URI'):
        return
    fallbacks = app.config.get('REPORT_FONT_FALLBACK_PATHS')
    assets = ReportAssets.discover(
        font_path=app.config.get('REPORT_FONT_PATH'),
        logo_path=app.config.get('REPORT_LOGO_PATH'),
        font_fallbacks=SYSTEM_THAI_FONTS if fallbacks is None else fallbacks
    )
    app.config.setdefault('REPORT_FONT_BASE64', None)
    app.config.setdefault('REPORT_LOGO_DATA_URI', None)
    if not app.config['REPORT_FONT_BASE64']:
        app.config['REPORT_FONT_BASE64'] = assets.font_data
    if not app.config['REPORT_LOGO_DATA_URI']:
        app.config['REPORT_LOGO_DATA_URI'] = assets.logo_data

def create_app(config_class=Config):
    """Application factory pattern"""
    app = Flask(__name__)
    app.config.from_object(config_class)

    logger = LoggerSetup.setup(app)

    # Initialize extensions with app
    db.init_app(app)
    csrf.init_app(app)

    # Add CSRF token to template context
    @app.context_processor
    def inject_csrf_token():
        from flask_wtf.csrf import generate_csrf
        return dict(csrf_token=generate_csrf)

    # Register blueprints
    from routes.auth import auth_bp
    from routes.dashboard import dashboard_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp, url_prefix='/dashboard')

    # Report generation shares one font registration and decoded logo
    load_report_assets(app)
    app.extensions['report_dispatcher'] = ReportDispatcher.from_config(app.config)

    # Initialize database
    init_db(app)

    logger.info("Application created with %s", config_class.__name__)
    return app

if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=8000, debug=True, use_reloader=False)
