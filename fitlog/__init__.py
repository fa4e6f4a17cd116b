# backend/fitlog/__init__.py

from flask import Flask, jsonify
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager

from config import Config

db = SQLAlchemy()
jwt = JWTManager()

# imported after db: background_jobs has no model imports
from .background_jobs import Jobs  # noqa: E402

jobs = Jobs()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)
    jobs.init_app(app)

    # cookies carry the session, so origins must be explicit for credentials
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    from .rate_limit import RateLimiter

    app.extensions["fitlog_login_limiter"] = RateLimiter(
        app.config["LOGIN_MAX_ATTEMPTS"], app.config["LOGIN_WINDOW_SECONDS"]
    )
    app.extensions["fitlog_signup_limiter"] = RateLimiter(
        app.config["LOGIN_MAX_ATTEMPTS"], app.config["LOGIN_WINDOW_SECONDS"]
    )

    # -----------------------------
    # JWT handlers
    # -----------------------------
    from .models.user import User

    @jwt.user_lookup_loader
    def load_user(jwt_header, jwt_payload):
        return db.session.get(User, int(jwt_payload["sub"]))

    @jwt.user_lookup_error_loader
    def user_lookup_error_callback(jwt_header, jwt_payload):
        return jsonify({"message": "User not found"}), 401

    @jwt.unauthorized_loader
    def unauthorized_callback(reason):
        return (
            jsonify(
                {
                    "message": "Unauthorized. Please log in.",
                    "error": reason,
                }
            ),
            401,
        )

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return (
            jsonify(
                {
                    "message": "Invalid session",
                    "error": reason,
                }
            ),
            401,
        )

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"message": "Session has expired"}), 401

    from .errors import register_error_handlers

    register_error_handlers(app)

    # -----------------------------
    # IMPORT BLUEPRINTS (all routes)
    # -----------------------------
    from .routes.auth_routes import auth_bp
    from .routes.dashboard_routes import dashboard_bp
    from .routes.workout_routes import workouts_bp
    from .routes.rehab_routes import rehab_bp
    from .routes.habit_routes import habits_bp
    from .routes.social_routes import friends_bp
    from .routes.settings_routes import settings_bp
    from .routes.gym_plan_routes import gym_plan_bp

    # -----------------------------
    # REGISTER BLUEPRINTS
    # -----------------------------
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(dashboard_bp, url_prefix="/api")
    app.register_blueprint(workouts_bp, url_prefix="/api")
    app.register_blueprint(rehab_bp, url_prefix="/api/rehab")
    app.register_blueprint(habits_bp, url_prefix="/api/habits")
    app.register_blueprint(friends_bp, url_prefix="/api/friends")
    app.register_blueprint(settings_bp, url_prefix="/api/settings")
    app.register_blueprint(gym_plan_bp, url_prefix="/api/gym-plan")

    @app.route("/api/health")
    def health():
        return {"status": "ok"}

    # -----------------------------
    # DB init
    # -----------------------------
    with app.app_context():
        from .models import activity_log, gym_plan, habit, rehab, social, stats, workout  # noqa: F401
        db.create_all()

    return app
