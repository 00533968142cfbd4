from schoolsync.auth import auth_bp
from schoolsync.users import users_bp
from schoolsync.classes import classes_bp
from schoolsync.subjects import subjects_bp
from schoolsync.attendance import attendance_bp
from schoolsync.academics import academics_bp
from schoolsync.results import results_bp
from schoolsync.announcements import announcements_bp
from schoolsync.materials import materials_bp

def register_blueprints(app):
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(classes_bp)
    app.register_blueprint(subjects_bp)
    app.register_blueprint(attendance_bp)
    app.register_blueprint(academics_bp)
    app.register_blueprint(results_bp)
    app.register_blueprint(announcements_bp)
    app.register_blueprint(materials_bp)
