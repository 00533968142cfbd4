import click
from schoolsync.errors import SchoolSyncError
from schoolsync.extensions import db
from schoolsync.models import ClassLevel, Subject
from schoolsync.schemas import UserCreate, parse
from schoolsync.storage import Storage
from schoolsync.utils.academic import get_current_academic_year


CLASS_LEVELS = [
    ("Grade 1", "First year of primary school"),
    ("Grade 2", "Second year of primary school"),
    ("Grade 3", "Third year of primary school"),
    ("Grade 4", "Fourth year of primary school"),
    ("Grade 5", "Fifth year of primary school"),
    ("Grade 6", "Final year of primary school"),
]

SUBJECTS = [
    ("Mathematics", "Numbers, shapes and problem solving"),
    ("English", "Reading, writing and comprehension"),
    ("Science", "Introduction to the natural world"),
    ("Social Studies", "Community, history and geography"),
]


def initialize_data(app):
    with app.app_context():
        db.create_all()


def seed_initial_data(academic_year=None):
    """Create the default class levels and their core subjects if missing."""

    academic_year = academic_year or get_current_academic_year()

    for name, description in CLASS_LEVELS:

        exists = ClassLevel.query.filter_by(
            name=name,
            academic_year=academic_year
        ).first()

        if not exists:
            class_level = ClassLevel(
                name=name,
                description=description,
                academic_year=academic_year
            )
            db.session.add(class_level)

    db.session.commit()

    class_levels = ClassLevel.query.filter_by(academic_year=academic_year).all()

    for class_level in class_levels:
        for name, description in SUBJECTS:

            exists = Subject.query.filter_by(
                name=name,
                class_level_id=class_level.id
            ).first()

            if not exists:
                subject = Subject(
                    name=name,
                    description=description,
                    class_level_id=class_level.id
                )
                db.session.add(subject)

    db.session.commit()

    return class_levels


def register_commands(app):

    @app.cli.command("init-db")
    def init_db_command():
        """Create all database tables."""
        db.create_all()
        click.echo("Database tables created")

    @app.cli.command("seed")
    @click.option("--year", type=int, default=None, help="Academic year to seed.")
    def seed_command(year):
        """Seed default class levels and subjects."""
        class_levels = seed_initial_data(year)
        click.echo(f"Seeded {len(class_levels)} class levels")

    @app.cli.command("create-admin")
    @click.option("--username", prompt=True)
    @click.option("--email", prompt=True)
    @click.option("--full-name", prompt=True)
    @click.password_option()
    def create_admin_command(username, email, full_name, password):
        """Create an administrator account."""
        try:
            data = parse(UserCreate, {
                "username": username,
                "password": password,
                "role": "admin",
                "full_name": full_name,
                "email": email
            })

            fields = data.model_dump()
            password = fields.pop("password")

            user = Storage(db.session).create_user(password, **fields)
        except SchoolSyncError as e:
            details = "; ".join(f"{f['field']}: {f['message']}" for f in e.fields)
            raise click.ClickException(details or e.message)

        click.echo(f"Admin {user.username} created")
