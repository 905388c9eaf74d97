import click
from flask import Flask

from school_portal.errors import LibraryError
from school_portal.services.auth_service import AuthService
from school_portal.services.notification_service import NotificationService


def register_cli(app: Flask):
    @app.cli.command("create-admin")
    @click.argument("email")
    @click.argument("name")
    @click.password_option()
    def create_admin(email, name, password):
        """Create an admin account."""
        try:
            admin = AuthService.create_admin(email, name, password)
        except LibraryError as e:
            raise click.ClickException(e.message)
        click.echo(f"Admin #{admin.id} created: {admin.email}")

    @app.cli.command("create-student")
    @click.argument("student_code")
    @click.argument("name")
    @click.argument("dob")
    @click.option("--email", default=None, help="Address for overdue reminders.")
    def create_student(student_code, name, dob, email):
        """Create a student account (DOB as YYYY-MM-DD)."""
        try:
            student = AuthService.create_student(student_code, name, dob, email=email)
        except LibraryError as e:
            raise click.ClickException(e.message)
        click.echo(f"Student #{student.id} created: {student.student_code}")

    @app.cli.command("run-overdue-check")
    def run_overdue_check():
        """Send overdue reminders once."""
        stats = NotificationService.run_overdue_check()
        click.echo(" ".join(f"{k}={v}" for k, v in stats.items()))
