import smtplib
import os
from datetime import datetime
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from jinja2 import Environment, FileSystemLoader, select_autoescape
from loguru import logger
from app.core.config import settings

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
template_dir = os.path.join(BASE_DIR, 'templates', 'email')

email_env = Environment(
    loader=FileSystemLoader(template_dir),
    autoescape=select_autoescape(['html', 'xml'])
)


# Helper to get template
def get_template(template_name):
    return email_env.get_template(template_name)


# Helper to send email via SMTP
def send_email_via_smtp(to_email, subject, html_content):
    # Only HOST is required. User/Pass are optional (for Mailpit)
    if not settings.SMTP_HOST:
        logger.warning("SMTP Host not configured. Skipping email.")
        return

    try:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{settings.EMAILS_FROM_NAME} <{settings.EMAILS_FROM_EMAIL}>"
        msg["To"] = to_email
        msg.attach(MIMEText(html_content, "html"))

        logger.debug(f"Connecting to SMTP: {settings.SMTP_HOST}:{settings.SMTP_PORT}")

        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
            server.ehlo()

            # TLS only on submission ports; Mailpit on 1025 runs plain
            if settings.SMTP_PORT in [587, 2525]:
                server.starttls()
                server.ehlo()

            if settings.SMTP_USER and settings.SMTP_PASSWORD:
                server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)

            server.sendmail(settings.EMAILS_FROM_EMAIL, to_email, msg.as_string())

        logger.success(f"Email sent successfully to {to_email}")
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")


# ---------------------------------------------------------
# 1. WELCOME EMAIL (after sign-up)
# ---------------------------------------------------------
def send_welcome_email(data: dict):
    """
    data requires: name, email
    """
    try:
        template = get_template('candidate_welcome.html')
        context = {
            "name": data.get("name"),
            "email": data.get("email"),
            "verify_url": f"{settings.FRONTEND_URL}/verify-phone",
            "login_url": f"{settings.FRONTEND_URL}/login"
        }
        html_content = template.render(context)
        send_email_via_smtp(data.get("email"), f"Welcome to the {settings.EMAILS_FROM_NAME}", html_content)
    except Exception as e:
        logger.error(f"Error preparing welcome email: {e}")


# ---------------------------------------------------------
# 2. APPLICATION SUBMITTED EMAIL
# ---------------------------------------------------------
def send_application_submitted_email(data: dict):
    """
    data requires: name, email, application_number, application_id
    optional: post_name, submitted_at
    """
    try:
        template = get_template('application_submitted.html')
        submitted_at = data.get("submitted_at") or datetime.now()
        context = {
            "name": data.get("name"),
            "application_number": data.get("application_number"),
            "post_name": data.get("post_name"),
            "submission_date": submitted_at.strftime("%d-%m-%Y %I:%M %p"),
            "acknowledgement_url": f"{settings.FRONTEND_URL}/applications/{data.get('application_id')}/acknowledgement",
            "track_url": f"{settings.FRONTEND_URL}/dashboard"
        }
        html_content = template.render(context)
        send_email_via_smtp(
            data.get("email"),
            f"Application Submitted Successfully - {data.get('application_number')}",
            html_content
        )
    except Exception as e:
        logger.error(f"Error preparing submission email: {e}")
