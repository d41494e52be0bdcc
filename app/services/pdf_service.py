import os
import pdfkit
from uuid import UUID
from datetime import datetime
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from jinja2 import Environment, FileSystemLoader, select_autoescape
from loguru import logger

from app.core.config import settings
from app.core.exceptions import ApplicationLocked, NotFoundError
from app.models.application import Application
from app.models.document import Document
from app.models.enums import ApplicationStatus, DocumentType, PaymentStatus
from app.services.application_service import get_post
from app.services.registration_service import get_latest_payment, load_registration_data

# -----------------------------
# Setup Jinja2 Environment
# -----------------------------
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
template_dir = os.path.join(BASE_DIR, 'templates', 'pdf')

pdf_env = Environment(
    loader=FileSystemLoader(template_dir),
    autoescape=select_autoescape(['html', 'xml'])
)

pdf_options = {
    'page-size': 'A4',
    'margin-top': '15mm',
    'margin-right': '15mm',
    'margin-bottom': '15mm',
    'margin-left': '15mm',
    'encoding': "UTF-8",
    'no-outline': None,
    'disable-smart-shrinking': None,
    'enable-local-file-access': None
}


# -----------------------------
# PDF Configuration
# -----------------------------
def get_pdf_config():
    # pdfkit.configuration raises when the binary is missing, so build it per call
    path = settings.WKHTMLTOPDF_PATH
    if os.name == 'nt' and not os.path.exists(path):
        path = r"C:\Program Files\wkhtmltopdf\bin\wkhtmltopdf.exe"

    if not os.path.exists(path):
        logger.warning(f"wkhtmltopdf not found at {path}. PDF generation will fail.")

    return pdfkit.configuration(wkhtmltopdf=path)


def render_pdf(html_content: str) -> bytes:
    try:
        return pdfkit.from_string(html_content, False, options=pdf_options, configuration=get_pdf_config())
    except OSError as e:
        raise ValueError(f"PDF generation failed. Ensure wkhtmltopdf is installed. Error: {e}")


# -----------------------------
# Acknowledgement Slip
# -----------------------------
async def generate_acknowledgement_pdf(session: AsyncSession, application_id: UUID) -> tuple[str, bytes]:
    """
    Builds the acknowledgement slip for a submitted application.
    Returns (file name, PDF bytes).
    """
    result = await session.execute(select(Application).where(Application.id == application_id))
    application = result.scalar_one_or_none()
    if not application:
        raise NotFoundError("Application not found")

    if ApplicationStatus(application.status) != ApplicationStatus.Submitted:
        raise ApplicationLocked(
            "Acknowledgement is available only after final submission",
            title="Application Not Submitted",
        )

    snapshot = await load_registration_data(session, application.user_id)
    post = await get_post(session, application.post_id)
    payment = await get_latest_payment(session, application.id)

    photo = (
        await session.execute(
            select(Document)
            .where(
                Document.user_id == application.user_id,
                Document.document_type == DocumentType.Photo.value,
            )
            .order_by(Document.created_at.desc())
            .limit(1)
        )
    ).scalar_one_or_none()

    fee = "-"
    if payment is not None and PaymentStatus(payment.payment_status) == PaymentStatus.Completed:
        fee = "Exempted" if payment.payment_method == "exempted" else f"Rs. {payment.amount}"

    context = {
        "application": application,
        "post_name": post.post_name if post else None,
        "status": ApplicationStatus(application.status).value.replace("_", " ").title(),
        "submitted_on": application.submitted_at.strftime("%d-%m-%Y %I:%M %p") if application.submitted_at else "-",
        "fee": fee,
        "personal": snapshot.personal_info,
        "education": snapshot.education,
        "experience": snapshot.experience,
        "photo_url": photo.file_url if photo else None,
        "generation_date": datetime.now().strftime("%d-%m-%Y"),
    }

    html_content = pdf_env.get_template("acknowledgement.html").render(context)
    pdf_bytes = render_pdf(html_content)

    return f"acknowledgement_{application.application_number}.pdf", pdf_bytes
