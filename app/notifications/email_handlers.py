from app.config import settings
from app.services.email_service import send_email
from app.utils.template import render_template


def send_user_email(template, subject, user, **ctx):
    html = render_template(
        template,
        first_name=user.first_name,
        store_name=settings.STORE_NAME,
        support_contact=settings.SUPPORT_CONTACT,
        **ctx,
    )
    return send_email(to=user.email, subject=subject, html=html)
