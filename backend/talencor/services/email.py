"""
Transactional email through Microsoft Graph (client-credentials flow over httpx).

Mail is best effort: missing credentials or a Graph failure are logged and the
caller still gets True, so a form submission never fails because of email.
"""
from dataclasses import dataclass
from datetime import date, datetime, timezone
from html import escape

import httpx

from talencor.config import get_settings
from talencor.utils.logger import get_logger

logger = get_logger(__name__)

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
GRAPH_SCOPE = "https://graph.microsoft.com/.default"
TOKEN_URL = "https://login.microsoftonline.com/{tenant}/oauth2/v2.0/token"

BRAND_NAVY = "#1B3A52"
BRAND_ORANGE = "#F39200"

_BASE_STYLE = f"""
    body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
    .container {{ max-width: 640px; margin: 0 auto; padding: 20px; }}
    .header {{ background-color: {BRAND_NAVY}; color: white; padding: 20px; text-align: center; }}
    .content {{ padding: 20px; background-color: #f9f9f9; }}
    .section {{ margin: 20px 0; padding: 15px; border-left: 4px solid {BRAND_ORANGE}; background-color: white; }}
    .footer {{ padding: 20px; text-align: center; font-size: 12px; color: #666; }}
    .note {{ padding: 10px; border-radius: 5px; }}
"""


@dataclass
class EmailMessage:
    to: str
    subject: str
    text: str
    html: str | None = None


async def _get_access_token(client: httpx.AsyncClient) -> str:
    settings = get_settings()
    resp = await client.post(
        TOKEN_URL.format(tenant=settings.ms_tenant_id),
        data={
            "grant_type": "client_credentials",
            "client_id": settings.ms_client_id,
            "client_secret": settings.ms_client_secret,
            "scope": GRAPH_SCOPE,
        },
    )
    resp.raise_for_status()
    return resp.json()["access_token"]


def _text_to_html(text: str) -> str:
    return "<p>" + escape(text).replace("\n", "<br>") + "</p>"


async def send_email(message: EmailMessage) -> bool:
    """Send one message from the configured sender mailbox. Always returns True."""
    settings = get_settings()
    logger.info("Sending email", extra={"to": message.to, "subject": message.subject[:120]})

    if not settings.mail_configured:
        logger.info("Mail credentials not configured; email skipped", extra={"to": message.to})
        return True

    payload = {
        "message": {
            "subject": message.subject,
            "body": {
                "contentType": "HTML",
                "content": message.html or _text_to_html(message.text),
            },
            "toRecipients": [{"emailAddress": {"address": message.to}}],
        },
        "saveToSentItems": True,
    }
    try:
        async with httpx.AsyncClient(timeout=settings.mail_timeout_seconds) as client:
            token = await _get_access_token(client)
            resp = await client.post(
                f"{GRAPH_BASE_URL}/users/{settings.mail_sender}/sendMail",
                json=payload,
                headers={"Authorization": f"Bearer {token}"},
            )
            resp.raise_for_status()
    except (httpx.HTTPError, KeyError, ValueError) as e:
        logger.error(
            "Microsoft Graph email error",
            extra={"to": message.to, "error": str(e)[:200]},
        )
        return True
    logger.info("Email sent", extra={"to": message.to})
    return True


def _wrap_html(title: str, body: str, subtitle: str | None = None) -> str:
    year = datetime.now(timezone.utc).year
    sub = f"<h2>{escape(subtitle)}</h2>" if subtitle else ""
    return f"""<!DOCTYPE html>
<html>
<head><style>{_BASE_STYLE}</style></head>
<body>
  <div class="container">
    <div class="header"><h1>{escape(title)}</h1>{sub}</div>
    <div class="content">
{body}
    </div>
    <div class="footer"><p>&copy; {year} Talencor Staffing. All rights reserved.</p></div>
  </div>
</body>
</html>"""


def build_job_posting_confirmation(
    contact_name: str,
    email: str,
    company_name: str,
    job_title: str,
    is_existing_client: bool,
) -> EmailMessage:
    settings = get_settings()
    if is_existing_client:
        status_line = "As an existing client, your job posting will be prioritized for immediate processing."
        note_color = "#d4edda"
    else:
        status_line = (
            "As a new client, we will discuss our services, pricing, and contract terms "
            "before posting your job."
        )
        note_color = "#d1ecf1"

    text = f"""Dear {contact_name},

Thank you for submitting your job posting for {job_title} at {company_name}.

We have received your request and a member of our recruiting team will contact you within one business day.

{status_line}

If you have any immediate questions, please don't hesitate to contact us at:
Phone: {settings.recruiting_phone}
Email: {settings.recruiting_email}

Best regards,
The Talencor Staffing Team"""

    body = f"""      <p>Dear {escape(contact_name)},</p>
      <p>Thank you for submitting your job posting for <strong>{escape(job_title)}</strong> at <strong>{escape(company_name)}</strong>.</p>
      <p>We have received your request and a member of our recruiting team will contact you within one business day.</p>
      <p class="note" style="background-color: {note_color};">{escape(status_line)}</p>
      <p>If you have any immediate questions, please don't hesitate to contact us:</p>
      <ul>
        <li>Phone: {escape(settings.recruiting_phone)}</li>
        <li>Email: {escape(settings.recruiting_email)}</li>
      </ul>"""

    return EmailMessage(
        to=email,
        subject="Job Posting Received - Talencor Staffing",
        text=text,
        html=_wrap_html("Job Posting Received", body),
    )


def build_internal_job_posting_notification(
    posting_id: int,
    contact_name: str,
    email: str,
    phone: str,
    company_name: str,
    job_title: str,
    location: str,
    employment_type: str,
    is_existing_client: bool,
    anticipated_start_date: date | str | None = None,
    salary_range: str | None = None,
    job_description: str | None = None,
    special_requirements: str | None = None,
) -> EmailMessage:
    settings = get_settings()
    client_status = "EXISTING CLIENT" if is_existing_client else "NEW CLIENT"
    if is_existing_client:
        actions = ["Verify current contract status", "Proceed with job posting"]
    else:
        actions = [
            "Contact new client within 24 hours",
            "Discuss services and pricing",
            "Send contract documents",
        ]
    admin_url = f"{settings.site_base_url}/admin/job-postings"
    start = str(anticipated_start_date) if anticipated_start_date else None

    details = [
        ("Title", job_title),
        ("Location", location),
        ("Type", employment_type),
    ]
    if start:
        details.append(("Start Date", start))
    if salary_range:
        details.append(("Salary Range", salary_range))
    company = [
        ("Company", company_name),
        ("Contact", contact_name),
        ("Email", email),
        ("Phone", phone),
    ]

    lines = [
        "NEW JOB POSTING RECEIVED",
        "",
        f"ID: #{posting_id}",
        f"Client Status: {client_status}",
        "",
        "COMPANY INFORMATION:",
        *[f"- {k}: {v}" for k, v in company],
        "",
        "JOB DETAILS:",
        *[f"- {k}: {v}" for k, v in details],
        "",
    ]
    if job_description:
        lines += ["JOB DESCRIPTION:", job_description, ""]
    if special_requirements:
        lines += ["SPECIAL REQUIREMENTS:", special_requirements, ""]
    lines += ["ACTION REQUIRED:", *[f"- {a}" for a in actions], "", f"View in admin panel: {admin_url}"]

    def _li(pairs: list[tuple[str, str]]) -> str:
        return "\n".join(
            f"          <li><strong>{escape(k)}:</strong> {escape(str(v))}</li>" for k, v in pairs
        )

    extra_sections = ""
    if job_description:
        extra_sections += (
            f'      <div class="section"><h3>Job Description</h3>'
            f"<p>{escape(job_description).replace(chr(10), '<br>')}</p></div>\n"
        )
    if special_requirements:
        extra_sections += (
            f'      <div class="section"><h3>Special Requirements</h3>'
            f"<p>{escape(special_requirements).replace(chr(10), '<br>')}</p></div>\n"
        )
    action_items = "\n".join(f"          <li>{escape(a)}</li>" for a in actions)
    body = f"""      <p><strong>Posting ID:</strong> #{posting_id}</p>
      <p><strong>Client Status:</strong> {client_status}</p>
      <div class="section">
        <h3>Company Information</h3>
        <ul>
{_li(company)}
        </ul>
      </div>
      <div class="section">
        <h3>Job Details</h3>
        <ul>
{_li(details)}
        </ul>
      </div>
{extra_sections}      <div class="section">
        <h3>Action Required</h3>
        <ul>
{action_items}
        </ul>
      </div>
      <p><a href="{escape(admin_url)}">View in admin panel</a></p>"""

    return EmailMessage(
        to=settings.internal_notification_email,
        subject=f"New Job Posting: {job_title} at {company_name}",
        text="\n".join(lines),
        html=_wrap_html("New Job Posting Received", body, subtitle=f"{job_title} at {company_name}"),
    )


def build_access_code_email(
    contact_name: str,
    email: str,
    company_name: str,
    access_code: str,
    expires_at: datetime | None,
) -> EmailMessage:
    settings = get_settings()
    login_url = f"{settings.site_base_url}/client-login"
    expiry = f"This code is valid until {expires_at:%B %d, %Y}." if expires_at else ""
    text = f"""Dear {contact_name},

Your request for client portal access for {company_name} has been approved.

Your access code: {access_code}
{expiry}

Sign in at {login_url} to submit and manage job postings.

Best regards,
The Talencor Staffing Team"""
    body = f"""      <p>Dear {escape(contact_name)},</p>
      <p>Your request for client portal access for <strong>{escape(company_name)}</strong> has been approved.</p>
      <div class="section"><h3>Your access code</h3><p style="font-size: 24px; letter-spacing: 4px;"><strong>{escape(access_code)}</strong></p><p>{escape(expiry)}</p></div>
      <p><a href="{escape(login_url)}">Sign in to the client portal</a></p>"""
    return EmailMessage(
        to=email,
        subject="Your Talencor Client Portal Access Code",
        text=text,
        html=_wrap_html("Client Portal Access Approved", body),
    )


async def send_job_posting_confirmation(**kwargs) -> bool:
    return await send_email(build_job_posting_confirmation(**kwargs))


async def send_internal_job_posting_notification(**kwargs) -> bool:
    return await send_email(build_internal_job_posting_notification(**kwargs))


async def send_access_code_email(**kwargs) -> bool:
    return await send_email(build_access_code_email(**kwargs))
