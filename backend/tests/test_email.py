"""Email builders and the Microsoft Graph sender."""
import json
from datetime import date, datetime

import httpx
import pytest
from conftest import run

import talencor.services.email as email_module
from talencor.config import get_settings
from talencor.services.email import (
    EmailMessage,
    build_access_code_email,
    build_internal_job_posting_notification,
    build_job_posting_confirmation,
    send_email,
)


def test_confirmation_for_new_client():
    message = build_job_posting_confirmation(
        contact_name="Maria <b>Lopez</b>",
        email="maria@northwind.ca",
        company_name="Smith & Sons",
        job_title="Picker",
        is_existing_client=False,
    )
    assert message.to == "maria@northwind.ca"
    assert message.subject == "Job Posting Received - Talencor Staffing"
    assert "As a new client" in message.text
    assert "Smith & Sons" in message.text
    assert "Smith &amp; Sons" in message.html
    assert "<b>Lopez</b>" not in message.html
    assert "&lt;b&gt;Lopez&lt;/b&gt;" in message.html


def test_confirmation_for_existing_client():
    message = build_job_posting_confirmation(
        contact_name="John", email="j@acme.com", company_name="Acme", job_title="Driver", is_existing_client=True
    )
    assert "prioritized for immediate processing" in message.text
    assert "#d4edda" in message.html


def test_internal_notification():
    message = build_internal_job_posting_notification(
        posting_id=42,
        contact_name="John",
        email="j@acme.com",
        phone="416-555-0001",
        company_name="Acme",
        job_title="Driver",
        location="Toronto",
        employment_type="temporary",
        is_existing_client=False,
        anticipated_start_date=date(2026, 11, 1),
        job_description="Line one\n<script>alert(1)</script>",
    )
    assert message.to == get_settings().internal_notification_email
    assert message.subject == "New Job Posting: Driver at Acme"
    assert "ID: #42" in message.text
    assert "Client Status: NEW CLIENT" in message.text
    assert "- Start Date: 2026-11-01" in message.text
    assert "Salary Range" not in message.text
    assert "Contact new client within 24 hours" in message.text
    assert "<script>" not in message.html
    assert "Line one<br>&lt;script&gt;" in message.html
    assert "https://www.talencor.com/admin/job-postings" in message.html


def test_access_code_email():
    message = build_access_code_email(
        contact_name="Jane",
        email="jane@newwidgets.com",
        company_name="New Widgets",
        access_code="123456",
        expires_at=datetime(2026, 12, 1),
    )
    assert "Your access code: 123456" in message.text
    assert "valid until December 01, 2026" in message.text
    assert "https://www.talencor.com/client-login" in message.text

    no_expiry = build_access_code_email(
        contact_name="Jane", email="j@x.com", company_name="X", access_code="654321", expires_at=None
    )
    assert "valid until" not in no_expiry.text


def test_send_email_without_credentials_is_skipped():
    assert run(send_email(EmailMessage(to="a@b.com", subject="Hi", text="Hello"))) is True


@pytest.fixture
def graph(monkeypatch):
    """Configure mail and route httpx traffic to a fake Graph/token endpoint."""
    settings = get_settings()
    monkeypatch.setattr(settings, "ms_tenant_id", "tenant")
    monkeypatch.setattr(settings, "ms_client_id", "client")
    monkeypatch.setattr(settings, "ms_client_secret", "secret")
    state = {"requests": [], "send_status": 202}

    def handler(request):
        state["requests"].append(request)
        if request.url.host == "login.microsoftonline.com":
            return httpx.Response(200, json={"access_token": "token-123"})
        return httpx.Response(state["send_status"])

    real_client = httpx.AsyncClient

    def fake_client(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(email_module.httpx, "AsyncClient", fake_client)
    return state


def test_send_email_through_graph(graph):
    ok = run(send_email(EmailMessage(to="a@b.com", subject="Hi", text="Line 1\nLine <2>")))
    assert ok is True

    token_request, send_request = graph["requests"]
    assert token_request.url.path == "/tenant/oauth2/v2.0/token"
    assert send_request.url.path == "/v1.0/users/no-reply@talencor.com/sendMail"
    assert send_request.headers["Authorization"] == "Bearer token-123"
    payload = json.loads(send_request.content)
    assert payload["message"]["toRecipients"] == [{"emailAddress": {"address": "a@b.com"}}]
    assert payload["message"]["body"]["content"] == "<p>Line 1<br>Line &lt;2&gt;</p>"


def test_send_email_graph_failure_is_not_fatal(graph):
    graph["send_status"] = 500
    assert run(send_email(EmailMessage(to="a@b.com", subject="Hi", text="x", html="<p>x</p>"))) is True
    assert len(graph["requests"]) == 2
