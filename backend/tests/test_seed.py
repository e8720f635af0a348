"""Seed commands create demo data once and leave existing rows alone."""
from conftest import run
from sqlalchemy import func, select
from typer.testing import CliRunner

from talencor.database.connection import transaction
from talencor.database.seed import (
    DEMO_CLIENTS,
    QUESTION_CATEGORIES,
    QUESTION_TAGS,
    SAMPLE_QUESTIONS,
    app,
    seed_question_bank,
)
from talencor.models import Client, DynamicLink, InterviewQuestion
from talencor.services.link_updater import WHMIS_CURRENT_URL, WHMIS_KEY

runner = CliRunner()


def _count(model):
    async def _load():
        async with transaction() as db:
            return (await db.execute(select(func.count()).select_from(model))).scalar_one()

    return run(_load())


def test_admin_command_creates_login(client):
    result = runner.invoke(app, ["admin", "--username", "boss", "--password", "S3cretPass!"])
    assert result.exit_code == 0
    assert "Admin user created: boss" in result.output

    resp = client.post("/api/admin/login", json={"username": "boss", "password": "S3cretPass!"})
    assert resp.status_code == 200

    again = runner.invoke(app, ["admin", "--username", "boss", "--password", "other"])
    assert again.exit_code == 0
    assert "already exists" in again.output


def test_admin_command_generates_password():
    result = runner.invoke(app, ["admin"])
    assert result.exit_code == 0
    assert "Password: " in result.output


def test_clients_command_is_idempotent(client):
    first = runner.invoke(app, ["clients"])
    assert first.exit_code == 0
    assert f"Created {len(DEMO_CLIENTS)} demo clients" in first.output
    # codes are masked in output
    assert "ACME2025" not in first.output
    assert "ACM***" in first.output

    assert "Created 0 demo clients" in runner.invoke(app, ["clients"]).output
    assert _count(Client) == len(DEMO_CLIENTS)
    assert client.post("/api/client/login", json={"access_code": "TECH2025"}).status_code == 200


def test_question_bank_command(client):
    result = runner.invoke(app, ["question-bank"])
    assert result.exit_code == 0
    assert (
        f"Created {len(QUESTION_CATEGORIES)} categories, {len(QUESTION_TAGS)} tags, "
        f"{len(SAMPLE_QUESTIONS)} questions"
    ) in result.output

    questions = client.get("/api/question-bank/questions", params={"search": "difficult team member"}).json()
    assert len(questions) == 1
    assert questions[0]["category"]["name"] == "Behavioral"
    assert [t["name"] for t in questions[0]["tags"]] == ["Conflict Resolution", "Teamwork"]
    assert questions[0]["created_by"] == "system"


def test_question_bank_seed_skips_existing():
    async def _seed():
        async with transaction() as db:
            return await seed_question_bank(db)

    run(_seed())
    assert run(_seed()) == {"categories": 0, "tags": 0, "questions": 0}
    assert _count(InterviewQuestion) == len(SAMPLE_QUESTIONS)


def test_whmis_link_command(client):
    result = runner.invoke(app, ["whmis-link"])
    assert result.exit_code == 0
    link = client.get(f"/api/dynamic-links/{WHMIS_KEY}").json()["link"]
    assert link["url"] == WHMIS_CURRENT_URL
    assert _count(DynamicLink) == 1


def test_all_command():
    result = runner.invoke(app, ["all", "--username", "owner", "--password", "OwnerPass1!"])
    assert result.exit_code == 0
    assert "Admin user created: owner" in result.output
    assert "WHMIS link set to" in result.output
    assert _count(Client) == len(DEMO_CLIENTS)


def test_no_command_shows_help():
    result = runner.invoke(app, [])
    assert result.exit_code == 0
    assert "question-bank" in result.output
