"""
Seed data for local and fresh deployments.

    python -m talencor.database.seed admin --username admin
    python -m talencor.database.seed clients
    python -m talencor.database.seed question-bank
    python -m talencor.database.seed whmis-link
    python -m talencor.database.seed all

Every command is safe to re-run: existing rows are left alone.
"""
import asyncio
import secrets
from typing import Any, Optional

import typer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from talencor.database.connection import close_db, init_db, transaction
from talencor.models import Client, InterviewQuestion, QuestionCategory, QuestionTag, User
from talencor.services.link_updater import WHMIS_CURRENT_URL, WHMIS_KEY, upsert_link
from talencor.utils.logger import get_logger, setup_logging
from talencor.utils.security import hash_password, mask_access_code

logger = get_logger(__name__)

app = typer.Typer(
    add_completion=False,
    help="Seed the Talencor database",
    invoke_without_command=True,
)

DEMO_CLIENTS = [
    {
        "company_name": "Acme Corporation",
        "contact_name": "John Smith",
        "email": "john.smith@acme.com",
        "phone": "416-555-0001",
        "access_code": "ACME2025",
    },
    {
        "company_name": "Tech Startup Inc",
        "contact_name": "Sarah Johnson",
        "email": "sarah@techstartup.com",
        "phone": "647-555-0002",
        "access_code": "TECH2025",
    },
    {
        "company_name": "Global Corp",
        "contact_name": "Michael Chen",
        "email": "mchen@globalcorp.com",
        "phone": "905-555-0003",
        "access_code": "GLOB2025",
    },
]

QUESTION_CATEGORIES = [
    ("General", "Common interview questions applicable to most positions"),
    ("Behavioral", "Questions about past experiences and behavior patterns"),
    ("Technical", "Role-specific technical questions and problem-solving scenarios"),
    ("Leadership", "Questions focused on management and leadership capabilities"),
    ("Customer Service", "Questions specific to customer-facing roles"),
]

QUESTION_TAGS = [
    ("Communication", "#3B82F6"),
    ("Problem Solving", "#10B981"),
    ("Leadership", "#8B5CF6"),
    ("Teamwork", "#F59E0B"),
    ("Adaptability", "#EF4444"),
    ("Time Management", "#6366F1"),
    ("Conflict Resolution", "#EC4899"),
    ("Decision Making", "#14B8A6"),
]

SAMPLE_QUESTIONS: list[dict[str, Any]] = [
    {
        "category": "General",
        "question": "Tell me about yourself and why you're interested in this position.",
        "difficulty": "entry",
        "tags": ["Communication"],
        "tips": [
            "Keep your answer focused on professional experiences",
            "Connect your background to the specific role",
            "Practice a 2-3 minute elevator pitch",
        ],
        "expected_elements": [
            "Professional background summary",
            "Relevant skills and experiences",
            "Interest in the role and company",
            "Career goals alignment",
        ],
    },
    {
        "category": "Behavioral",
        "question": "Describe a time when you had to work with a difficult team member. How did you handle the situation?",
        "difficulty": "mid",
        "tags": ["Teamwork", "Conflict Resolution"],
        "tips": [
            "Use the STAR method (Situation, Task, Action, Result)",
            "Focus on your actions and communication skills",
            "Show emotional intelligence and professionalism",
        ],
        "expected_elements": [
            "Clear situation description",
            "Your specific role and responsibilities",
            "Actions taken to address the difficulty",
            "Positive outcome or lessons learned",
        ],
    },
    {
        "category": "Leadership",
        "question": "How do you handle underperforming team members?",
        "difficulty": "senior",
        "tags": ["Leadership", "Communication"],
        "tips": [
            "Emphasize coaching and development approach",
            "Mention documentation and formal processes",
            "Show balance between support and accountability",
        ],
        "expected_elements": [
            "Initial assessment and understanding",
            "Clear communication of expectations",
            "Support and development plan",
            "Progress monitoring and follow-up",
        ],
    },
    {
        "category": "Technical",
        "question": "Walk me through how you would approach solving a complex problem you've never encountered before.",
        "difficulty": "senior",
        "tags": ["Problem Solving", "Decision Making"],
        "tips": [
            "Demonstrate systematic problem-solving approach",
            "Show research and learning capabilities",
            "Mention collaboration and seeking help when needed",
        ],
        "expected_elements": [
            "Problem analysis and breakdown",
            "Research and information gathering",
            "Hypothesis formation and testing",
            "Implementation and validation",
        ],
    },
    {
        "category": "Customer Service",
        "question": "How would you handle an angry customer who feels their issue hasn't been resolved?",
        "difficulty": "mid",
        "tags": ["Communication", "Conflict Resolution"],
        "tips": [
            "Emphasize active listening and empathy",
            "Show de-escalation techniques",
            "Focus on solution-oriented approach",
        ],
        "expected_elements": [
            "Active listening and acknowledgment",
            "Empathy and understanding",
            "Clear action plan for resolution",
            "Follow-up and relationship repair",
        ],
    },
    {
        "category": "General",
        "question": "What are your greatest strengths and how do they apply to this role?",
        "difficulty": "entry",
        "tags": ["Communication"],
        "tips": [
            "Choose strengths relevant to the job requirements",
            "Provide specific examples to support your claims",
            "Show how these strengths benefit the employer",
        ],
        "expected_elements": [
            "2-3 relevant strengths",
            "Specific examples or evidence",
            "Connection to job requirements",
            "Value proposition for the employer",
        ],
    },
    {
        "category": "Behavioral",
        "question": "Tell me about a time when you had to learn something completely new quickly. How did you approach it?",
        "difficulty": "mid",
        "tags": ["Adaptability", "Time Management"],
        "tips": [
            "Show your learning methodology and adaptability",
            "Demonstrate resourcefulness and initiative",
            "Highlight successful application of new knowledge",
        ],
        "expected_elements": [
            "Context of the learning need",
            "Specific learning strategies used",
            "Resources and support sought",
            "Successful application and results",
        ],
    },
    {
        "category": "Leadership",
        "question": "Describe your leadership style and give an example of how you've motivated a team during a challenging project.",
        "difficulty": "executive",
        "tags": ["Leadership", "Teamwork"],
        "tips": [
            "Articulate your leadership philosophy clearly",
            "Provide concrete examples of motivational techniques",
            "Show results and team feedback",
        ],
        "expected_elements": [
            "Clear leadership style description",
            "Specific challenging situation",
            "Motivational strategies employed",
            "Team response and project outcomes",
        ],
    },
]


async def seed_admin(db: AsyncSession, username: str, password: str) -> User | None:
    """Create the admin account. Returns None when the username is already taken."""
    result = await db.execute(select(User).where(User.username == username))
    if result.scalar_one_or_none():
        logger.info("Admin user already exists", extra={"username": username})
        return None
    user = User(username=username, password_hash=hash_password(password), is_admin=True)
    db.add(user)
    await db.flush()
    logger.info("Admin user created", extra={"user_id": user.id})
    return user


async def seed_clients(db: AsyncSession) -> list[Client]:
    """Demo clients with fixed, non-expiring codes. Existing company names are skipped."""
    result = await db.execute(select(Client.company_name))
    existing = set(result.scalars().all())
    created = []
    for data in DEMO_CLIENTS:
        if data["company_name"] in existing:
            continue
        client = Client(**data, is_active=True)
        db.add(client)
        created.append(client)
    await db.flush()
    for client in created:
        logger.info(
            "Demo client created",
            extra={"company": client.company_name, "code": mask_access_code(client.access_code)},
        )
    return created


async def seed_question_bank(db: AsyncSession) -> dict[str, int]:
    """Categories, tags and sample questions, each matched by name/text."""
    result = await db.execute(select(QuestionCategory))
    categories = {c.name: c for c in result.scalars().all()}
    result = await db.execute(select(QuestionTag))
    tags = {t.name: t for t in result.scalars().all()}
    result = await db.execute(select(InterviewQuestion.question))
    existing_questions = set(result.scalars().all())

    counts = {"categories": 0, "tags": 0, "questions": 0}
    for name, description in QUESTION_CATEGORIES:
        if name not in categories:
            categories[name] = QuestionCategory(name=name, description=description)
            db.add(categories[name])
            counts["categories"] += 1
    for name, color in QUESTION_TAGS:
        if name not in tags:
            tags[name] = QuestionTag(name=name, color=color)
            db.add(tags[name])
            counts["tags"] += 1
    await db.flush()

    for item in SAMPLE_QUESTIONS:
        if item["question"] in existing_questions:
            continue
        db.add(
            InterviewQuestion(
                question=item["question"],
                category_id=categories[item["category"]].id,
                difficulty=item["difficulty"],
                tips=item["tips"],
                expected_elements=item["expected_elements"],
                is_public=True,
                created_by="system",
                tags=[tags[name] for name in item["tags"]],
            )
        )
        counts["questions"] += 1
    await db.flush()
    logger.info("Question bank seeded", extra=counts)
    return counts


async def seed_whmis_link(db: AsyncSession) -> None:
    await upsert_link(
        db,
        WHMIS_KEY,
        WHMIS_CURRENT_URL,
        description="WHMIS Training - Free online training link",
        force_touch=True,
    )


async def _run(step) -> Any:
    setup_logging()
    await init_db()
    try:
        async with transaction() as db:
            return await step(db)
    finally:
        await close_db()


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("admin")
def admin_command(
    username: str = typer.Option("admin", "--username", "-u", help="Admin username"),
    password: Optional[str] = typer.Option(
        None, "--password", "-p", help="Admin password (generated when omitted)"
    ),
):
    """Create the first admin account."""
    password = password or secrets.token_urlsafe(12)
    user = asyncio.run(_run(lambda db: seed_admin(db, username, password)))
    if user is None:
        typer.echo(f"Admin user '{username}' already exists")
        return
    typer.echo(f"Admin user created: {username}")
    typer.echo(f"Password: {password}")
    typer.echo("Change this password after first login.")


@app.command("clients")
def clients_command():
    """Create the three demo clients."""
    created = asyncio.run(_run(seed_clients))
    typer.echo(f"Created {len(created)} demo clients")
    for client in created:
        typer.echo(f"  - {client.company_name} (code: {mask_access_code(client.access_code)})")


@app.command("question-bank")
def question_bank_command():
    """Create sample categories, tags and interview questions."""
    counts = asyncio.run(_run(seed_question_bank))
    typer.echo(
        f"Created {counts['categories']} categories, {counts['tags']} tags, "
        f"{counts['questions']} questions"
    )


@app.command("whmis-link")
def whmis_link_command():
    """Point the WHMIS training link at the current known course URL."""
    asyncio.run(_run(seed_whmis_link))
    typer.echo(f"WHMIS link set to: {WHMIS_CURRENT_URL}")


@app.command("all")
def all_command(
    username: str = typer.Option("admin", "--username", "-u", help="Admin username"),
    password: Optional[str] = typer.Option(
        None, "--password", "-p", help="Admin password (generated when omitted)"
    ),
):
    """Run every seed step."""
    admin_command(username=username, password=password)
    clients_command()
    question_bank_command()
    whmis_link_command()


if __name__ == "__main__":
    app()
