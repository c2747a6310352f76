"""Capaz CLI.

Commands:
- init: Initialize database schema
- create-org: Create an organization in the tenant tree
- create-admin: Create an admin user in an organization
- seed-templates: Load the shared MSP template skill catalog
- seed-demo: Create the demo organizations and admin accounts
- stats: Show organization statistics
- serve: Run the API server
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy import func, select

from capaz.catalog.repository import seed_templates
from capaz.config import get_config
from capaz.core.errors import CapazError
from capaz.db.connection import close_db, get_session, init_db
from capaz.db.models import AssessmentModel, SkillCategoryModel, SkillModel, UserModel
from capaz.models import OrganizationType, Role
from capaz.organizations.service import create_organization, get_organization_by_slug
from capaz.users.service import create_user, get_user_by_email

app = typer.Typer(
    name="capaz",
    help="Capaz - multi-tenant skills assessment",
    no_args_is_help=True,
)

console = Console()


def _run(coro) -> None:
    """Run a coroutine, turning expected failures into a clean CLI error."""

    async def _wrapped():
        try:
            await coro
        finally:
            await close_db()

    try:
        asyncio.run(_wrapped())
    except CapazError as exc:
        console.print(f"[bold red]✗[/bold red] {exc.message}")
        for error in getattr(exc, "errors", []):
            console.print(f"  {error['path']}: {error['message']}")
        raise typer.Exit(code=1) from exc


@app.command()
def init(
    drop: bool = typer.Option(False, "--drop", help="Drop existing tables"),
):
    """Initialize database schema."""
    config = get_config()
    console.print(f"[bold]Initializing database:[/bold] {config.db.url}")

    if drop:
        console.print("[yellow]Dropping existing tables...[/yellow]")
    console.print("[green]Creating tables...[/green]")
    _run(init_db(drop=drop))
    console.print("[bold green]✓[/bold green] Database initialized")


@app.command(name="create-org")
def create_org_cmd(
    name: str = typer.Argument(..., help="Organization display name"),
    slug: str = typer.Argument(..., help="Unique slug used at registration"),
    org_type: OrganizationType = typer.Option(OrganizationType.END_CLIENT, "--type", help="Organization type"),
    parent: str | None = typer.Option(None, "--parent", help="Parent organization slug"),
    description: str | None = typer.Option(None, "--description"),
):
    """Create an organization."""

    async def _create():
        async with get_session() as session:
            parent_id = None
            if parent:
                parent_org = await get_organization_by_slug(session, parent)
                if parent_org is None:
                    raise typer.BadParameter(f"Unknown parent organization: {parent}")
                parent_id = parent_org.id

            organization = await create_organization(
                session, name, slug, org_type, parent_org_id=parent_id, description=description
            )
            console.print(
                f"[bold green]✓[/bold green] Created {organization.type} "
                f"[cyan]{organization.slug}[/cyan] ({organization.id})"
            )

    _run(_create())


@app.command(name="create-admin")
def create_admin_cmd(
    email: str = typer.Argument(..., help="Admin email"),
    org: str = typer.Option(..., "--org", help="Organization slug"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
    first_name: str = typer.Option("Admin", "--first-name"),
    last_name: str = typer.Option("User", "--last-name"),
    role: Role = typer.Option(Role.ORG_ADMIN, "--role", help="ORG_ADMIN or PLATFORM_ADMIN"),
):
    """Create an admin user."""

    async def _create():
        async with get_session() as session:
            organization = await get_organization_by_slug(session, org)
            if organization is None:
                raise typer.BadParameter(f"Unknown organization: {org}")
            if await get_user_by_email(session, email) is not None:
                console.print(f"[yellow]User {email} already exists.[/yellow]")
                return

            user = await create_user(
                session,
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
                organization_id=organization.id,
                role=role,
            )
            console.print(f"[bold green]✓[/bold green] Created {user.role} [cyan]{user.email}[/cyan]")

    _run(_create())


@app.command(name="seed-templates")
def seed_templates_cmd():
    """Load (or refresh) the shared MSP template catalog."""

    async def _seed():
        async with get_session() as session:
            categories, skills = await seed_templates(session)
            console.print(f"[bold green]✓[/bold green] Seeded {categories} categories, {skills} skills")

    _run(_seed())


@app.command(name="seed-demo")
def seed_demo_cmd(
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
):
    """Create capaz-platform, demo-msp and demo-client with their admins."""

    async def _get_or_create(session, name, slug, org_type, parent_id=None, description=None):
        existing = await get_organization_by_slug(session, slug)
        if existing is not None:
            return existing
        return await create_organization(
            session, name, slug, org_type, parent_org_id=parent_id, description=description
        )

    async def _seed():
        async with get_session() as session:
            platform = await _get_or_create(
                session, "Capaz Platform", "capaz-platform", OrganizationType.PLATFORM_OWNER,
                description="Platform owner organization",
            )
            msp = await _get_or_create(
                session, "Demo MSP", "demo-msp", OrganizationType.MSP_RESELLER,
                parent_id=platform.id, description="Demo MSP reseller organization",
            )
            client = await _get_or_create(
                session, "Demo Client", "demo-client", OrganizationType.END_CLIENT,
                parent_id=msp.id, description="Demo end client organization",
            )

            admins = [
                ("admin@capaz.io", "Platform", "Admin", Role.PLATFORM_ADMIN, platform.id),
                ("admin@demo-msp.com", "MSP", "Admin", Role.ORG_ADMIN, msp.id),
            ]
            for email, first, last, role, organization_id in admins:
                if await get_user_by_email(session, email) is None:
                    await create_user(
                        session,
                        email=email,
                        password=password,
                        first_name=first,
                        last_name=last,
                        organization_id=organization_id,
                        role=role,
                    )

            categories, skills = await seed_templates(session)

            table = Table(title="Demo data")
            table.add_column("Item", style="cyan")
            table.add_column("Value", style="green")
            table.add_row("Platform org", platform.slug)
            table.add_row("MSP org", msp.slug)
            table.add_row("Client org", client.slug)
            table.add_row("Admins", ", ".join(a[0] for a in admins))
            table.add_row("Template catalog", f"{categories} categories, {skills} skills")
            console.print(table)

    _run(_seed())


@app.command()
def stats(
    org: str = typer.Option(..., "--org", help="Organization slug"),
):
    """Show organization statistics."""

    async def _stats():
        async with get_session() as session:
            organization = await get_organization_by_slug(session, org)
            if organization is None:
                raise typer.BadParameter(f"Unknown organization: {org}")

            users_count = (
                await session.execute(
                    select(func.count()).select_from(UserModel).where(
                        UserModel.organization_id == organization.id,
                        UserModel.is_active.is_(True),
                    )
                )
            ).scalar_one()

            assessed_count = (
                await session.execute(
                    select(func.count())
                    .select_from(AssessmentModel)
                    .join(UserModel, UserModel.id == AssessmentModel.user_id)
                    .where(
                        UserModel.organization_id == organization.id,
                        AssessmentModel.is_current.is_(True),
                    )
                )
            ).scalar_one()

            categories_count = (
                await session.execute(
                    select(func.count()).select_from(SkillCategoryModel).where(
                        SkillCategoryModel.organization_id == organization.id,
                        SkillCategoryModel.is_active.is_(True),
                    )
                )
            ).scalar_one()

            templates_count = (
                await session.execute(
                    select(func.count())
                    .select_from(SkillModel)
                    .join(SkillCategoryModel, SkillCategoryModel.id == SkillModel.category_id)
                    .where(SkillCategoryModel.is_template.is_(True), SkillModel.is_active.is_(True))
                )
            ).scalar_one()

            table = Table(title=f"Statistics: {organization.name}")
            table.add_column("Metric", style="cyan")
            table.add_column("Count", justify="right", style="green")

            table.add_row("Active users", str(users_count))
            table.add_row("Users with current assessment", str(assessed_count))
            table.add_row("Private categories", str(categories_count))
            table.add_row("Template skills", str(templates_count))

            console.print(table)

    _run(_stats())


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Host to bind"),
    port: int = typer.Option(8000, help="Port to bind"),
    reload: bool = typer.Option(False, help="Enable autoreload (dev only)"),
):
    """Run the API server."""
    import uvicorn

    typer.echo(f"Starting Capaz API on http://{host}:{port}")
    uvicorn.run("capaz.web.app:app", host=host, port=port, reload=reload, workers=1)


if __name__ == "__main__":
    app()
