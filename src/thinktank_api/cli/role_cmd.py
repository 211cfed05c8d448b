"""Role management CLI commands.

These act with the backend service key, which bypasses row-level security,
so they work before any admin exists.
"""

import asyncio

import typer

from thinktank_api.core.errors import NotFoundError, RemoteError, ValidationError
from thinktank_api.lib.backend.client import DataStoreClient
from thinktank_api.models.role import Role
from thinktank_api.schemas.role import RoleAssignmentFailed

roles_app = typer.Typer()


def _service_store() -> DataStoreClient:
    from thinktank_api.core.config import get_settings

    settings = get_settings()
    if not settings.backend_service_key:
        typer.echo("Error: BACKEND_SERVICE_KEY is not set", err=True)
        raise typer.Exit(code=1)
    return DataStoreClient.create(settings.backend_url, settings.backend_service_key, settings.backend_timeout)


@roles_app.command("list")
def list_roles() -> None:
    """List all role assignments."""
    asyncio.run(_list_roles())


async def _list_roles() -> None:
    """Async implementation of role listing."""
    from thinktank_api.services.role_service import list_user_roles

    store = _service_store()
    try:
        rows = await list_user_roles(store)
        typer.echo(f"{'Role ID':<38} {'User ID':<38} {'Role':<10}")
        typer.echo("-" * 86)
        for row in rows:
            typer.echo(f"{row['id']!s:<38} {row['user_id']!s:<38} {row['role']:<10}")
        typer.echo(f"\nTotal: {len(rows)}")
    except RemoteError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1) from e
    finally:
        await store.close()


@roles_app.command("assign")
def assign_role(
    email: str = typer.Option(..., prompt=True, help="Email of the account"),
    role: Role = typer.Option(Role.USER, prompt=True, help="Role (admin/moderator/user)"),
    actor: str = typer.Option(..., "--actor", help="Identity ID recorded as the actor in the audit log"),
) -> None:
    """Assign a role to the account registered under an email."""
    asyncio.run(_assign_role(email, role, actor))


async def _assign_role(email: str, role: Role, actor: str) -> None:
    """Async implementation of role assignment."""
    from thinktank_api.services.role_service import assign_role

    store = _service_store()
    try:
        result = await assign_role(store, email, role, actor_id=actor)
        if isinstance(result, RoleAssignmentFailed):
            typer.echo(f"Error: {result.message}", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"Role '{role}' {result.action} for {email}")
    except (ValidationError, RemoteError) as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1) from e
    finally:
        await store.close()


@roles_app.command("remove")
def remove_role(
    role_id: str = typer.Argument(..., help="ID of the role assignment to remove"),
    actor: str = typer.Option(..., "--actor", help="Identity ID recorded as the actor in the audit log"),
) -> None:
    """Remove one role assignment."""
    asyncio.run(_remove_role(role_id, actor))


async def _remove_role(role_id: str, actor: str) -> None:
    """Async implementation of role removal."""
    from thinktank_api.services.role_service import remove_role

    store = _service_store()
    try:
        await remove_role(store, role_id, actor_id=actor)
        typer.echo(f"Role assignment {role_id} removed")
    except NotFoundError as e:
        typer.echo(f"Role assignment {role_id} not found", err=True)
        raise typer.Exit(code=1) from e
    except RemoteError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1) from e
    finally:
        await store.close()
