# blogo/cli.py
import typer

from blogo.db import get_session, init_db
from blogo.dependencies import get_blog_service, get_user_service
from blogo.errors import BlogoError
from blogo.services import seeder

app = typer.Typer(help="Blogo CLI with subcommands")


@app.command("init-db")
def init_db_cmd():
    """Create all tables if they don't exist."""
    init_db()
    typer.echo("Database initialized")


@app.command("seed")
def seed_cmd(
    users: int = typer.Option(0, help="Number of random users (0 = sample community)", min=0),
    blogs: int = typer.Option(0, help="Number of random blogs", min=0),
):
    """Populate the database with the sample community or with random data."""
    init_db()
    if users == 0:
        created = seeder.seed_sample_data()
        typer.echo(
            f"Seed complete: users={len(created['users'])}, blogs={len(created['blogs'])}"
        )
        for username, email, _ in seeder.SAMPLE_USERS:
            typer.echo(f"  - Username: {username}, Email: {email}")
        return

    seeder.seed_random_generators()
    with get_session() as db:
        counts = seeder.seed_random_data(db, users, blogs)
    typer.echo(
        "Seed complete: users={users}, blogs={blogs}, follows={follows}, likes={likes}".format(
            **counts
        )
    )


@app.command("user")
def user_cmd(user_id: int = typer.Argument(..., help="ID of the user", min=1)):
    """Show a user profile with follower, following and blog counts."""
    try:
        profile = get_user_service().get_with_stats(user_id)
    except BlogoError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)

    user = profile.user
    typer.echo(f"\n👤 {user.display_name} (@{user.username}, id {user.id})")
    typer.echo("─" * 50)
    typer.echo(f"Email: {user.email}")
    if user.bio:
        typer.echo(f"Bio:   {user.bio}")
    if profile.partial:
        typer.echo("Stats unavailable")
    else:
        stats = profile.stats
        typer.echo(
            f"Followers: {stats.followers_count}  Following: {stats.following_count}  "
            f"Blogs: {stats.blogs_count}"
        )


@app.command("blogs")
def blogs_cmd(
    limit: int = typer.Option(20, "--limit", "-l", help="Number of blogs (1-100)", min=1, max=100),
    offset: int = typer.Option(0, "--offset", "-o", help="Blogs to skip", min=0),
):
    """List the latest blogs."""
    try:
        page = get_blog_service().get_all(limit, offset)
    except BlogoError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)

    if not page:
        typer.echo("No blogs found")
        return

    typer.echo(f"\n📝 Latest {len(page)} blogs:")
    typer.echo("─" * 50)
    for blog in page:
        author = blog.author.username if blog.author else blog.author_id
        typer.echo(f"{blog.id:4d}. {blog.title:<40} by {author} ({blog.likes_count} likes)")


@app.command("serve")
def serve_cmd(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """Run the API server."""
    import uvicorn

    uvicorn.run("blogo.main:app", host=host, port=port, reload=reload, log_level="info")


if __name__ == "__main__":
    app()
