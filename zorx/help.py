"""Help screens for the ``zorx help`` command."""

from __future__ import annotations

from rich.panel import Panel

from zorx import __version__
from zorx.console import ConsoleLogger

REPO_URL = "https://github.com/Dannys-notepad/zorx"


def display_general_help(logger: ConsoleLogger) -> None:
    """Print the full usage banner."""
    logger.console.print(
        Panel(
            f"[bold bright_cyan]ZORX CLI[/bold bright_cyan]  v{__version__}\n"
            "A smart CLI tool for rapid project scaffolding and boilerplate code generation",
            border_style="bright_cyan",
        )
    )

    logger.header("USAGE")
    logger.normal("  zorx <command> [options]")

    logger.header("COMMANDS")
    logger.normal("  create <project-name>    Create a new project")
    logger.normal("  help [command]           Show this help message")
    logger.normal("  --version                Show version information")

    logger.header("CREATE OPTIONS")
    _print_create_options(logger)

    logger.header("EXAMPLES")
    logger.normal("  # Basic project creation")
    logger.success("  zorx create my-api")
    logger.normal("  # Project with additional packages")
    logger.success('  zorx create my-api --install "morgan,mongoose"')
    logger.normal("  # Skip installation and use a specific package manager")
    logger.success("  zorx create my-api --skip-install --package-manager pnpm")

    logger.header("QUICK START")
    logger.normal("  1. zorx create my-project")
    logger.normal("  2. cd my-project")
    logger.normal("  3. npm run dev")
    logger.normal("  4. Open http://localhost:3000")

    logger.header("COMING FEATURES")
    _print_reserved_options(logger)

    logger.header("SUPPORT")
    logger.info(f"  GitHub: {REPO_URL}")
    logger.info(f"  Issues: {REPO_URL}/issues")


def display_command_help(logger: ConsoleLogger, command: str) -> None:
    """Print the detailed reference for *command*, or point to general help."""
    if command != "create":
        logger.warn(f"No detailed help available for: {command}")
        logger.info("Run `zorx help` for general usage information.")
        return

    logger.header("CREATE COMMAND")
    logger.info("Create a new project with customizable options.")

    logger.header("ARGUMENTS")
    logger.normal("  project-name             Required. Name of the project directory to create")

    logger.header("OPTIONS")
    _print_create_options(logger)

    logger.header("COMING SOON")
    _print_reserved_options(logger)

    logger.header("EXAMPLES")
    logger.success("  zorx create my-app")
    logger.success("  zorx create my-api --port 8080 --install \"morgan\"")
    logger.success("  zorx create my-project --skip-install --package-manager yarn")


def _print_create_options(logger: ConsoleLogger) -> None:
    logger.normal("  --force                  Override and recreate the directory if it exists")
    logger.normal("  --port <port>            Server port (default: 3000)")
    logger.normal("  --skip-install           Skip dependency installation")
    logger.normal("  --install <packages>     Extra packages (comma separated)")
    logger.normal("  --pm, --package-manager  npm, yarn, pnpm or bun (default: npm)")


def _print_reserved_options(logger: ConsoleLogger) -> None:
    logger.warn("  --ts                     Use TypeScript template (coming soon)")
    logger.warn("  --template <template>    Use a specific project template (coming soon)")
    logger.warn("  --git                    Initialize a git repository (coming soon)")
