"""
JobTracker - Main Entry Point

Usage:
    # Start the API server
    python main.py api

    # Client commands (login, add, list, dashboard, stats, ...)
    python main.py cli dashboard

    # Maintenance
    python main.py users
    python main.py delete-user someone@example.com
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))


def main():
    if len(sys.argv) < 2:
        print_help()
        return

    command = sys.argv[1].lower()

    if command == "api":
        import uvicorn
        from jobtracker.ui.api.config import get_settings

        settings = get_settings()
        uvicorn.run(
            "jobtracker.ui.api.main:app",
            host=settings.host,
            port=settings.port,
            reload=settings.debug,
            log_level=settings.log_level,
        )

    elif command == "cli":
        from jobtracker.ui.cli import app
        sys.argv = sys.argv[1:]  # Remove 'cli' from args
        app()

    elif command in ["users", "delete-user"]:
        from jobtracker.ui.api.manage import app
        app(args=sys.argv[1:])

    elif command in ["help", "-h", "--help"]:
        print_help()

    else:
        print(f"Unknown command: {command}")
        print_help()


def print_help():
    print("""
JobTracker
==========

Commands:
    api                 Start the API server
    cli <command>       Run a client command (see below)
    users               List registered users
    delete-user <email> Delete a user and their applications
    help                Show this help message

Examples:
    python main.py api
    python main.py cli login you@example.com
    python main.py cli add --title "Backend Engineer" --company TechCorp
    python main.py cli dashboard
    python main.py users

For CLI subcommands, run:
    python -m jobtracker.ui.cli --help
""")


if __name__ == "__main__":
    main()
