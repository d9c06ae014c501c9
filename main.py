#!/usr/bin/env python3
"""Docker volume backup - archive every volume, upload, notify.

Runs once per invocation; schedule it with cron, a systemd timer or a
container restart policy.

Examples:
    # Get help
    python -m main --help

    # One backup run
    python -m main run

    # What would be archived
    python -m main volumes

    # Check the environment
    python -m main config show
"""

from cli.main import cli

if __name__ == '__main__':
    cli()
