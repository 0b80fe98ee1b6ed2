#!/usr/bin/env python3
"""Launcher script for the AgentOffice server.

Tails the gateway log and serves derived agent state over HTTP. All settings
come from the environment:

- AGENTOFFICE_LOG_PATH: gateway log, strftime placeholders allowed
- AGENTOFFICE_POLL_INTERVAL / AGENTOFFICE_MAX_INACTIVE: seconds
- AGENTOFFICE_AGENTS_FILE: optional YAML agent catalog
- AGENTOFFICE_HOST / AGENTOFFICE_PORT / AGENTOFFICE_LOG_DIR / LOG_LEVEL
"""

import sys
from pathlib import Path

# Add src to Python path
sys.path.insert(0, str(Path(__file__).parent / "src"))


def main():
    """Main entry point."""
    try:
        from agentoffice.server import run
    except ImportError as e:
        print(f"Import error: {e}", file=sys.stderr)
        print("Please ensure dependencies are installed:", file=sys.stderr)
        print("pip install -e .", file=sys.stderr)
        sys.exit(1)

    run()


if __name__ == "__main__":
    main()
