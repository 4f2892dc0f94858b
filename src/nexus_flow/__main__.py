"""Allow running as ``python -m nexus_flow``."""

from nexus_flow.cli.main import app

if __name__ == "__main__":
    app()
