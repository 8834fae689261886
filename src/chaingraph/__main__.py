"""Entry point for chaingraph."""

import sys

from pydantic import ValidationError

from chaingraph.app import ChainGraphApp
from chaingraph.config import Settings, configure_logging


def main() -> None:
    """Run the chaingraph application.

    An optional first argument names a domain to query on start.
    """
    try:
        settings = Settings()
    except ValidationError as e:
        sys.exit(f"Invalid CHAINGRAPH_* settings:\n{e}")
    configure_logging(settings.log_level)
    domain = sys.argv[1] if len(sys.argv) > 1 else None
    app = ChainGraphApp(settings, initial_domain=domain)
    app.run()


if __name__ == "__main__":
    main()
