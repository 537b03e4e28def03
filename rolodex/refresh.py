"""
CLI entrypoint to run one role/allow-list refresh cycle and report the result, e.g. as a
deployment smoke check that the accounts and config tables are readable:

  python -m rolodex.refresh

Exits 1 if either source failed to load.
"""

import logging
import sys

from rolodex.core.config import get_settings
from rolodex.core.database import SessionLocal
from rolodex.core.dependencies import build_account_services
from rolodex.services.refresh_scheduler import run_refresh_cycle

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Refresh once; log snapshot size and allow-list size."""
    services = build_account_services(get_settings(), SessionLocal)
    result = run_refresh_cycle(services.roles, services.allow_list)
    snapshot = services.roles.current
    allow_list = services.allow_list.current
    logger.info(
        "Refresh completed: roles_ok=%s accounts=%s allow_list_ok=%s handlers=%s",
        result.roles_ok,
        len(snapshot) if snapshot is not None else None,
        result.allow_list_ok,
        len(allow_list) if allow_list is not None else None,
    )
    return 0 if result.roles_ok and result.allow_list_ok else 1


if __name__ == "__main__":
    sys.exit(main())
