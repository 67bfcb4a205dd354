"""
Service context for log lines.

Identifies which process wrote a line (``service@env:pid``) so logs from
several workers sharing one inventory store can be told apart.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'ticket-issuance-core')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')
    worker = os.getenv('PYTEST_XDIST_WORKER') or str(os.getpid())
    return f'{service_name}@{deploy_env}:{worker}'
