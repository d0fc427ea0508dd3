"""
ekstester/utils/host.py

Host inspection helpers: OS family detection and the cloud-CLI precondition.
"""

from __future__ import annotations

import logging
import shutil
import sys
from typing import Optional

from ekstester.config.errors import PreconditionError

logger = logging.getLogger(__name__)

AWS_CLI = "aws"


def host_os(platform: Optional[str] = None) -> str:
    """
    Return the OS family used in download URLs: "darwin" or "linux".

    Args:
        platform: A sys.platform style value. Defaults to the running host.
    """
    plat = sys.platform if platform is None else platform
    return "darwin" if plat.startswith("darwin") else "linux"


def require_aws_cli() -> str:
    """
    Locate the AWS CLI on the search path.

    Returns:
        The absolute path of the 'aws' executable.

    Raises:
        PreconditionError: If 'aws' is not installed.
    """
    path = shutil.which(AWS_CLI)
    if path is None:
        raise PreconditionError(
            f"{AWS_CLI!r} CLI is not installed "
            "(pip3 install awscli --no-cache-dir --upgrade)"
        )
    logger.debug("found %s CLI at %s", AWS_CLI, path)
    return path
