"""
Package logger for quote-deployments.

Progress goes to stderr at INFO so that stdout carries only the command text
and summaries printed by the CLI. Records do not propagate to the root logger,
which would otherwise print them a second time once an application configures
logging.
"""

import logging

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
logger.addHandler(logging.StreamHandler())
logger.propagate = False
