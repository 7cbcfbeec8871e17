import os

from slowapi import Limiter
from slowapi.util import get_remote_address

PARSE_RATE_LIMIT = os.getenv("PARSE_RATE_LIMIT", "120/minute")

limiter = Limiter(key_func=get_remote_address)
