"""Reference string generation"""

import time
import uuid


def random_suffix(length: int) -> str:
    """Upper-case hex characters from a fresh UUID4"""
    return uuid.uuid4().hex[:length].upper()


def generate_reference(prefix: str = "TXN", suffix_length: int = 4) -> str:
    """Prefix + epoch millis + random hex, e.g. TXN1718030400123A9F2"""
    return f"{prefix}{int(time.time() * 1000)}{random_suffix(suffix_length)}"
