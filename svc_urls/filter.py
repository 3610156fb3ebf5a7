# svc_urls/filter.py
import re
from typing import Iterable, List, Optional, Union

from svc_urls.errors import InvalidPatternError
from svc_urls.models import Service


def compile_pattern(pattern: Optional[str]) -> Optional[re.Pattern]:
    """
    Compile a service-name filter.
    None or "" means no filtering.
    """
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(f"invalid filter pattern {pattern!r}: {e}") from e


def select(
    services: Iterable[Service],
    pattern: Union[str, re.Pattern, None] = None,
) -> List[Service]:
    """
    Keep services whose name matches anywhere (re.search, case-sensitive).
    Input order is preserved.
    """
    if isinstance(pattern, str) or pattern is None:
        pattern = compile_pattern(pattern)
    if pattern is None:
        return list(services)
    return [s for s in services if pattern.search(s.name)]
