"""Compare the newest weekly tag installed locally with the newest one published.

Weekly tags look like ``w_<year>_<week>``. The local side comes from
``eups tags``; the remote side is the HTML index at the first EUPS_PKGROOT
entry, which links one ``w_<year>_<week>.list`` file per published tag.
"""

import logging
import re
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import requests

from stacktools.core.eups.abc import Eups

logger = logging.getLogger(__name__)

_LOCAL_TAG_RE = re.compile(r"w_(\d{4})_(\d+)")
_REMOTE_TAG_RE = re.compile(r">w_(\d{4})_(\d+)\.list<")

REQUEST_TIMEOUT = 30


class StackVersionError(RuntimeError):
    """Raised when the local or remote weekly tag cannot be determined."""


@dataclass(frozen=True, order=True)
class WeeklyTag:
    year: int
    week: int
    name: str = field(compare=False)


@dataclass(frozen=True)
class StackVersions:
    local: WeeklyTag
    remote: WeeklyTag

    @property
    def up_to_date(self) -> bool:
        return self.local >= self.remote


def latest_weekly_tag(text: str, pattern: re.Pattern[str] = _LOCAL_TAG_RE) -> WeeklyTag | None:
    """Pick the newest ``w_<year>_<week>`` tag found in ``text``."""
    tags = [
        WeeklyTag(year=int(m.group(1)), week=int(m.group(2)), name=f"w_{m.group(1)}_{m.group(2)}")
        for m in pattern.finditer(text)
    ]
    if not tags:
        return None
    return max(tags)


def pkgroot_listing_url(pkgroot: str | None) -> str | None:
    """Return the binary listing URL: the first ``|``-separated EUPS_PKGROOT entry."""
    if not pkgroot:
        return None
    first = pkgroot.split("|")[0].strip()
    return first or None


def fetch_listing(url: str) -> str:
    r = requests.get(url, timeout=REQUEST_TIMEOUT)
    if r.status_code >= 400:
        raise StackVersionError(f"Problem fetching pkgroot {url}: {r.status_code}")
    return r.text


def latest_local_tag(eups: Eups) -> WeeklyTag:
    result = eups.list_tags()
    if not result.success:
        raise StackVersionError(f"Problem reading local tags: {result.stderr.strip()}")
    tag = latest_weekly_tag(result.stdout)
    if tag is None:
        raise StackVersionError("No weekly tags installed locally")
    return tag


def latest_remote_tag(url: str, fetch: Callable[[str], str] = fetch_listing) -> WeeklyTag:
    try:
        body = fetch(url)
    except requests.RequestException as e:
        raise StackVersionError(f"Problem fetching pkgroot {url}: {e}") from e
    tag = latest_weekly_tag(body, _REMOTE_TAG_RE)
    if tag is None:
        raise StackVersionError(f"No weekly tags listed at {url}")
    return tag


def check_stack_version(
    eups: Eups,
    pkgroot: str | None,
    fetch: Callable[[str], str] = fetch_listing,
) -> StackVersions:
    """Look up the local and remote weekly tags concurrently.

    Raises:
        StackVersionError: If EUPS_PKGROOT is unset or either lookup fails
    """
    url = pkgroot_listing_url(pkgroot)
    if url is None:
        raise StackVersionError("EUPS_PKGROOT is not set")

    with ThreadPoolExecutor(max_workers=2) as executor:
        local_future = executor.submit(latest_local_tag, eups)
        remote_future = executor.submit(latest_remote_tag, url, fetch)
        local = local_future.result()
        remote = remote_future.result()

    logger.debug("Local tag %s, remote tag %s", local.name, remote.name)
    return StackVersions(local=local, remote=remote)
