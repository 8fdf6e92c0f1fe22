from datetime import datetime, timedelta
from html import escape
from typing import Sequence

import humanize

from .ledger import PingRecord

PAGE = '''<!DOCTYPE html>
<meta charset="utf-8">
<title>presence canary</title>
<style>
    body {{
        max-width: 960px;
        font-family: sans-serif;
        font-size: 1.25em;
        margin: 0 auto;
    }}
</style>

<h1>presence canary</h1>
<p>known pings (up to {capacity}):</p>
{body}
'''


def humanize_delta(then: datetime, now: datetime) -> str:
    # clock skew can put a record slightly in the future; show it as "now"
    return humanize.naturaltime(max(now - then, timedelta(0)))


def render_entry(ping: PingRecord, now: datetime) -> str:
    iso = ping.timestamp.isoformat()
    ago = humanize_delta(ping.timestamp, now)
    return f'<li>{escape(ping.reason)} - <time datetime="{iso}">{ago}</time></li>'


def render_status_page(records: Sequence[PingRecord], capacity: int, now: datetime) -> str:
    '''Render the public status page. `records` is expected newest first.'''
    if not records:
        body = "<p>No pings recorded yet.</p>"
    else:
        entries = "\n    ".join(render_entry(p, now) for p in records[:capacity])
        body = f"<ol>\n    {entries}\n</ol>"
    return PAGE.format(capacity=capacity, body=body)
