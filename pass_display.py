#!/usr/bin/env python3
"""
Pass Display
Formats ISS pass windows for the terminal in the observer's local timezone.
"""

from datetime import datetime, timezone

import pytz


def categorize_pass_time(start_time_local):
    """Categorize pass by local time"""
    hour = start_time_local.hour
    if 18 <= hour <= 23:
        return "Evening"
    elif 4 <= hour < 8:
        return "Morning"
    elif 8 <= hour <= 17:
        return "Daytime"
    else:
        return "Night"  # 0-4 hours


def risetime_local(pass_window, local_tz):
    """Convert the pass rise time (epoch seconds, UTC) to local time"""
    start_time_utc = datetime.fromtimestamp(pass_window['risetime'], tz=timezone.utc)
    return start_time_utc.astimezone(local_tz)


def format_pass(pass_window, local_tz=pytz.utc):
    """Render one pass as 'Next pass at <local time> for <n> seconds!'"""
    if 'risetime' not in pass_window or 'duration' not in pass_window:
        # Unknown shape, show what the service sent
        return f"Next pass: {pass_window}"

    start_time_local = risetime_local(pass_window, local_tz)
    start_time_str = start_time_local.strftime('%Y-%m-%d %H:%M:%S %Z')
    return f"Next pass at {start_time_str} for {pass_window['duration']} seconds!"


def print_pass_times(passes, local_tz=pytz.utc):
    """Print passes one per line, tagged with their time of day"""
    if not passes:
        print("No upcoming ISS passes returned for your location.")
        return

    print(f"Upcoming ISS passes ({len(passes)} total):")
    for pass_window in passes:
        line = format_pass(pass_window, local_tz)
        if 'risetime' in pass_window:
            line = f"[{categorize_pass_time(risetime_local(pass_window, local_tz)):>7}] {line}"
        print(line)
