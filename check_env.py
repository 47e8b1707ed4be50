#!/usr/bin/env python3
"""Helper script to check and create the .env file for Supabase and WhatsApp."""

from pathlib import Path
import os
import sys

TEMPLATE = """# Supabase Configuration (Required)
# Get these from: https://supabase.com/dashboard -> Your Project -> Settings -> API
DAIRY_SUPABASE_URL=https://your-project-id.supabase.co
DAIRY_SUPABASE_KEY=your-service-role-key-here

# API Configuration
DAIRY_API_PREFIX=/api
DAIRY_LOG_LEVEL=INFO
# DAIRY_FRONTEND_ALLOWED_ORIGINS - JSON array or comma-separated list

# Calendar and scheduling
DAIRY_TIMEZONE=Asia/Kolkata
DAIRY_SCHEDULER_ENABLED=true
DAIRY_DAILY_ORDER_TIME=03:00
DAIRY_LOOKAHEAD_ORDER_TIME=09:00

# Delivery sheets
DAIRY_DATA_ROOT=./data

# WhatsApp Cloud API (Optional - leave empty to disable notifications)
DAIRY_WHATSAPP_PHONE_NUMBER_ID=
DAIRY_WHATSAPP_ACCESS_TOKEN=
"""

SECRET_KEYS = ("DAIRY_SUPABASE_KEY", "DAIRY_WHATSAPP_ACCESS_TOKEN")


def _mask(line: str) -> str:
    name, _, value = line.partition("=")
    value = value.strip()
    if name.strip() in SECRET_KEYS and len(value) > 20:
        return f"{name}={value[:12]}...{value[-6:]}"
    return line


def main():
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Dairy Delivery Environment Checker")
    print("=" * 60)
    print()

    if not env_file.exists():
        env_file.write_text(TEMPLATE, encoding="utf-8")
        print(f"Created template .env file at: {env_file}")
        print("Please edit .env and add your Supabase credentials.")
        return

    print(f"Found .env file at: {env_file}")
    print("-" * 60)
    for line in env_file.read_text(encoding="utf-8").splitlines():
        print(_mask(line))
    print("-" * 60)
    print()

    for name in ("DAIRY_SUPABASE_URL", "DAIRY_SUPABASE_KEY"):
        status = "set" if os.getenv(name) else "not set"
        print(f"{name} in environment: {status}")
    print()

    sys.path.insert(0, str(project_root / "src"))
    try:
        from dairyops.config import settings
    except Exception as e:
        print(f"Error loading config: {e}")
        return

    supabase_ready = bool(settings.supabase_url and settings.supabase_key)
    print(f"Supabase configured: {'yes' if supabase_ready else 'NO'}")
    print(f"WhatsApp configured: {'yes' if settings.whatsapp_configured else 'no (notifications disabled)'}")
    print(f"Business timezone:   {settings.timezone}")
    print(f"Scheduler:           {'on' if settings.scheduler_enabled else 'off'} "
          f"({settings.daily_order_time} today, {settings.lookahead_order_time} tomorrow)")
    if not supabase_ready:
        print()
        print("Troubleshooting:")
        print("1. Make sure .env file exists in project root")
        print("2. Make sure variables start with DAIRY_ prefix")
        print("3. Restart the backend after editing .env")


if __name__ == "__main__":
    main()
