"""
Register the Telegram webhook

Points the bot at this service's webhook endpoint, using
TELEGRAM_WEBHOOK_SECRET as the secret token when it is set.

Usage: python scripts/set_webhook.py https://bot.example.com
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from app.core.config import settings
from app.services.telegram_service import TelegramService


async def main(public_url: str) -> bool:
    service = TelegramService()

    print("=" * 60)
    print("  Telegram Webhook Setup")
    print("=" * 60 + "\n")

    if not service.is_configured():
        print("❌ TELEGRAM_BOT_TOKEN is not set in .env file")
        return False

    url = f"{public_url.rstrip('/')}{settings.API_PREFIX}/telegram/webhook"
    print(f"Webhook URL: {url}")
    print(f"Secret token: {'✅ Set' if settings.TELEGRAM_WEBHOOK_SECRET else '⚠️ Not set'}\n")

    result = await service.set_webhook(url, settings.TELEGRAM_WEBHOOK_SECRET)
    if result["success"]:
        print("✅ Webhook registered")
    else:
        print(f"❌ Failed: {result['error']}")
    return result["success"]


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)

    ok = asyncio.run(main(sys.argv[1]))
    sys.exit(0 if ok else 1)
