#!/usr/bin/env python3
"""
Create the public product image bucket in Supabase Storage.

Usage:
    SUPABASE_URL=... SUPABASE_SERVICE_ROLE_KEY=... python scripts/setup_storage.py
"""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from octamart import config
from octamart.db import get_supabase
from octamart.services.storage import ImageStorage


async def main() -> int:
    client = await get_supabase()
    storage = ImageStorage(client)

    print(f"Checking bucket '{storage.bucket}'...")
    try:
        created = await storage.ensure_bucket()
    except Exception as e:
        print(f"❌ Failed to set up storage: {e}")
        return 1

    if created:
        print(f"✅ Bucket '{storage.bucket}' created (public)")
    else:
        print(f"✅ Bucket '{storage.bucket}' already exists")
    print(f"   Allowed types: {', '.join(config.ALLOWED_IMAGE_TYPES)}")
    print(f"   Max size: {config.MAX_UPLOAD_SIZE // (1024 * 1024)}MB")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
