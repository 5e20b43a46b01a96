# scripts/check_db.py
import sys
from pathlib import Path
from sqlalchemy import text

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio
from audit_trail.config.settings import get_settings
from audit_trail.infrastructure.database.session import create_engine_from_settings

async def check_connection():
    engine = create_engine_from_settings(get_settings())
    async with engine.begin() as conn:
        result = await conn.execute(text("SELECT 1"))
        print("DB Connected:", result.scalar())
    await engine.dispose()

asyncio.run(check_connection())
