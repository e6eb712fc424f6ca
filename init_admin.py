"""
Initialise the administrator account.
Creates the default super administrator used for the first login.
"""
import asyncio
from sqlalchemy import select

from uniscape.core.container import get_container
from uniscape.db.models import Account
from uniscape.infrastructure.database import get_session, init_db
from uniscape.modules.accounts import AccountCreateInput, AccountService


async def create_default_admin():
    """Create the default administrator when none exists."""
    await init_db()
    container = get_container()

    async for db in get_session():
        stmt = select(Account).where(Account.role.in_(["admin", "super_admin"])).limit(1)
        result = await db.execute(stmt)
        existing_admin = result.scalar_one_or_none()

        if existing_admin:
            print("An administrator account already exists, nothing to do")
            return

        service = AccountService.with_session(db, container)
        await service.register(
            AccountCreateInput(
                username="admin",
                password="admin123",
                role="super_admin",
                name="Administrator",
                email=container.settings.notifications.admin_email,
                is_active=True,
            )
        )

        print("=" * 50)
        print("Default administrator created!")
        print("=" * 50)
        print("Username: admin")
        print("Password: admin123")
        print("=" * 50)
        print("Change the password right after logging in!")
        print("=" * 50)

    await container.notifier.drain()


if __name__ == "__main__":
    asyncio.run(create_default_admin())
