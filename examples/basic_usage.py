"""Basic statistics example using the built-in DI container."""

import asyncio

from trippio_stats.core.config import StatsConfig
from trippio_stats.core.container import DIContainer


async def main() -> None:
    config = StatsConfig.from_env()
    async with DIContainer.create_service(config=config) as service:
        snapshot = await service.get_statistics()
        months = await service.get_monthly_stats()

    print("Users:", snapshot.total_users)
    print("Orders:", snapshot.total_orders)
    print("Revenue:", snapshot.total_revenue)
    print("Hotels:", snapshot.total_hotels)
    print("Bookings:", snapshot.total_bookings)
    for month in months:
        print(f"{month.month:02d}: revenue={month.revenue} orders={month.orders}")


if __name__ == "__main__":
    asyncio.run(main())
