import asyncio
import os

from DevCycleClient import User
from DevCycleClient.asynchronous import AsyncDevCycleCloudClient

SDK_KEY = os.environ.get("DEVCYCLE_SERVER_SDK_KEY", "dvc_server_example")


async def main():
    user = User(user_id="example-user")

    async with AsyncDevCycleCloudClient(SDK_KEY) as client:
        theme = await client.variable_value(user, "theme", "light")
        limits = await client.variable_value(user, "rate-limits", {"rps": 10})
        print(f"theme={theme} limits={limits}")


if __name__ == "__main__":
    asyncio.run(main())
