import asyncio

from postgrest_builder import Client


async def main() -> None:
    async with Client("http://localhost:3000") as client:
        response = await client.from_("todos").select("*").execute()
        print(response.text())


if __name__ == "__main__":
    asyncio.run(main())
