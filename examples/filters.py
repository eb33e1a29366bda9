import asyncio

from pydantic import BaseModel

from postgrest_builder import Client


class StatusChange(BaseModel):
    status: str


async def main() -> None:
    async with Client("http://localhost:3000").schema("personal") as client:
        users = (
            await client.from_("users")
            .select("username, status")
            .in_("status", ["ONLINE", "OFFLINE"])
            .order_with_options("username", ascending=True)
            .limit(10)
            .execute()
        )
        print(users.status_code, users.text())

        updated = (
            await client.from_("users")
            .eq("username", "supabot")
            .update(StatusChange(status="OFFLINE"))
            .execute()
        )
        print(updated.status_code, updated.json())

        status = await client.rpc("get_status", '{"name_param": "supabot"}').execute()
        print(status.raise_for_status().json())


if __name__ == "__main__":
    asyncio.run(main())
