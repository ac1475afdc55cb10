"""Integration tests for gifts, investments and tournament entry fees.

Every coin movement must leave matching ledger lines and a non-negative
balance. Pre-condition: alembic upgrade head
"""

import pytest
from httpx import AsyncClient

from config.settings import settings

pytestmark = pytest.mark.asyncio(loop_scope="session")


async def _coins(client: AsyncClient, headers: dict[str, str]) -> int:
    resp = await client.get("/api/wallet", headers=headers)
    return int(resp.json()["data"]["coins"])


class TestGift:
    async def test_gift_moves_coins_and_writes_ledger(
        self, client: AsyncClient, make_user
    ) -> None:
        alice_id, alice = await make_user("alice")
        bob_id, bob = await make_user("bob")

        resp = await client.post(
            "/api/gifts", json={"receiver_id": bob_id, "amount": 30}, headers=alice
        )

        assert resp.status_code == 201
        gift = resp.json()["data"]
        assert gift["sender_balance"] == settings.STARTING_COINS - 30
        assert await _coins(client, alice) == settings.STARTING_COINS - 30
        assert await _coins(client, bob) == settings.STARTING_COINS + 30

        sent = (await client.get("/api/transactions", headers=alice)).json()["data"]["items"]
        received = (await client.get("/api/transactions", headers=bob)).json()["data"]["items"]
        assert sent[0]["type"] == "gift_sent"
        assert sent[0]["amount"] == -30
        assert sent[0]["reference_id"] == gift["gift_id"]
        assert received[0]["type"] == "gift_received"
        assert received[0]["amount"] == 30

        notes = (await client.get("/api/notifications", headers=bob)).json()["data"]
        assert any(n["type"] == "gift" for n in notes["items"])

    async def test_overdraft_rejected_without_side_effects(
        self, client: AsyncClient, make_user
    ) -> None:
        _, alice = await make_user("poor")
        bob_id, bob = await make_user("rich")

        resp = await client.post(
            "/api/gifts",
            json={"receiver_id": bob_id, "amount": settings.STARTING_COINS + 1},
            headers=alice,
        )

        assert resp.status_code == 400
        assert resp.json()["code"] == 2001
        assert await _coins(client, alice) == settings.STARTING_COINS
        assert await _coins(client, bob) == settings.STARTING_COINS
        ledger = (await client.get("/api/transactions", headers=alice)).json()["data"]
        assert ledger["items"] == []

    async def test_unknown_receiver(self, client: AsyncClient, make_user) -> None:
        _, alice = await make_user("lonely")

        resp = await client.post(
            "/api/gifts", json={"receiver_id": "no-such-user", "amount": 5}, headers=alice
        )

        assert resp.status_code == 404
        assert await _coins(client, alice) == settings.STARTING_COINS


class TestInvestment:
    async def test_invest_then_withdraw(self, client: AsyncClient, make_user) -> None:
        _, alice = await make_user("inv")
        target_id, _ = await make_user("star")

        created = await client.post(
            "/api/investments",
            json={
                "target_type": "user",
                "target_id": target_id,
                "target_name": "Star",
                "amount": 50,
            },
            headers=alice,
        )
        assert created.status_code == 201
        inv = created.json()["data"]
        assert await _coins(client, alice) == settings.STARTING_COINS - 50

        withdrawn = await client.post(f"/api/investments/{inv['id']}/withdraw", headers=alice)
        assert withdrawn.status_code == 200
        payout = withdrawn.json()["data"]["payout"]
        assert payout == 50 * (100 + inv["return_rate"]) // 100
        assert await _coins(client, alice) == settings.STARTING_COINS - 50 + payout

        again = await client.post(f"/api/investments/{inv['id']}/withdraw", headers=alice)
        assert again.status_code == 400
        assert again.json()["code"] == 5002


class TestTournament:
    async def test_join_charges_fee_and_leave_does_not_refund(
        self, client: AsyncClient, make_user
    ) -> None:
        _, host = await make_user("host")
        _, player = await make_user("player")
        created = await client.post(
            "/api/tournaments",
            json={"title": "Integration Cup", "entry_fee": 20, "max_players": 2},
            headers=host,
        )
        tid = created.json()["data"]["id"]

        joined = await client.post(f"/api/tournaments/{tid}/join", headers=player)
        assert joined.status_code == 200
        data = joined.json()["data"]
        assert data["entry_fee_paid"] == 20
        assert data["tournament"]["current_players"] == 1
        assert data["tournament"]["prize_pool"] == 20

        twice = await client.post(f"/api/tournaments/{tid}/join", headers=player)
        assert twice.json()["code"] == 6002

        left = await client.post(f"/api/tournaments/{tid}/leave", headers=player)
        assert left.status_code == 200
        assert left.json()["data"]["tournament"]["current_players"] == 0
        assert left.json()["data"]["tournament"]["prize_pool"] == 20
        assert await _coins(client, player) == settings.STARTING_COINS - 20
