"""API test helpers — account, task and checkout shortcuts over the HTTP surface."""

from taskshare.infrastructure.payment_gateway import RazorpaySignatureVerifier

TEST_KEY_ID = "rzp_test_key"
TEST_KEY_SECRET = "rzp-test-secret"
PASSWORD = "correct horse battery"


class RecordingEmailSender:
    """Captures outbound mail so tests can read invite links back."""

    def __init__(self):
        self.outbox: list[dict] = []

    async def send(self, to_address: str, subject: str, html_body: str) -> bool:
        self.outbox.append(
            {"to": to_address, "subject": subject, "html_body": html_body},
        )
        return True


async def register(client, email: str, name: str = "Test User", **extra):
    return await client.post(
        "/api/v1/auth/register",
        json={"name": name, "email": email, "password": PASSWORD, **extra},
    )


async def login_headers(client, email: str) -> dict:
    res = await client.post(
        "/api/v1/auth/login", json={"email": email, "password": PASSWORD},
    )
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


async def signup(client, email: str, name: str = "Test User") -> dict:
    """Register and log in. Returns auth headers."""
    res = await register(client, email, name)
    assert res.status_code == 201, res.text
    return await login_headers(client, email)


async def upgrade(client, headers: dict, order_id: str = "order_test123") -> dict:
    """Complete a verified checkout for the caller."""
    payment_id = "pay_test456"
    signature = RazorpaySignatureVerifier(TEST_KEY_SECRET).expected_signature(
        order_id, payment_id,
    )
    res = await client.post(
        "/api/v1/billing/verify",
        json={
            "razorpay_order_id": order_id,
            "razorpay_payment_id": payment_id,
            "razorpay_signature": signature,
        },
        headers=headers,
    )
    assert res.status_code == 200, res.text
    return res.json()


async def create_task(client, headers: dict, title: str = "Buy milk") -> dict:
    res = await client.post("/api/v1/tasks", json={"title": title}, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()
