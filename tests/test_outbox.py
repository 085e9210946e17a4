import asyncio

from conftest import create_user

from spot2go.outbox import run_job


class Flaky:
    def __init__(self, failures):
        self.failures = failures
        self.calls = 0

    def __call__(self, *args, **kwargs):
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError("provider unavailable")


def test_job_is_retried_until_it_succeeds():
    job = Flaky(failures=2)
    assert asyncio.run(run_job("email", job, max_attempts=3, retry_delay=0)) is True
    assert job.calls == 3


def test_job_gives_up_after_last_attempt_without_raising():
    job = Flaky(failures=10)
    assert asyncio.run(run_job("email", job, max_attempts=3, retry_delay=0)) is False
    assert job.calls == 3


def test_async_jobs_are_awaited():
    seen = []

    async def job(value, suffix=""):
        seen.append(value + suffix)

    assert asyncio.run(run_job("push", job, "hello", suffix="!", retry_delay=0)) is True
    assert seen == ["hello!"]


def test_failed_side_effect_does_not_fail_the_request(client, db, mailer):
    create_user(db, email="forgot@example.com")

    def broken(*args, **kwargs):
        raise RuntimeError("mail provider down")

    mailer.send_password_reset_email = broken
    response = client.post("/api/auth/request-password-reset", json={"email": "forgot@example.com"})
    assert response.status_code == 200
