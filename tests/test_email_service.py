import smtplib

import pytest

from spot2go import email_service
from spot2go.email_service import Mailer


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None, fail_starttls=False):
        self.host = host
        self.port = port
        self.fail_starttls = fail_starttls
        self.calls = []
        FakeSMTP.instances.append(self)

    def starttls(self, context=None):
        self.calls.append("starttls")
        if self.fail_starttls:
            raise smtplib.SMTPNotSupportedError("STARTTLS extension not supported by server.")

    def login(self, username, password):
        self.calls.append("login")

    def sendmail(self, from_addr, to_addrs, msg):
        self.calls.append("sendmail")

    def quit(self):
        self.calls.append("quit")
        if self.fail_starttls:
            raise smtplib.SMTPServerDisconnected("please run connect() first")

    def close(self):
        self.calls.append("close")


@pytest.fixture
def mailer():
    FakeSMTP.instances = []
    return Mailer(host="smtp.test", port=587, username="user", password="pass", resend_api_key=None)


def test_smtp_send_upgrades_logs_in_and_quits(mailer, monkeypatch):
    monkeypatch.setattr(email_service.smtplib, "SMTP", FakeSMTP)

    result = mailer._send_via_smtp(["to@example.com"], "Hello", "<p>hi</p>")

    assert result["success"] is True
    [server] = FakeSMTP.instances
    assert server.calls == ["starttls", "login", "sendmail", "quit"]


def test_failed_starttls_still_closes_the_connection(mailer, monkeypatch):
    monkeypatch.setattr(
        email_service.smtplib, "SMTP", lambda host, port, timeout=None: FakeSMTP(host, port, timeout, fail_starttls=True)
    )

    with pytest.raises(smtplib.SMTPNotSupportedError):
        mailer._send_via_smtp(["to@example.com"], "Hello", "<p>hi</p>")

    [server] = FakeSMTP.instances
    assert server.calls == ["starttls", "quit", "close"]
