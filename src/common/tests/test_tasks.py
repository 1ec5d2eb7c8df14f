from django.core import mail

from common.tasks import send_email


def test_send_email_to_a_single_recipient() -> None:
    send_email(to="rider@example.com", subject="Hello", body="Body")

    (message,) = mail.outbox
    assert message.bcc == ["rider@example.com"]
    assert message.to == []
    assert message.subject == "Hello"


def test_send_email_with_html_alternative() -> None:
    send_email(to=["a@example.com", "b@example.com"], subject="Hi", body="Plain", html_body="<p>Rich</p>")

    (message,) = mail.outbox
    assert message.bcc == ["a@example.com", "b@example.com"]
    assert message.alternatives[0][0] == "<p>Rich</p>"
