"""이메일 발송 유틸리티 — SMTP (aiosmtplib).

SMTP 설정은 config.py의 SMTP_* 환경 변수로 관리.
SMTP_USER가 비어 있으면 발송하지 않습니다.
"""

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

import aiosmtplib

from app.config import settings


def is_email_configured() -> bool:
    """SMTP 자격 증명이 설정되어 있는지 여부."""
    return bool(settings.SMTP_USER and settings.SMTP_FROM_EMAIL)


async def send_email(
    to: str,
    subject: str,
    html: str,
    text: str | None = None,
) -> None:
    """이메일 발송.

    Args:
        to: 수신자 이메일 주소
        subject: 제목
        html: HTML 본문
        text: 플레인텍스트 본문 (선택)

    Raises:
        aiosmtplib.SMTPException: SMTP 서버 오류
        OSError: 연결 실패
    """
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>"
    msg["To"] = to

    if text:
        msg.attach(MIMEText(text, "plain", "utf-8"))
    msg.attach(MIMEText(html, "html", "utf-8"))

    await aiosmtplib.send(
        msg,
        hostname=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USER,
        password=settings.SMTP_PASSWORD,
        start_tls=True,
    )


def render_invitation(name: str, email: str, temporary_password: str, store_name: str) -> tuple[str, str]:
    """초대 메일 본문(html, text)을 생성합니다."""
    login_url: str = f"{settings.APP_BASE_URL}/login"
    text: str = (
        f"{name} 님, {store_name}의 ShiftBoard에 초대되었습니다.\n"
        f"Email: {email}\nTemporary password: {temporary_password}\n"
        f"Log in at {login_url} and change your password."
    )
    html: str = (
        f"<p>{escape(name)} 님, <b>{escape(store_name)}</b>의 ShiftBoard에 초대되었습니다.</p>"
        f"<p>Email: {escape(email)}<br>Temporary password: <code>{escape(temporary_password)}</code></p>"
        f'<p><a href="{login_url}">Log in</a> and change your password.</p>'
    )
    return html, text


def render_notification(title: str, message: str, link: str | None) -> tuple[str, str]:
    """알림 메일 본문(html, text)을 생성합니다."""
    url: str | None = f"{settings.APP_BASE_URL}{link}" if link else None
    text: str = f"{title}\n\n{message}" + (f"\n\n{url}" if url else "")
    html: str = f"<h3>{escape(title)}</h3><p>{escape(message)}</p>"
    if url:
        html += f'<p><a href="{url}">Open</a></p>'
    return html, text
