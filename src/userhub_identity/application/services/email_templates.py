"""Email content rendered by the application services."""

from html import escape

PASSWORD_RESET_SUBJECT = "Your password reset token (valid for only {minutes} minutes)"

PASSWORD_RESET_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: Arial, sans-serif; background-color: #f0f0f0; margin: 0; padding: 0;">
    <div style="max-width: 600px; margin: auto; padding: 20px; background-color: #fff; border-radius: 10px; box-shadow: 0 0 10px rgba(0, 0, 0, 0.1);">
        <h1 style="color: #333;">Hello {name},</h1>
        <p style="color: #333;">We received a request to reset your password. To proceed, please click the button below:</p>
        <p style="margin: 30px 0;">
            <a href="{reset_link}" style="display: inline-block; padding: 10px 20px; background-color: #007BFF; color: #fff; text-decoration: none; border-radius: 5px;">Reset Password</a>
        </p>
        <p style="color: #333;">This link will expire in {minutes} minutes.</p>
        <p style="color: #333;">If you did not request a password reset, please ignore this email.</p>
    </div>
</body>
</html>
"""


def render_password_reset_email(
    name: str, reset_link: str, expire_minutes: int
) -> tuple[str, str]:
    """Return ``(subject, html_body)`` for a password reset email."""
    subject = PASSWORD_RESET_SUBJECT.format(minutes=expire_minutes)
    html_body = PASSWORD_RESET_HTML.format(
        name=escape(name),
        reset_link=escape(reset_link, quote=True),
        minutes=expire_minutes,
    )
    return subject, html_body
