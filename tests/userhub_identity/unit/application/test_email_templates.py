"""Unit tests for the password reset email template."""

from userhub_identity.application.services.email_templates import (
    render_password_reset_email,
)


class TestPasswordResetTemplate:
    """Tests for the reset email template."""

    def test_render(self):
        subject, html_body = render_password_reset_email(
            name="Jane Doe",
            reset_link="http://localhost:4100/user/resetpassword/abc",
            expire_minutes=10,
        )

        assert subject == "Your password reset token (valid for only 10 minutes)"
        assert "Hello Jane Doe," in html_body
        assert 'href="http://localhost:4100/user/resetpassword/abc"' in html_body

    def test_name_is_escaped(self):
        _, html_body = render_password_reset_email("<b>Jane</b>", "http://x/abc", 10)

        assert "<b>Jane</b>" not in html_body
        assert "&lt;b&gt;Jane&lt;/b&gt;" in html_body

    def test_template_is_application_owned(self):
        """Test that the infrastructure email package exports delivery only."""
        import userhub_identity.infrastructure.email as email_package

        assert not hasattr(email_package, "render_password_reset_email")
