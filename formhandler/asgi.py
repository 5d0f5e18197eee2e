"""Demo application: a contact form served by Litestar.

Run it with ``formhandler serve``. The secret key (``FORMHANDLER_SECRET_KEY``
or ``secret_key`` in app.yaml) signs the session cookie holding the CSRF
tokens.
"""

from __future__ import annotations

import hashlib
import logging

from litestar import Litestar, Request, route
from litestar.enums import HttpMethod
from litestar.middleware.session.client_side import CookieBackendConfig
from litestar.response import Redirect
from litestar.response import Template as TemplateResponse

from formhandler.config import Settings, get_settings
from formhandler.fields import Optgroup
from formhandler.form import Form
from formhandler.submission import Submission, load_submission
from formhandler.template import get_template_config
from formhandler.validators import RegexValidator, StringValidator, UploadValidator

logger = logging.getLogger(__name__)

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
FLASH_SESSION_KEY = "flash"


def create_session_config(settings: Settings) -> CookieBackendConfig:
    """Create a cookie-backed session config."""
    session_secret = hashlib.sha256(settings.secret_key.encode()).digest()
    return CookieBackendConfig(
        secret=session_secret,
        max_age=settings.session.max_age,
        httponly=True,
        secure=not settings.debug,
        samesite="lax",
        domain=settings.session.cookie_domain,
    )


def build_contact_form(submission: Submission) -> Form:
    form = Form(submission, action="/", name="contact")

    form.text_field("name", label="Name", max_length=80).add_validator(StringValidator(2, 80))
    form.text_field("email", label="Email", type="email").add_validator(
        RegexValidator(EMAIL_PATTERN, messages={"no_match": "Please enter a valid email address."})
    )

    topic = form.select_field("topic", label="Topic")
    topic.add_option(Optgroup("Sales").set_options_from_dict({
        "quote": "Request a quote",
        "order": "Order status",
    }))
    topic.add_option(Optgroup("Support").set_options_from_dict({
        "bug": "Report a problem",
        "question": "Ask a question",
    }))

    form.text_area("message", label="Message", rows=6).add_validator(StringValidator(10, 2000))
    form.upload_field(
        "attachment",
        label="Attachment",
        help_text="Optional. PDF or Word document, up to 2 MB.",
        accept=".pdf,.doc,.docx",
    ).add_validator(
        UploadValidator(
            required=False,
            max_filesize=2 * 1024 * 1024,
            allowed_extensions=["pdf", "doc", "docx"],
        )
    )
    form.check_box("newsletter", label="Keep me posted")
    form.submit_button("Send")
    return form


@route("/", http_method=[HttpMethod.GET, HttpMethod.POST])
async def contact(request: Request) -> TemplateResponse:
    submission = await load_submission(request)
    form = build_contact_form(submission)

    if form.is_valid():
        data = form.get_data()
        logger.info("Contact request about %r from %s", data["topic"], data["email"])
        request.session[FLASH_SESSION_KEY] = f"Thanks {data['name']}, we will be in touch."
        return Redirect(path="/")

    return TemplateResponse(
        "contact.html",
        context={
            "form": form,
            "flash": request.session.pop(FLASH_SESSION_KEY, None),
        },
    )


def create_app(settings: Settings | None = None) -> Litestar:
    settings = settings or get_settings()
    if not settings.secret_key:
        raise ValueError("FORMHANDLER_SECRET_KEY must be set to sign session cookies")

    return Litestar(
        route_handlers=[contact],
        middleware=[create_session_config(settings).middleware],
        template_config=get_template_config(),
        debug=settings.debug,
    )
