"""
Flask-WTF form for the availability check page.
"""

from __future__ import annotations

from flask_wtf import FlaskForm
from wtforms import StringField, SubmitField
from wtforms.validators import DataRequired


class CheckSubdomainForm(FlaskForm):
    """Single-field form: the subdomain label to check."""

    subdomain: StringField = StringField(
        "Subdomain",
        validators=[DataRequired(message="Please enter a domain")],
        render_kw={"placeholder": "my-app", "autofocus": True, "autocomplete": "off"},
    )
    submit: SubmitField = SubmitField("Check")
