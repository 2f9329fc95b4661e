import re

from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError
from django.utils.html import format_html

from formentry.htmlform.context import Mode
from formentry.htmlform.exceptions import BadFormDesignException, InvalidSubmissionException

CHECKBOX_VALUE = "true"

# key: value pairs of a toggle spec, e.g. {id: 'hiv-section', style: "dim"}
TOGGLE_PROPERTY = re.compile(r"""["']?(\w+)["']?\s*:\s*(?:"([^"]*)"|'([^']*)'|([^,}\s]+))""")


class DateInput(forms.DateInput):
    input_type = "date"


class CheckboxInput(forms.CheckboxInput):
    def format_value(self, value):
        # always submit the same value so a checked box reads as "true"
        return CHECKBOX_VALUE


class DateWidget:
    def __init__(self):
        self.initial_value = None

    def render(self, context):
        name = context.get_field_name(self)
        date_format = settings.FORMENTRY_DATE_INPUT_FORMAT
        if context.mode == Mode.VIEW:
            if self.initial_value is None:
                return format_html('<span class="emptyValue" id="{}"></span>', name)
            return format_html('<span class="value" id="{}">{}</span>', name, self.initial_value.strftime(date_format))
        return DateInput(format=date_format).render(name, self.initial_value, attrs={"id": name})

    def get_value(self, context, submission):
        """Return the submitted date, or None when left blank."""
        raw_value = submission.get(context.get_field_name(self))
        field = forms.DateField(required=False, input_formats=[settings.FORMENTRY_DATE_INPUT_FORMAT])
        try:
            return field.clean(raw_value)
        except ValidationError as e:
            raise InvalidSubmissionException(f"Invalid date '{raw_value}'", code="invalid_date") from e


class CheckboxWidget:
    value = CHECKBOX_VALUE

    def __init__(self):
        self.initial_value = None
        self.disabled = False
        self.toggle_target = None
        self.toggle_dim = False

    def render(self, context):
        name = context.get_field_name(self)
        attrs = {"id": name}
        if self.disabled or context.mode == Mode.VIEW:
            attrs["disabled"] = True
        if self.toggle_target:
            attrs["data-toggle-target"] = self.toggle_target
            attrs["data-toggle-mode"] = "dim" if self.toggle_dim else "hide"
        widget = CheckboxInput(check_test=lambda value: value == self.value)
        return widget.render(name, self.initial_value, attrs=attrs)

    def get_value(self, context, submission):
        return submission.get(context.get_field_name(self))


class ErrorWidget:
    def render(self, context):
        name = context.get_field_name(self)
        errors = context.get_errors(context.get_error_target(self))
        if not errors:
            return format_html('<span class="error field-error" id="{}" style="display: none"></span>', name)
        return format_html('<span class="error field-error" id="{}">{}</span>', name, ", ".join(errors))


class ToggleWidget:
    """Parses the toggle spec linking a checkbox to the page section it shows or dims.

    The spec is either a bare element id, which hides the target while the box is
    unchecked, or an object literal such as ``{id: 'hiv-section', style: 'dim'}``.
    """

    def __init__(self, toggle_spec):
        toggle_spec = (toggle_spec or "").strip()
        self.style = "hide"
        if toggle_spec.startswith("{"):
            properties = {}
            for key, *values in TOGGLE_PROPERTY.findall(toggle_spec):
                properties[key] = next((value for value in values if value), "")
            self.target_id = properties.get("id")
            self.style = properties.get("style", self.style)
        else:
            self.target_id = toggle_spec
        if not self.target_id:
            raise BadFormDesignException(f"Toggle spec '{toggle_spec}' does not name a target id", code="invalid_toggle")

    @property
    def is_toggle_dim(self):
        return self.style == "dim"
