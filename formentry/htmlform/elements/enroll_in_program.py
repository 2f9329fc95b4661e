import dataclasses
import logging
from itertools import chain

from django import forms
from django.core.exceptions import ValidationError
from django.utils.safestring import mark_safe

from formentry.clinical import lookups
from formentry.clinical.models import LocationTag, Program
from formentry.htmlform.context import Mode
from formentry.htmlform.exceptions import BadFormDesignException, FormEntryException
from formentry.htmlform.widgets import CheckboxWidget, DateWidget, ErrorWidget, ToggleWidget

logger = logging.getLogger(__name__)

# errors that point at a broken combination of parameters rather than a missing record
BAD_DESIGN_CODES = {"toggle_requires_checkbox", "invalid_toggle"}


@dataclasses.dataclass(frozen=True)
class EnrollInProgramConfig:
    program: Program
    show_date: bool = False
    show_checkbox: bool = False
    toggle_target_id: str | None = None
    toggle_dim: bool = False
    states: tuple = ()
    location_tag: LocationTag | None = None


class FlagField(forms.Field):
    def to_python(self, value):
        return isinstance(value, str) and value.strip().lower() == "true"


class EnrollInProgramParametersForm(forms.Form):
    """Parses the ``<enrollInProgram>`` tag attributes.

    Field names are the attribute names used in form definitions. Attributes
    other than these are ignored.
    """

    programId = forms.CharField(required=False)
    showDate = FlagField(required=False)
    showCheckbox = FlagField(required=False)
    toggle = forms.CharField(required=False)
    stateIds = forms.CharField(required=False)
    locationTag = forms.CharField(required=False)

    def _parameters(self):
        if hasattr(self.data, "dict"):
            return self.data.dict()
        return dict(self.data)

    def clean_programId(self):
        program = lookups.get_program(self.cleaned_data["programId"])
        if program is None:
            raise ValidationError(
                "Couldn't find program in: %(parameters)s",
                code="invalid_program",
                params={"parameters": self._parameters()},
            )
        return program

    def clean_toggle(self):
        if "toggle" not in self.data:
            return None
        if not self.cleaned_data.get("showCheckbox"):
            raise ValidationError(
                "<enrollInProgram> 'toggle' parameter requires 'showCheckbox=\"true\"'",
                code="toggle_requires_checkbox",
            )
        try:
            return ToggleWidget(self.cleaned_data["toggle"])
        except BadFormDesignException as e:
            raise ValidationError(str(e), code=e.code) from e

    def clean_stateIds(self):
        state_ids = self.cleaned_data["stateIds"]
        program = self.cleaned_data.get("programId")
        if not state_ids or program is None:
            return ()

        states = []
        workflows = set()
        for token in state_ids.split(","):
            token = token.strip()
            if not token:
                continue
            state = lookups.get_state(token, program)
            if state is None:
                if ":" in token:
                    lookup = "associated to a concept with a concept mapping"
                else:
                    lookup = "with an id or uuid"
                raise ValidationError(
                    "Cannot find a program work flow state %(lookup)s that matches '%(token)s'",
                    code="state_not_found",
                    params={"lookup": lookup, "token": token},
                )
            if not state.initial:
                raise ValidationError(
                    "The program work flow state that matches '%(token)s' is not marked as initial",
                    code="state_not_initial",
                    params={"token": token},
                )
            if state in states:
                continue
            if state.workflow_id in workflows:
                raise ValidationError(
                    "A patient cannot be in multiple states in the same workflow", code="duplicate_workflow"
                )
            workflows.add(state.workflow_id)
            states.append(state)
        return tuple(states)

    def clean_locationTag(self):
        name = self.cleaned_data["locationTag"]
        if not name:
            return None
        location_tag = lookups.get_location_tag(name)
        if location_tag is None:
            raise ValidationError(
                "Unable to find location tag %(name)s", code="invalid_location_tag", params={"name": name}
            )
        return location_tag


def parse_parameters(parameters) -> EnrollInProgramConfig:
    """Build the element configuration, raising on the first invalid parameter."""
    form = EnrollInProgramParametersForm(data=parameters)
    if not form.is_valid():
        error = next(chain.from_iterable(form.errors.as_data().values()))
        message = error.messages[0]
        logger.warning("Invalid <enrollInProgram> parameters: %s", message)
        exception_class = BadFormDesignException if error.code in BAD_DESIGN_CODES else FormEntryException
        raise exception_class(message, code=error.code)

    data = form.cleaned_data
    toggle = data["toggle"]
    return EnrollInProgramConfig(
        program=data["programId"],
        show_date=data["showDate"],
        show_checkbox=data["showCheckbox"],
        toggle_target_id=toggle.target_id if toggle else None,
        toggle_dim=toggle.is_toggle_dim if toggle else False,
        states=data["stateIds"],
        location_tag=data["locationTag"],
    )


class EnrollInProgramElement:
    """Renders an optional enrollment date and "enroll" checkbox, and enrolls the
    patient in the configured program when the form is submitted.
    """

    def __init__(self, context, parameters):
        self.config = parse_parameters(parameters)
        self.date_widget = None
        self.date_error_widget = None
        self.checkbox_widget = None
        self.checkbox_error_widget = None

        if self.config.show_date:
            self.date_widget = DateWidget()
            self.date_error_widget = ErrorWidget()
            context.register_widget(self.date_widget)
            context.register_error_widget(self.date_widget, self.date_error_widget)

        if self.config.show_checkbox:
            self.checkbox_widget = self._get_checkbox_widget(context)
            self.checkbox_error_widget = ErrorWidget()
            context.register_widget(self.checkbox_widget)
            context.register_error_widget(self.checkbox_widget, self.checkbox_error_widget)

        logger.debug("Built <enrollInProgram> element for program %s", self.config.program)

    @property
    def program(self):
        return self.config.program

    def _get_checkbox_widget(self, context):
        widget = CheckboxWidget()
        # if the patient is already enrolled, check and disable the checkbox
        patient = context.existing_patient
        encounter_date = context.previous_encounter_date
        if encounter_date is None:
            encounter_date = context.get_best_approximation_of_encounter_date()
        if lookups.is_enrolled_in_program_on_date(patient, self.program, encounter_date):
            logger.info("Patient %s is already enrolled in %s on %s", patient, self.program, encounter_date)
            widget.initial_value = CheckboxWidget.value
            widget.disabled = True
        if self.config.toggle_target_id:
            widget.toggle_target = self.config.toggle_target_id
            widget.toggle_dim = self.config.toggle_dim
        return widget

    def render(self, context) -> str:
        html = []
        if self.date_widget:
            html.append(self.date_widget.render(context))
            if context.mode != Mode.VIEW:
                html.append(self.date_error_widget.render(context))
        if self.checkbox_widget and context.mode != Mode.VIEW:
            html.append(self.checkbox_widget.render(context))
        return mark_safe("".join(html))

    def handle_submission(self, session, submission):
        context = session.context
        if context.mode == Mode.VIEW:
            return
        if self.checkbox_widget and self.checkbox_widget.get_value(context, submission) != CheckboxWidget.value:
            logger.debug("Enrollment in %s not requested", self.program)
            return

        selected_date = None
        if self.date_widget:
            selected_date = self.date_widget.get_value(context, submission)
        session.submission_actions.enroll_in_program(
            self.program, selected_date, self.config.states, self.config.location_tag
        )

    def validate_submission(self, context, submission):
        return []
