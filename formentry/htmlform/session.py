import dataclasses
import datetime
import logging

from formentry.clinical.models import LocationTag, Program
from formentry.htmlform.context import FormEntryContext, Mode
from formentry.htmlform.elements import ELEMENT_TAGS
from formentry.htmlform.elements.base import Renderable, SubmissionParticipant
from formentry.htmlform.exceptions import BadFormDesignException, FormEntryException, FormSubmissionError

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class EnrollInProgramAction:
    program: Program
    enrollment_date: datetime.date | None
    states: tuple
    location_tag: LocationTag | None


class FormSubmissionActions:
    """Collects the side effects requested by the elements of one submission.

    Actions are only queued here; carrying them out is left to the caller once
    every element has handled the submission.
    """

    def __init__(self):
        self.enrollments: list[EnrollInProgramAction] = []

    def enroll_in_program(self, program, enrollment_date=None, states=None, location_tag=None):
        if program is None:
            raise FormEntryException("Cannot enroll in a blank program", code="blank_program")
        action = EnrollInProgramAction(
            program=program,
            enrollment_date=enrollment_date,
            states=tuple(states or ()),
            location_tag=location_tag,
        )
        self.enrollments.append(action)
        logger.info(
            "Queued enrollment in %s on %s with %d initial state(s)", program, enrollment_date, len(action.states)
        )
        return action


class FormEntrySession:
    def __init__(self, patient=None, mode=Mode.ENTER, encounter_date=None, previous_encounter_date=None):
        self.context = FormEntryContext(
            mode=mode,
            patient=patient,
            encounter_date=encounter_date,
            previous_encounter_date=previous_encounter_date,
        )
        self.submission_actions = FormSubmissionActions()
        self.elements = []

    @property
    def patient(self):
        return self.context.existing_patient

    def add_element(self, tag: str, parameters: dict):
        """Build the element for ``tag`` from its attributes and add it to the form."""
        try:
            element_class = ELEMENT_TAGS[tag]
        except KeyError as e:
            raise BadFormDesignException(f"Unknown form element <{tag}>", code="unknown_tag") from e
        element = element_class(self.context, parameters)
        self.elements.append(element)
        return element

    def _submission_participants(self):
        return [element for element in self.elements if isinstance(element, SubmissionParticipant)]

    def render(self) -> str:
        return "".join(element.render(self.context) for element in self.elements if isinstance(element, Renderable))

    def validate_submission(self, submission) -> list[FormSubmissionError]:
        errors = []
        for element in self._submission_participants():
            errors.extend(element.validate_submission(self.context, submission))
        for error in errors:
            self.context.add_errors(error.widget, [error.message])
        return errors

    def handle_submission(self, submission) -> list[EnrollInProgramAction]:
        for element in self._submission_participants():
            element.handle_submission(self, submission)
        return list(self.submission_actions.enrollments)
